"""
SQLAlchemy ORM Database класс
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from marketplace.core.config import Config
from marketplace.database.orm_models import Base


logger = logging.getLogger(__name__)


class ORMDatabase:
    """Подключение к базе данных через SQLAlchemy ORM"""

    def __init__(self, database_url: str | None = None):
        """
        Инициализация ORM Database

        Args:
            database_url: URL базы данных (SQLite или PostgreSQL)
        """
        self.database_url = database_url or Config.get_database_url()
        self.engine: AsyncEngine | None = None
        self.session_factory: async_sessionmaker[AsyncSession] | None = None
        self._is_sqlite = self.database_url.startswith("sqlite")

    @property
    def is_sqlite(self) -> bool:
        """Используется ли SQLite"""
        return self._is_sqlite

    async def connect(self) -> None:
        """Подключение к базе данных"""
        logger.info("Инициализация подключения к БД...")
        logger.info(f"   Is SQLite: {self._is_sqlite}")

        connect_args: dict = {}
        if self._is_sqlite:
            connect_args = {
                "check_same_thread": False,
                "timeout": Config.SQLITE_BUSY_TIMEOUT,
            }

        self.engine = create_async_engine(
            self.database_url,
            echo=Config.DATABASE_ECHO,
            pool_pre_ping=True,  # Проверка соединения перед использованием
            pool_recycle=3600,  # Переподключение каждый час
            connect_args=connect_args,
        )

        if self._is_sqlite:
            self._use_immediate_transactions(self.engine)

        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,  # Важно для async работы
        )

        logger.info("OK: Подключено к базе данных")
        logger.debug("Используйте 'alembic upgrade head' для применения миграций БД")

    @staticmethod
    def _use_immediate_transactions(engine: AsyncEngine) -> None:
        """
        Каждая транзакция SQLite начинается с BEGIN IMMEDIATE

        Блокировка на запись берётся в начале транзакции, поэтому
        read-check-write внутри одной сессии не пересекается с другими писателями.
        """

        @event.listens_for(engine.sync_engine, "connect")
        def _disable_driver_begin(dbapi_connection, connection_record):
            # BEGIN выполняем сами в обработчике "begin"
            dbapi_connection.isolation_level = None

        @event.listens_for(engine.sync_engine, "begin")
        def _begin_immediate(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    async def create_tables(self) -> None:
        """Создание схемы по метаданным ORM (без Alembic)"""
        if not self.engine:
            raise RuntimeError("База данных не подключена")

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Схема БД создана")

    async def disconnect(self) -> None:
        """Отключение от базы данных"""
        if self.engine:
            await self.engine.dispose()
            logger.info("Отключено от базы данных")

    @asynccontextmanager
    async def get_session(self) -> AsyncIterator[AsyncSession]:
        """
        Context manager для получения сессии

        Usage:
            async with db.get_session() as session:
                order = await session.get(Order, order_id)
                # Автоматический commit/rollback
        """
        if not self.session_factory:
            raise RuntimeError("База данных не подключена")

        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
                logger.debug("OK: Транзакция успешно завершена (commit)")
            except Exception as e:
                await session.rollback()
                logger.error(f"ERROR: Транзакция отменена (rollback): {e}")
                raise
