"""
Базовый репозиторий для работы с базой данных
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Generic, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.database.orm_database import ORMDatabase
from marketplace.repositories.exceptions import StorageError


logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R", bound="BaseRepository")


class BaseRepository(Generic[T]):
    """
    Базовый класс для всех репозиториев
    Предоставляет общую функциональность для работы с БД

    Без привязанной сессии каждый вызов выполняется в собственной транзакции.
    Внутри transaction() все вызовы идут через одну сессию и
    фиксируются вместе.
    """

    def __init__(self, database: ORMDatabase, session: AsyncSession | None = None):
        """
        Инициализация репозитория

        Args:
            database: Подключение к базе данных
            session: Сессия, к которой привязан репозиторий (для transaction())
        """
        self.database = database
        self._session = session

    def _bind(self: R, session: AsyncSession) -> R:
        """Копия репозитория, привязанная к сессии"""
        return self.__class__(self.database, session=session)

    def within(self: R, other: "BaseRepository") -> R:
        """
        Репозиторий, работающий в транзакции другого репозитория

        Args:
            other: Репозиторий из transaction()

        Returns:
            Копия, привязанная к сессии other, или self, если other не в транзакции
        """
        if other._session is None:
            return self
        return self._bind(other._session)

    @asynccontextmanager
    async def transaction(self: R) -> AsyncIterator[R]:
        """
        Контекстный менеджер для транзакций

        Yields:
            Репозиторий, все операции которого выполняются в одной транзакции
        """
        if self._session is not None:
            # Уже внутри транзакции
            yield self
            return

        async with self._storage_errors("transaction"):
            async with self.database.get_session() as session:
                yield self._bind(session)

    @asynccontextmanager
    async def _session_scope(self, operation: str) -> AsyncIterator[AsyncSession]:
        """
        Сессия для одной операции

        Args:
            operation: Название операции для сообщений об ошибках

        Yields:
            Привязанная сессия или новая с автоматическим commit/rollback
        """
        async with self._storage_errors(operation):
            if self._session is not None:
                yield self._session
            else:
                async with self.database.get_session() as session:
                    yield session

    @asynccontextmanager
    async def _storage_errors(self, operation: str) -> AsyncIterator[None]:
        """Перевод ошибок SQLAlchemy в StorageError"""
        try:
            yield
        except SQLAlchemyError as e:
            logger.error(f"Ошибка хранилища ({operation}): {e}")
            raise StorageError(operation, e) from e
