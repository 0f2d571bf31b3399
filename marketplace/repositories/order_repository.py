"""
Репозиторий для работы с заказами
"""

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import ColumnElement, or_, select, update
from sqlalchemy.exc import IntegrityError

from marketplace.core.constants import OrderStatus
from marketplace.database.models import Order
from marketplace.database.orm_models import Order as OrderRow
from marketplace.repositories.base import BaseRepository
from marketplace.repositories.exceptions import StorageError
from marketplace.utils.helpers import as_utc, get_now, new_id


logger = logging.getLogger(__name__)


class OrderRepository(BaseRepository[Order]):
    """Репозиторий для работы с заказами"""

    # Поля, которые меняются переходами state machine
    MUTABLE_FIELDS = frozenset(
        {
            "status",
            "author_confirmed",
            "customer_confirmed",
            "accepted_at",
            "completed_at",
        }
    )

    async def insert(self, order: Order) -> Order:
        """
        Сохранение нового заказа

        Args:
            order: Заказ (id генерируется, если не задан)

        Returns:
            Сохранённый заказ
        """
        now = get_now()
        row = OrderRow(
            id=order.id or new_id(),
            service_id=order.service_id,
            author_id=order.author_id,
            customer_id=order.customer_id,
            status=order.status,
            message=order.message,
            author_confirmed=order.author_confirmed,
            customer_confirmed=order.customer_confirmed,
            created_at=order.created_at or now,
            accepted_at=order.accepted_at,
            completed_at=order.completed_at,
            updated_at=now,
            version=1,
        )

        try:
            async with self._session_scope("order insert") as session:
                session.add(row)
                await session.flush()
        except StorageError as e:
            if isinstance(e.cause, IntegrityError):
                logger.error(f"Заказ не сохранён, нарушено ограничение: {e.cause}")
            raise

        logger.info(f"Создан заказ #{row.id}")
        return self._row_to_order(row)

    async def get(self, order_id: str) -> Order | None:
        """
        Получение заказа по ID

        Args:
            order_id: ID заказа

        Returns:
            Объект Order или None
        """
        async with self._session_scope("order get") as session:
            row = await session.get(OrderRow, order_id, populate_existing=True)
            return self._row_to_order(row) if row else None

    async def update(
        self,
        order_id: str,
        updates: Mapping[str, Any],
        expected: Mapping[str, Any] | None = None,
    ) -> bool:
        """
        Условное обновление заказа (compare-and-set)

        UPDATE выполняется одним запросом с условием на ожидаемые значения,
        поэтому проверка и запись атомарны на уровне БД.

        Args:
            order_id: ID заказа
            updates: Поля для обновления
            expected: Ожидаемые текущие значения полей

        Returns:
            True если строка обновлена, False если заказа нет или условие не выполнено
        """
        if not updates:
            return False

        unknown = set(updates) - self.MUTABLE_FIELDS
        if unknown:
            raise ValueError(f"Поля заказа не изменяются: {', '.join(sorted(unknown))}")

        stmt = update(OrderRow).where(OrderRow.id == order_id)
        for field, value in (expected or {}).items():
            stmt = stmt.where(getattr(OrderRow, field) == value)

        stmt = stmt.values(
            **updates,
            updated_at=get_now(),
            version=OrderRow.version + 1,
        ).execution_options(synchronize_session=False)

        async with self._session_scope("order update") as session:
            result = await session.execute(stmt)
            updated = result.rowcount == 1

        if updated:
            logger.info(f"Заказ #{order_id} обновлён: {', '.join(updates.keys())}")
        else:
            logger.debug(f"Заказ #{order_id} не обновлён: условие {dict(expected or {})} не выполнено")
        return updated

    async def list_by_author(self, author_id: str) -> list[Order]:
        """Заказы, в которых пользователь - автор услуги"""
        return await self._list(OrderRow.author_id == author_id, "orders by author")

    async def list_by_customer(self, customer_id: str) -> list[Order]:
        """Заказы, в которых пользователь - заказчик"""
        return await self._list(OrderRow.customer_id == customer_id, "orders by customer")

    async def list_by_party(self, user_id: str) -> list[Order]:
        """Заказы, в которых пользователь - любая из сторон"""
        return await self._list(
            or_(OrderRow.author_id == user_id, OrderRow.customer_id == user_id),
            "orders by party",
        )

    async def has_confirmed_order(self, service_id: str, customer_id: str) -> bool:
        """
        Есть ли у заказчика завершённый заказ этой услуги

        Args:
            service_id: ID услуги
            customer_id: ID заказчика

        Returns:
            True если найден заказ в статусе Confirmed
        """
        stmt = (
            select(OrderRow.id)
            .where(
                OrderRow.service_id == service_id,
                OrderRow.customer_id == customer_id,
                OrderRow.status == OrderStatus.CONFIRMED,
            )
            .limit(1)
        )
        async with self._session_scope("confirmed order lookup") as session:
            result = await session.execute(stmt)
            return result.scalar_one_or_none() is not None

    async def _list(self, condition: ColumnElement[bool], operation: str) -> list[Order]:
        stmt = select(OrderRow).where(condition).order_by(OrderRow.created_at.desc())
        async with self._session_scope(operation) as session:
            result = await session.execute(stmt)
            return [self._row_to_order(row) for row in result.scalars().all()]

    @staticmethod
    def _row_to_order(row: OrderRow) -> Order:
        """
        Преобразование строки БД в объект Order

        Args:
            row: ORM объект

        Returns:
            Объект Order
        """
        return Order(
            id=row.id,
            service_id=row.service_id,
            author_id=row.author_id,
            customer_id=row.customer_id,
            status=row.status,
            author_confirmed=bool(row.author_confirmed),
            customer_confirmed=bool(row.customer_confirmed),
            message=row.message,
            created_at=as_utc(row.created_at),
            accepted_at=as_utc(row.accepted_at),
            completed_at=as_utc(row.completed_at),
            updated_at=as_utc(row.updated_at),
            version=row.version,
        )
