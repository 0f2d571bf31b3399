"""
Жизненный цикл заказа услуги (бизнес-логика)
"""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from marketplace.core.constants import OrderStatus, PartyRole
from marketplace.database.models import Order
from marketplace.domain.exceptions import (
    InvalidStateTransitionError,
    OrderValidationError,
    UnauthorizedActionError,
)
from marketplace.domain.order_state_machine import OrderStateMachine
from marketplace.domain.ports import ActorRoleResolver, OrderStore, ServiceOwnerLookup
from marketplace.repositories.exceptions import EntityNotFoundError
from marketplace.schemas.order import OrderConfirmSchema, OrderCreateSchema
from marketplace.services.role_resolver import OrderPartyResolver
from marketplace.utils.helpers import get_now


logger = logging.getLogger(__name__)


class OrderWorkflow:
    """
    Сервис для управления заказами

    Каждый переход статуса - одна условная запись в хранилище
    (compare-and-set по ожидаемому статусу), поэтому параллельные
    вызовы не требуют блокировок в процессе.
    """

    def __init__(
        self,
        orders: OrderStore,
        resolver: ActorRoleResolver | None = None,
        service_owners: ServiceOwnerLookup | None = None,
        state_machine: OrderStateMachine | None = None,
    ):
        """
        Инициализация сервиса

        Args:
            orders: Хранилище заказов
            resolver: Определение роли пользователя в заказе
            service_owners: Поиск автора услуги (None - автор передаётся явно)
            state_machine: State machine для валидации переходов
        """
        self.orders = orders
        self.resolver = resolver or OrderPartyResolver()
        self.service_owners = service_owners
        self.state_machine = state_machine or OrderStateMachine()

    async def place_order(self, order: OrderCreateSchema | Mapping[str, Any]) -> Order:
        """
        Создание заказа

        Args:
            order: Данные заказа (схема или словарь)

        Returns:
            Сохранённый заказ со сгенерированным ID

        Raises:
            OrderValidationError: Некорректные данные или автор совпадает с заказчиком
            EntityNotFoundError: Услуга не найдена
        """
        if not isinstance(order, OrderCreateSchema):
            try:
                order = OrderCreateSchema.model_validate(dict(order))
            except ValidationError as e:
                logger.warning(f"Заказ отклонён валидацией: {e}")
                raise OrderValidationError(
                    "Некорректные данные заказа", e.errors(include_url=False)
                ) from e

        author_id = order.author_id
        if self.service_owners is not None:
            owner_id = await self.service_owners.get_owner_id(order.service_id)
            if owner_id is None:
                raise EntityNotFoundError("Service", order.service_id)
            if author_id is not None and author_id != owner_id:
                raise OrderValidationError(
                    f"Пользователь {author_id} не является автором услуги #{order.service_id}"
                )
            author_id = owner_id

        if not author_id:
            raise OrderValidationError("Не указан автор услуги")
        if author_id == order.customer_id:
            raise OrderValidationError("Нельзя заказать собственную услугу")

        created = await self.orders.insert(
            Order(
                service_id=order.service_id,
                author_id=author_id,
                customer_id=order.customer_id,
                status=OrderStatus.PENDING,
                author_confirmed=False,
                customer_confirmed=False,
                message=order.message,
                created_at=get_now(),
            )
        )
        logger.info(
            f"Заказ #{created.id} на услугу #{created.service_id} "
            f"от {created.customer_id} автору {created.author_id}"
        )
        return created

    async def get_order(self, order_id: str) -> Order:
        """
        Получение заказа по ID

        Raises:
            EntityNotFoundError: Заказ не найден
        """
        order = await self.orders.get(order_id)
        if order is None:
            raise EntityNotFoundError("Order", order_id)
        return order

    async def accept_order(self, order_id: str, actor_id: str | None = None) -> Order:
        """
        Автор принимает заказ

        Args:
            order_id: ID заказа
            actor_id: Кто принимает (None - без проверки роли)

        Returns:
            Заказ в статусе Accepted

        Raises:
            EntityNotFoundError: Заказ не найден
            InvalidStateTransitionError: Заказ не в статусе Pending
            UnauthorizedActionError: actor_id не автор заказа
        """
        return await self._leave_pending(
            order_id,
            OrderStatus.ACCEPTED,
            {"status": OrderStatus.ACCEPTED, "accepted_at": get_now()},
            actor_id,
        )

    async def refuse_order(self, order_id: str, actor_id: str | None = None) -> Order:
        """
        Автор отказывается от заказа (терминальный статус Refused)

        Ошибки те же, что у accept_order.
        """
        return await self._leave_pending(
            order_id,
            OrderStatus.REFUSED,
            {"status": OrderStatus.REFUSED},
            actor_id,
        )

    async def confirm_order(self, order_id: str, role: str, caller_id: str) -> Order:
        """
        Подтверждение выполнения заказа одной из сторон

        Сторона ставит только свой флаг. Когда оба флага выставлены,
        заказ переводится в Confirmed второй условной записью.
        Повторное подтверждение той же стороной - успешный no-op.

        Args:
            order_id: ID заказа
            role: "author" или "customer"
            caller_id: ID вызывающего пользователя

        Returns:
            Заказ после подтверждения

        Raises:
            OrderValidationError: Неизвестная роль
            EntityNotFoundError: Заказ не найден
            UnauthorizedActionError: Роль вызывающего не совпадает с role
            InvalidStateTransitionError: Заказ не в статусе Accepted
        """
        try:
            request = OrderConfirmSchema(order_id=order_id, role=role, caller_id=caller_id)
        except ValidationError as e:
            logger.warning(f"Подтверждение заказа #{order_id} отклонено: {e}")
            raise OrderValidationError(
                f"Некорректный запрос подтверждения: {role}", e.errors(include_url=False)
            ) from e

        role = request.role
        order = await self.get_order(order_id)

        actual_role = await self.resolver.resolve(order, caller_id)
        if actual_role != role:
            logger.warning(
                f"Пользователь {caller_id} ({actual_role}) пытался подтвердить "
                f"заказ #{order_id} как {role}"
            )
            raise UnauthorizedActionError(caller_id, f"confirm order #{order_id}", role)

        flag = PartyRole.confirmation_field(role)

        if not order.is_confirmed_by(role):
            self.state_machine.ensure_confirmable(order.status)

            updated = await self.orders.update(
                order_id, {flag: True}, expected={"status": OrderStatus.ACCEPTED}
            )
            if not updated:
                # Статус изменился между чтением и записью
                order = await self.get_order(order_id)
                if not order.is_confirmed_by(role):
                    self.state_machine.ensure_confirmable(order.status)
            else:
                logger.info(f"Заказ #{order_id}: подтверждение стороны {role}")
        elif order.status != OrderStatus.CONFIRMED:
            self.state_machine.ensure_confirmable(order.status)

        order = await self.get_order(order_id)
        if order.status == OrderStatus.ACCEPTED and order.both_confirmed:
            self.state_machine.validate_transition(order.status, OrderStatus.CONFIRMED)
            completed = await self.orders.update(
                order_id,
                {"status": OrderStatus.CONFIRMED, "completed_at": get_now()},
                expected={
                    "status": OrderStatus.ACCEPTED,
                    "author_confirmed": True,
                    "customer_confirmed": True,
                },
            )
            if completed:
                logger.info(f"Заказ #{order_id} выполнен: подтверждён обеими сторонами")
            order = await self.get_order(order_id)

        return order

    async def get_orders_for_author(self, user_id: str) -> list[Order]:
        """Заказы на услуги пользователя"""
        return await self.orders.list_by_author(user_id)

    async def get_orders_for_customer(self, user_id: str) -> list[Order]:
        """Заказы, сделанные пользователем"""
        return await self.orders.list_by_customer(user_id)

    async def get_orders_for_user(self, user_id: str) -> list[Order]:
        """
        Все заказы, где пользователь - одна из сторон

        Returns:
            Список без повторов, новые заказы первыми
        """
        seen: set[str] = set()
        result = []
        for order in await self.orders.list_by_party(user_id):
            if order.id in seen:
                continue
            seen.add(order.id)
            result.append(order)
        return result

    async def _leave_pending(
        self,
        order_id: str,
        to_status: str,
        updates: dict[str, Any],
        actor_id: str | None,
    ) -> Order:
        """
        Переход из Pending в to_status одной условной записью

        Из двух параллельных вызовов запись выполнит ровно один,
        второй получит InvalidStateTransitionError.
        """
        order = await self.get_order(order_id)

        if actor_id is not None:
            role = await self.resolver.resolve(order, actor_id)
            check = self.state_machine.validate_transition(
                OrderStatus.PENDING, to_status, role=role
            )
            if not check.is_valid:
                logger.warning(f"Заказ #{order_id}: {check.error_message} (пользователь {actor_id})")
                raise UnauthorizedActionError(
                    actor_id, f"{to_status} order #{order_id}", check.required_role
                )

        self.state_machine.validate_transition(order.status, to_status)

        updated = await self.orders.update(
            order_id, updates, expected={"status": OrderStatus.PENDING}
        )
        if not updated:
            current = await self.get_order(order_id)
            logger.warning(
                f"Заказ #{order_id} не переведён в {to_status}: текущий статус {current.status}"
            )
            raise InvalidStateTransitionError(
                current.status,
                to_status,
                self.state_machine.validate_transition(
                    current.status, to_status, raise_exception=False
                ).error_message
                or "статус изменён параллельным запросом",
            )

        logger.info(
            f"Заказ #{order_id}: {self.state_machine.get_transition_description(OrderStatus.PENDING, to_status)}"
        )
        return await self.get_order(order_id)
