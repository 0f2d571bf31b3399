"""
Тесты жизненного цикла заказа
"""
import asyncio

import pytest

from marketplace.core.constants import OrderStatus, PartyRole
from marketplace.domain.exceptions import (
    InvalidStateTransitionError,
    OrderValidationError,
    UnauthorizedActionError,
)
from marketplace.repositories import EntityNotFoundError
from marketplace.services import OrderWorkflow


class TestPlaceOrder:
    async def test_place_order(self, workflow: OrderWorkflow, service_id, author_id, customer_id):
        """Новый заказ всегда Pending, автор берётся из услуги"""
        order = await workflow.place_order(
            {"service_id": service_id, "customer_id": customer_id, "message": "Привет"}
        )
        assert order.id
        assert order.status == OrderStatus.PENDING
        assert order.author_id == author_id
        assert not order.author_confirmed
        assert not order.customer_confirmed
        assert order.created_at is not None
        assert order.completed_at is None

    async def test_own_service(self, workflow: OrderWorkflow, service_id, author_id):
        with pytest.raises(OrderValidationError):
            await workflow.place_order({"service_id": service_id, "customer_id": author_id})

    async def test_author_mismatch(self, workflow: OrderWorkflow, service_id, customer_id):
        with pytest.raises(OrderValidationError):
            await workflow.place_order(
                {"service_id": service_id, "customer_id": customer_id, "author_id": "other"}
            )

    async def test_missing_service(self, workflow: OrderWorkflow, customer_id):
        with pytest.raises(EntityNotFoundError):
            await workflow.place_order({"service_id": "missing", "customer_id": customer_id})

    async def test_invalid_input(self, workflow: OrderWorkflow, service_id):
        with pytest.raises(OrderValidationError) as exc_info:
            await workflow.place_order({"service_id": service_id})
        assert exc_info.value.errors

    async def test_without_owner_lookup(self, order_repo):
        """Без каталога услуг автор передаётся явно"""
        workflow = OrderWorkflow(order_repo)
        order = await workflow.place_order(
            {"service_id": "external", "customer_id": "c-1", "author_id": "a-1"}
        )
        assert order.author_id == "a-1"

        with pytest.raises(OrderValidationError):
            await workflow.place_order({"service_id": "external", "customer_id": "c-1"})


class TestAcceptRefuse:
    async def test_accept(self, workflow: OrderWorkflow, pending_order, author_id):
        order = await workflow.accept_order(pending_order.id, actor_id=author_id)
        assert order.status == OrderStatus.ACCEPTED
        assert order.accepted_at is not None

    async def test_accept_twice(self, workflow: OrderWorkflow, pending_order):
        """Второй accept - ошибка, accepted_at не меняется"""
        first = await workflow.accept_order(pending_order.id)

        with pytest.raises(InvalidStateTransitionError):
            await workflow.accept_order(pending_order.id)

        order = await workflow.get_order(pending_order.id)
        assert order.accepted_at == first.accepted_at

    async def test_customer_cannot_accept(self, workflow: OrderWorkflow, pending_order, customer_id):
        with pytest.raises(UnauthorizedActionError):
            await workflow.accept_order(pending_order.id, actor_id=customer_id)

        order = await workflow.get_order(pending_order.id)
        assert order.status == OrderStatus.PENDING

    async def test_refuse_is_terminal(self, workflow: OrderWorkflow, pending_order, author_id):
        order = await workflow.refuse_order(pending_order.id, actor_id=author_id)
        assert order.status == OrderStatus.REFUSED

        with pytest.raises(InvalidStateTransitionError):
            await workflow.accept_order(pending_order.id)
        with pytest.raises(InvalidStateTransitionError):
            await workflow.confirm_order(pending_order.id, PartyRole.AUTHOR, author_id)

    async def test_missing_order(self, workflow: OrderWorkflow):
        with pytest.raises(EntityNotFoundError):
            await workflow.accept_order("missing")
        with pytest.raises(EntityNotFoundError):
            await workflow.refuse_order("missing")

    async def test_concurrent_accept_and_refuse(self, workflow: OrderWorkflow, pending_order):
        """Из параллельных переходов из Pending проходит ровно один"""
        results = await asyncio.gather(
            workflow.accept_order(pending_order.id),
            workflow.refuse_order(pending_order.id),
            workflow.accept_order(pending_order.id),
            return_exceptions=True,
        )
        succeeded = [r for r in results if not isinstance(r, Exception)]
        failed = [r for r in results if isinstance(r, Exception)]

        assert len(succeeded) == 1
        assert all(isinstance(e, InvalidStateTransitionError) for e in failed)

        order = await workflow.get_order(pending_order.id)
        assert order.status == succeeded[0].status


class TestConfirm:
    async def test_full_scenario(self, workflow: OrderWorkflow, pending_order, author_id, customer_id):
        """place -> accept -> confirm(customer) -> confirm(author)"""
        await workflow.accept_order(pending_order.id)

        order = await workflow.confirm_order(pending_order.id, PartyRole.CUSTOMER, customer_id)
        assert order.status == OrderStatus.ACCEPTED
        assert order.customer_confirmed
        assert not order.author_confirmed
        assert order.completed_at is None

        order = await workflow.confirm_order(pending_order.id, PartyRole.AUTHOR, author_id)
        assert order.status == OrderStatus.CONFIRMED
        assert order.both_confirmed
        assert order.completed_at is not None

    async def test_confirm_pending(self, workflow: OrderWorkflow, pending_order, customer_id):
        with pytest.raises(InvalidStateTransitionError):
            await workflow.confirm_order(pending_order.id, PartyRole.CUSTOMER, customer_id)

    async def test_wrong_role(self, workflow: OrderWorkflow, accepted_order, customer_id):
        """Заказчик не может подтвердить за автора"""
        with pytest.raises(UnauthorizedActionError):
            await workflow.confirm_order(accepted_order.id, PartyRole.AUTHOR, customer_id)

    async def test_stranger(self, workflow: OrderWorkflow, accepted_order):
        with pytest.raises(UnauthorizedActionError):
            await workflow.confirm_order(accepted_order.id, PartyRole.CUSTOMER, "stranger")

    async def test_unknown_role(self, workflow: OrderWorkflow, accepted_order, customer_id):
        with pytest.raises(OrderValidationError):
            await workflow.confirm_order(accepted_order.id, "admin", customer_id)

    async def test_missing_order(self, workflow: OrderWorkflow, customer_id):
        with pytest.raises(EntityNotFoundError):
            await workflow.confirm_order("missing", PartyRole.CUSTOMER, customer_id)

    async def test_reconfirm_is_noop(
        self, workflow: OrderWorkflow, accepted_order, author_id, customer_id
    ):
        """Повторное подтверждение той же стороной - успешный no-op"""
        first = await workflow.confirm_order(accepted_order.id, PartyRole.AUTHOR, author_id)
        again = await workflow.confirm_order(accepted_order.id, PartyRole.AUTHOR, author_id)
        assert again.status == OrderStatus.ACCEPTED
        assert again.version == first.version

        await workflow.confirm_order(accepted_order.id, PartyRole.CUSTOMER, customer_id)
        done = await workflow.confirm_order(accepted_order.id, PartyRole.CUSTOMER, customer_id)
        assert done.status == OrderStatus.CONFIRMED

    async def test_concurrent_confirmations(
        self, workflow: OrderWorkflow, accepted_order, author_id, customer_id
    ):
        """Параллельные подтверждения обеих сторон завершают заказ"""
        results = await asyncio.gather(
            workflow.confirm_order(accepted_order.id, PartyRole.AUTHOR, author_id),
            workflow.confirm_order(accepted_order.id, PartyRole.CUSTOMER, customer_id),
        )
        assert all(r.author_confirmed or r.customer_confirmed for r in results)

        order = await workflow.get_order(accepted_order.id)
        assert order.status == OrderStatus.CONFIRMED
        assert order.author_confirmed and order.customer_confirmed
        assert order.completed_at is not None


class TestProjections:
    async def test_orders_for_user(self, workflow: OrderWorkflow, service_repo, author_id, customer_id):
        """Пользователь может быть автором в одних заказах и заказчиком в других"""
        own_service = await service_repo.create(customer_id, "Переводы")
        service_id = await service_repo.create(author_id, "Дизайн")

        await workflow.place_order({"service_id": service_id, "customer_id": customer_id})
        await workflow.place_order({"service_id": own_service, "customer_id": author_id})
        await workflow.place_order({"service_id": own_service, "customer_id": "third"})

        as_author = await workflow.get_orders_for_author(customer_id)
        as_customer = await workflow.get_orders_for_customer(customer_id)
        everything = await workflow.get_orders_for_user(customer_id)

        assert len(as_author) == 2
        assert len(as_customer) == 1
        assert len(everything) == 3
        assert {o.id for o in everything} == {o.id for o in as_author + as_customer}

    async def test_no_orders(self, workflow: OrderWorkflow):
        assert await workflow.get_orders_for_user("nobody") == []

    async def test_get_order_missing(self, workflow: OrderWorkflow):
        with pytest.raises(EntityNotFoundError):
            await workflow.get_order("missing")
