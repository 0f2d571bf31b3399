"""
Тесты для OrderStateMachine
"""
import pytest

from marketplace.core.constants import OrderStatus, PartyRole
from marketplace.domain.exceptions import InvalidStateTransitionError
from marketplace.domain.order_state_machine import OrderStateMachine


class TestTransitions:
    """Граф переходов"""

    @pytest.mark.parametrize(
        "from_state,to_state",
        [
            (OrderStatus.PENDING, OrderStatus.ACCEPTED),
            (OrderStatus.PENDING, OrderStatus.REFUSED),
            (OrderStatus.ACCEPTED, OrderStatus.CONFIRMED),
        ],
    )
    def test_allowed(self, from_state, to_state):
        assert OrderStateMachine.can_transition(from_state, to_state)
        result = OrderStateMachine.validate_transition(from_state, to_state)
        assert result.is_valid

    @pytest.mark.parametrize(
        "from_state,to_state",
        [
            (OrderStatus.PENDING, OrderStatus.CONFIRMED),
            (OrderStatus.ACCEPTED, OrderStatus.REFUSED),
            (OrderStatus.ACCEPTED, OrderStatus.ACCEPTED),
            (OrderStatus.REFUSED, OrderStatus.ACCEPTED),
            (OrderStatus.CONFIRMED, OrderStatus.PENDING),
        ],
    )
    def test_forbidden(self, from_state, to_state):
        assert not OrderStateMachine.can_transition(from_state, to_state)
        with pytest.raises(InvalidStateTransitionError) as exc_info:
            OrderStateMachine.validate_transition(from_state, to_state)
        assert exc_info.value.from_state == from_state
        assert exc_info.value.to_state == to_state

    def test_forbidden_without_exception(self):
        """Тест валидации без выброса исключения"""
        result = OrderStateMachine.validate_transition(
            OrderStatus.REFUSED, OrderStatus.ACCEPTED, raise_exception=False
        )
        assert not result.is_valid
        assert "терминальным" in result.error_message

    def test_terminal_states(self):
        assert OrderStateMachine.is_terminal_state(OrderStatus.REFUSED)
        assert OrderStateMachine.is_terminal_state(OrderStatus.CONFIRMED)
        assert not OrderStateMachine.is_terminal_state(OrderStatus.PENDING)
        assert not OrderStateMachine.is_terminal_state(OrderStatus.ACCEPTED)


class TestRoles:
    """Права ролей на переходы"""

    def test_author_accepts(self):
        result = OrderStateMachine.validate_transition(
            OrderStatus.PENDING, OrderStatus.ACCEPTED, role=PartyRole.AUTHOR
        )
        assert result.is_valid

    def test_customer_cannot_accept(self):
        result = OrderStateMachine.validate_transition(
            OrderStatus.PENDING, OrderStatus.ACCEPTED, role=PartyRole.CUSTOMER
        )
        assert not result.is_valid
        assert result.required_role == PartyRole.AUTHOR

    def test_both_parties_confirm(self):
        roles = OrderStateMachine.get_required_roles(OrderStatus.ACCEPTED, OrderStatus.CONFIRMED)
        assert roles == {PartyRole.AUTHOR, PartyRole.CUSTOMER}


class TestEnsureConfirmable:
    def test_accepted_is_confirmable(self):
        OrderStateMachine.ensure_confirmable(OrderStatus.ACCEPTED)

    @pytest.mark.parametrize(
        "state", [OrderStatus.PENDING, OrderStatus.REFUSED, OrderStatus.CONFIRMED]
    )
    def test_other_states_are_not(self, state):
        with pytest.raises(InvalidStateTransitionError):
            OrderStateMachine.ensure_confirmable(state)

    def test_transition_description(self):
        assert (
            OrderStateMachine.get_transition_description(OrderStatus.PENDING, OrderStatus.ACCEPTED)
            == "Автор принял заказ"
        )
