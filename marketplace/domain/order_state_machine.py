"""
State Machine для валидации переходов статусов заказов
"""

from dataclasses import dataclass

from marketplace.core.constants import OrderStatus, PartyRole
from marketplace.domain.exceptions import InvalidStateTransitionError


@dataclass
class OrderStateTransitionResult:
    """Результат валидации перехода статуса"""

    is_valid: bool
    error_message: str | None = None
    required_role: str | None = None


class OrderStateMachine:
    """
    State Machine для управления жизненным циклом заказа

    Граф переходов:

    PENDING → ACCEPTED → CONFIRMED
       ↓
    REFUSED

    В CONFIRMED заказ переходит только когда обе стороны подтвердили
    выполнение (author_confirmed и customer_confirmed).
    """

    # Допустимые переходы: из какого статуса в какие можно перейти
    TRANSITIONS: dict[str, set[str]] = {
        OrderStatus.PENDING: {
            OrderStatus.ACCEPTED,  # Автор принял
            OrderStatus.REFUSED,  # Автор отказался
        },
        OrderStatus.ACCEPTED: {
            OrderStatus.CONFIRMED,  # Обе стороны подтвердили
        },
        OrderStatus.REFUSED: set(),  # Терминальное состояние
        OrderStatus.CONFIRMED: set(),  # Терминальное состояние
    }

    # Роли, которые могут выполнять переходы
    ROLE_PERMISSIONS: dict[tuple[str, str], set[str]] = {
        # (from_status, to_status): {allowed_roles}
        (OrderStatus.PENDING, OrderStatus.ACCEPTED): {PartyRole.AUTHOR},
        (OrderStatus.PENDING, OrderStatus.REFUSED): {PartyRole.AUTHOR},
        # Завершение - результат подтверждений обеих сторон
        (OrderStatus.ACCEPTED, OrderStatus.CONFIRMED): {
            PartyRole.AUTHOR,
            PartyRole.CUSTOMER,
        },
    }

    # Подтверждать выполнение можно только в этом статусе
    CONFIRMABLE_STATUS = OrderStatus.ACCEPTED

    @classmethod
    def can_transition(cls, from_state: str, to_state: str) -> bool:
        """
        Проверка возможности перехода между статусами

        Args:
            from_state: Текущий статус
            to_state: Целевой статус

        Returns:
            True если переход допустим
        """
        return to_state in cls.TRANSITIONS.get(from_state, set())

    @classmethod
    def validate_transition(
        cls,
        from_state: str,
        to_state: str,
        role: str | None = None,
        raise_exception: bool = True,
    ) -> OrderStateTransitionResult:
        """
        Валидация перехода статуса с проверкой роли

        Повторный переход в тот же статус недопустим: второй accept
        должен завершиться ошибкой, а не молча пройти.

        Args:
            from_state: Текущий статус заказа
            to_state: Целевой статус
            role: Роль инициатора (None - роль не проверяется)
            raise_exception: Выбрасывать ли исключение при ошибке

        Returns:
            OrderStateTransitionResult с результатом валидации

        Raises:
            InvalidStateTransitionError: Если переход недопустим и raise_exception=True
        """
        if not cls.can_transition(from_state, to_state):
            error_msg = (
                f"Переход из '{OrderStatus.get_status_name(from_state)}' "
                f"в '{OrderStatus.get_status_name(to_state)}' недопустим"
            )

            allowed = cls.TRANSITIONS.get(from_state, set())
            if allowed:
                allowed_names = sorted(OrderStatus.get_status_name(s) for s in allowed)
                error_msg += f". Допустимые переходы: {', '.join(allowed_names)}"
            else:
                error_msg += (
                    f". Статус '{OrderStatus.get_status_name(from_state)}' является терминальным"
                )

            if raise_exception:
                raise InvalidStateTransitionError(from_state, to_state, error_msg)

            return OrderStateTransitionResult(is_valid=False, error_message=error_msg)

        if role is not None:
            required_roles = cls.get_required_roles(from_state, to_state)
            if required_roles and role not in required_roles:
                return OrderStateTransitionResult(
                    is_valid=False,
                    error_message=(
                        f"Роль '{role}' не может выполнить переход "
                        f"'{from_state}' → '{to_state}'"
                    ),
                    required_role=", ".join(sorted(required_roles)),
                )

        return OrderStateTransitionResult(is_valid=True)

    @classmethod
    def get_required_roles(cls, from_state: str, to_state: str) -> set[str]:
        """Роли, которым разрешён переход"""
        return cls.ROLE_PERMISSIONS.get((from_state, to_state), set())

    @classmethod
    def is_terminal_state(cls, state: str) -> bool:
        """
        Проверка, является ли статус терминальным

        Args:
            state: Статус для проверки

        Returns:
            True если из этого статуса нельзя никуда перейти
        """
        return len(cls.TRANSITIONS.get(state, set())) == 0

    @classmethod
    def ensure_confirmable(cls, state: str) -> None:
        """
        Проверка, что в текущем статусе стороны могут подтверждать выполнение

        Raises:
            InvalidStateTransitionError: Если заказ не в статусе ACCEPTED
        """
        if state != cls.CONFIRMABLE_STATUS:
            raise InvalidStateTransitionError(
                state,
                OrderStatus.CONFIRMED,
                f"Подтверждение возможно только для заказа в статусе "
                f"'{OrderStatus.get_status_name(cls.CONFIRMABLE_STATUS)}'",
            )

    @classmethod
    def get_transition_description(cls, from_state: str, to_state: str) -> str:
        """
        Получение описания перехода

        Args:
            from_state: Начальный статус
            to_state: Конечный статус

        Returns:
            Описание перехода
        """
        descriptions = {
            (OrderStatus.PENDING, OrderStatus.ACCEPTED): "Автор принял заказ",
            (OrderStatus.PENDING, OrderStatus.REFUSED): "Автор отказался от заказа",
            (OrderStatus.ACCEPTED, OrderStatus.CONFIRMED): "Обе стороны подтвердили выполнение",
        }

        return descriptions.get(
            (from_state, to_state),
            f"Переход из {OrderStatus.get_status_name(from_state)} "
            f"в {OrderStatus.get_status_name(to_state)}",
        )
