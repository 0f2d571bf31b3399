"""
Исключения доменного уровня
"""


class MarketplaceError(Exception):
    """Базовое исключение ядра маркетплейса"""


class DomainError(MarketplaceError):
    """Нарушение бизнес-правил заказа или голосования"""


class InvalidStateTransitionError(DomainError):
    """Исключение при попытке недопустимого перехода статуса"""

    def __init__(self, from_state: str, to_state: str, reason: str = ""):
        self.from_state = from_state
        self.to_state = to_state
        self.reason = reason
        message = f"Недопустимый переход из '{from_state}' в '{to_state}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class UnauthorizedActionError(DomainError):
    """Роль вызывающего не совпадает с ролью, которую требует операция"""

    def __init__(self, user_id: str | None, action: str, required_role: str | None = None):
        self.user_id = user_id
        self.action = action
        self.required_role = required_role
        message = f"Пользователь {user_id} не может выполнить '{action}'"
        if required_role:
            message += f" (требуется роль: {required_role})"
        super().__init__(message)


class OrderValidationError(DomainError):
    """Структурно некорректные входные данные"""

    def __init__(self, message: str, errors: list[dict] | None = None):
        self.errors = errors or []
        super().__init__(message)
