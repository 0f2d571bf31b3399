"""
Исключения для работы с репозиториями
"""

from marketplace.domain.exceptions import MarketplaceError


class RepositoryError(MarketplaceError):
    """Базовое исключение для репозиториев"""


class StorageError(RepositoryError):
    """
    Хранилище не смогло выполнить чтение или запись

    Не повторяется внутри ядра, пробрасывается вызывающему как есть.
    """

    def __init__(self, operation: str, cause: Exception | None = None):
        self.operation = operation
        self.cause = cause
        message = f"Storage failure during {operation}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class EntityNotFoundError(RepositoryError):
    """
    Исключение при отсутствии записи
    """

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} #{entity_id} not found")
