"""
Вспомогательные функции
"""

import uuid
from datetime import datetime, timezone


def get_now() -> datetime:
    """
    Получить текущее время в UTC

    Returns:
        datetime объект с timezone UTC
    """
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """
    Привести datetime из БД к UTC

    SQLite не хранит timezone, поэтому наивные значения считаются UTC.

    Args:
        value: Значение из БД

    Returns:
        datetime с timezone UTC или None
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def new_id() -> str:
    """Новый идентификатор сущности (UUID4 строкой)"""
    return str(uuid.uuid4())
