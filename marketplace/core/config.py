"""
Конфигурация приложения (переменные окружения)
"""

import os

from dotenv import load_dotenv

from marketplace.core.constants import MAX_ORDER_MESSAGE_LENGTH, VoteRepeatPolicy


load_dotenv()


def _get_bool(name: str, default: bool) -> bool:
    """Чтение булевой переменной окружения"""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Конфигурация ядра маркетплейса"""

    # База данных
    DATABASE_PATH: str = os.getenv("DATABASE_PATH", "marketplace.db")
    DATABASE_URL: str | None = os.getenv("DATABASE_URL")
    SQLITE_BUSY_TIMEOUT: float = float(os.getenv("SQLITE_BUSY_TIMEOUT", "30"))
    DATABASE_ECHO: bool = _get_bool("DATABASE_ECHO", False)

    # Логирование
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOGS_DIR: str = os.getenv("LOGS_DIR", "logs")

    # Голосования
    VOTE_REPEAT_POLICY: str = os.getenv("VOTE_REPEAT_POLICY", VoteRepeatPolicy.TOGGLE)
    # Голосовать за услугу может только заказчик с завершённым заказом
    SERVICE_VOTE_REQUIRES_ORDER: bool = _get_bool("SERVICE_VOTE_REQUIRES_ORDER", True)

    # Заказы
    ORDER_MESSAGE_MAX_LENGTH: int = int(
        os.getenv("ORDER_MESSAGE_MAX_LENGTH", str(MAX_ORDER_MESSAGE_LENGTH))
    )

    @classmethod
    def get_database_url(cls) -> str:
        """URL базы данных: DATABASE_URL или SQLite-файл по DATABASE_PATH"""
        if cls.DATABASE_URL:
            return cls.DATABASE_URL
        return f"sqlite+aiosqlite:///{cls.DATABASE_PATH}"
