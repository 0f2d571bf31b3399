"""
Database package: подключение к БД и модели
"""

from marketplace.database.models import Order, Vote, VoteTally
from marketplace.database.orm_database import ORMDatabase


def get_database(database_url: str | None = None) -> ORMDatabase:
    """
    Фабрика для получения экземпляра БД

    Args:
        database_url: URL базы данных (по умолчанию из Config)
    """
    return ORMDatabase(database_url)


__all__ = ["ORMDatabase", "Order", "Vote", "VoteTally", "get_database"]
