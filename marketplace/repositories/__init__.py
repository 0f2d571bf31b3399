"""
Repository layer для абстракции работы с базой данных
"""

from marketplace.repositories.base import BaseRepository
from marketplace.repositories.exceptions import EntityNotFoundError, RepositoryError, StorageError
from marketplace.repositories.order_repository import OrderRepository
from marketplace.repositories.subject_repository import BlogPostRepository, ServiceRepository
from marketplace.repositories.vote_repository import VoteRepository


__all__ = [
    "BaseRepository",
    "BlogPostRepository",
    "EntityNotFoundError",
    "OrderRepository",
    "RepositoryError",
    "ServiceRepository",
    "StorageError",
    "VoteRepository",
]
