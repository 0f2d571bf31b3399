"""
Объекты голосования: услуги и посты блога

Сами сущности принадлежат внешним модулям (каталог услуг, блог);
здесь только то, что нужно ядру: проверка существования, владелец услуги
и кэш счётчиков голосов.
"""

import logging

from sqlalchemy import select, update

from marketplace.database.orm_models import BlogPost as BlogPostRow
from marketplace.database.orm_models import Service as ServiceRow
from marketplace.repositories.base import BaseRepository
from marketplace.utils.helpers import get_now, new_id


logger = logging.getLogger(__name__)


class ServiceRepository(BaseRepository[ServiceRow]):
    """Услуги: владелец и кэшированные счётчики голосов"""

    async def create(self, owner_id: str, title: str, service_id: str | None = None) -> str:
        """
        Регистрация услуги

        Args:
            owner_id: ID автора услуги
            title: Название
            service_id: ID (генерируется, если не задан)

        Returns:
            ID услуги
        """
        row = ServiceRow(
            id=service_id or new_id(),
            owner_id=owner_id,
            title=title,
            upvotes=0,
            downvotes=0,
            created_at=get_now(),
        )
        async with self._session_scope("service create") as session:
            session.add(row)
        logger.info(f"Создана услуга #{row.id} (владелец {owner_id})")
        return row.id

    async def exists(self, subject_id: str) -> bool:
        async with self._session_scope("service exists") as session:
            result = await session.execute(select(ServiceRow.id).where(ServiceRow.id == subject_id))
            return result.scalar_one_or_none() is not None

    async def get_owner_id(self, service_id: str) -> str | None:
        """ID автора услуги или None, если услуги нет"""
        async with self._session_scope("service owner") as session:
            result = await session.execute(
                select(ServiceRow.owner_id).where(ServiceRow.id == service_id)
            )
            return result.scalar_one_or_none()

    async def get_counts(self, service_id: str) -> tuple[int, int] | None:
        """Кэшированные (upvotes, downvotes) услуги"""
        async with self._session_scope("service counts") as session:
            result = await session.execute(
                select(ServiceRow.upvotes, ServiceRow.downvotes).where(ServiceRow.id == service_id)
            )
            row = result.one_or_none()
            return (row.upvotes, row.downvotes) if row else None

    async def store_counts(self, subject_id: str, upvotes: int, downvotes: int) -> None:
        """Запись пересчитанных счётчиков голосов"""
        async with self._session_scope("service counters") as session:
            await session.execute(
                update(ServiceRow)
                .where(ServiceRow.id == subject_id)
                .values(upvotes=upvotes, downvotes=downvotes)
            )
        logger.debug(f"Счётчики услуги #{subject_id}: +{upvotes} / -{downvotes}")


class BlogPostRepository(BaseRepository[BlogPostRow]):
    """Посты блога; счётчики голосов не кэшируются"""

    async def create(self, author_id: str, title: str, post_id: str | None = None) -> str:
        row = BlogPostRow(
            id=post_id or new_id(),
            author_id=author_id,
            title=title,
            created_at=get_now(),
        )
        async with self._session_scope("blog post create") as session:
            session.add(row)
        logger.info(f"Создан пост #{row.id}")
        return row.id

    async def exists(self, subject_id: str) -> bool:
        async with self._session_scope("blog post exists") as session:
            result = await session.execute(
                select(BlogPostRow.id).where(BlogPostRow.id == subject_id)
            )
            return result.scalar_one_or_none() is not None

    async def store_counts(self, subject_id: str, upvotes: int, downvotes: int) -> None:
        # Рейтинг поста всегда считается по голосам
        return None
