"""
Репозиторий голосов за посты и услуги
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.core.constants import SubjectKind
from marketplace.database.models import Vote
from marketplace.database.orm_database import ORMDatabase
from marketplace.database.orm_models import Vote as VoteRow
from marketplace.repositories.base import BaseRepository
from marketplace.utils.helpers import as_utc, get_now, new_id


logger = logging.getLogger(__name__)


class VoteRepository(BaseRepository[Vote]):
    """
    Голоса одного типа объектов (посты или услуги)

    Ключ голоса - пара (subject_id, user_id); тип объекта задаётся
    при создании репозитория и в интерфейс не выходит.
    """

    def __init__(
        self,
        database: ORMDatabase,
        subject_kind: str,
        session: AsyncSession | None = None,
    ):
        """
        Args:
            database: Подключение к базе данных
            subject_kind: Тип объектов (SubjectKind)
            session: Сессия для работы внутри transaction()
        """
        if subject_kind not in SubjectKind.all_kinds():
            raise ValueError(f"Неизвестный тип объекта голосования: {subject_kind}")
        super().__init__(database, session=session)
        self.subject_kind = subject_kind

    def _bind(self, session: AsyncSession) -> "VoteRepository":
        return self.__class__(self.database, self.subject_kind, session=session)

    async def get(self, subject_id: str, user_id: str) -> Vote | None:
        """
        Голос пользователя за объект

        Внутри transaction() строка блокируется до конца транзакции
        (SELECT ... FOR UPDATE; в SQLite транзакция и так эксклюзивна).

        Args:
            subject_id: ID объекта
            user_id: ID пользователя

        Returns:
            Голос или None
        """
        stmt = select(VoteRow).where(
            VoteRow.subject_kind == self.subject_kind,
            VoteRow.subject_id == subject_id,
            VoteRow.user_id == user_id,
        )
        if self._session is not None and not self.database.is_sqlite:
            stmt = stmt.with_for_update()

        async with self._session_scope("vote get") as session:
            result = await session.execute(stmt.execution_options(populate_existing=True))
            row = result.scalar_one_or_none()
            return self._row_to_vote(row) if row else None

    async def upsert(self, vote: Vote) -> bool:
        """
        Создание или обновление голоса одним запросом

        INSERT ... ON CONFLICT DO UPDATE по уникальному ключу
        (subject_kind, subject_id, user_id): дубликат строки невозможен
        даже при гонке двух вставок.

        Args:
            vote: Голос

        Returns:
            True если голос записан
        """
        insert = sqlite_insert if self.database.is_sqlite else postgresql_insert
        stmt = insert(VoteRow).values(
            id=vote.id or new_id(),
            subject_kind=self.subject_kind,
            subject_id=vote.subject_id,
            user_id=vote.user_id,
            is_upvote=vote.is_upvote,
            created_at=vote.created_at or get_now(),
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[VoteRow.subject_kind, VoteRow.subject_id, VoteRow.user_id],
            set_={
                "is_upvote": stmt.excluded.is_upvote,
                "created_at": stmt.excluded.created_at,
            },
        )

        async with self._session_scope("vote upsert") as session:
            result = await session.execute(stmt)
            written = result.rowcount != 0

        logger.debug(
            f"Голос {self.subject_kind}:{vote.subject_id} от {vote.user_id} "
            f"записан (is_upvote={vote.is_upvote})"
        )
        return written

    async def delete(self, subject_id: str, user_id: str) -> bool:
        """
        Удаление голоса

        Returns:
            True если строка была удалена, False если голоса не было
        """
        stmt = delete(VoteRow).where(
            VoteRow.subject_kind == self.subject_kind,
            VoteRow.subject_id == subject_id,
            VoteRow.user_id == user_id,
        )
        async with self._session_scope("vote delete") as session:
            result = await session.execute(stmt)
            return result.rowcount > 0

    async def list_by_subject(self, subject_id: str) -> list[Vote]:
        """Все текущие голоса за объект"""
        stmt = (
            select(VoteRow)
            .where(VoteRow.subject_kind == self.subject_kind, VoteRow.subject_id == subject_id)
            .order_by(VoteRow.created_at)
        )
        async with self._session_scope("votes by subject") as session:
            result = await session.execute(stmt)
            return [self._row_to_vote(row) for row in result.scalars().all()]

    @staticmethod
    def _row_to_vote(row: VoteRow) -> Vote:
        return Vote(
            id=row.id,
            subject_id=row.subject_id,
            user_id=row.user_id,
            is_upvote=bool(row.is_upvote),
            created_at=as_utc(row.created_at),
        )
