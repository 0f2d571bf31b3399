"""
Голосование за объекты (посты блога, услуги)
"""

import logging

from pydantic import ValidationError

from marketplace.database.models import Vote, VoteTally
from marketplace.domain.exceptions import OrderValidationError, UnauthorizedActionError
from marketplace.domain.ports import SubjectScoreSink, VoteEligibility, VoteStore
from marketplace.domain.vote_policy import ToggleVotePolicy, VoteAction, VotePolicy
from marketplace.repositories.exceptions import EntityNotFoundError
from marketplace.schemas.vote import VoteCreateSchema
from marketplace.utils.helpers import get_now


logger = logging.getLogger(__name__)


class VoteLedger:
    """
    Учёт голосов по объектам одного типа

    На пару (объект, пользователь) хранится не больше одного голоса.
    Рейтинг всегда пересчитывается по текущим голосам; кэш счётчиков
    у объекта (если есть) пишется в той же транзакции, что и голос.
    """

    def __init__(
        self,
        store: VoteStore,
        subjects: SubjectScoreSink,
        policy: VotePolicy | None = None,
        eligibility: VoteEligibility | None = None,
        subject_name: str = "Subject",
    ):
        """
        Args:
            store: Хранилище голосов
            subjects: Владелец объектов: существование и кэш счётчиков
            policy: Политика повторного голоса (по умолчанию toggle)
            eligibility: Проверка права голосовать (None - голосуют все)
            subject_name: Название типа объекта для ошибок
        """
        self.store = store
        self.subjects = subjects
        self.policy = policy or ToggleVotePolicy()
        self.eligibility = eligibility
        self.subject_name = subject_name

    async def get_user_vote(self, subject_id: str, user_id: str) -> Vote | None:
        """Текущий голос пользователя или None"""
        return await self.store.get(subject_id, user_id)

    async def vote(self, subject_id: str, user_id: str, is_upvote: bool) -> VoteAction:
        """
        Голос пользователя

        - голоса не было: создаётся
        - та же полярность: решает политика (toggle снимает голос)
        - другая полярность: голос меняется на месте

        Args:
            subject_id: ID объекта
            user_id: ID пользователя
            is_upvote: True - за, False - против

        Returns:
            Применённое действие

        Raises:
            EntityNotFoundError: Объект не найден
            UnauthorizedActionError: Пользователь не может голосовать за объект
        """
        try:
            request = VoteCreateSchema(subject_id=subject_id, user_id=user_id, is_upvote=is_upvote)
        except ValidationError as e:
            raise OrderValidationError("Некорректный голос", e.errors(include_url=False)) from e

        if not await self.subjects.exists(request.subject_id):
            raise EntityNotFoundError(self.subject_name, request.subject_id)

        if self.eligibility is not None and not await self.eligibility.can_vote(
            request.subject_id, request.user_id
        ):
            logger.warning(
                f"Пользователь {request.user_id} не может голосовать за "
                f"{self.subject_name} #{request.subject_id}"
            )
            raise UnauthorizedActionError(request.user_id, f"vote for {self.subject_name}")

        async with self.store.transaction() as store:
            existing = await store.get(request.subject_id, request.user_id)
            action = self.policy.decide(existing, request.is_upvote)

            if action == VoteAction.CREATED:
                await store.upsert(
                    Vote(
                        subject_id=request.subject_id,
                        user_id=request.user_id,
                        is_upvote=request.is_upvote,
                        created_at=get_now(),
                    )
                )
            elif action == VoteAction.REMOVED:
                await store.delete(request.subject_id, request.user_id)
            elif action == VoteAction.FLIPPED:
                await store.upsert(
                    Vote(
                        id=existing.id,
                        subject_id=request.subject_id,
                        user_id=request.user_id,
                        is_upvote=request.is_upvote,
                        created_at=get_now(),
                    )
                )

            if action != VoteAction.UNCHANGED:
                await self._refresh_counts(store, request.subject_id)

        logger.info(
            f"Голос {request.user_id} за {self.subject_name} #{request.subject_id}: {action.value}"
        )
        return action

    async def remove_vote(self, subject_id: str, user_id: str) -> None:
        """Снятие голоса; отсутствие голоса не ошибка"""
        async with self.store.transaction() as store:
            if not await store.delete(subject_id, user_id):
                return
            await self._refresh_counts(store, subject_id)
        logger.info(f"Голос {user_id} за {self.subject_name} #{subject_id} снят")

    async def get_tally(self, subject_id: str) -> VoteTally:
        """Подсчёт голосов за и против"""
        return VoteTally.from_votes(await self.store.list_by_subject(subject_id))

    async def get_score(self, subject_id: str) -> int:
        """Рейтинг объекта: за минус против"""
        return (await self.get_tally(subject_id)).score

    async def _refresh_counts(self, store: VoteStore, subject_id: str) -> None:
        """Пересчёт и запись счётчиков в той же транзакции, что и голос"""
        tally = VoteTally.from_votes(await store.list_by_subject(subject_id))
        await self.subjects.within(store).store_counts(subject_id, tally.upvotes, tally.downvotes)
