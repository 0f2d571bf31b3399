"""
Тесты голосования за посты и услуги
"""
import asyncio

import pytest
import pytest_asyncio

from marketplace.core.constants import PartyRole, VoteRepeatPolicy
from marketplace.database import ORMDatabase
from marketplace.domain.exceptions import OrderValidationError, UnauthorizedActionError
from marketplace.domain.vote_policy import ToggleVotePolicy, VoteAction
from marketplace.database.models import Vote
from marketplace.repositories import EntityNotFoundError, ServiceRepository
from marketplace.services import ServiceFactory, VoteLedger


class RecordingTogglePolicy(ToggleVotePolicy):
    """Toggle-политика, запоминающая порядок решений"""

    def __init__(self):
        self.decisions: list[tuple[bool, VoteAction]] = []

    def decide(self, existing, is_upvote):
        action = super().decide(existing, is_upvote)
        self.decisions.append((is_upvote, action))
        return action


@pytest_asyncio.fixture
async def post_id(factory: ServiceFactory) -> str:
    return await factory.blog_post_repository.create("author-1", "Пост", post_id="post-1")


@pytest.fixture
def ledger(factory: ServiceFactory) -> VoteLedger:
    return factory.blog_post_votes


class TestVote:
    async def test_toggle_scenario(self, ledger: VoteLedger, post_id):
        """up (0 -> 1), up again (1 -> 0), down (0 -> -1)"""
        assert await ledger.vote(post_id, "user-1", True) == VoteAction.CREATED
        assert await ledger.get_score(post_id) == 1

        assert await ledger.vote(post_id, "user-1", True) == VoteAction.REMOVED
        assert await ledger.get_score(post_id) == 0
        assert await ledger.get_user_vote(post_id, "user-1") is None

        assert await ledger.vote(post_id, "user-1", False) == VoteAction.CREATED
        assert await ledger.get_score(post_id) == -1
        assert len(await ledger.store.list_by_subject(post_id)) == 1

    async def test_flip(self, ledger: VoteLedger, post_id):
        """Смена полярности оставляет одну строку"""
        await ledger.vote(post_id, "user-1", True)
        assert await ledger.vote(post_id, "user-1", False) == VoteAction.FLIPPED

        vote = await ledger.get_user_vote(post_id, "user-1")
        assert vote.is_upvote is False
        assert len(await ledger.store.list_by_subject(post_id)) == 1
        assert await ledger.get_score(post_id) == -1

    async def test_score_is_ups_minus_downs(self, ledger: VoteLedger, post_id):
        for user, is_upvote in [("a", True), ("b", True), ("c", False), ("d", True)]:
            await ledger.vote(post_id, user, is_upvote)

        tally = await ledger.get_tally(post_id)
        assert (tally.upvotes, tally.downvotes) == (3, 1)
        assert await ledger.get_score(post_id) == tally.upvotes - tally.downvotes == 2

    async def test_missing_subject(self, ledger: VoteLedger):
        with pytest.raises(EntityNotFoundError):
            await ledger.vote("missing", "user-1", True)

    async def test_invalid_vote(self, ledger: VoteLedger, post_id):
        with pytest.raises(OrderValidationError):
            await ledger.vote(post_id, "", True)

    async def test_no_vote(self, ledger: VoteLedger, post_id):
        assert await ledger.get_user_vote(post_id, "user-1") is None
        assert await ledger.get_score(post_id) == 0

    async def test_remove_vote(self, ledger: VoteLedger, post_id):
        await ledger.vote(post_id, "user-1", False)
        await ledger.remove_vote(post_id, "user-1")
        assert await ledger.get_user_vote(post_id, "user-1") is None

        # Снятие отсутствующего голоса - не ошибка
        await ledger.remove_vote(post_id, "user-1")
        assert await ledger.get_score(post_id) == 0

    async def test_concurrent_votes_single_row(self, ledger: VoteLedger, post_id):
        """
        Параллельные голоса одного пользователя не теряются

        Порядок решений внутри транзакций записывается политикой; итоговая
        строка должна совпадать с последовательным применением этих решений.
        """
        policy = RecordingTogglePolicy()
        ledger.policy = policy
        inputs = [i % 3 != 0 for i in range(8)]

        actions = await asyncio.gather(*[ledger.vote(post_id, "user-1", up) for up in inputs])

        assert sorted(actions) == sorted(action for _, action in policy.decisions)
        assert len(policy.decisions) == len(inputs)

        state = None
        for is_upvote, action in policy.decisions:
            current = None if state is None else Vote(post_id, "user-1", state)
            assert ToggleVotePolicy().decide(current, is_upvote) == action
            if action in (VoteAction.CREATED, VoteAction.FLIPPED):
                state = is_upvote
            elif action == VoteAction.REMOVED:
                state = None

        votes = await ledger.store.list_by_subject(post_id)
        assert len(votes) == (0 if state is None else 1)
        if state is not None:
            assert votes[0].is_upvote is state
        assert await ledger.get_score(post_id) == {None: 0, True: 1, False: -1}[state]

    async def test_concurrent_votes_of_different_users(self, ledger: VoteLedger, post_id):
        await asyncio.gather(*[ledger.vote(post_id, f"user-{i}", True) for i in range(5)])
        assert await ledger.get_score(post_id) == 5


class TestKeepPolicy:
    async def test_repeat_vote_unchanged(self, db: ORMDatabase, post_id):
        ledger = ServiceFactory(db, vote_policy=VoteRepeatPolicy.KEEP).blog_post_votes

        assert await ledger.vote(post_id, "user-1", True) == VoteAction.CREATED
        assert await ledger.vote(post_id, "user-1", True) == VoteAction.UNCHANGED
        assert await ledger.get_score(post_id) == 1


class TestServiceVotes:
    async def test_counters_cached(self, factory: ServiceFactory, service_id):
        """Счётчики услуги обновляются после каждого голоса"""
        ledger = factory.service_votes
        await ledger.vote(service_id, "user-1", True)
        await ledger.vote(service_id, "user-2", False)
        await ledger.vote(service_id, "user-3", True)
        assert await factory.service_repository.get_counts(service_id) == (2, 1)

        await ledger.vote(service_id, "user-1", True)
        assert await factory.service_repository.get_counts(service_id) == (1, 1)

        await ledger.remove_vote(service_id, "user-2")
        assert await factory.service_repository.get_counts(service_id) == (1, 0)

    async def test_vote_requires_confirmed_order(
        self, db: ORMDatabase, service_id, author_id, customer_id
    ):
        """За услугу голосует только заказчик с выполненным заказом"""
        factory = ServiceFactory(db, service_vote_requires_order=True)
        ledger = factory.service_votes
        workflow = factory.order_workflow

        with pytest.raises(UnauthorizedActionError):
            await ledger.vote(service_id, customer_id, True)

        order = await workflow.place_order({"service_id": service_id, "customer_id": customer_id})
        await workflow.accept_order(order.id)
        await workflow.confirm_order(order.id, PartyRole.AUTHOR, author_id)

        # Заказ ещё не завершён
        with pytest.raises(UnauthorizedActionError):
            await ledger.vote(service_id, customer_id, True)

        await workflow.confirm_order(order.id, PartyRole.CUSTOMER, customer_id)
        assert await ledger.vote(service_id, customer_id, True) == VoteAction.CREATED
        assert await ledger.get_score(service_id) == 1

    async def test_counters_failure_rolls_back_vote(
        self, factory: ServiceFactory, service_id, monkeypatch
    ):
        """Если счётчики не записались, голос тоже не сохраняется"""

        async def broken_store_counts(self, subject_id, upvotes, downvotes):
            raise RuntimeError("counters unavailable")

        ledger = factory.service_votes
        monkeypatch.setattr(ServiceRepository, "store_counts", broken_store_counts)

        with pytest.raises(RuntimeError):
            await ledger.vote(service_id, "user-1", True)

        assert await ledger.get_user_vote(service_id, "user-1") is None
        assert await ledger.get_score(service_id) == 0

        # После восстановления повторный голос создаётся, а не снимается
        monkeypatch.undo()
        assert await ledger.vote(service_id, "user-1", True) == VoteAction.CREATED
        assert await factory.service_repository.get_counts(service_id) == (1, 0)

    async def test_counters_failure_keeps_vote_on_remove(
        self, factory: ServiceFactory, service_id, monkeypatch
    ):
        ledger = factory.service_votes
        await ledger.vote(service_id, "user-1", False)

        async def broken_store_counts(self, subject_id, upvotes, downvotes):
            raise RuntimeError("counters unavailable")

        monkeypatch.setattr(ServiceRepository, "store_counts", broken_store_counts)
        with pytest.raises(RuntimeError):
            await ledger.remove_vote(service_id, "user-1")
        monkeypatch.undo()

        vote = await ledger.get_user_vote(service_id, "user-1")
        assert vote is not None and vote.is_upvote is False
        assert await factory.service_repository.get_counts(service_id) == (0, 1)

    async def test_ledger_for(self, factory: ServiceFactory):
        assert factory.ledger_for("service") is factory.service_votes
        assert factory.ledger_for("blog_post") is factory.blog_post_votes
        with pytest.raises(ValueError):
            factory.ledger_for("comment")
