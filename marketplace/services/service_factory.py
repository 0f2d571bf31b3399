"""
Factory для создания сервисов и репозиториев
"""

import logging

from marketplace.core.config import Config
from marketplace.core.constants import SubjectKind
from marketplace.database.orm_database import ORMDatabase
from marketplace.domain.order_state_machine import OrderStateMachine
from marketplace.domain.vote_policy import VotePolicy, get_vote_policy
from marketplace.repositories import (
    BlogPostRepository,
    OrderRepository,
    ServiceRepository,
    VoteRepository,
)
from marketplace.services.order_workflow import OrderWorkflow
from marketplace.services.role_resolver import OrderPartyResolver
from marketplace.services.vote_eligibility import CompletedOrderEligibility
from marketplace.services.vote_ledger import VoteLedger


logger = logging.getLogger(__name__)


class ServiceFactory:
    """
    Factory для создания сервисов с инжекцией зависимостей
    """

    def __init__(
        self,
        database: ORMDatabase,
        vote_policy: str | None = None,
        service_vote_requires_order: bool | None = None,
    ):
        """
        Инициализация фабрики

        Args:
            database: Подключение к базе данных
            vote_policy: Политика повторного голоса (по умолчанию из Config)
            service_vote_requires_order: Проверять заказ перед голосом за услугу
        """
        self.database = database
        self.vote_policy_name = vote_policy or Config.VOTE_REPEAT_POLICY
        self.service_vote_requires_order = (
            Config.SERVICE_VOTE_REQUIRES_ORDER
            if service_vote_requires_order is None
            else service_vote_requires_order
        )
        self.reset()

    @property
    def order_repository(self) -> OrderRepository:
        """Ленивая инициализация OrderRepository"""
        if self._order_repo is None:
            self._order_repo = OrderRepository(self.database)
        return self._order_repo

    @property
    def service_repository(self) -> ServiceRepository:
        """Ленивая инициализация ServiceRepository"""
        if self._service_repo is None:
            self._service_repo = ServiceRepository(self.database)
        return self._service_repo

    @property
    def blog_post_repository(self) -> BlogPostRepository:
        """Ленивая инициализация BlogPostRepository"""
        if self._blog_post_repo is None:
            self._blog_post_repo = BlogPostRepository(self.database)
        return self._blog_post_repo

    @property
    def state_machine(self) -> OrderStateMachine:
        """Ленивая инициализация OrderStateMachine"""
        if self._state_machine is None:
            self._state_machine = OrderStateMachine()
        return self._state_machine

    @property
    def vote_policy(self) -> VotePolicy:
        if self._vote_policy is None:
            self._vote_policy = get_vote_policy(self.vote_policy_name)
        return self._vote_policy

    @property
    def order_workflow(self) -> OrderWorkflow:
        """Получение OrderWorkflow"""
        if self._order_workflow is None:
            self._order_workflow = OrderWorkflow(
                orders=self.order_repository,
                resolver=OrderPartyResolver(),
                service_owners=self.service_repository,
                state_machine=self.state_machine,
            )
        return self._order_workflow

    @property
    def service_votes(self) -> VoteLedger:
        """Голосование за услуги"""
        if self._service_votes is None:
            eligibility = (
                CompletedOrderEligibility(self.order_repository)
                if self.service_vote_requires_order
                else None
            )
            self._service_votes = VoteLedger(
                store=VoteRepository(self.database, SubjectKind.SERVICE),
                subjects=self.service_repository,
                policy=self.vote_policy,
                eligibility=eligibility,
                subject_name="Service",
            )
        return self._service_votes

    @property
    def blog_post_votes(self) -> VoteLedger:
        """Голосование за посты блога"""
        if self._blog_post_votes is None:
            self._blog_post_votes = VoteLedger(
                store=VoteRepository(self.database, SubjectKind.BLOG_POST),
                subjects=self.blog_post_repository,
                policy=self.vote_policy,
                subject_name="BlogPost",
            )
        return self._blog_post_votes

    def ledger_for(self, subject_kind: str) -> VoteLedger:
        """
        Ledger по типу объекта

        Raises:
            ValueError: Неизвестный тип объекта
        """
        if subject_kind == SubjectKind.SERVICE:
            return self.service_votes
        if subject_kind == SubjectKind.BLOG_POST:
            return self.blog_post_votes
        raise ValueError(f"Неизвестный тип объекта голосования: {subject_kind}")

    def reset(self):
        """Сброс кэшированных сервисов (для тестирования)"""
        self._order_repo = None
        self._service_repo = None
        self._blog_post_repo = None
        self._state_machine = None
        self._vote_policy = None
        self._order_workflow = None
        self._service_votes = None
        self._blog_post_votes = None
        logger.debug("ServiceFactory: сервисы сброшены")
