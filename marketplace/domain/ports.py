"""
Контракты внешних зависимостей ядра

Каждое хранилище - отдельный протокол для своего типа сущности,
реализации лежат в marketplace.repositories.
"""

from collections.abc import Mapping
from contextlib import AbstractAsyncContextManager
from typing import Any, Protocol

from marketplace.database.models import Order, Vote


class OrderStore(Protocol):
    """Хранилище заказов"""

    async def get(self, order_id: str) -> Order | None: ...

    async def insert(self, order: Order) -> Order: ...

    async def update(
        self,
        order_id: str,
        updates: Mapping[str, Any],
        expected: Mapping[str, Any] | None = None,
    ) -> bool:
        """Условное обновление: применяется только если текущие значения совпадают с expected"""
        ...

    async def list_by_author(self, author_id: str) -> list[Order]: ...

    async def list_by_customer(self, customer_id: str) -> list[Order]: ...

    async def list_by_party(self, user_id: str) -> list[Order]: ...


class VoteStore(Protocol):
    """Хранилище голосов с ключом (subject_id, user_id)"""

    def transaction(self) -> AbstractAsyncContextManager["VoteStore"]:
        """Хранилище, привязанное к одной атомарной транзакции"""
        ...

    async def get(self, subject_id: str, user_id: str) -> Vote | None: ...

    async def upsert(self, vote: Vote) -> bool: ...

    async def delete(self, subject_id: str, user_id: str) -> bool: ...

    async def list_by_subject(self, subject_id: str) -> list[Vote]: ...


class ActorRoleResolver(Protocol):
    """Определяет роль пользователя в заказе (author / customer / none)"""

    async def resolve(self, order: Order, user_id: str) -> str: ...


class SubjectScoreSink(Protocol):
    """Владелец объекта голосования: проверка существования и кэш счётчиков"""

    async def exists(self, subject_id: str) -> bool: ...

    async def store_counts(self, subject_id: str, upvotes: int, downvotes: int) -> None: ...

    def within(self, store: VoteStore) -> "SubjectScoreSink":
        """Тот же владелец, пишущий в транзакции хранилища голосов"""
        ...


class ServiceOwnerLookup(Protocol):
    """Поиск автора услуги"""

    async def get_owner_id(self, service_id: str) -> str | None: ...


class VoteEligibility(Protocol):
    """Право пользователя голосовать за объект"""

    async def can_vote(self, subject_id: str, user_id: str) -> bool: ...
