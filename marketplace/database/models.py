"""
Модели данных
"""
from dataclasses import dataclass
from datetime import datetime

from marketplace.core.constants import OrderStatus, PartyRole


@dataclass
class Order:
    """Модель заказа услуги"""
    id: str | None = None
    service_id: str = ""
    author_id: str = ""
    customer_id: str = ""
    status: str = OrderStatus.PENDING
    author_confirmed: bool = False
    customer_confirmed: bool = False
    message: str = ""
    created_at: datetime | None = None
    accepted_at: datetime | None = None
    completed_at: datetime | None = None
    updated_at: datetime | None = None
    version: int = 1

    def is_confirmed_by(self, role: str) -> bool:
        """
        Подтвердила ли сторона выполнение

        Args:
            role: PartyRole.AUTHOR или PartyRole.CUSTOMER

        Returns:
            Значение флага подтверждения
        """
        if role == PartyRole.AUTHOR:
            return self.author_confirmed
        if role == PartyRole.CUSTOMER:
            return self.customer_confirmed
        return False

    @property
    def both_confirmed(self) -> bool:
        """Обе стороны подтвердили выполнение"""
        return self.author_confirmed and self.customer_confirmed

    def involves(self, user_id: str) -> bool:
        """Является ли пользователь стороной заказа"""
        return user_id in (self.author_id, self.customer_id)


@dataclass
class Vote:
    """Голос пользователя за объект (пост или услугу)"""
    subject_id: str
    user_id: str
    is_upvote: bool
    id: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class VoteTally:
    """Подсчёт голосов по объекту"""
    upvotes: int = 0
    downvotes: int = 0

    @property
    def score(self) -> int:
        """Рейтинг: голоса за минус голоса против"""
        return self.upvotes - self.downvotes

    @classmethod
    def from_votes(cls, votes: list[Vote]) -> "VoteTally":
        """Пересчёт по актуальному набору голосов"""
        upvotes = sum(1 for vote in votes if vote.is_upvote)
        return cls(upvotes=upvotes, downvotes=len(votes) - upvotes)
