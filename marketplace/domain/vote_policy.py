"""
Политика обработки повторного голоса

Решение "что сделать с голосом" отделено от его атомарного применения:
VoteLedger выполняет выбранное действие внутри транзакции хранилища,
а политика только выбирает действие.
"""

from abc import ABC, abstractmethod
from enum import Enum

from marketplace.core.constants import VoteRepeatPolicy
from marketplace.database.models import Vote


class VoteAction(str, Enum):
    """Действие над голосом пары (объект, пользователь)"""

    CREATED = "created"  # Голоса не было, создан
    REMOVED = "removed"  # Голос снят
    FLIPPED = "flipped"  # Полярность изменена на месте
    UNCHANGED = "unchanged"  # Ничего не изменилось


class VotePolicy(ABC):
    """Базовая политика: создание и смена полярности"""

    name = "base"

    def decide(self, existing: Vote | None, is_upvote: bool) -> VoteAction:
        """
        Выбор действия

        Args:
            existing: Текущий голос пользователя или None
            is_upvote: Полярность нового голоса

        Returns:
            Действие, которое нужно применить
        """
        if existing is None:
            return VoteAction.CREATED
        if existing.is_upvote != is_upvote:
            return VoteAction.FLIPPED
        return self.on_repeat(existing)

    @abstractmethod
    def on_repeat(self, existing: Vote) -> VoteAction:
        """Повторный голос той же полярности"""


class ToggleVotePolicy(VotePolicy):
    """Повторный клик по той же кнопке снимает голос"""

    name = VoteRepeatPolicy.TOGGLE

    def on_repeat(self, existing: Vote) -> VoteAction:
        return VoteAction.REMOVED


class KeepVotePolicy(VotePolicy):
    """Повторный голос той же полярности ничего не меняет"""

    name = VoteRepeatPolicy.KEEP

    def on_repeat(self, existing: Vote) -> VoteAction:
        return VoteAction.UNCHANGED


def get_vote_policy(name: str) -> VotePolicy:
    """
    Политика по имени из конфигурации

    Args:
        name: "toggle" или "keep"

    Returns:
        Экземпляр политики

    Raises:
        ValueError: Неизвестное имя политики
    """
    policies: dict[str, type[VotePolicy]] = {
        VoteRepeatPolicy.TOGGLE: ToggleVotePolicy,
        VoteRepeatPolicy.KEEP: KeepVotePolicy,
    }
    try:
        return policies[name.strip().lower()]()
    except KeyError:
        raise ValueError(
            f"Неизвестная политика голосования '{name}'. Допустимые: {', '.join(policies)}"
        ) from None
