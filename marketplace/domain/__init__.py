"""Доменная логика: state machine заказов, политика голосования, контракты"""

from marketplace.domain.exceptions import (
    DomainError,
    InvalidStateTransitionError,
    MarketplaceError,
    OrderValidationError,
    UnauthorizedActionError,
)
from marketplace.domain.order_state_machine import OrderStateMachine, OrderStateTransitionResult
from marketplace.domain.vote_policy import (
    KeepVotePolicy,
    ToggleVotePolicy,
    VoteAction,
    VotePolicy,
    get_vote_policy,
)


__all__ = [
    "DomainError",
    "InvalidStateTransitionError",
    "KeepVotePolicy",
    "MarketplaceError",
    "OrderStateMachine",
    "OrderStateTransitionResult",
    "OrderValidationError",
    "ToggleVotePolicy",
    "UnauthorizedActionError",
    "VoteAction",
    "VotePolicy",
    "get_vote_policy",
]
