"""Ядро приложения - конфигурация и константы"""

from marketplace.core.config import Config
from marketplace.core.constants import OrderStatus, PartyRole, SubjectKind, VoteRepeatPolicy


__all__ = [
    "Config",
    "OrderStatus",
    "PartyRole",
    "SubjectKind",
    "VoteRepeatPolicy",
]
