"""Утилиты"""

from marketplace.utils.helpers import as_utc, get_now, new_id


__all__ = ["as_utc", "get_now", "new_id"]
