"""Определение роли пользователя в заказе"""

from marketplace.core.constants import PartyRole
from marketplace.database.models import Order


class OrderPartyResolver:
    """Роль по полям заказа: автор услуги или заказчик"""

    async def resolve(self, order: Order, user_id: str) -> str:
        if not order.involves(user_id):
            return PartyRole.NONE
        if user_id == order.author_id:
            return PartyRole.AUTHOR
        return PartyRole.CUSTOMER
