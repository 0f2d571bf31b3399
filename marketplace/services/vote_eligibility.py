"""
Право голосовать за услугу
"""

import logging

from marketplace.repositories.order_repository import OrderRepository


logger = logging.getLogger(__name__)


class CompletedOrderEligibility:
    """
    Голосовать за услугу может только заказчик,
    у которого есть выполненный (Confirmed) заказ этой услуги
    """

    def __init__(self, orders: OrderRepository):
        self.orders = orders

    async def can_vote(self, subject_id: str, user_id: str) -> bool:
        """
        Args:
            subject_id: ID услуги
            user_id: ID пользователя

        Returns:
            True если пользователь пользовался услугой
        """
        allowed = await self.orders.has_confirmed_order(subject_id, user_id)
        if not allowed:
            logger.debug(f"Пользователь {user_id} не пользовался услугой #{subject_id}")
        return allowed
