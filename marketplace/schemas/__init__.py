"""Pydantic schemas package"""
from marketplace.schemas.order import OrderConfirmSchema, OrderCreateSchema
from marketplace.schemas.vote import VoteCreateSchema


__all__ = [
    # Order schemas
    "OrderConfirmSchema",
    "OrderCreateSchema",
    # Vote schemas
    "VoteCreateSchema",
]
