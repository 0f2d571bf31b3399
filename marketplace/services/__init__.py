"""
Service layer для бизнес-логики
"""

from marketplace.services.order_workflow import OrderWorkflow
from marketplace.services.role_resolver import OrderPartyResolver
from marketplace.services.service_factory import ServiceFactory
from marketplace.services.vote_eligibility import CompletedOrderEligibility
from marketplace.services.vote_ledger import VoteLedger


__all__ = [
    "CompletedOrderEligibility",
    "OrderPartyResolver",
    "OrderWorkflow",
    "ServiceFactory",
    "VoteLedger",
]
