"""Membership gate exports"""

from .models import FREE_PLAN_ID, Subscription
from .service import MembershipService

__all__ = [
    "FREE_PLAN_ID",
    "MembershipService",
    "Subscription",
]
