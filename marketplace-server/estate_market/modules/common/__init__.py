"""Shared domain primitives: error taxonomy and pagination."""

from .exceptions import (
    ForbiddenError,
    InsufficientFundsError,
    InvalidStateError,
    ListingUnavailableError,
    MarketplaceError,
    MembershipRequiredError,
    NotFoundError,
    ValidationError,
)
from .pagination import Page, PageRequest

__all__ = [
    "ForbiddenError",
    "InsufficientFundsError",
    "InvalidStateError",
    "ListingUnavailableError",
    "MarketplaceError",
    "MembershipRequiredError",
    "NotFoundError",
    "Page",
    "PageRequest",
    "ValidationError",
]
