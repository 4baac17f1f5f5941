"""Marketplace listings, settlement and buyer/seller messages"""

from .exceptions import MarketplaceTransactionNotFoundError, MessageNotFoundError
from .listings import ListingService
from .messages import MessageService
from .models import (
    TRANSACTION_ROLES,
    MarketplaceMessageRecord,
    MarketplaceTransactionRecord,
    Party,
    SoldProperty,
)
from .service import MarketplaceService

__all__ = [
    "TRANSACTION_ROLES",
    "ListingService",
    "MarketplaceMessageRecord",
    "MarketplaceService",
    "MarketplaceTransactionNotFoundError",
    "MarketplaceTransactionRecord",
    "MessageNotFoundError",
    "MessageService",
    "Party",
    "SoldProperty",
]
