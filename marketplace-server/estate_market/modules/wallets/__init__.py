"""Wallet ledger exports"""

from .exceptions import WalletNotFoundError
from .models import (
    TRANSACTION_STATUSES,
    TRANSACTION_TYPES,
    PropertyBrief,
    WalletSnapshot,
    WalletSummary,
    WalletTransactionRecord,
)
from .service import WalletService

__all__ = [
    "TRANSACTION_STATUSES",
    "TRANSACTION_TYPES",
    "PropertyBrief",
    "WalletNotFoundError",
    "WalletService",
    "WalletSnapshot",
    "WalletSummary",
    "WalletTransactionRecord",
]
