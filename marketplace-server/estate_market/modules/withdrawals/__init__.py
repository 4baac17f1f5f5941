"""Withdrawal approval workflow exports"""

from .exceptions import WithdrawalNotFoundError, WithdrawalNotPendingError
from .models import PAYMENT_METHODS, WITHDRAWAL_STATUSES, RequesterIdentity, WithdrawalRequestRecord
from .payment_details import validate_payment_details
from .service import WithdrawalService

__all__ = [
    "PAYMENT_METHODS",
    "WITHDRAWAL_STATUSES",
    "RequesterIdentity",
    "WithdrawalNotFoundError",
    "WithdrawalNotPendingError",
    "WithdrawalRequestRecord",
    "WithdrawalService",
    "validate_payment_details",
]
