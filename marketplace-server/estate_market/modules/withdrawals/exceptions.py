"""Withdrawal workflow exceptions."""

from estate_market.modules.common.exceptions import InvalidStateError, NotFoundError


class WithdrawalNotFoundError(NotFoundError):
    """The withdrawal request does not exist."""


class WithdrawalNotPendingError(InvalidStateError):
    """The withdrawal request has already been processed."""
