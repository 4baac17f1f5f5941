"""Wallet ledger exceptions."""

from estate_market.modules.common.exceptions import NotFoundError


class WalletNotFoundError(NotFoundError):
    """No wallet exists for this user yet."""
