"""Marketplace module exceptions."""

from estate_market.modules.common.exceptions import NotFoundError


class MarketplaceTransactionNotFoundError(NotFoundError):
    """The requested marketplace transaction does not exist."""


class MessageNotFoundError(NotFoundError):
    """The requested message does not exist."""
