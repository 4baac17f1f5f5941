"""Account specific exceptions."""

from estate_market.modules.common.exceptions import MarketplaceError, NotFoundError


class AccountError(MarketplaceError):
    """Base class for account errors."""


class AccountAlreadyExistsError(AccountError):
    """An account with this email already exists."""

    code = "account_exists"


class AccountNotFoundError(NotFoundError, AccountError):
    """The requested account cannot be found."""
