"""Domain error taxonomy shared by the wallet and marketplace modules."""


class MarketplaceError(Exception):
    """Base class for domain errors; ``code`` is stable and machine readable."""

    code = "error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.__class__.__doc__ or self.code)

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(MarketplaceError):
    """Malformed input."""

    code = "validation_error"


class MembershipRequiredError(MarketplaceError):
    """This action requires a paid subscription."""

    code = "membership_required"


class ForbiddenError(MarketplaceError):
    """You are not allowed to perform this action."""

    code = "forbidden"


class NotFoundError(MarketplaceError):
    """The requested entity does not exist."""

    code = "not_found"


class InsufficientFundsError(MarketplaceError):
    """Wallet balance is too low for this operation."""

    code = "insufficient_funds"


class ListingUnavailableError(MarketplaceError):
    """This listing is no longer available."""

    code = "listing_unavailable"


class InvalidStateError(MarketplaceError):
    """The entity is not in a state that allows this operation."""

    code = "invalid_state"
