"""Property registry exceptions."""

from estate_market.modules.common.exceptions import NotFoundError


class PropertyNotFoundError(NotFoundError):
    """The requested property does not exist."""
