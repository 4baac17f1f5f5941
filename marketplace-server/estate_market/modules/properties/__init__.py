"""Property registry exports"""

from .exceptions import PropertyNotFoundError
from .models import PROPERTY_TYPES, ListingFilters, PropertyCreateInput, PropertySnapshot
from .service import PropertyService

__all__ = [
    "PROPERTY_TYPES",
    "ListingFilters",
    "PropertyCreateInput",
    "PropertyNotFoundError",
    "PropertyService",
    "PropertySnapshot",
]
