"""Property registry service."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from estate_market.core.money import positive_amount, to_amount
from estate_market.modules.common.exceptions import ForbiddenError, ValidationError

from .exceptions import PropertyNotFoundError
from .models import PROPERTY_STATUSES, PROPERTY_TYPES, PropertyCreateInput, PropertySnapshot
from .repository import PropertyRepository

logger = logging.getLogger(__name__)

# Marketplace fields and ownership are only changed through listing and settlement.
UPDATABLE_FIELDS = frozenset(
    {
        "title",
        "description",
        "price",
        "currency",
        "location",
        "address",
        "type",
        "status",
        "bedrooms",
        "bathrooms",
        "area",
        "area_unit",
        "images",
    }
)


@dataclass(slots=True)
class PropertyService:
    repository: PropertyRepository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "PropertyService":
        from estate_market.infrastructure.database.repositories.property_repository import SqlPropertyRepository

        return cls(SqlPropertyRepository(session))

    async def create_property(self, owner_id: str, payload: PropertyCreateInput) -> PropertySnapshot:
        fields = asdict(payload)
        self._validate_fields(fields)
        fields["price"] = positive_amount(fields["price"], "price")
        snapshot = await self.repository.create(user_id=owner_id, fields=fields)
        logger.info("Property %s created by user %s", snapshot.id, owner_id)
        return snapshot

    async def get_property(self, property_id: str) -> PropertySnapshot:
        snapshot = await self.repository.get(property_id)
        if snapshot is None:
            raise PropertyNotFoundError(f"Property not found: {property_id}")
        return snapshot

    async def get_properties_by_user_id(self, user_id: str) -> Sequence[PropertySnapshot]:
        return await self.repository.list_by_user(user_id)

    async def update_property(
        self,
        property_id: str,
        changes: dict[str, Any],
        *,
        actor_id: str | None = None,
    ) -> PropertySnapshot:
        """Generic update-by-id restricted to descriptive fields.

        When ``actor_id`` is given the caller must own the property.
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")
        if actor_id is not None:
            current = await self.get_property(property_id)
            if current.user_id != actor_id:
                raise ForbiddenError("You can only edit your own properties")
        self._validate_fields(changes)
        if "price" in changes:
            changes = {**changes, "price": positive_amount(changes["price"], "price")}
        snapshot = await self.repository.update(property_id, changes)
        if snapshot is None:
            raise PropertyNotFoundError(f"Property not found: {property_id}")
        return snapshot

    @staticmethod
    def _validate_fields(fields: dict[str, Any]) -> None:
        if "title" in fields and not (fields["title"] or "").strip():
            raise ValidationError("title is required")
        if "type" in fields and fields["type"] not in PROPERTY_TYPES:
            raise ValidationError(f"Unsupported property type: {fields['type']}")
        if "status" in fields and fields["status"] not in PROPERTY_STATUSES:
            raise ValidationError(f"Unsupported property status: {fields['status']}")
        for name in ("bedrooms", "bathrooms"):
            value = fields.get(name)
            if value is not None and value < 0:
                raise ValidationError(f"{name} cannot be negative")
        if fields.get("area") is not None and to_amount(fields["area"]) < 0:
            raise ValidationError("area cannot be negative")
