"""Marketplace listing registry.

A listing is the set of marketplace fields on a property. Listing
overwrites any previous listing state, so a property never has more than
one active listing; removal and settlement clear the fields.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from sqlalchemy.ext.asyncio import AsyncSession

from estate_market.core.config import Settings, get_settings
from estate_market.core.money import AmountLike, positive_amount, to_amount
from estate_market.db.models import utcnow
from estate_market.infrastructure.database import atomic
from estate_market.modules.common.exceptions import ForbiddenError, ListingUnavailableError, ValidationError
from estate_market.modules.common.pagination import Page, PageRequest
from estate_market.modules.membership.service import MembershipService
from estate_market.modules.properties.exceptions import PropertyNotFoundError
from estate_market.modules.properties.models import ListingFilters, PropertySnapshot
from estate_market.modules.properties.repository import PropertyRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ListingService:
    session: AsyncSession
    properties: PropertyRepository
    membership: MembershipService
    settings: Settings = field(default_factory=get_settings)

    @classmethod
    def with_session(cls, session: AsyncSession, settings: Settings | None = None) -> "ListingService":
        from estate_market.infrastructure.database.repositories.property_repository import SqlPropertyRepository

        return cls(
            session,
            SqlPropertyRepository(session),
            MembershipService.with_session(session),
            settings or get_settings(),
        )

    async def list_property_in_marketplace(
        self,
        user_id: str,
        property_id: str,
        price: AmountLike,
        duration_days: int | None = None,
    ) -> PropertySnapshot:
        price = positive_amount(price, "price")
        duration_days = self._duration(duration_days)

        async with atomic(self.session):
            await self.membership.require_paid_member(user_id, "list properties in the marketplace")
            current = await self._require_property(property_id, for_update=True)
            if current.user_id != user_id:
                raise ForbiddenError("You can only list your own properties in the marketplace")
            listed_at = utcnow()
            updated = await self.properties.set_listing(
                property_id,
                owner_id=user_id,
                price=price,
                listed_at=listed_at,
                duration_days=duration_days,
                expires_at=listed_at + timedelta(days=duration_days),
            )
            if not updated:
                raise ListingUnavailableError("The property changed owner while it was being listed")
            snapshot = await self._require_property(property_id)

        logger.info(
            "Property %s listed by user %s at %s for %s days",
            property_id,
            user_id,
            price,
            duration_days,
        )
        return snapshot

    async def remove_property_from_marketplace(self, user_id: str, property_id: str) -> PropertySnapshot:
        async with atomic(self.session):
            current = await self._require_property(property_id, for_update=True)
            if current.user_id != user_id:
                raise ForbiddenError("You can only remove your own properties from the marketplace")
            if not await self.properties.clear_listing(property_id, owner_id=user_id):
                # The property was sold between the ownership check and the update.
                raise ListingUnavailableError()
            snapshot = await self._require_property(property_id)

        logger.info("Property %s removed from the marketplace by user %s", property_id, user_id)
        return snapshot

    async def get_marketplace_listings(
        self,
        page: int = 1,
        page_size: int = 10,
        filters: ListingFilters | None = None,
    ) -> Page[PropertySnapshot]:
        """Active listings, newest first. Expired listings are hidden when expiry is enforced."""
        filters = filters or ListingFilters()
        for bound in (filters.min_price, filters.max_price):
            if bound is not None:
                to_amount(bound)
        request = PageRequest.build(page, page_size, self.settings.marketplace.max_page_size)
        now = self._now_for_expiry()
        total = await self.properties.count_listings(filters, now)
        if request.is_beyond(total):
            return request.empty(total)
        rows = await self.properties.list_listings(filters, now, offset=request.offset, limit=request.limit)
        return Page(data=list(rows), total=total, page=request.page, page_size=request.page_size)

    async def get_marketplace_listing(self, property_id: str) -> PropertySnapshot:
        snapshot = await self._require_property(property_id)
        if not snapshot.is_in_marketplace or self._is_expired(snapshot):
            raise ListingUnavailableError(f"Property {property_id} is not listed in the marketplace")
        return snapshot

    async def expire_stale_listings(self) -> int:
        async with atomic(self.session):
            expired = await self.properties.expire_listings(utcnow())
        if expired:
            logger.info("Cleared %s expired marketplace listings", expired)
        return expired

    def _duration(self, duration_days: int | None) -> int:
        if duration_days is None:
            return self.settings.marketplace.default_duration
        if isinstance(duration_days, bool) or not isinstance(duration_days, int) or duration_days <= 0:
            raise ValidationError("duration must be a positive number of days")
        return duration_days

    def _now_for_expiry(self) -> datetime | None:
        return utcnow() if self.settings.marketplace.enforce_expiry else None

    def _is_expired(self, snapshot: PropertySnapshot) -> bool:
        if not self.settings.marketplace.enforce_expiry or snapshot.marketplace_expires_at is None:
            return False
        expires_at = snapshot.marketplace_expires_at
        if expires_at.tzinfo is None:
            # SQLite hands back naive values; they were written as UTC.
            expires_at = expires_at.replace(tzinfo=utcnow().tzinfo)
        return expires_at <= utcnow()

    async def _require_property(self, property_id: str, *, for_update: bool = False) -> PropertySnapshot:
        snapshot = await self.properties.get(property_id, for_update=for_update)
        if snapshot is None:
            raise PropertyNotFoundError(f"Property not found: {property_id}")
        return snapshot
