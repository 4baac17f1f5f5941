"""SQLAlchemy implementation for the property registry and listing fields."""

from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal
from typing import Any, Sequence

from sqlalchemy import desc, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from estate_market.core.money import coerce_amount
from estate_market.db.models import Property, utcnow
from estate_market.modules.properties.models import ListingFilters, PropertySnapshot

_CLEARED_LISTING = {
    "is_in_marketplace": False,
    "marketplace_price": None,
    "marketplace_listing_date": None,
    "marketplace_duration": None,
    "marketplace_expires_at": None,
}


class SqlPropertyRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, property_id: str, *, for_update: bool = False) -> PropertySnapshot | None:
        stmt = select(Property).options(selectinload(Property.owner)).where(Property.id == property_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt.execution_options(populate_existing=True))
        model = result.scalars().first()
        return self._to_domain(model) if model else None

    async def list_by_user(self, user_id: str) -> Sequence[PropertySnapshot]:
        stmt = (
            select(Property)
            .options(selectinload(Property.owner))
            .where(Property.user_id == user_id)
            .order_by(desc(Property.created_at))
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return [self._to_domain(row) for row in result.scalars().all()]

    async def create(self, *, user_id: str, fields: dict[str, Any]) -> PropertySnapshot:
        values = dict(fields)
        values["images"] = json.dumps(values.get("images") or [])
        model = Property(user_id=user_id, **values)
        self.session.add(model)
        await self.session.flush()
        return await self.get(model.id)

    async def update(self, property_id: str, fields: dict[str, Any]) -> PropertySnapshot | None:
        values = dict(fields)
        if "images" in values:
            values["images"] = json.dumps(values["images"] or [])
        values["updated_at"] = utcnow()
        stmt = (
            update(Property)
            .where(Property.id == property_id)
            .values(**values)
            .returning(Property.id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.first() is None:
            return None
        return await self.get(property_id)

    async def set_listing(
        self,
        property_id: str,
        *,
        owner_id: str,
        price: Decimal,
        listed_at: datetime,
        duration_days: int,
        expires_at: datetime,
    ) -> bool:
        stmt = (
            update(Property)
            .where(Property.id == property_id, Property.user_id == owner_id)
            .values(
                is_in_marketplace=True,
                marketplace_price=price,
                marketplace_listing_date=listed_at,
                marketplace_duration=duration_days,
                marketplace_expires_at=expires_at,
                updated_at=listed_at,
            )
            .returning(Property.id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def clear_listing(self, property_id: str, *, owner_id: str) -> bool:
        stmt = (
            update(Property)
            .where(Property.id == property_id, Property.user_id == owner_id)
            .values(updated_at=utcnow(), **_CLEARED_LISTING)
            .returning(Property.id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def close_listing_for_sale(
        self,
        property_id: str,
        *,
        seller_id: str,
        buyer_id: str,
        price: Decimal,
        now: datetime | None,
    ) -> bool:
        """Transfer ownership and clear the listing only if it is still the one we read."""
        conditions = [
            Property.id == property_id,
            Property.user_id == seller_id,
            Property.is_in_marketplace.is_(True),
            Property.marketplace_price == price,
        ]
        if now is not None:
            conditions.append(self._not_expired(now))
        stmt = (
            update(Property)
            .where(*conditions)
            .values(user_id=buyer_id, updated_at=utcnow(), **_CLEARED_LISTING)
            .returning(Property.id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def count_listings(self, filters: ListingFilters, now: datetime | None) -> int:
        stmt = select(func.count()).select_from(Property).where(*self._listing_conditions(filters, now))
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def list_listings(
        self,
        filters: ListingFilters,
        now: datetime | None,
        *,
        offset: int,
        limit: int,
    ) -> Sequence[PropertySnapshot]:
        stmt = (
            select(Property)
            .options(selectinload(Property.owner))
            .where(*self._listing_conditions(filters, now))
            .order_by(desc(Property.marketplace_listing_date), Property.id)
            .offset(offset)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return [self._to_domain(row) for row in result.scalars().all()]

    async def expire_listings(self, now: datetime) -> int:
        stmt = (
            update(Property)
            .where(
                Property.is_in_marketplace.is_(True),
                Property.marketplace_expires_at.is_not(None),
                Property.marketplace_expires_at <= now,
            )
            .values(updated_at=utcnow(), **_CLEARED_LISTING)
            .returning(Property.id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return len(result.all())

    @staticmethod
    def _not_expired(now: datetime):
        return or_(Property.marketplace_expires_at.is_(None), Property.marketplace_expires_at > now)

    @classmethod
    def _listing_conditions(cls, filters: ListingFilters, now: datetime | None) -> list:
        conditions = [Property.is_in_marketplace.is_(True)]
        if now is not None:
            conditions.append(cls._not_expired(now))
        if filters.min_price is not None:
            conditions.append(Property.marketplace_price >= filters.min_price)
        if filters.max_price is not None:
            conditions.append(Property.marketplace_price <= filters.max_price)
        if filters.type:
            conditions.append(Property.type == filters.type)
        if filters.location:
            conditions.append(Property.location.ilike(f"%{filters.location}%"))
        if filters.bedrooms:
            conditions.append(Property.bedrooms >= filters.bedrooms)
        if filters.bathrooms:
            conditions.append(Property.bathrooms >= filters.bathrooms)
        return conditions

    @staticmethod
    def _to_domain(model: Property) -> PropertySnapshot:
        return PropertySnapshot(
            id=model.id,
            user_id=model.user_id,
            title=model.title,
            price=coerce_amount(model.price),
            currency=model.currency,
            type=model.type,
            status=model.status,
            description=model.description,
            location=model.location,
            address=model.address,
            bedrooms=model.bedrooms,
            bathrooms=model.bathrooms,
            area=model.area,
            area_unit=model.area_unit,
            images=json.loads(model.images) if model.images else [],
            is_in_marketplace=bool(model.is_in_marketplace),
            marketplace_price=coerce_amount(model.marketplace_price) if model.marketplace_price is not None else None,
            marketplace_listing_date=model.marketplace_listing_date,
            marketplace_duration=model.marketplace_duration,
            marketplace_expires_at=model.marketplace_expires_at,
            owner_name=model.owner.name if model.owner is not None else None,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
