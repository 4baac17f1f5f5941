"""
Marketplace listing registry: membership gate, ownership, filters and expiry.
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy import update

from estate_market.db.models import Property, utcnow
from estate_market.modules.common import (
    ForbiddenError,
    ListingUnavailableError,
    MembershipRequiredError,
    ValidationError,
)
from estate_market.modules.marketplace import ListingService
from estate_market.modules.properties import ListingFilters, PropertyNotFoundError, PropertyService


async def _backdate_expiry(session, property_id):
    await session.execute(
        update(Property)
        .where(Property.id == property_id)
        .values(marketplace_expires_at=utcnow() - timedelta(days=1))
    )
    await session.commit()


class TestListingCreation:
    """Only paid owners can list, and relisting overwrites the old listing"""

    async def test_paid_owner_lists_property(self, session, settings, make_account, make_property):
        owner = await make_account("Seller", paid=True)
        prop = await make_property(owner.id)
        service = ListingService.with_session(session, settings)

        listed = await service.list_property_in_marketplace(owner.id, prop.id, "1000000", 30)

        assert listed.is_in_marketplace is True
        assert listed.marketplace_price == Decimal("1000000.00")
        assert listed.marketplace_duration == 30
        assert listed.marketplace_listing_date is not None
        assert listed.marketplace_expires_at is not None

    async def test_free_member_is_refused(self, session, settings, make_account, make_property):
        owner = await make_account("Free")
        prop = await make_property(owner.id)

        with pytest.raises(MembershipRequiredError):
            await ListingService.with_session(session, settings).list_property_in_marketplace(
                owner.id, prop.id, 500000, 30
            )

        unchanged = await PropertyService.with_session(session).get_property(prop.id)
        assert unchanged.is_in_marketplace is False
        assert unchanged.marketplace_price is None

    async def test_cancelled_paid_plan_is_refused(self, session, settings, make_account, make_property):
        from estate_market.modules.membership import MembershipService

        owner = await make_account("Lapsed", paid=True)
        await MembershipService.with_session(session).set_subscription(owner.id, plan_id="premium", status="cancelled")
        await session.commit()
        prop = await make_property(owner.id)

        with pytest.raises(MembershipRequiredError):
            await ListingService.with_session(session, settings).list_property_in_marketplace(owner.id, prop.id, 1, 7)

    async def test_non_owner_is_forbidden(self, session, settings, make_account, make_property):
        owner = await make_account("Owner", paid=True)
        intruder = await make_account("Intruder", paid=True)
        prop = await make_property(owner.id)

        with pytest.raises(ForbiddenError):
            await ListingService.with_session(session, settings).list_property_in_marketplace(
                intruder.id, prop.id, 1000, 30
            )

    @pytest.mark.parametrize(
        "price, duration",
        [(0, 30), (-5, 30), ("1e30", 30), ("1000000000000", 30), (1000, 0), (1000, -7), (1000, True)],
    )
    async def test_invalid_price_or_duration(self, session, settings, make_account, make_property, price, duration):
        owner = await make_account("Strict", paid=True)
        prop = await make_property(owner.id)

        with pytest.raises(ValidationError):
            await ListingService.with_session(session, settings).list_property_in_marketplace(
                owner.id, prop.id, price, duration
            )

    async def test_any_positive_duration_and_default(self, session, settings, make_account, make_property):
        owner = await make_account("Flexible", paid=True)
        first = await make_property(owner.id)
        second = await make_property(owner.id)
        service = ListingService.with_session(session, settings)

        odd = await service.list_property_in_marketplace(owner.id, first.id, 1000, 45)
        default = await service.list_property_in_marketplace(owner.id, second.id, 1000)

        assert odd.marketplace_duration == 45
        assert default.marketplace_duration == settings.marketplace.default_duration

    async def test_relisting_overwrites(self, session, settings, make_account, make_property):
        owner = await make_account("Relister", paid=True)
        prop = await make_property(owner.id)
        service = ListingService.with_session(session, settings)

        await service.list_property_in_marketplace(owner.id, prop.id, 1000, 7)
        await service.list_property_in_marketplace(owner.id, prop.id, 2000, 14)

        page = await service.get_marketplace_listings()
        assert page.total == 1
        assert page.data[0].marketplace_price == Decimal("2000.00")
        assert page.data[0].marketplace_duration == 14

    async def test_unknown_property(self, session, settings, make_account):
        owner = await make_account("Ghost", paid=True)
        with pytest.raises(PropertyNotFoundError):
            await ListingService.with_session(session, settings).list_property_in_marketplace(
                owner.id, "missing", 1000, 30
            )


class TestListingRemoval:
    """Only the owner may take a listing down"""

    async def test_owner_removes_listing(self, session, settings, make_account, make_property):
        owner = await make_account("Remover", paid=True)
        prop = await make_property(owner.id)
        service = ListingService.with_session(session, settings)
        await service.list_property_in_marketplace(owner.id, prop.id, 1000, 30)

        removed = await service.remove_property_from_marketplace(owner.id, prop.id)

        assert removed.is_in_marketplace is False
        assert removed.marketplace_price is None
        assert removed.marketplace_listing_date is None
        assert removed.marketplace_duration is None
        with pytest.raises(ListingUnavailableError):
            await service.get_marketplace_listing(prop.id)

    async def test_other_user_cannot_remove(self, session, settings, make_account, make_property):
        owner = await make_account("Keeper", paid=True)
        other = await make_account("Other", paid=True)
        prop = await make_property(owner.id)
        service = ListingService.with_session(session, settings)
        await service.list_property_in_marketplace(owner.id, prop.id, 1000, 30)

        with pytest.raises(ForbiddenError):
            await service.remove_property_from_marketplace(other.id, prop.id)
        assert (await service.get_marketplace_listing(prop.id)).is_in_marketplace is True


class TestListingQueries:
    """Browsing is scoped to active listings and supports filters"""

    async def _seed(self, session, settings, make_account, make_property):
        owner = await make_account("Agency", paid=True)
        service = ListingService.with_session(session, settings)
        fixtures = [
            ("Downtown Studio", "studio", "Downtown Dubai", 0, 1, 400000),
            ("Marina Apartment", "apartment", "Dubai Marina", 2, 2, 1200000),
            ("Palm Villa", "villa", "Palm Jumeirah", 5, 6, 9000000),
        ]
        ids = {}
        for title, kind, location, beds, baths, price in fixtures:
            prop = await make_property(owner.id, title=title, type=kind, location=location, bedrooms=beds, bathrooms=baths)
            await service.list_property_in_marketplace(owner.id, prop.id, price, 30)
            ids[title] = prop.id
        await make_property(owner.id, title="Unlisted Townhouse", type="townhouse")
        return service, ids

    async def test_only_listed_properties_newest_first(self, session, settings, make_account, make_property):
        service, _ = await self._seed(session, settings, make_account, make_property)
        page = await service.get_marketplace_listings(1, 10)

        assert page.total == 3
        assert [item.title for item in page.data] == ["Palm Villa", "Marina Apartment", "Downtown Studio"]
        assert page.data[0].owner_name == "Agency"

    async def test_filters(self, session, settings, make_account, make_property):
        service, _ = await self._seed(session, settings, make_account, make_property)

        by_price = await service.get_marketplace_listings(
            filters=ListingFilters(min_price=Decimal("500000"), max_price=Decimal("2000000"))
        )
        assert [item.title for item in by_price.data] == ["Marina Apartment"]

        by_type = await service.get_marketplace_listings(filters=ListingFilters(type="villa"))
        assert [item.title for item in by_type.data] == ["Palm Villa"]

        by_location = await service.get_marketplace_listings(filters=ListingFilters(location="marina"))
        assert [item.title for item in by_location.data] == ["Marina Apartment"]

        by_rooms = await service.get_marketplace_listings(filters=ListingFilters(bedrooms=2, bathrooms=2))
        assert by_rooms.total == 2

    async def test_out_of_range_price_filter(self, session, settings):
        service = ListingService.with_session(session, settings)

        with pytest.raises(ValidationError):
            await service.get_marketplace_listings(filters=ListingFilters(max_price=Decimal("1e30")))

    async def test_page_beyond_total(self, session, settings, make_account, make_property):
        service, _ = await self._seed(session, settings, make_account, make_property)
        page = await service.get_marketplace_listings(3, 2)

        assert page.data == []
        assert page.total == 3


class TestListingExpiry:
    """Expired listings disappear from browsing and can be swept"""

    async def test_expired_listing_hidden_and_swept(self, session, settings, make_account, make_property):
        owner = await make_account("Expiring", paid=True)
        fresh = await make_property(owner.id, title="Fresh")
        stale = await make_property(owner.id, title="Stale")
        service = ListingService.with_session(session, settings)
        await service.list_property_in_marketplace(owner.id, fresh.id, 1000, 30)
        await service.list_property_in_marketplace(owner.id, stale.id, 1000, 30)
        await _backdate_expiry(session, stale.id)

        page = await service.get_marketplace_listings()
        assert [item.title for item in page.data] == ["Fresh"]
        with pytest.raises(ListingUnavailableError):
            await service.get_marketplace_listing(stale.id)

        assert await service.expire_stale_listings() == 1
        swept = await PropertyService.with_session(session).get_property(stale.id)
        assert swept.is_in_marketplace is False
        assert await service.expire_stale_listings() == 0

    async def test_expiry_not_enforced(self, session, make_account, make_property):
        from estate_market.core.config import Settings

        lenient = Settings(_env_file=None, marketplace={"enforce_expiry": False})
        owner = await make_account("Advisory", paid=True)
        prop = await make_property(owner.id)
        service = ListingService.with_session(session, lenient)
        await service.list_property_in_marketplace(owner.id, prop.id, 1000, 7)
        await _backdate_expiry(session, prop.id)

        assert (await service.get_marketplace_listings()).total == 1
        assert (await service.get_marketplace_listing(prop.id)).id == prop.id
