"""
Marketplace settlement: commission split, ownership transfer and the
all-or-nothing behaviour of a purchase.
"""

from decimal import Decimal

import pytest
from sqlalchemy import func, select

from estate_market.core.money import split_commission
from estate_market.db.models import MarketplaceTransaction, WalletTransaction
from estate_market.modules.common import (
    ForbiddenError,
    InsufficientFundsError,
    ListingUnavailableError,
    MembershipRequiredError,
    ValidationError,
)
from estate_market.modules.marketplace import ListingService, MarketplaceService
from estate_market.modules.properties import PropertyNotFoundError, PropertyService
from estate_market.modules.wallets import WalletService


async def _count_settlements(session):
    result = await session.execute(select(func.count()).select_from(MarketplaceTransaction))
    return result.scalar_one()


async def _ledger_sum(session, user_id):
    result = await session.execute(
        select(func.coalesce(func.sum(WalletTransaction.amount), 0)).where(
            WalletTransaction.user_id == user_id, WalletTransaction.status == "completed"
        )
    )
    return Decimal(str(result.scalar_one())).quantize(Decimal("0.01"))


@pytest.fixture
def listed_property(session, settings, make_account, make_property):
    async def _list(price="1000000", seller_balance=None):
        seller = await make_account("Seller", paid=True, balance=seller_balance)
        prop = await make_property(seller.id, title="Creek Harbour Residence")
        await ListingService.with_session(session, settings).list_property_in_marketplace(seller.id, prop.id, price, 30)
        return seller, prop

    return _list


class TestCommissionSplit:
    """Fee and earning always add back up to the sale price"""

    @pytest.mark.parametrize(
        "price, fee, earning",
        [
            ("1000000", "500000.00", "500000.00"),
            ("0.01", "0.01", "0.00"),
            ("1000.01", "500.01", "500.00"),
            ("333.33", "166.67", "166.66"),
        ],
    )
    def test_half_split(self, price, fee, earning):
        platform_fee, seller_earning = split_commission(Decimal(price), Decimal("0.5"))
        assert platform_fee == Decimal(fee)
        assert seller_earning == Decimal(earning)
        assert platform_fee + seller_earning == Decimal(price)


class TestPurchaseScenario:
    """A paid buyer with enough balance takes over the property"""

    async def test_million_dirham_sale(self, session, settings, make_account, listed_property):
        seller, prop = await listed_property("1000000")
        buyer = await make_account("Buyer", paid=True, balance="1200000")
        service = MarketplaceService.with_session(session, settings)
        wallets = WalletService.with_session(session, settings)

        transaction_id = await service.purchase_marketplace_listing(buyer.id, prop.id)

        assert await wallets.get_balance(buyer.id) == Decimal("200000.00")
        assert await wallets.get_balance(seller.id) == Decimal("500000.00")

        record = await service.get_marketplace_transaction(transaction_id)
        assert record.buyer_id == buyer.id
        assert record.seller_id == seller.id
        assert record.listing_id == prop.id
        assert record.sale_price == Decimal("1000000.00")
        assert record.platform_fee == Decimal("500000.00")
        assert record.seller_earning == Decimal("500000.00")
        assert record.buyer.name == "Buyer"
        assert record.seller.name == "Seller"
        assert record.property.title == "Creek Harbour Residence"

        transferred = await PropertyService.with_session(session).get_property(prop.id)
        assert transferred.user_id == buyer.id
        assert transferred.is_in_marketplace is False
        assert transferred.marketplace_price is None

        seller_summary = await wallets.get_wallet_summary(seller.id)
        assert seller_summary.total_sales == Decimal("1000000.00")
        assert seller_summary.total_commissions == Decimal("500000.00")
        buyer_summary = await wallets.get_wallet_summary(buyer.id)
        assert buyer_summary.total_purchases == Decimal("1000000.00")

        for user in (buyer, seller):
            assert await _ledger_sum(session, user.id) == await wallets.get_balance(user.id)

    async def test_purchase_references_property_on_ledger(self, session, settings, make_account, listed_property):
        _, prop = await listed_property("5000")
        buyer = await make_account("Buyer", paid=True, balance="5000")

        await MarketplaceService.with_session(session, settings).purchase_marketplace_listing(buyer.id, prop.id)

        page = await WalletService.with_session(session, settings).get_transactions(buyer.id)
        purchase = next(tx for tx in page.data if tx.type == "purchase")
        assert purchase.amount == Decimal("-5000.00")
        assert purchase.related_listing_id == prop.id
        assert purchase.property.title == "Creek Harbour Residence"

    async def test_odd_cent_price(self, session, settings, make_account, listed_property):
        seller, prop = await listed_property("1000.01")
        buyer = await make_account("Buyer", paid=True, balance="2000")
        service = MarketplaceService.with_session(session, settings)

        record = await service.get_marketplace_transaction(
            await service.purchase_marketplace_listing(buyer.id, prop.id)
        )

        assert record.platform_fee + record.seller_earning == Decimal("1000.01")
        assert await WalletService.with_session(session, settings).get_balance(seller.id) == record.seller_earning

    async def test_balance_built_from_small_deposits_pays_exact_price(
        self, session, settings, make_account, listed_property
    ):
        seller, prop = await listed_property("0.80")
        buyer = await make_account("Buyer", paid=True)
        wallets = WalletService.with_session(session, settings)
        await wallets.deposit_funds(buyer.id, "0.70")
        await wallets.deposit_funds(buyer.id, "0.10")

        await MarketplaceService.with_session(session, settings).purchase_marketplace_listing(
            buyer.id, prop.id, expected_price="0.80"
        )

        assert await wallets.get_balance(buyer.id) == Decimal("0.00")
        assert await wallets.get_balance(seller.id) == Decimal("0.40")
        assert await _ledger_sum(session, buyer.id) == Decimal("0.00")


class TestPurchaseFailures:
    """Failed purchases leave every balance, listing and record untouched"""

    async def _assert_untouched(self, session, settings, seller, buyer, prop, buyer_balance, seller_balance="0"):
        wallets = WalletService.with_session(session, settings)
        assert await wallets.get_balance(buyer.id) == Decimal(buyer_balance)
        assert await wallets.get_balance(seller.id) == Decimal(seller_balance)
        listing = await ListingService.with_session(session, settings).get_marketplace_listing(prop.id)
        assert listing.user_id == seller.id
        assert listing.is_in_marketplace is True
        assert await _count_settlements(session) == 0

    async def test_insufficient_funds(self, session, settings, make_account, listed_property):
        seller, prop = await listed_property("1000000")
        buyer = await make_account("Poor", paid=True, balance="999999.99")

        with pytest.raises(InsufficientFundsError):
            await MarketplaceService.with_session(session, settings).purchase_marketplace_listing(buyer.id, prop.id)

        await self._assert_untouched(session, settings, seller, buyer, prop, "999999.99")

    async def test_free_buyer(self, session, settings, make_account, listed_property):
        seller, prop = await listed_property("1000")
        buyer = await make_account("Free", balance="5000")

        with pytest.raises(MembershipRequiredError):
            await MarketplaceService.with_session(session, settings).purchase_marketplace_listing(buyer.id, prop.id)

        await self._assert_untouched(session, settings, seller, buyer, prop, "5000")

    async def test_buyer_is_seller(self, session, settings, listed_property):
        seller, prop = await listed_property("1000", seller_balance="5000")

        with pytest.raises(ForbiddenError):
            await MarketplaceService.with_session(session, settings).purchase_marketplace_listing(seller.id, prop.id)

    async def test_price_changed_since_confirmation(self, session, settings, make_account, listed_property):
        seller, prop = await listed_property("1000")
        buyer = await make_account("Careful", paid=True, balance="5000")

        with pytest.raises(ListingUnavailableError):
            await MarketplaceService.with_session(session, settings).purchase_marketplace_listing(
                buyer.id, prop.id, expected_price="900"
            )

        await self._assert_untouched(session, settings, seller, buyer, prop, "5000")

    async def test_invalid_expected_price(self, session, settings, make_account, listed_property):
        _, prop = await listed_property("1000")
        buyer = await make_account("Typo", paid=True, balance="5000")
        with pytest.raises(ValidationError):
            await MarketplaceService.with_session(session, settings).purchase_marketplace_listing(
                buyer.id, prop.id, expected_price="-1"
            )
        with pytest.raises(ValidationError):
            await MarketplaceService.with_session(session, settings).purchase_marketplace_listing(
                buyer.id, prop.id, expected_price="1e30"
            )

    async def test_infrastructure_failure_rolls_back(self, session, settings, make_account, listed_property):
        seller, prop = await listed_property("1000")
        buyer = await make_account("Unlucky", paid=True, balance="5000")
        service = MarketplaceService.with_session(session, settings)

        class BrokenRepository:
            async def create_transaction(self, **kwargs):
                raise RuntimeError("connection lost")

        service.repository = BrokenRepository()
        with pytest.raises(RuntimeError):
            await service.purchase_marketplace_listing(buyer.id, prop.id)

        await self._assert_untouched(session, settings, seller, buyer, prop, "5000")

    async def test_unknown_property(self, session, settings, make_account):
        buyer = await make_account("Lost", paid=True, balance="10")
        with pytest.raises(PropertyNotFoundError):
            await MarketplaceService.with_session(session, settings).purchase_marketplace_listing(buyer.id, "missing")


class TestListingExclusivity:
    """A listing settles at most once"""

    async def test_second_purchase_fails(self, session, settings, make_account, listed_property):
        seller, prop = await listed_property("1000")
        first = await make_account("First", paid=True, balance="5000")
        second = await make_account("Second", paid=True, balance="5000")
        service = MarketplaceService.with_session(session, settings)

        await service.purchase_marketplace_listing(first.id, prop.id, expected_price="1000")
        with pytest.raises(ListingUnavailableError):
            await service.purchase_marketplace_listing(second.id, prop.id)

        wallets = WalletService.with_session(session, settings)
        assert await wallets.get_balance(second.id) == Decimal("5000.00")
        assert await wallets.get_balance(seller.id) == Decimal("500.00")
        assert await _count_settlements(session) == 1

    async def test_removed_listing_cannot_be_bought(self, session, settings, make_account, listed_property):
        seller, prop = await listed_property("1000")
        buyer = await make_account("Late", paid=True, balance="5000")
        await ListingService.with_session(session, settings).remove_property_from_marketplace(seller.id, prop.id)

        with pytest.raises(ListingUnavailableError):
            await MarketplaceService.with_session(session, settings).purchase_marketplace_listing(buyer.id, prop.id)


class TestTransactionHistory:
    """Users see their settlements filtered by role"""

    async def test_role_filter(self, session, settings, make_account, make_property):
        alice = await make_account("Alice", paid=True, balance="10000")
        bob = await make_account("Bob", paid=True, balance="10000")
        listings = ListingService.with_session(session, settings)
        service = MarketplaceService.with_session(session, settings)

        house = await make_property(alice.id, title="Alice House")
        await listings.list_property_in_marketplace(alice.id, house.id, 1000, 30)
        await service.purchase_marketplace_listing(bob.id, house.id)

        flat = await make_property(bob.id, title="Bob Flat")
        await listings.list_property_in_marketplace(bob.id, flat.id, 2000, 30)
        await service.purchase_marketplace_listing(alice.id, flat.id)

        as_buyer = await service.get_user_marketplace_transactions(alice.id, "buyer")
        as_seller = await service.get_user_marketplace_transactions(alice.id, "seller")
        everything = await service.get_user_marketplace_transactions(alice.id, "all")

        assert [tx.property.title for tx in as_buyer.data] == ["Bob Flat"]
        assert [tx.property.title for tx in as_seller.data] == ["Alice House"]
        assert everything.total == 2
        assert everything.data[0].sale_price == Decimal("2000.00")

        with pytest.raises(ValidationError):
            await service.get_user_marketplace_transactions(alice.id, "broker")
