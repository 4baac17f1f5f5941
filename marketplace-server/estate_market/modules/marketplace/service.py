"""Marketplace transaction engine.

``purchase_marketplace_listing`` settles a sale as one database
transaction: buyer debit, seller credit, commission, ownership transfer,
listing closure and the settlement record either all happen or none do.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from estate_market.core.config import Settings, get_settings
from estate_market.core.money import AmountLike, positive_amount, split_commission
from estate_market.db.models import utcnow
from estate_market.infrastructure.database import atomic
from estate_market.modules.common.exceptions import ForbiddenError, ListingUnavailableError, ValidationError
from estate_market.modules.common.pagination import Page, PageRequest
from estate_market.modules.membership.service import MembershipService
from estate_market.modules.properties.exceptions import PropertyNotFoundError
from estate_market.modules.properties.repository import PropertyRepository
from estate_market.modules.wallets.service import WalletService

from .exceptions import MarketplaceTransactionNotFoundError
from .models import TRANSACTION_ROLES, MarketplaceTransactionRecord
from .repository import MarketplaceRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MarketplaceService:
    session: AsyncSession
    repository: MarketplaceRepository
    properties: PropertyRepository
    wallets: WalletService
    membership: MembershipService
    settings: Settings = field(default_factory=get_settings)

    @classmethod
    def with_session(cls, session: AsyncSession, settings: Settings | None = None) -> "MarketplaceService":
        from estate_market.infrastructure.database.repositories.marketplace_repository import (
            SqlMarketplaceRepository,
        )
        from estate_market.infrastructure.database.repositories.property_repository import SqlPropertyRepository

        settings = settings or get_settings()
        return cls(
            session,
            SqlMarketplaceRepository(session),
            SqlPropertyRepository(session),
            WalletService.with_session(session, settings),
            MembershipService.with_session(session),
            settings,
        )

    async def purchase_marketplace_listing(
        self,
        buyer_id: str,
        property_id: str,
        expected_price: AmountLike | None = None,
    ) -> str:
        """Settle a purchase and return the new marketplace transaction id.

        ``expected_price`` is the amount the buyer confirmed; if the live
        listing price differs the purchase is refused rather than charging
        a different amount.
        """
        if expected_price is not None:
            expected_price = positive_amount(expected_price, "expected_price")

        async with atomic(self.session):
            listing = await self.properties.get(property_id, for_update=True)
            if listing is None:
                raise PropertyNotFoundError(f"Property not found: {property_id}")
            if not listing.is_in_marketplace or listing.marketplace_price is None:
                self._log_unavailable(buyer_id, property_id, "not listed")
                raise ListingUnavailableError()
            seller_id = listing.user_id
            if seller_id == buyer_id:
                raise ForbiddenError("You cannot purchase your own listing")
            await self.membership.require_paid_member(buyer_id, "purchase marketplace listings")

            sale_price = listing.marketplace_price
            if expected_price is not None and expected_price != sale_price:
                self._log_unavailable(buyer_id, property_id, f"price changed to {sale_price}")
                raise ListingUnavailableError(
                    f"The listing price changed to {sale_price} {self.settings.currency}"
                )
            platform_fee, seller_earning = split_commission(sale_price, self.settings.commission_rate)

            # Closing the listing first makes a concurrent purchase or removal lose cleanly.
            closed = await self.properties.close_listing_for_sale(
                property_id,
                seller_id=seller_id,
                buyer_id=buyer_id,
                price=sale_price,
                now=utcnow() if self.settings.marketplace.enforce_expiry else None,
            )
            if not closed:
                self._log_unavailable(buyer_id, property_id, "closed, expired or repriced")
                raise ListingUnavailableError()

            await self.wallets.debit(
                buyer_id,
                sale_price,
                type="purchase",
                related_listing_id=property_id,
                description=f"Purchase of {listing.title}",
            )
            await self.wallets.credit(
                seller_id,
                sale_price,
                type="sale",
                related_listing_id=property_id,
                description=f"Sale of {listing.title}",
            )
            if platform_fee > 0:
                await self.wallets.debit(
                    seller_id,
                    platform_fee,
                    type="commission",
                    related_listing_id=property_id,
                    description=f"Platform commission on {listing.title}",
                )
            record = await self.repository.create_transaction(
                buyer_id=buyer_id,
                seller_id=seller_id,
                listing_id=property_id,
                sale_price=sale_price,
                platform_fee=platform_fee,
                seller_earning=seller_earning,
            )

        logger.info(
            "Marketplace sale %s: property %s from %s to %s for %s (fee %s)",
            record.id,
            property_id,
            seller_id,
            buyer_id,
            sale_price,
            platform_fee,
        )
        return record.id

    async def get_marketplace_transaction(self, transaction_id: str) -> MarketplaceTransactionRecord:
        record = await self.repository.get_transaction(transaction_id)
        if record is None:
            raise MarketplaceTransactionNotFoundError(f"Marketplace transaction not found: {transaction_id}")
        return record

    async def get_user_marketplace_transactions(
        self,
        user_id: str,
        role: str = "all",
        page: int = 1,
        page_size: int = 10,
    ) -> Page[MarketplaceTransactionRecord]:
        if role not in TRANSACTION_ROLES:
            raise ValidationError(f"role must be one of: {', '.join(sorted(TRANSACTION_ROLES))}")
        request = PageRequest.build(page, page_size, self.settings.marketplace.max_page_size)
        total = await self.repository.count_transactions(user_id, role)
        if request.is_beyond(total):
            return request.empty(total)
        rows = await self.repository.list_transactions(user_id, role, offset=request.offset, limit=request.limit)
        return Page(data=list(rows), total=total, page=request.page, page_size=request.page_size)

    @staticmethod
    def _log_unavailable(buyer_id: str, property_id: str, reason: str) -> None:
        logger.warning("Listing %s unavailable to buyer %s: %s", property_id, buyer_id, reason)
