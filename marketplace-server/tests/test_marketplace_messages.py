"""
Buyer/seller message threads attached to a settlement.
"""

import pytest

from estate_market.modules.common import ForbiddenError, ValidationError
from estate_market.modules.marketplace import (
    ListingService,
    MarketplaceService,
    MarketplaceTransactionNotFoundError,
    MessageNotFoundError,
    MessageService,
)


@pytest.fixture
def settled(session, settings, make_account, make_property):
    async def _settle():
        seller = await make_account("Seller", paid=True)
        buyer = await make_account("Buyer", paid=True, balance="10000")
        prop = await make_property(seller.id)
        await ListingService.with_session(session, settings).list_property_in_marketplace(seller.id, prop.id, 1000, 30)
        transaction_id = await MarketplaceService.with_session(session, settings).purchase_marketplace_listing(
            buyer.id, prop.id
        )
        return transaction_id, buyer, seller

    return _settle


class TestMessageThread:
    """Participants exchange messages in order"""

    async def test_conversation_is_chronological(self, session, settings, settled):
        transaction_id, buyer, seller = await settled()
        service = MessageService.with_session(session, settings)

        await service.send_marketplace_message(transaction_id, buyer.id, "When can I get the keys?")
        await service.send_marketplace_message(transaction_id, seller.id, "  Tomorrow morning.  ")
        await service.send_marketplace_message(transaction_id, buyer.id, "Great, thanks!")

        page = await service.get_marketplace_messages(transaction_id, seller.id)
        assert page.total == 3
        assert [m.content for m in page.data] == [
            "When can I get the keys?",
            "Tomorrow morning.",
            "Great, thanks!",
        ]
        assert page.data[0].sender.name == "Buyer"
        assert [m.id for m in page.data] == sorted(m.id for m in page.data)

    async def test_pagination(self, session, settings, settled):
        transaction_id, buyer, _ = await settled()
        service = MessageService.with_session(session, settings)
        for index in range(3):
            await service.send_marketplace_message(transaction_id, buyer.id, f"message {index}")

        second = await service.get_marketplace_messages(transaction_id, buyer.id, page=2, page_size=2)
        assert [m.content for m in second.data] == ["message 2"]
        beyond = await service.get_marketplace_messages(transaction_id, buyer.id, page=3, page_size=2)
        assert beyond.data == []
        assert beyond.total == 3

    async def test_mark_as_read(self, session, settings, settled):
        transaction_id, buyer, seller = await settled()
        service = MessageService.with_session(session, settings)
        message = await service.send_marketplace_message(transaction_id, buyer.id, "Hello")
        assert message.is_read is False

        updated = await service.mark_message_as_read(message.id, seller.id)

        assert updated.is_read is True
        page = await service.get_marketplace_messages(transaction_id, seller.id)
        assert page.data[0].is_read is True


class TestMessageGuards:
    """Only the two parties may use the thread"""

    async def test_empty_content(self, session, settings, settled):
        transaction_id, buyer, _ = await settled()
        with pytest.raises(ValidationError):
            await MessageService.with_session(session, settings).send_marketplace_message(transaction_id, buyer.id, "   ")

    async def test_outsider_is_forbidden(self, session, settings, settled, make_account):
        transaction_id, buyer, _ = await settled()
        outsider = await make_account("Outsider")
        service = MessageService.with_session(session, settings)
        message = await service.send_marketplace_message(transaction_id, buyer.id, "Private")

        with pytest.raises(ForbiddenError):
            await service.send_marketplace_message(transaction_id, outsider.id, "Hi")
        with pytest.raises(ForbiddenError):
            await service.get_marketplace_messages(transaction_id, outsider.id)
        with pytest.raises(ForbiddenError):
            await service.mark_message_as_read(message.id, outsider.id)

    async def test_sender_cannot_mark_own_message(self, session, settings, settled):
        transaction_id, buyer, seller = await settled()
        service = MessageService.with_session(session, settings)
        message = await service.send_marketplace_message(transaction_id, buyer.id, "Is parking included?")

        with pytest.raises(ForbiddenError):
            await service.mark_message_as_read(message.id, buyer.id)

        page = await service.get_marketplace_messages(transaction_id, seller.id)
        assert page.data[0].is_read is False

    async def test_unknown_ids(self, session, settings, make_account):
        user = await make_account("Curious")
        service = MessageService.with_session(session, settings)

        with pytest.raises(MarketplaceTransactionNotFoundError):
            await service.send_marketplace_message("missing", user.id, "Hello")
        with pytest.raises(MessageNotFoundError):
            await service.mark_message_as_read(12345, user.id)
