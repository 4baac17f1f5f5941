"""Per-transaction message thread between buyer and seller."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from estate_market.core.config import Settings, get_settings
from estate_market.infrastructure.database import atomic
from estate_market.modules.common.exceptions import ForbiddenError, ValidationError
from estate_market.modules.common.pagination import Page, PageRequest

from .exceptions import MarketplaceTransactionNotFoundError, MessageNotFoundError
from .models import MarketplaceMessageRecord, MarketplaceTransactionRecord
from .repository import MarketplaceRepository

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 4000


@dataclass(slots=True)
class MessageService:
    session: AsyncSession
    repository: MarketplaceRepository
    settings: Settings = field(default_factory=get_settings)

    @classmethod
    def with_session(cls, session: AsyncSession, settings: Settings | None = None) -> "MessageService":
        from estate_market.infrastructure.database.repositories.marketplace_repository import (
            SqlMarketplaceRepository,
        )

        return cls(session, SqlMarketplaceRepository(session), settings or get_settings())

    async def send_marketplace_message(self, transaction_id: str, sender_id: str, content: str) -> MarketplaceMessageRecord:
        content = (content or "").strip()
        if not content:
            raise ValidationError("Message content cannot be empty")
        if len(content) > MAX_MESSAGE_LENGTH:
            raise ValidationError(f"Messages are limited to {MAX_MESSAGE_LENGTH} characters")
        async with atomic(self.session):
            await self._require_participant(transaction_id, sender_id)
            message = await self.repository.add_message(
                transaction_id=transaction_id,
                sender_id=sender_id,
                content=content,
            )
        logger.info("Message %s posted on transaction %s by %s", message.id, transaction_id, sender_id)
        return message

    async def get_marketplace_messages(
        self,
        transaction_id: str,
        user_id: str,
        page: int = 1,
        page_size: int = 50,
    ) -> Page[MarketplaceMessageRecord]:
        """Oldest first, so the thread reads top to bottom."""
        await self._require_participant(transaction_id, user_id)
        request = PageRequest.build(page, page_size, self.settings.marketplace.max_page_size)
        total = await self.repository.count_messages(transaction_id)
        if request.is_beyond(total):
            return request.empty(total)
        rows = await self.repository.list_messages(transaction_id, offset=request.offset, limit=request.limit)
        return Page(data=list(rows), total=total, page=request.page, page_size=request.page_size)

    async def mark_message_as_read(self, message_id: int, user_id: str) -> MarketplaceMessageRecord:
        message = await self.repository.get_message(message_id)
        if message is None:
            raise MessageNotFoundError(f"Message not found: {message_id}")
        await self._require_participant(message.transaction_id, user_id)
        if message.sender_id == user_id:
            raise ForbiddenError("Only the recipient can mark a message as read")
        if not message.is_read:
            async with atomic(self.session):
                await self.repository.mark_message_read(message_id)
            message.is_read = True
        return message

    async def _require_participant(self, transaction_id: str, user_id: str) -> MarketplaceTransactionRecord:
        record = await self.repository.get_transaction(transaction_id)
        if record is None:
            raise MarketplaceTransactionNotFoundError(f"Marketplace transaction not found: {transaction_id}")
        if not record.involves(user_id):
            raise ForbiddenError("Only the buyer and seller can access this conversation")
        return record
