"""Storewide sale campaigns and effective pricing."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any, Mapping

from app.catalog.models import Campaign, HistoryEntry, Product, SaleDocument
from app.catalog.sanitize import Number
from app.store import SALE, DocumentStore
from app.store.codec import decode_document, encode_document
from app.utils.dates import end_of_day, localize, now_in_tz, parse_iso_date, start_of_day
from app.utils.retry import retry_conflict

logger = logging.getLogger(__name__)


def is_active(campaign: Campaign | None, as_of: datetime) -> bool:
    """True when the campaign is enabled, has a positive discount, and ``as_of``
    falls between 00:00 of its start date and the end of its end date.
    """
    if campaign is None or not campaign.enabled:
        return False
    if campaign.price is None or campaign.price <= 0:
        return False
    if not campaign.start_date or not campaign.end_date:
        return False
    try:
        start = start_of_day(parse_iso_date(campaign.start_date))
        end = end_of_day(parse_iso_date(campaign.end_date))
    except (ValueError, TypeError):
        logger.debug("Campaign %r has malformed dates", campaign.name)
        return False
    return start <= localize(as_of) <= end


def effective_price(product: Product, campaign: Campaign | None, as_of: datetime) -> Number:
    if not is_active(campaign, as_of):
        return product.offer_price
    return max(0, product.base_price - campaign.price)


class SaleEngine:
    """Owns the sale document: the current campaign plus its history."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def get_document(self) -> SaleDocument:
        snapshot = await self.store.read(SALE)
        if not snapshot.exists:
            return SaleDocument()
        return SaleDocument.from_dict(decode_document(snapshot.content, SALE))

    @retry_conflict
    async def set_current(
        self, fields: Mapping[str, Any] | None, *, now: datetime | None = None
    ) -> SaleDocument:
        snapshot = await self.store.read(SALE)
        document = (
            SaleDocument.from_dict(decode_document(snapshot.content, SALE))
            if snapshot.exists
            else SaleDocument()
        )
        incoming = Campaign.from_dict(fields) if fields else None
        if incoming and incoming.enabled and incoming.name and not document.has_in_history(incoming):
            stamp = localize(now) if now else now_in_tz()
            document.history.append(
                HistoryEntry.archive(incoming, entry_id=uuid.uuid4().hex, enabled_at=stamp.isoformat())
            )
            logger.info("Archived campaign %r to sale history", incoming.name)
        document.current = incoming
        await self.store.write(SALE, encode_document(document.to_dict()), snapshot.revision)
        logger.info("Current campaign set to %r", incoming.name if incoming else None)
        return document
