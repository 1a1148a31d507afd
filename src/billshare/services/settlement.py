from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from billshare.db.models import (
    BillBreakdown,
    DistributionOptions,
    ItemClaim,
    ParticipantTotal,
    ReceiptItem,
    ReceiptTotals,
)
from billshare.logging import get_logger
from billshare.services.breakdown import compute_bill_breakdown, find_participant


log = get_logger(__name__)


class ReceiptDataProvider(Protocol):
    async def get_receipt(self, receipt_id: str) -> Mapping[str, Any] | None: ...

    async def get_receipt_items(self, receipt_id: str) -> list[ReceiptItem]: ...

    async def get_item_claims(self, item_ids: Sequence[str]) -> list[ItemClaim]: ...


class ReceiptNotFoundError(LookupError):
    pass


async def calculate_bill_breakdown(
    provider: ReceiptDataProvider,
    receipt_id: str,
    distribution: Optional[DistributionOptions] = None,
) -> BillBreakdown:
    receipt = await provider.get_receipt(receipt_id)
    if receipt is None:
        raise ReceiptNotFoundError(f"Receipt {receipt_id} not found")

    items = await provider.get_receipt_items(receipt_id)
    claims: list[ItemClaim] = []
    if items:
        claims = await provider.get_item_claims([item.id for item in items])

    breakdown = compute_bill_breakdown(items, claims, ReceiptTotals.from_record(receipt), distribution)
    log.info(
        "settlement.calculated",
        receipt_id=receipt_id,
        items=len(items),
        claims=len(claims),
        participants=len(breakdown.participants),
    )
    return breakdown


async def get_my_total(
    provider: ReceiptDataProvider,
    receipt_id: str,
    user_id: str,
    distribution: Optional[DistributionOptions] = None,
) -> ParticipantTotal | None:
    breakdown = await calculate_bill_breakdown(provider, receipt_id, distribution)
    return find_participant(breakdown, user_id)
