from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional


class DistributionType(str, Enum):
    PROPORTIONAL = "proportional"
    EQUAL = "equal"


@dataclass(slots=True)
class Profile:
    id: str
    username: Optional[str] = None
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None


@dataclass(slots=True)
class ReceiptItem:
    id: str
    name: str
    quantity: int
    unit_price: float
    total_price: float


@dataclass(slots=True)
class ItemClaim:
    item_id: str
    user_id: str
    quantity: float
    profile: Optional[Profile] = None


@dataclass(slots=True, frozen=True)
class DistributionOptions:
    tax: DistributionType = DistributionType.PROPORTIONAL
    tip: DistributionType = DistributionType.PROPORTIONAL


def _amount(value: Any) -> float:
    if value is None:
        return 0.0
    amount = float(value)
    return amount if amount > 0 else 0.0


@dataclass(slots=True)
class ReceiptTotals:
    subtotal: float = 0.0
    tax: float = 0.0
    tip: float = 0.0
    total: float = 0.0

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "ReceiptTotals":
        """Coalesce a receipt record into non-negative totals.

        Missing or negative amounts become 0. A missing total falls back to
        ``subtotal + tax + tip``.
        """
        subtotal = _amount(record.get("subtotal"))
        tax = _amount(record.get("tax"))
        tip = _amount(record.get("tip_amount"))
        total = _amount(record.get("total")) or subtotal + tax + tip
        return cls(subtotal=subtotal, tax=tax, tip=tip, total=total)


@dataclass(slots=True)
class ClaimedItem:
    name: str
    quantity: float
    amount: float


@dataclass(slots=True)
class ParticipantTotal:
    user_id: str
    username: str
    display_name: Optional[str]
    avatar_url: Optional[str]
    items_total: float
    tax_portion: float
    tip_portion: float
    total_owed: float
    claimed_items: list[ClaimedItem] = field(default_factory=list)


@dataclass(slots=True)
class BillBreakdown:
    subtotal: float
    tax: float
    tip: float
    total: float
    participants: list[ParticipantTotal]
    unclaimed_total: float
    tax_distribution: DistributionType
    tip_distribution: DistributionType
