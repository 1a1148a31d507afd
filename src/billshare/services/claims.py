from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from billshare.db.models import ClaimedItem, ItemClaim, Profile, ReceiptItem
from billshare.logging import get_logger


log = get_logger(__name__)


@dataclass(slots=True)
class UserClaims:
    items_total: float = 0.0
    claimed_items: list[ClaimedItem] = field(default_factory=list)
    profile: Optional[Profile] = None


@dataclass(slots=True)
class ClaimAggregate:
    users: dict[str, UserClaims]
    unclaimed_total: float


def claimed_quantity(item_id: str, claims: Iterable[ItemClaim]) -> float:
    return sum((claim.quantity for claim in claims if claim.item_id == item_id), 0.0)


def aggregate_claims(items: Sequence[ReceiptItem], claims: Sequence[ItemClaim]) -> ClaimAggregate:
    """Collapse per-(item, user) claims into per-user totals and the unclaimed value.

    Users appear in the order of their first claim. Claims on items that are
    not part of ``items`` are ignored.
    """
    item_map = {item.id: item for item in items}
    users: dict[str, UserClaims] = {}

    for claim in claims:
        item = item_map.get(claim.item_id)
        if item is None:
            log.debug("claims.skip_unknown_item", item_id=claim.item_id, user_id=claim.user_id)
            continue

        amount = item.unit_price * claim.quantity
        user = users.get(claim.user_id)
        if user is None:
            user = users[claim.user_id] = UserClaims(profile=claim.profile)
        elif user.profile is None:
            user.profile = claim.profile

        user.items_total += amount
        user.claimed_items.append(ClaimedItem(name=item.name, quantity=claim.quantity, amount=amount))

    unclaimed_total = 0.0
    for item in items:
        remaining = item.quantity - claimed_quantity(item.id, claims)
        if remaining > 0:
            unclaimed_total += item.unit_price * remaining

    return ClaimAggregate(users=users, unclaimed_total=unclaimed_total)


def available_to_claim(item: ReceiptItem, claims: Iterable[ItemClaim], user_id: str) -> float:
    """Quantity ``user_id`` may hold on ``item`` without over-claiming it.

    The user's own existing claim counts as available, since claims are
    replaced rather than added to.
    """
    claims = list(claims)
    own = sum((c.quantity for c in claims if c.item_id == item.id and c.user_id == user_id), 0.0)
    available = item.quantity - claimed_quantity(item.id, claims) + own
    return max(0.0, available)


def unclaimed_items(items: Sequence[ReceiptItem], claims: Sequence[ItemClaim]) -> list[ReceiptItem]:
    return [item for item in items if claimed_quantity(item.id, claims) < item.quantity]


def split_item_claims(item: ReceiptItem, user_ids: Sequence[str]) -> list[ItemClaim]:
    """Share one unit of ``item`` equally between ``user_ids``."""
    unique_ids = list(dict.fromkeys(user_ids))
    if len(unique_ids) < 2:
        raise ValueError("an item must be split between at least two users")

    share = 1 / len(unique_ids)
    return [ItemClaim(item_id=item.id, user_id=user_id, quantity=share) for user_id in unique_ids]
