from __future__ import annotations

from typing import Optional, Sequence

from billshare.db.models import (
    BillBreakdown,
    DistributionOptions,
    ItemClaim,
    ParticipantTotal,
    ReceiptItem,
    ReceiptTotals,
)
from billshare.logging import get_logger
from billshare.services.claims import ClaimAggregate, aggregate_claims
from billshare.services.distribution import ParticipantShare, calculate_participant_shares


UNKNOWN_USERNAME = "Unknown"

log = get_logger(__name__)


def assemble_breakdown(
    aggregate: ClaimAggregate,
    shares: Sequence[ParticipantShare],
    totals: ReceiptTotals,
    distribution: DistributionOptions,
) -> BillBreakdown:
    participants: list[ParticipantTotal] = []
    for share in shares:
        user = aggregate.users[share.user_id]
        profile = user.profile
        participants.append(
            ParticipantTotal(
                user_id=share.user_id,
                username=(profile.username if profile else None) or UNKNOWN_USERNAME,
                display_name=(profile.display_name if profile else None) or None,
                avatar_url=(profile.avatar_url if profile else None) or None,
                items_total=share.items_total,
                tax_portion=share.tax_portion,
                tip_portion=share.tip_portion,
                total_owed=share.total_owed,
                claimed_items=list(user.claimed_items),
            )
        )

    # sorted() is stable, so ties keep first-claim order
    participants = sorted(participants, key=lambda p: p.total_owed, reverse=True)

    return BillBreakdown(
        subtotal=totals.subtotal,
        tax=totals.tax,
        tip=totals.tip,
        total=totals.total,
        participants=participants,
        unclaimed_total=aggregate.unclaimed_total,
        tax_distribution=distribution.tax,
        tip_distribution=distribution.tip,
    )


def compute_bill_breakdown(
    items: Sequence[ReceiptItem],
    claims: Sequence[ItemClaim],
    totals: ReceiptTotals,
    distribution: Optional[DistributionOptions] = None,
) -> BillBreakdown:
    if distribution is None:
        distribution = DistributionOptions()

    aggregate = aggregate_claims(items, claims)
    shares = calculate_participant_shares(
        {user_id: user.items_total for user_id, user in aggregate.users.items()},
        aggregate.unclaimed_total,
        totals.subtotal,
        totals.tax,
        totals.tip,
        distribution,
    )
    breakdown = assemble_breakdown(aggregate, shares, totals, distribution)
    log.debug(
        "breakdown.computed",
        participants=len(breakdown.participants),
        unclaimed_total=breakdown.unclaimed_total,
        tax_distribution=distribution.tax,
        tip_distribution=distribution.tip,
    )
    return breakdown


def find_participant(breakdown: BillBreakdown, user_id: str) -> Optional[ParticipantTotal]:
    for participant in breakdown.participants:
        if participant.user_id == user_id:
            return participant
    return None


def display_name_for(participant: ParticipantTotal) -> str:
    return participant.display_name or participant.username
