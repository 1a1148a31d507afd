from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from billshare.db.models import DistributionOptions, DistributionType


@dataclass(slots=True)
class ParticipantShare:
    user_id: str
    items_total: float
    tax_portion: float
    tip_portion: float
    total_owed: float


def share_amount(
    amount: float,
    distribution_type: DistributionType,
    proportion: float,
    participant_count: int,
) -> float:
    if distribution_type == DistributionType.EQUAL:
        return amount / participant_count
    return amount * proportion


def calculate_participant_shares(
    items_totals: Mapping[str, float],
    unclaimed_total: float,
    subtotal: float,
    tax: float,
    tip: float,
    distribution: DistributionOptions,
) -> list[ParticipantShare]:
    """Spread tax, tip and unclaimed items over everyone holding a claim.

    Only users present in ``items_totals`` take part: with nobody claiming,
    the result is empty and nothing gets distributed. A zero subtotal makes
    every proportional portion 0 instead of falling back to an equal split.
    """
    participant_count = max(1, len(items_totals))
    unclaimed_per_person = unclaimed_total / participant_count

    shares: list[ParticipantShare] = []
    for user_id, items_total in items_totals.items():
        proportion = items_total / subtotal if subtotal > 0 else 0.0
        tax_portion = share_amount(tax, distribution.tax, proportion, participant_count)
        tip_portion = share_amount(tip, distribution.tip, proportion, participant_count)
        with_unclaimed = items_total + unclaimed_per_person

        shares.append(
            ParticipantShare(
                user_id=user_id,
                items_total=with_unclaimed,
                tax_portion=tax_portion,
                tip_portion=tip_portion,
                total_owed=with_unclaimed + tax_portion + tip_portion,
            )
        )
    return shares
