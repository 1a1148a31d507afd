from __future__ import annotations

from billshare.db.models import BillBreakdown, ParticipantTotal
from billshare.services.breakdown import display_name_for


DISTRIBUTION_LABELS = {
    "proportional": "Proportional",
    "equal": "Equal",
}

FRACTION_LABELS = {
    0.5: "½",
    0.25: "¼",
}


def format_money(amount: float, symbol: str = "£") -> str:
    return f"{symbol}{amount:.2f}"


def format_quantity(quantity: float) -> str:
    if quantity == 1:
        return ""
    if quantity in FRACTION_LABELS:
        return FRACTION_LABELS[quantity]
    if f"{quantity:.2f}" == "0.33":
        return "⅓"
    if float(quantity).is_integer():
        return f"({int(quantity)})"
    return f"({quantity * 100:.0f}%)"


def _distribution_label(value: str) -> str:
    return DISTRIBUTION_LABELS.get(value, value)


def format_participant(participant: ParticipantTotal, symbol: str = "£") -> str:
    lines = [
        f"{display_name_for(participant)}: {format_money(participant.total_owed, symbol)}",
        f"  Items: {format_money(participant.items_total, symbol)}",
        f"  Tax: {format_money(participant.tax_portion, symbol)}",
        f"  Tip: {format_money(participant.tip_portion, symbol)}",
    ]
    for item in participant.claimed_items:
        qty = format_quantity(item.quantity)
        label = f"{item.name} {qty}" if qty else item.name
        lines.append(f"  · {label}: {format_money(item.amount, symbol)}")
    return "\n".join(lines)


def format_breakdown(breakdown: BillBreakdown, symbol: str = "£") -> str:
    lines = [
        f"Subtotal: {format_money(breakdown.subtotal, symbol)}",
        f"Tax: {format_money(breakdown.tax, symbol)}",
        f"Tip: {format_money(breakdown.tip, symbol)}",
        f"Total: {format_money(breakdown.total, symbol)}",
    ]
    if breakdown.unclaimed_total > 0:
        lines.append(f"Unclaimed items: {format_money(breakdown.unclaimed_total, symbol)}")
    splits = []
    if breakdown.tax > 0:
        splits.append(f"Tax split: {_distribution_label(breakdown.tax_distribution)}")
    if breakdown.tip > 0:
        splits.append(f"Tip split: {_distribution_label(breakdown.tip_distribution)}")
    if splits:
        lines.append(", ".join(splits))

    if not breakdown.participants:
        lines.append("No items claimed yet.")
    for participant in breakdown.participants:
        lines.append("")
        lines.append(format_participant(participant, symbol))
    return "\n".join(lines)
