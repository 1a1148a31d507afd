from billshare.db.models import (
    BillBreakdown,
    ClaimedItem,
    DistributionType,
    ParticipantTotal,
)
from billshare.services.report import format_breakdown, format_money, format_quantity


def _participant() -> ParticipantTotal:
    return ParticipantTotal(
        user_id="u1",
        username="alex",
        display_name="Alex",
        avatar_url=None,
        items_total=21.5,
        tax_portion=2.15,
        tip_portion=3.0,
        total_owed=26.65,
        claimed_items=[
            ClaimedItem(name="Curry", quantity=1, amount=14.0),
            ClaimedItem(name="Naan", quantity=0.5, amount=2.5),
        ],
    )


def test_format_money():
    assert format_money(3) == "£3.00"
    assert format_money(12.5, "€") == "€12.50"
    assert format_money(0.1 + 0.2, "$") == "$0.30"


def test_format_quantity():
    assert format_quantity(1) == ""
    assert format_quantity(0.5) == "½"
    assert format_quantity(0.25) == "¼"
    assert format_quantity(1 / 3) == "⅓"
    assert format_quantity(3) == "(3)"
    assert format_quantity(0.2) == "(20%)"


def test_format_breakdown():
    breakdown = BillBreakdown(
        subtotal=40,
        tax=4,
        tip=6,
        total=50,
        participants=[_participant()],
        unclaimed_total=5,
        tax_distribution=DistributionType.PROPORTIONAL,
        tip_distribution=DistributionType.EQUAL,
    )

    text = format_breakdown(breakdown)

    assert "Total: £50.00" in text
    assert "Unclaimed items: £5.00" in text
    assert "Tax split: Proportional, Tip split: Equal" in text
    assert "Alex: £26.65" in text
    assert "Naan ½: £2.50" in text
    assert "Curry: £14.00" in text


def test_format_breakdown_without_participants():
    breakdown = BillBreakdown(
        subtotal=0,
        tax=0,
        tip=0,
        total=0,
        participants=[],
        unclaimed_total=0,
        tax_distribution=DistributionType.EQUAL,
        tip_distribution=DistributionType.EQUAL,
    )

    text = format_breakdown(breakdown, "$")

    assert "Unclaimed" not in text
    assert "No items claimed yet." in text
    assert "Subtotal: $0.00" in text


def test_format_breakdown_hides_split_for_zero_amounts():
    breakdown = BillBreakdown(
        subtotal=40,
        tax=0,
        tip=6,
        total=46,
        participants=[_participant()],
        unclaimed_total=0,
        tax_distribution=DistributionType.EQUAL,
        tip_distribution=DistributionType.PROPORTIONAL,
    )

    text = format_breakdown(breakdown)

    assert "Tax split" not in text
    assert "Tip split: Proportional" in text
    assert "Alex: £26.65" in text
    assert " — " not in text
