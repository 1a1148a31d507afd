from decimal import Decimal

import pytest

from billshare.db.repo import BillRepository


class DummyDB:
    def __init__(self) -> None:
        self.receipts = {}
        self.items = []
        self.claims = []
        self.queries = []

    async def fetchrow(self, query: str, *args):
        self.queries.append(query)
        if "FROM receipts" in query:
            return self.receipts.get(args[0])
        return None

    async def fetch(self, query: str, *args):
        self.queries.append(query)
        if "FROM receipt_items" in query:
            return self.items
        if "FROM item_claims" in query:
            return [row for row in self.claims if row["item_id"] in args[0]]
        return []


@pytest.mark.asyncio
async def test_get_receipt():
    db = DummyDB()
    db.receipts["r1"] = {"subtotal": Decimal("50.00"), "tax": None, "tip_amount": 5, "total": 55, "owner_id": "u1"}
    repo = BillRepository(db)  # type: ignore[arg-type]

    assert (await repo.get_receipt("r1"))["subtotal"] == Decimal("50.00")
    assert await repo.get_receipt("r2") is None


@pytest.mark.asyncio
async def test_get_receipt_items_converts_numbers():
    db = DummyDB()
    db.items = [
        {"id": "i1", "name": "Tacos", "quantity": 3, "unit_price": Decimal("4.50"), "total_price": Decimal("13.50")},
        {"id": "i2", "name": "Water", "quantity": 1, "unit_price": None, "total_price": None},
    ]
    repo = BillRepository(db)  # type: ignore[arg-type]

    items = await repo.get_receipt_items("r1")

    assert items[0].unit_price == 4.5
    assert isinstance(items[0].total_price, float)
    assert items[1].unit_price == 0.0


@pytest.mark.asyncio
async def test_get_item_claims_joins_profiles():
    db = DummyDB()
    db.claims = [
        {
            "item_id": "i1",
            "user_id": "u1",
            "quantity": Decimal("0.5"),
            "profile_id": "u1",
            "username": "jo",
            "display_name": None,
            "avatar_url": None,
        },
        {
            "item_id": "i1",
            "user_id": "u2",
            "quantity": Decimal("0.5"),
            "profile_id": None,
            "username": None,
            "display_name": None,
            "avatar_url": None,
        },
    ]
    repo = BillRepository(db)  # type: ignore[arg-type]

    claims = await repo.get_item_claims(["i1"])

    assert claims[0].quantity == 0.5
    assert claims[0].profile is not None
    assert claims[0].profile.username == "jo"
    assert claims[1].profile is None


@pytest.mark.asyncio
async def test_get_item_claims_without_items():
    db = DummyDB()
    repo = BillRepository(db)  # type: ignore[arg-type]

    assert await repo.get_item_claims([]) == []
    assert db.queries == []
