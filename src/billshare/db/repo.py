from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

import asyncpg

from billshare.db.models import ItemClaim, Profile, ReceiptItem
from billshare.logging import get_logger, sql_logger


class Database:
    def __init__(self, dsn: str) -> None:
        self._dsn = dsn
        self._pool: asyncpg.Pool | None = None
        self._log = get_logger(__name__)

    async def connect(self) -> None:
        if self._pool is None:
            # asyncpg expects a plain postgresql:// scheme, without "+asyncpg"
            dsn = self._dsn.replace("+asyncpg", "")
            self._pool = await asyncpg.create_pool(dsn)
            self._log.info("db.pool.created")

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            self._log.info("db.pool.closed")

    async def fetch(self, query: str, *args: Any) -> list[asyncpg.Record]:
        await self._ensure_pool()
        assert self._pool
        sql_logger.info("sql.fetch", query=query, args=args)
        return await self._pool.fetch(query, *args)

    async def fetchrow(self, query: str, *args: Any) -> asyncpg.Record | None:
        await self._ensure_pool()
        assert self._pool
        sql_logger.info("sql.fetchrow", query=query, args=args)
        return await self._pool.fetchrow(query, *args)

    async def _ensure_pool(self) -> None:
        if self._pool is None:
            await self.connect()


def _profile_from_row(row: Mapping[str, Any]) -> Optional[Profile]:
    if row.get("profile_id") is None:
        return None
    return Profile(
        id=str(row["profile_id"]),
        username=row.get("username"),
        display_name=row.get("display_name"),
        avatar_url=row.get("avatar_url"),
    )


class BillRepository:
    """Reads receipts, items and claims for settlement from Postgres."""

    def __init__(self, db: Database) -> None:
        self.db = db

    async def get_receipt(self, receipt_id: str) -> Mapping[str, Any] | None:
        row = await self.db.fetchrow(
            "SELECT subtotal, tax, tip_amount, total, owner_id FROM receipts WHERE id = $1",
            receipt_id,
        )
        return dict(row) if row is not None else None

    async def get_receipt_items(self, receipt_id: str) -> list[ReceiptItem]:
        rows = await self.db.fetch(
            """
            SELECT id, name, quantity, unit_price, total_price
            FROM receipt_items
            WHERE receipt_id = $1
            ORDER BY created_at
            """,
            receipt_id,
        )
        return [
            ReceiptItem(
                id=str(row["id"]),
                name=row["name"],
                quantity=int(row["quantity"]),
                unit_price=float(row["unit_price"] or 0),
                total_price=float(row["total_price"] or 0),
            )
            for row in rows
        ]

    async def get_item_claims(self, item_ids: Sequence[str]) -> list[ItemClaim]:
        if not item_ids:
            return []
        rows = await self.db.fetch(
            """
            SELECT c.item_id, c.user_id, c.quantity,
                   p.id AS profile_id, p.username, p.display_name, p.avatar_url
            FROM item_claims c
            LEFT JOIN profiles p ON p.id = c.user_id
            WHERE c.item_id = ANY($1::uuid[])
            ORDER BY c.created_at
            """,
            list(item_ids),
        )
        return [
            ItemClaim(
                item_id=str(row["item_id"]),
                user_id=str(row["user_id"]),
                quantity=float(row["quantity"]),
                profile=_profile_from_row(row),
            )
            for row in rows
        ]
