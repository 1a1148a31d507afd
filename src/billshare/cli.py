from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Optional, Sequence

from billshare.config import get_settings
from billshare.db.models import DistributionOptions, DistributionType
from billshare.db.repo import BillRepository, Database
from billshare.logging import configure_logging, get_logger
from billshare.services.breakdown import find_participant
from billshare.services.report import format_breakdown, format_participant
from billshare.services.settlement import ReceiptNotFoundError, calculate_bill_breakdown


def build_parser() -> argparse.ArgumentParser:
    choices = [d.value for d in DistributionType]
    parser = argparse.ArgumentParser(prog="billshare", description="Show who owes what on a receipt.")
    parser.add_argument("receipt_id")
    parser.add_argument("--tax", choices=choices, default=None, help="how tax is split")
    parser.add_argument("--tip", choices=choices, default=None, help="how tip is split")
    parser.add_argument("--user", default=None, help="only show this user's total")
    return parser


async def run(args: argparse.Namespace) -> int:
    settings = get_settings()
    if not settings.database_url:
        print("DATABASE_URL is not set", file=sys.stderr)
        return 2

    defaults = settings.distribution
    distribution = DistributionOptions(
        tax=DistributionType(args.tax) if args.tax else defaults.tax,
        tip=DistributionType(args.tip) if args.tip else defaults.tip,
    )

    log = get_logger(__name__)
    db = Database(settings.database_url)
    await db.connect()
    try:
        breakdown = await calculate_bill_breakdown(BillRepository(db), args.receipt_id, distribution)
    except ReceiptNotFoundError as exc:
        log.warning("cli.receipt_not_found", receipt_id=args.receipt_id)
        print(str(exc), file=sys.stderr)
        return 1
    finally:
        await db.close()

    if args.user:
        participant = find_participant(breakdown, args.user)
        if participant is None:
            print(f"User {args.user} has not claimed anything on this receipt")
            return 0
        print(format_participant(participant, settings.currency_symbol))
        return 0

    print(format_breakdown(breakdown, settings.currency_symbol))
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level, json_logs=settings.log_json)
    return asyncio.run(run(args))


if __name__ == "__main__":
    raise SystemExit(main())
