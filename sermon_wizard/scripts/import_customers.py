"""Import paid customers from the billing platform's invoice CSV export.

Usage:
    python -m sermon_wizard.scripts.import_customers --csv lista-anual.csv [--plan-days 365] [--dry-run]
"""

from __future__ import annotations

import argparse
import csv
import logging
import sys
from pathlib import Path

from sermon_wizard.services.customer import (
    PLAN_DURATION_DAYS,
    CustomerRecord,
    parse_customer_rows,
    upsert_customers,
)

logger = logging.getLogger(__name__)

CSV_DELIMITER = ";"


def read_customer_csv(path: Path, plan_days: int = PLAN_DURATION_DAYS) -> list[CustomerRecord]:
    """Read a ';'-separated export and return the paid customer records."""
    # utf-8-sig strips the BOM spreadsheet exports often start with
    with path.open(newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f, delimiter=CSV_DELIMITER)
        return parse_customer_rows(reader, plan_days=plan_days)


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    parser = argparse.ArgumentParser(description="Import paid customers from a CSV export")
    parser.add_argument("--csv", required=True, type=Path, help="Path to the ';'-separated CSV")
    parser.add_argument(
        "--plan-days",
        type=int,
        default=PLAN_DURATION_DAYS,
        help=f"Plan duration in days (default {PLAN_DURATION_DAYS})",
    )
    parser.add_argument(
        "--dry-run", action="store_true", help="Parse and report without writing to the database"
    )
    args = parser.parse_args(argv)

    if not args.csv.is_file():
        print(f"CSV file not found: {args.csv}")
        return 1

    records = read_customer_csv(args.csv, plan_days=args.plan_days)
    print(f"CSV read complete: {len(records)} paid customers found.")
    if not records:
        print("Nothing to import.")
        return 0
    if args.dry_run:
        for record in records:
            print(f"  {record.email}  expires {record.expires_at.date().isoformat()}")
        return 0

    from sermon_wizard.db.session import SessionLocal

    db = SessionLocal()
    try:
        count = upsert_customers(db, records)
    except Exception as e:
        print(f"Import failed, no changes were saved: {e}")
        return 1
    finally:
        db.close()
    print(f"Success: {count} customers imported/updated.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
