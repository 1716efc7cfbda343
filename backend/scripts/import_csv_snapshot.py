#!/usr/bin/env python
"""Import a brokerage CSV export as a snapshot from the command line.

Usage:
    cd backend
    python -m scripts.import_csv_snapshot USER_ID export.csv [--date 2024-06-28] [--source wealthsimple] [--dry-run]
"""

import argparse
import sys
import uuid
from pathlib import Path

from database import get_session_local, init_db
from integrations.csv_protocol import PortfolioSource
from integrations.exceptions import CsvImportError
from integrations.parsing_utils import parse_iso_datetime
from logging_config import setup_logging
from services.import_service import ImportService


def import_file(
    user_id: str,
    csv_path: str,
    snapshot_date: str | None = None,
    source: str | None = None,
    dry_run: bool = False,
) -> int:
    """Import one file and print a summary. Returns a process exit code."""
    path = Path(csv_path)
    if not path.is_file():
        print(f"ERROR: File not found: {csv_path}")
        return 1

    effective_date = None
    if snapshot_date:
        effective_date = parse_iso_datetime(snapshot_date)
        if effective_date is None:
            print(f"ERROR: Invalid date: {snapshot_date} (expected YYYY-MM-DD)")
            return 1

    content = path.read_bytes()
    try:
        if dry_run:
            parsed = ImportService.parse_upload(content, source)
            metrics = parsed.metrics
            print(f"DRY RUN: {parsed.source.value} export, {len(parsed.records)} holdings")
            print(f"  Market value: {metrics.total_market_value}")
            print(f"  Book value:   {metrics.total_book_value}")
            print(f"  Gain/loss:    {metrics.total_gain_loss} ({metrics.total_gain_loss_percent}%)")
            print(f"  Accounts:     {metrics.accounts_count}")
            return 0

        init_db()
        db = get_session_local()()
        try:
            snapshot = ImportService.import_csv(
                db,
                user_id,
                content,
                filename=path.name,
                snapshot_date=effective_date,
                source=source,
            )
            print(f"Imported {snapshot.source} snapshot {snapshot.id}: {snapshot.record_count} holdings")
            print(f"  Market value: {snapshot.metrics.total_market_value}")
        finally:
            db.close()
    except CsvImportError as e:
        print(f"ERROR: {e}")
        return 1
    return 0


def main():
    setup_logging()
    parser = argparse.ArgumentParser(description="Import a brokerage CSV export as a snapshot")
    parser.add_argument("user_id", help="Owner of the snapshot (UUID)")
    parser.add_argument("csv_file", help="Path to the exported CSV file")
    parser.add_argument("--date", dest="snapshot_date", help="Snapshot date (defaults to now)")
    parser.add_argument(
        "--source",
        choices=[s.value for s in PortfolioSource],
        help="Expected export format (detected from the header if omitted)",
    )
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Validate and show the totals without writing to the DB",
    )
    args = parser.parse_args()

    try:
        uuid.UUID(args.user_id)
    except ValueError:
        parser.error(f"user_id must be a UUID: {args.user_id}")

    sys.exit(import_file(
        args.user_id,
        args.csv_file,
        snapshot_date=args.snapshot_date,
        source=args.source,
        dry_run=args.dry_run,
    ))


if __name__ == "__main__":
    main()
