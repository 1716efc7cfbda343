"""Import service - turns an uploaded export into a stored snapshot."""

import dataclasses
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from integrations.csv_format_registry import detect_format, normalize_rows, read_csv
from integrations.csv_protocol import HoldingRecord, PortfolioSource
from integrations.parsing_utils import to_naive_utc
from models import Holding, PortfolioMetrics, Snapshot
from services.exceptions import PersistenceError
from services.snapshot_aggregator import MetricsSummary, aggregate_holdings

logger = logging.getLogger(__name__)


@dataclass
class ParsedImport:
    """A fully validated upload that has not been written yet."""

    source: PortfolioSource
    records: list[HoldingRecord]
    metrics: MetricsSummary


class ImportService:
    """Validates brokerage exports and stores them as snapshots.

    Validation happens in order (header, then every row) before anything is
    written, and the snapshot, its holdings and its metrics are committed in
    a single transaction.
    """

    @staticmethod
    def parse_upload(
        content: bytes,
        source: Optional[PortfolioSource | str] = None,
    ) -> ParsedImport:
        """Read, validate and normalize an upload without touching the database.

        Args:
            content: Raw file bytes.
            source: Expected source, or None to detect it from the header.

        Raises:
            UnreadableFileError, EmptyFileError: The file is not usable CSV.
            MissingColumnsError: The header matches no known format.
            MalformedRowError: A row has an unparseable cell.
        """
        headers, rows = read_csv(content)
        fmt = detect_format(headers, source)
        records = normalize_rows(rows, fmt.source)
        return ParsedImport(
            source=fmt.source,
            records=records,
            metrics=aggregate_holdings(records),
        )

    @staticmethod
    def import_csv(
        db: Session,
        user_id: str,
        content: bytes,
        filename: Optional[str],
        snapshot_date: Optional[datetime] = None,
        source: Optional[PortfolioSource | str] = None,
    ) -> Snapshot:
        """Validate an upload and store it as a new snapshot.

        Args:
            db: Database session
            user_id: Owner of the snapshot
            content: Raw file bytes
            filename: Original filename, kept for display
            snapshot_date: The date the export describes (defaults to now)
            source: Expected source, or None to detect it from the header

        Returns:
            The stored Snapshot with holdings and metrics

        Raises:
            CsvImportError subclasses: The upload failed validation; nothing
                was written.
            PersistenceError: The database rejected the write; nothing was
                written.
        """
        parsed = ImportService.parse_upload(content, source)
        effective_date = snapshot_date or datetime.now(timezone.utc)

        try:
            snapshot = Snapshot(
                user_id=user_id,
                source=parsed.source.value,
                snapshot_date=to_naive_utc(effective_date),
                filename=filename,
                record_count=len(parsed.records),
            )
            db.add(snapshot)
            db.flush()  # Get the snapshot ID

            db.add_all(
                Holding(snapshot_id=snapshot.id, **dataclasses.asdict(record))
                for record in parsed.records
            )
            db.add(
                PortfolioMetrics(
                    snapshot_id=snapshot.id,
                    **dataclasses.asdict(parsed.metrics),
                )
            )
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.error("Failed to store %s import for user %s", parsed.source.value, user_id, exc_info=True)
            raise PersistenceError("Failed to store import")

        db.refresh(snapshot)
        logger.info(
            "Imported %s snapshot %s (%s): %d holdings, market value %s",
            parsed.source.value,
            snapshot.id,
            effective_date.date().isoformat(),
            len(parsed.records),
            parsed.metrics.total_market_value,
        )
        return snapshot
