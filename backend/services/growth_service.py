"""Growth service - loads snapshots and ledgers and builds chart series."""

import logging
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from integrations.csv_protocol import PortfolioSource
from models import PortfolioMetrics, Snapshot
from services.external_account_service import ExternalAccountService
from services.growth_series import (
    CombinedGrowthPoint,
    GrowthPoint,
    SnapshotValuation,
    build_source_series,
    combine_growth_series,
)

logger = logging.getLogger(__name__)

ALL_SOURCES: list[str] = [s.value for s in PortfolioSource]


class GrowthService:
    """Builds single-source and combined growth series for one user.

    Each call reads its own inputs and computes the series synchronously;
    nothing is cached between requests.
    """

    @staticmethod
    def load_valuations(
        db: Session,
        user_id: str,
        sources: Optional[Sequence[str]] = None,
    ) -> dict[str, list[SnapshotValuation]]:
        """Snapshots joined with metrics, grouped by source, oldest first.

        Snapshots sharing a date stay in import order.
        """
        query = (
            db.query(Snapshot, PortfolioMetrics)
            .join(PortfolioMetrics, PortfolioMetrics.snapshot_id == Snapshot.id)
            .filter(Snapshot.user_id == user_id)
        )
        if sources is not None:
            query = query.filter(Snapshot.source.in_(list(sources)))
        rows = query.order_by(Snapshot.snapshot_date, Snapshot.imported_at).all()

        by_source: dict[str, list[SnapshotValuation]] = {}
        for snapshot, metrics in rows:
            by_source.setdefault(snapshot.source, []).append(
                SnapshotValuation(
                    snapshot_id=snapshot.id,
                    source=snapshot.source,
                    snapshot_date=snapshot.snapshot_date,
                    market_value=metrics.total_market_value,
                    book_value=metrics.total_book_value,
                    gain_loss=metrics.total_gain_loss,
                    gain_loss_percent=metrics.total_gain_loss_percent,
                    holdings_count=metrics.holdings_count,
                    imported_at=snapshot.imported_at,
                )
            )
        return by_source

    @staticmethod
    def _latest_snapshot_id(valuations: Sequence[SnapshotValuation]) -> Optional[str]:
        """Id of the last snapshot in (date, import) order."""
        return valuations[-1].snapshot_id if valuations else None

    def source_series(self, db: Session, user_id: str, source: str) -> list[GrowthPoint]:
        """Growth series for one source; its newest point uses live external balances."""
        valuations = self.load_valuations(db, user_id, [source]).get(source, [])
        histories = ExternalAccountService.load_histories(db, user_id)
        return build_source_series(
            valuations,
            histories,
            live_snapshot_id=self._latest_snapshot_id(valuations),
        )

    def combined_series(
        self,
        db: Session,
        user_id: str,
        sources: Optional[Sequence[str]] = None,
    ) -> list[CombinedGrowthPoint]:
        """Merged series across sources plus external accounts.

        Only the newest snapshot across every included source gets live
        external balances; all other points are strictly point-in-time.
        """
        slots = list(sources) if sources is not None else list(ALL_SOURCES)
        valuations_by_source = self.load_valuations(db, user_id, slots)
        histories = ExternalAccountService.load_histories(db, user_id)

        all_valuations = sorted(
            (v for vals in valuations_by_source.values() for v in vals),
            key=lambda v: (v.snapshot_date, v.imported_at or v.snapshot_date),
        )
        live_snapshot_id = self._latest_snapshot_id(all_valuations)

        series_by_source = {
            source: build_source_series(
                valuations_by_source.get(source, []),
                histories,
                live_snapshot_id=live_snapshot_id,
            )
            for source in slots
        }
        combined = combine_growth_series(series_by_source, histories, slots)
        logger.debug(
            "Built combined growth series for user %s: %d points from %d snapshots",
            user_id, len(combined), len(all_valuations),
        )
        return combined
