"""Analytics service - snapshot summaries and the current net-worth breakdown."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from integrations.parsing_utils import PERCENT_PLACES, round_half_away
from models import Holding, PortfolioMetrics, Snapshot
from services.exceptions import NotFoundError
from services.external_account_service import ExternalAccountService
from services.growth_service import ALL_SOURCES
from services.ledger import external_totals_as_of
from services.snapshot_service import SnapshotService

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
PERFORMER_COUNT = 5
UNKNOWN_CATEGORY = "Unknown"


@dataclass
class Performer:
    """One security's gain across every account that holds it."""

    symbol: Optional[str]
    name: Optional[str]
    market_value: Decimal
    book_value: Decimal
    gain_loss: Decimal
    gain_loss_percent: Decimal


@dataclass
class AllocationSlice:
    category: str
    market_value: Decimal
    percent: Decimal


@dataclass
class SnapshotSummary:
    snapshot: Snapshot
    metrics: Optional[PortfolioMetrics]
    top_performers: list[Performer]
    bottom_performers: list[Performer]
    allocation: list[AllocationSlice]


@dataclass
class InstitutionBalance:
    institution_name: str
    assets: Decimal = ZERO
    debt: Decimal = ZERO


@dataclass
class NetWorthSummary:
    """Current balances; debt figures are positive magnitudes."""

    external_assets: Decimal
    external_debt: Decimal
    external_net_worth: Decimal
    portfolio_by_source: dict[str, Decimal]
    total_portfolio_value: Decimal
    total_net_worth: Decimal
    institutions: list[InstitutionBalance] = field(default_factory=list)


def _percent_of(part: Decimal, whole: Decimal) -> Decimal:
    if whole <= 0:
        return ZERO
    return round_half_away(part / whole * Decimal("100"), PERCENT_PLACES)


def rank_performers(holdings: list[Holding]) -> tuple[list[Performer], list[Performer]]:
    """Aggregate holdings by (symbol, name) and return the top and bottom performers.

    Both lists are ordered by gain/book (best first for the top list, worst
    first for the bottom list). Performers without book value cannot be
    ranked; they report 0% and sort last in both lists.
    """
    grouped: dict[tuple, Performer] = {}
    for holding in holdings:
        key = (holding.symbol, holding.name)
        performer = grouped.get(key)
        if performer is None:
            performer = grouped[key] = Performer(
                symbol=holding.symbol,
                name=holding.name,
                market_value=ZERO,
                book_value=ZERO,
                gain_loss=ZERO,
                gain_loss_percent=ZERO,
            )
        performer.market_value += holding.market_value or ZERO
        performer.book_value += holding.book_value or ZERO
        performer.gain_loss += holding.gain_loss or ZERO

    ranked: list[Performer] = []
    unranked: list[Performer] = []
    for performer in grouped.values():
        if performer.book_value > 0:
            performer.gain_loss_percent = _percent_of(performer.gain_loss, performer.book_value)
            ranked.append(performer)
        else:
            unranked.append(performer)

    best_first = sorted(ranked, key=lambda p: p.gain_loss_percent, reverse=True)
    worst_first = list(reversed(best_first))
    return (
        (best_first + unranked)[:PERFORMER_COUNT],
        (worst_first + unranked)[:PERFORMER_COUNT],
    )


def allocation_by_category(holdings: list[Holding]) -> list[AllocationSlice]:
    """Market value per asset category, largest first."""
    by_category: dict[str, Decimal] = {}
    for holding in holdings:
        category = holding.asset_category or UNKNOWN_CATEGORY
        by_category[category] = by_category.get(category, ZERO) + (holding.market_value or ZERO)

    total = sum(by_category.values(), ZERO)
    slices = [
        AllocationSlice(category=category, market_value=value, percent=_percent_of(value, total))
        for category, value in by_category.items()
    ]
    slices.sort(key=lambda s: (-s.market_value, s.category))
    return slices


class AnalyticsService:
    """Per-snapshot breakdowns for the analytics page."""

    @staticmethod
    def summary(
        db: Session, user_id: str, snapshot_id: Optional[str] = None
    ) -> SnapshotSummary:
        """Summarize one snapshot (the latest when no id is given).

        Raises:
            NotFoundError: If the snapshot does not exist, or the user has
                no snapshots at all.
        """
        if snapshot_id is not None:
            snapshot = SnapshotService.get_snapshot(db, user_id, snapshot_id)
        else:
            snapshot = SnapshotService.latest_snapshot(db, user_id)
            if snapshot is None:
                raise NotFoundError("Snapshot")

        holdings = db.query(Holding).filter(Holding.snapshot_id == snapshot.id).all()
        top, bottom = rank_performers(holdings)
        return SnapshotSummary(
            snapshot=snapshot,
            metrics=snapshot.metrics,
            top_performers=top,
            bottom_performers=bottom,
            allocation=allocation_by_category(holdings),
        )


class NetWorthService:
    """Current net worth from the latest snapshot per source and live balances."""

    @staticmethod
    def current(db: Session, user_id: str) -> NetWorthSummary:
        histories = ExternalAccountService.load_histories(db, user_id)
        now = datetime.now(timezone.utc)

        totals_by_institution: dict[str, InstitutionBalance] = {}
        for history in histories:
            balance = totals_by_institution.setdefault(
                history.institution_name,
                InstitutionBalance(institution_name=history.institution_name),
            )
            totals = external_totals_as_of([history], now, include_future=True)
            balance.assets += totals.assets
            balance.debt += totals.debt

        external = external_totals_as_of(histories, now, include_future=True)

        portfolio_by_source: dict[str, Decimal] = {}
        for source in ALL_SOURCES:
            latest = SnapshotService.latest_snapshot(db, user_id, source)
            if latest is None or latest.metrics is None:
                portfolio_by_source[source] = ZERO
            else:
                portfolio_by_source[source] = latest.metrics.total_market_value
        total_portfolio = sum(portfolio_by_source.values(), ZERO)

        logger.debug("Computed net worth for user %s across %d accounts", user_id, len(histories))
        return NetWorthSummary(
            external_assets=external.assets,
            external_debt=external.debt,
            external_net_worth=external.net_worth,
            portfolio_by_source=portfolio_by_source,
            total_portfolio_value=total_portfolio,
            total_net_worth=total_portfolio + external.net_worth,
            institutions=sorted(totals_by_institution.values(), key=lambda b: b.institution_name),
        )
