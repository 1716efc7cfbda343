"""Growth series construction and multi-source merging.

Pure functions over plain data; the database-facing side lives in
``services.growth_service``.

A per-source series has one point per snapshot. Sources are imported
independently and on different days, so the combined series is built in two
passes: first every point is folded into a calendar-date keyed map, then the
dates are walked in order carrying each source's last known value forward
over the days it did not report.
"""

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Iterable, Mapping, Optional, Sequence, TypeVar, Union

from integrations.parsing_utils import PERCENT_PLACES, ensure_utc, round_half_away
from services.ledger import AccountHistory, external_totals_as_of

ZERO = Decimal("0")


class TimeRange(str, Enum):
    """Named chart windows."""

    three_months = "3M"
    six_months = "6M"
    one_year = "1Y"
    three_years = "3Y"
    five_years = "5Y"
    all = "ALL"


TIME_RANGE_MONTHS: dict[TimeRange, Optional[int]] = {
    TimeRange.three_months: 3,
    TimeRange.six_months: 6,
    TimeRange.one_year: 12,
    TimeRange.three_years: 36,
    TimeRange.five_years: 60,
    TimeRange.all: None,
}


@dataclass(frozen=True)
class SnapshotValuation:
    """A snapshot joined with its pre-computed metrics."""

    snapshot_id: str
    source: str
    snapshot_date: datetime
    market_value: Decimal
    book_value: Decimal
    gain_loss: Decimal
    gain_loss_percent: Decimal = ZERO
    holdings_count: int = 0
    imported_at: Optional[datetime] = None


@dataclass
class GrowthPoint:
    """One point of a single-source growth series."""

    snapshot_id: str
    source: str
    date: datetime
    portfolio_value: Decimal
    book_value: Decimal
    gain_loss: Decimal
    gain_loss_percent: Decimal
    holdings_count: int
    external_assets: Decimal
    external_debt: Decimal
    combined_value: Decimal
    period_change: Decimal
    period_change_percent: Decimal
    external_is_live: bool = False


@dataclass
class CombinedGrowthPoint:
    """One point of the merged chart series.

    ``source_values`` has a slot for every known source, holding either the
    value reported on this date or the last value carried forward.
    """

    date: date
    source_values: dict[str, Decimal]
    total_portfolio_value: Decimal
    book_value: Decimal
    gain_loss: Decimal
    external_assets: Decimal
    external_debt: Decimal
    combined_value: Decimal
    net_worth: Decimal
    period_change: Decimal = ZERO
    period_change_percent: Decimal = ZERO


@dataclass
class _DateAccumulator:
    """Everything reported on one calendar date, before carry-forward.

    A source missing from ``values`` did not report on this date; that is
    different from reporting zero.
    """

    day: date
    values: dict[str, Decimal] = field(default_factory=dict)
    book_values: dict[str, Decimal] = field(default_factory=dict)
    gains: dict[str, Decimal] = field(default_factory=dict)
    external_assets: Optional[Decimal] = None
    external_debt: Optional[Decimal] = None
    external_is_live: bool = False


def calendar_day(moment: Union[date, datetime]) -> date:
    """Collapse a timestamp to its UTC calendar date."""
    if isinstance(moment, datetime):
        return ensure_utc(moment).astimezone(timezone.utc).date()
    return moment


def period_change(current: Decimal, previous: Optional[Decimal]) -> tuple[Decimal, Decimal]:
    """Change and percent change from the previous point.

    The first point (no previous) has no change. Percent change is 0 when the
    previous value is not positive.
    """
    if previous is None:
        return ZERO, ZERO
    change = current - previous
    if previous <= 0:
        return change, ZERO
    return change, round_half_away(change / previous * Decimal("100"), PERCENT_PLACES)


def build_source_series(
    valuations: Sequence[SnapshotValuation],
    histories: Sequence[AccountHistory],
    live_snapshot_id: Optional[str] = None,
) -> list[GrowthPoint]:
    """Build one source's growth series with external balances at each date.

    Historical points only see ledger entries recorded at or before their
    snapshot date. The point whose snapshot id equals ``live_snapshot_id``
    uses the latest entry of every account instead, so the newest point on a
    chart reflects current external balances.

    Args:
        valuations: The source's snapshots with metrics. Sorted here by
            snapshot date; equal dates keep their given (import) order.
        histories: All of the user's external accounts with entries.
        live_snapshot_id: Snapshot whose point uses live external balances.

    Returns:
        One GrowthPoint per snapshot, oldest first.
    """
    ordered = sorted(valuations, key=lambda v: ensure_utc(v.snapshot_date))

    points: list[GrowthPoint] = []
    previous_value: Optional[Decimal] = None
    for valuation in ordered:
        is_live = live_snapshot_id is not None and valuation.snapshot_id == live_snapshot_id
        totals = external_totals_as_of(
            histories, valuation.snapshot_date, include_future=is_live
        )
        change, change_percent = period_change(valuation.market_value, previous_value)
        points.append(
            GrowthPoint(
                snapshot_id=valuation.snapshot_id,
                source=valuation.source,
                date=ensure_utc(valuation.snapshot_date),
                portfolio_value=valuation.market_value,
                book_value=valuation.book_value,
                gain_loss=valuation.gain_loss,
                gain_loss_percent=valuation.gain_loss_percent,
                holdings_count=valuation.holdings_count,
                external_assets=totals.assets,
                external_debt=totals.debt,
                combined_value=valuation.market_value + totals.assets,
                period_change=change,
                period_change_percent=change_percent,
                external_is_live=is_live,
            )
        )
        previous_value = valuation.market_value
    return points


def _collect_by_date(
    series_by_source: Mapping[str, Sequence[GrowthPoint]],
) -> dict[date, _DateAccumulator]:
    """First pass: fold every source's points into a date-keyed map.

    Same-day values from one source are added together. External balances
    are not additive (every source sees the same accounts); the first value
    seen for a date is kept unless a later one is live.
    """
    by_date: dict[date, _DateAccumulator] = {}
    for source, points in series_by_source.items():
        for point in points:
            day = calendar_day(point.date)
            acc = by_date.get(day)
            if acc is None:
                acc = by_date[day] = _DateAccumulator(day=day)

            acc.values[source] = acc.values.get(source, ZERO) + point.portfolio_value
            acc.book_values[source] = acc.book_values.get(source, ZERO) + point.book_value
            acc.gains[source] = acc.gains.get(source, ZERO) + point.gain_loss

            if acc.external_assets is None or (point.external_is_live and not acc.external_is_live):
                acc.external_assets = point.external_assets
                acc.external_debt = point.external_debt
                acc.external_is_live = point.external_is_live
    return by_date


def merge_source_series(
    series_by_source: Mapping[str, Sequence[GrowthPoint]],
    sources: Optional[Sequence[str]] = None,
) -> list[CombinedGrowthPoint]:
    """Merge per-source series into one chronologically ordered series.

    Args:
        series_by_source: Source identifier -> that source's growth points.
        sources: Every source that should get a slot, in display order.
            Defaults to the keys of ``series_by_source``. Sources without any
            point carry zero throughout.

    Returns:
        One CombinedGrowthPoint per calendar date on which any source
        reported, oldest first. Empty input gives an empty list.
    """
    slots = list(sources) if sources is not None else list(series_by_source)
    for source in series_by_source:
        if source not in slots:
            slots.append(source)

    by_date = _collect_by_date(series_by_source)

    # Second pass: walk dates in order, carrying the last known values.
    last_value = {s: ZERO for s in slots}
    last_book = {s: ZERO for s in slots}
    last_gain = {s: ZERO for s in slots}
    last_assets = ZERO
    last_debt = ZERO
    previous_net_worth: Optional[Decimal] = None

    merged: list[CombinedGrowthPoint] = []
    for day in sorted(by_date):
        acc = by_date[day]
        for source in slots:
            if source in acc.values:
                last_value[source] = acc.values[source]
                last_book[source] = acc.book_values[source]
                last_gain[source] = acc.gains[source]
        if acc.external_assets is not None:
            last_assets = acc.external_assets
            last_debt = acc.external_debt

        total = sum(last_value.values(), ZERO)
        combined = total + last_assets
        net_worth = combined - last_debt
        change, change_percent = period_change(net_worth, previous_net_worth)
        merged.append(
            CombinedGrowthPoint(
                date=day,
                source_values=dict(last_value),
                total_portfolio_value=total,
                book_value=sum(last_book.values(), ZERO),
                gain_loss=sum(last_gain.values(), ZERO),
                external_assets=last_assets,
                external_debt=last_debt,
                combined_value=combined,
                net_worth=net_worth,
                period_change=change,
                period_change_percent=change_percent,
            )
        )
        previous_net_worth = net_worth
    return merged


def build_external_only_series(
    histories: Sequence[AccountHistory],
    sources: Sequence[str] = (),
) -> list[CombinedGrowthPoint]:
    """Net-worth series from external account entries alone.

    Used when there are no portfolio snapshots at all. Entries are replayed
    in time order; at each one the asset and debt totals are recomputed as
    of that entry's timestamp, and the last result for each calendar date
    wins.
    """
    moments = sorted(
        (ensure_utc(entry.recorded_at) for history in histories for entry in history.entries)
    )

    by_date = {}
    for moment in moments:
        by_date[calendar_day(moment)] = external_totals_as_of(histories, moment)

    points: list[CombinedGrowthPoint] = []
    previous_net_worth: Optional[Decimal] = None
    for day in sorted(by_date):
        totals = by_date[day]
        change, change_percent = period_change(totals.net_worth, previous_net_worth)
        points.append(
            CombinedGrowthPoint(
                date=day,
                source_values={s: ZERO for s in sources},
                total_portfolio_value=ZERO,
                book_value=ZERO,
                gain_loss=ZERO,
                external_assets=totals.assets,
                external_debt=totals.debt,
                combined_value=totals.assets,
                net_worth=totals.net_worth,
                period_change=change,
                period_change_percent=change_percent,
            )
        )
        previous_net_worth = totals.net_worth
    return points


def combine_growth_series(
    series_by_source: Mapping[str, Sequence[GrowthPoint]],
    histories: Sequence[AccountHistory],
    sources: Optional[Sequence[str]] = None,
) -> list[CombinedGrowthPoint]:
    """Combined chart series for any mix of portfolio and external data.

    - Some portfolio points: two-pass merge across sources.
    - No portfolio points but external entries: external-only series.
    - Nothing at all: empty list.

    Never raises for empty or partial input.
    """
    if any(points for points in series_by_source.values()):
        return merge_source_series(series_by_source, sources)
    if any(history.entries for history in histories):
        slots = list(sources) if sources is not None else list(series_by_source)
        return build_external_only_series(histories, slots)
    return []


def subtract_months(d: date, months: int) -> date:
    """Subtract months from a date, clamping to valid day."""
    year = d.year
    month = d.month - months
    while month <= 0:
        month += 12
        year -= 1
    # Clamp day to max days in target month
    max_day = calendar.monthrange(year, month)[1]
    day = min(d.day, max_day)
    return date(year, month, day)


P = TypeVar("P", GrowthPoint, CombinedGrowthPoint)


def filter_by_range(
    points: Iterable[P],
    time_range: TimeRange,
    today: Optional[date] = None,
) -> list[P]:
    """Keep points dated on or after ``today`` minus the range. ALL keeps everything."""
    months = TIME_RANGE_MONTHS[TimeRange(time_range)]
    if months is None:
        return list(points)
    cutoff = subtract_months(today or datetime.now(timezone.utc).date(), months)
    return [p for p in points if calendar_day(p.date) >= cutoff]
