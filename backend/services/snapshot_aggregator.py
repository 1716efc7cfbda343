"""Snapshot aggregator - portfolio totals for one import."""

from dataclasses import dataclass
from decimal import Decimal

from integrations.csv_protocol import HoldingRecord
from integrations.parsing_utils import PERCENT_PLACES, round_half_away

ZERO = Decimal("0")


@dataclass
class MetricsSummary:
    """Portfolio-level totals, field-compatible with the PortfolioMetrics model."""

    total_market_value: Decimal
    total_book_value: Decimal
    total_gain_loss: Decimal
    total_gain_loss_percent: Decimal
    holdings_count: int
    accounts_count: int


def gain_loss_percent(market_value: Decimal, book_value: Decimal) -> Decimal:
    """(market - book) / book x 100, or exactly 0 when book value is not positive."""
    if book_value <= 0:
        return Decimal("0")
    return round_half_away((market_value - book_value) / book_value * Decimal("100"), PERCENT_PLACES)


def aggregate_holdings(records: list[HoldingRecord]) -> MetricsSummary:
    """Sum a snapshot's holdings into a MetricsSummary.

    Missing values count as zero in the sums. The account count is the number
    of distinct non-null account labels.
    """
    total_market = sum((r.market_value for r in records if r.market_value is not None), ZERO)
    total_book = sum((r.book_value for r in records if r.book_value is not None), ZERO)
    total_gain = sum((r.gain_loss for r in records if r.gain_loss is not None), ZERO)
    accounts = {r.account_label for r in records if r.account_label is not None}

    return MetricsSummary(
        total_market_value=total_market,
        total_book_value=total_book,
        total_gain_loss=total_gain,
        total_gain_loss_percent=gain_loss_percent(total_market, total_book),
        holdings_count=len(records),
        accounts_count=len(accounts),
    )
