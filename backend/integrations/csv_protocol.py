"""Protocol definitions for brokerage CSV export formats.

Every supported export format maps its rows to :class:`HoldingRecord`, the
single canonical holding shape the rest of the system works with.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Mapping, Protocol

from integrations.exceptions import MalformedRowError
from integrations.parsing_utils import is_valid_identifier, parse_decimal


class PortfolioSource(str, Enum):
    """Brokerages whose exports can be imported."""

    raymond_james = "raymond_james"
    wealthsimple = "wealthsimple"


@dataclass(frozen=True)
class HoldingRecord:
    """Normalized holding data from any export format.

    Numeric fields are already rounded to their stored precision and are
    never rounded again. ``None`` means the export had no value for the cell.
    """

    symbol: str | None = None
    name: str | None = None  # Security display name
    asset_category: str | None = None
    industry: str | None = None
    account_label: str | None = None  # Used for grouping, e.g. "Investment Account - TFSA"
    quantity: Decimal | None = None  # 6 dp
    price: Decimal | None = None  # 4 dp
    average_cost: Decimal | None = None  # 4 dp, per unit
    book_value: Decimal | None = None  # 2 dp
    market_value: Decimal | None = None  # 2 dp
    accrued_interest: Decimal | None = None  # 2 dp
    gain_loss: Decimal | None = None  # 2 dp
    gain_loss_percent: Decimal | None = None  # 4 dp
    percent_of_portfolio: Decimal | None = None  # 4 dp


@dataclass(frozen=True)
class NumericColumn:
    """How one numeric CSV column is parsed."""

    column: str
    places: int
    percent: bool = False


class CsvFormat(Protocol):
    """Protocol that all export format readers must implement."""

    @property
    def source(self) -> PortfolioSource:
        """The source identifier this format belongs to."""
        ...

    @property
    def required_columns(self) -> tuple[str, ...]:
        """Header columns that must be present for a file to match."""
        ...

    @property
    def provides_portfolio_weights(self) -> bool:
        """Whether rows carry their own weight-of-portfolio percent."""
        ...

    def transform_row(self, row: Mapping[str, str], row_number: int) -> HoldingRecord:
        """Convert one raw row to a HoldingRecord.

        Raises:
            MalformedRowError: If a numeric or identifier cell is unparseable.
        """
        ...


def text_cell(row: Mapping[str, str], column: str) -> str | None:
    """Return a stripped text cell, or None when blank or absent."""
    value = row.get(column)
    if value is None:
        return None
    value = value.strip()
    return value or None


def parse_numeric_columns(
    row: Mapping[str, str],
    columns: Mapping[str, NumericColumn],
    row_number: int,
    source: str,
) -> dict[str, Decimal | None]:
    """Parse several numeric cells, reporting every bad column at once.

    Args:
        row: The raw row.
        columns: Field name -> column definition.
        row_number: 1-based data row number, for error reporting.
        source: Source identifier, for error reporting.

    Returns:
        Field name -> parsed value (None for blank cells).

    Raises:
        MalformedRowError: Listing every column that failed to parse.
    """
    parsed: dict[str, Decimal | None] = {}
    bad_columns: list[str] = []
    for field_name, numeric in columns.items():
        try:
            parsed[field_name] = parse_decimal(
                row.get(numeric.column), numeric.places, percent=numeric.percent
            )
        except ValueError:
            bad_columns.append(numeric.column)
    if bad_columns:
        raise MalformedRowError(row_number, bad_columns, source)
    return parsed


def check_identifier_columns(
    row: Mapping[str, str],
    columns: tuple[str, ...],
    row_number: int,
    source: str,
) -> None:
    """Validate the shape of identifying columns without keeping their values.

    Raises:
        MalformedRowError: If an identifier cell has an implausible shape.
    """
    bad_columns = [col for col in columns if not is_valid_identifier(row.get(col))]
    if bad_columns:
        raise MalformedRowError(row_number, bad_columns, source)
