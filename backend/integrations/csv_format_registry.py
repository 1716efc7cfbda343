"""Registry of brokerage export formats and the holding normalizer.

The registry is responsible for:
- Reading raw upload bytes into header + rows
- Matching a header to a known export format
- Normalizing raw rows into HoldingRecords
"""

import csv
import dataclasses
import io
import logging
from decimal import Decimal
from typing import Mapping

from integrations.csv_protocol import CsvFormat, HoldingRecord, PortfolioSource
from integrations.exceptions import EmptyFileError, MissingColumnsError, UnreadableFileError
from integrations.parsing_utils import PERCENT_PLACES, round_half_away
from integrations.raymond_james_csv import RaymondJamesFormat
from integrations.wealthsimple_csv import WealthsimpleFormat

logger = logging.getLogger(__name__)

# Detection order when the caller does not name a source.
FORMAT_DEFINITIONS: list[CsvFormat] = [
    RaymondJamesFormat(),
    WealthsimpleFormat(),
]

_FORMATS_BY_SOURCE: dict[PortfolioSource, CsvFormat] = {
    fmt.source: fmt for fmt in FORMAT_DEFINITIONS
}


def get_format(source: PortfolioSource | str) -> CsvFormat:
    """Get the format reader for a source.

    Raises:
        ValueError: If the source is not a known identifier.
    """
    return _FORMATS_BY_SOURCE[PortfolioSource(source)]


def read_csv(content: bytes) -> tuple[list[str], list[dict[str, str]]]:
    """Decode upload bytes and split them into a header and data rows.

    Header names are whitespace-trimmed. Rows whose cells are all blank are
    skipped; missing trailing cells read as "".

    Raises:
        UnreadableFileError: If the bytes are not UTF-8 CSV.
        EmptyFileError: If there is no header or no data row.
    """
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise UnreadableFileError("File is not UTF-8 encoded text")

    try:
        all_rows = list(csv.reader(io.StringIO(text)))
    except csv.Error as exc:
        raise UnreadableFileError(f"CSV parsing error: {exc}")

    non_blank = [r for r in all_rows if any(cell.strip() for cell in r)]
    if not non_blank:
        raise EmptyFileError("CSV file is empty")

    headers = [h.strip() for h in non_blank[0]]
    rows = []
    for raw in non_blank[1:]:
        padded = raw + [""] * (len(headers) - len(raw))
        rows.append(dict(zip(headers, padded)))

    if not rows:
        raise EmptyFileError("CSV file has no data rows")
    return headers, rows


def detect_format(headers: list[str], source: PortfolioSource | str | None = None) -> CsvFormat:
    """Match a header against the known export formats.

    Args:
        headers: Trimmed header names.
        source: If given, only this source's format is considered.

    Returns:
        The matching format reader.

    Raises:
        MissingColumnsError: Listing the columns missing for the requested
            format, or for the closest format when auto-detecting.
    """
    header_set = set(headers)

    if source is not None:
        fmt = get_format(source)
        missing = [c for c in fmt.required_columns if c not in header_set]
        if missing:
            raise MissingColumnsError(missing, fmt.source.value)
        return fmt

    closest: tuple[CsvFormat, list[str]] | None = None
    for fmt in FORMAT_DEFINITIONS:
        missing = [c for c in fmt.required_columns if c not in header_set]
        if not missing:
            logger.debug("Detected %s export format", fmt.source.value)
            return fmt
        if closest is None or len(missing) < len(closest[1]):
            closest = (fmt, missing)

    fmt, missing = closest
    raise MissingColumnsError(missing, fmt.source.value)


def normalize_row(
    row: Mapping[str, str],
    source: PortfolioSource | str,
    row_number: int = 1,
) -> HoldingRecord:
    """Convert one raw row into a HoldingRecord.

    Pure function: identifying columns are validated and dropped.

    Raises:
        MalformedRowError: If a numeric or identifier cell is unparseable.
    """
    return get_format(source).transform_row(row, row_number)


def with_portfolio_weights(records: list[HoldingRecord]) -> list[HoldingRecord]:
    """Fill in weight-of-portfolio percent for records that lack one.

    Weight = market value / total market value x 100, rounded to 4 dp.
    Records are returned unchanged when the total is not positive.
    """
    total = sum((r.market_value for r in records if r.market_value is not None), Decimal("0"))
    if total <= 0:
        return list(records)

    weighted = []
    for record in records:
        if record.percent_of_portfolio is None and record.market_value is not None:
            record = dataclasses.replace(
                record,
                percent_of_portfolio=round_half_away(
                    record.market_value / total * Decimal("100"), PERCENT_PLACES
                ),
            )
        weighted.append(record)
    return weighted


def normalize_rows(
    rows: list[Mapping[str, str]],
    source: PortfolioSource | str,
) -> list[HoldingRecord]:
    """Normalize every row of one export, failing on the first bad row.

    Raises:
        MalformedRowError: For the first row that cannot be parsed.
    """
    fmt = get_format(source)
    records = [fmt.transform_row(row, i) for i, row in enumerate(rows, start=1)]
    if not fmt.provides_portfolio_weights:
        records = with_portfolio_weights(records)
    return records
