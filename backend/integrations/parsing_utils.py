"""Shared parsing utilities for brokerage CSV exports.

Centralises the cell-level parsing every export format needs: money and
percent strings, identifier shape checks, and date/time normalisation.
"""

import re
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

# Fractional digits each kind of cell is rounded to, exactly once, at parse time.
MONEY_PLACES = 2
QUANTITY_PLACES = 6
PRICE_PLACES = 4
PERCENT_PLACES = 4

_NUMBER_NOISE_RE = re.compile(r"[$€£¥,\s]")
_IDENTIFIER_RE = re.compile(r"^[A-Za-z0-9*#\- ]*$")


def round_half_away(value: Decimal, places: int) -> Decimal:
    """Round to ``places`` fractional digits, ties away from zero.

    ``decimal.ROUND_HALF_UP`` rounds ties away from zero for negative
    numbers as well, so -1.005 becomes -1.01.

    Raises:
        ValueError: If the value has more digits than the decimal context holds.
    """
    try:
        return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"Number out of range: {value}")


def _clean_number(value: str, strip_percent: bool) -> str | None:
    """Strip formatting noise from a numeric cell.

    Returns ``None`` for cells that mean "no value" (blank or a lone dash).
    """
    cleaned = _NUMBER_NOISE_RE.sub("", value)
    if strip_percent:
        cleaned = cleaned.replace("%", "")
    if cleaned in ("", "-"):
        return None
    # Accounting negatives: "(1,234.56)" or "$(12.00)"
    if cleaned.startswith("(") and cleaned.endswith(")"):
        cleaned = "-" + cleaned[1:-1]
    return cleaned


def parse_decimal(value: str | None, places: int, *, percent: bool = False) -> Decimal | None:
    """Parse a formatted numeric cell to a rounded Decimal.

    Handles the formats brokerage exports produce:
    - Currency symbols and thousands separators ("$1,234.56")
    - Accounting negatives ("(1,234.56)")
    - Trailing percent signs when ``percent`` is set ("12.5%")
    - Blank cells and a lone "-" mean no value

    Args:
        value: The raw cell text, or None when the column is absent.
        places: Fractional digits to round to.
        percent: Strip a trailing ``%`` before parsing.

    Returns:
        The rounded Decimal, or None when the cell holds no value.

    Raises:
        ValueError: If the cell holds text that is not a finite number.
    """
    if value is None:
        return None
    cleaned = _clean_number(value, strip_percent=percent)
    if cleaned is None:
        return None
    try:
        number = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Not a number: {value!r}")
    if not number.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return round_half_away(number, places)


def is_valid_identifier(value: str | None) -> bool:
    """Return True if an account/client identifier cell has a plausible shape.

    Masked identifiers ("****1234") and dashed account numbers are accepted.
    The value itself is never returned or stored.
    """
    if value is None:
        return True
    return bool(_IDENTIFIER_RE.match(value.strip()))


def parse_iso_datetime(value) -> datetime | None:
    """Parse an ISO 8601 string (or date/datetime object) to a UTC-aware datetime.

    Handles:
    - Z suffix ("2024-01-15T10:30:00Z")
    - +0000 no-colon offset ("2024-01-15T10:30:00+0000")
    - Standard ISO with colon offset ("2024-06-28 18:42:46+00:00")
    - Date-only strings ("2024-06-28")
    - datetime/date objects passed through with UTC normalisation

    Args:
        value: A string, date, datetime, or None.

    Returns:
        A timezone-aware UTC datetime, or None if the value cannot be parsed.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    value_str = str(value).strip()

    # Handle Z suffix: "2024-01-15T10:30:00Z" -> "2024-01-15T10:30:00+00:00"
    if value_str.endswith("Z"):
        value_str = value_str[:-1] + "+00:00"

    # Handle "+0000" no-colon tz: "...+0000" -> "...+00:00"
    if (
        len(value_str) >= 5
        and value_str[-5] in ("+", "-")
        and value_str[-4:].isdigit()
    ):
        value_str = value_str[:-2] + ":" + value_str[-2:]

    try:
        dt = datetime.fromisoformat(value_str)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt
    except (ValueError, TypeError):
        pass

    # Try date-only: "2024-06-28"
    try:
        d = date.fromisoformat(str(value).strip())
        return datetime(d.year, d.month, d.day, tzinfo=timezone.utc)
    except (ValueError, TypeError):
        return None


def ensure_utc(dt: datetime) -> datetime:
    """Ensure a datetime is timezone-aware (UTC).

    If the datetime is naive, attach UTC; otherwise return as-is.
    SQLite hands back naive datetimes that were stored as UTC.

    Args:
        dt: A datetime object.

    Returns:
        The same datetime, guaranteed to be timezone-aware.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def to_naive_utc(dt: datetime) -> datetime:
    """Convert an aware datetime to the naive UTC form stored in the database."""
    return ensure_utc(dt).astimezone(timezone.utc).replace(tzinfo=None)


def date_to_datetime(d: date) -> datetime:
    """Convert a date to a midnight-UTC datetime.

    Args:
        d: A date object.

    Returns:
        A timezone-aware datetime at midnight UTC on that date.
    """
    return datetime(d.year, d.month, d.day, tzinfo=timezone.utc)
