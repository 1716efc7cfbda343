"""External account ledger - point-in-time balance lookups.

Entries are append-only, so the balance of an account "as of" a moment is
simply the entry with the greatest ``recorded_at`` at or before that moment.
An account with no qualifying entry has no value (``None``), which is not the
same as a zero balance.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional

from config import settings
from integrations.parsing_utils import date_to_datetime, ensure_utc


@dataclass(frozen=True)
class LedgerEntry:
    """One recorded balance."""

    value: Decimal
    recorded_at: datetime


@dataclass
class AccountHistory:
    """An external account and its balance entries."""

    account_id: str
    account_type: Optional[str]
    entries: list[LedgerEntry] = field(default_factory=list)
    institution_name: str = ""

    @property
    def is_debt(self) -> bool:
        return is_debt_type(self.account_type)


@dataclass
class ExternalTotals:
    """Summed external balances at one moment; debt is a positive magnitude."""

    assets: Decimal = Decimal("0")
    debt: Decimal = Decimal("0")

    @property
    def net_worth(self) -> Decimal:
        return self.assets - self.debt


def is_debt_type(account_type: Optional[str], debt_types: Iterable[str] | None = None) -> bool:
    """Return True if an account type is a liability (mortgage, loan, ...)."""
    if not account_type:
        return False
    types = settings.DEBT_ACCOUNT_TYPES if debt_types is None else debt_types
    return account_type in types


def _as_moment(as_of: date | datetime) -> datetime:
    if isinstance(as_of, datetime):
        return ensure_utc(as_of)
    return date_to_datetime(as_of)


def latest_entry_as_of(
    entries: Iterable[LedgerEntry],
    as_of: date | datetime,
    include_future: bool = False,
) -> LedgerEntry | None:
    """Find the entry with the greatest recorded_at that is <= ``as_of``.

    Args:
        entries: An account's entries, in any order (newest-first is typical).
        as_of: The moment to look up. A plain date means midnight UTC.
        include_future: Ignore ``as_of`` and return the most recent entry.

    Returns:
        The chosen entry, or None if no entry qualifies. On equal timestamps
        the entry seen first wins.
    """
    moment = _as_moment(as_of)
    best: LedgerEntry | None = None
    best_at: datetime | None = None
    for entry in entries:
        recorded_at = ensure_utc(entry.recorded_at)
        if not include_future and recorded_at > moment:
            continue
        if best_at is None or recorded_at > best_at:
            best, best_at = entry, recorded_at
    return best


def value_as_of(
    entries: Iterable[LedgerEntry],
    as_of: date | datetime,
    include_future: bool = False,
) -> Decimal | None:
    """Balance of an account as of a moment, or None when nothing was recorded yet."""
    entry = latest_entry_as_of(entries, as_of, include_future)
    return entry.value if entry is not None else None


def external_totals_as_of(
    histories: Iterable[AccountHistory],
    as_of: date | datetime,
    include_future: bool = False,
) -> ExternalTotals:
    """Sum asset balances and debt magnitudes across accounts as of a moment.

    Accounts without a value at ``as_of`` are left out of both sums.
    """
    totals = ExternalTotals()
    for history in histories:
        value = value_as_of(history.entries, as_of, include_future)
        if value is None:
            continue
        if history.is_debt:
            totals.debt += abs(value)
        else:
            totals.assets += value
    return totals
