"""Tests for point-in-time external account lookups."""

from datetime import date, datetime, timezone
from decimal import Decimal

from services.ledger import (
    AccountHistory,
    LedgerEntry,
    external_totals_as_of,
    is_debt_type,
    latest_entry_as_of,
    value_as_of,
)

JAN_1 = datetime(2024, 1, 1, 12, 0)
JAN_5 = datetime(2024, 1, 5, 12, 0)
FEB_1 = datetime(2024, 2, 1, 12, 0)

ENTRIES = [
    LedgerEntry(Decimal("150"), JAN_5),
    LedgerEntry(Decimal("100"), JAN_1),
]


class TestValueAsOf:
    def test_before_first_entry_is_absent(self):
        assert value_as_of(ENTRIES, datetime(2023, 12, 31)) is None

    def test_exact_timestamp_is_included(self):
        assert value_as_of(ENTRIES, JAN_1) == Decimal("100")

    def test_between_entries_uses_earlier(self):
        assert value_as_of(ENTRIES, datetime(2024, 1, 4)) == Decimal("100")

    def test_after_last_entry(self):
        assert value_as_of(ENTRIES, FEB_1) == Decimal("150")

    def test_include_future_uses_latest(self):
        assert value_as_of(ENTRIES, datetime(2023, 1, 1), include_future=True) == Decimal("150")

    def test_order_of_entries_does_not_matter(self):
        assert value_as_of(list(reversed(ENTRIES)), datetime(2024, 1, 4)) == Decimal("100")

    def test_plain_date_means_midnight_utc(self):
        # Jan 5 entry is at noon, so the midnight lookup still sees Jan 1
        assert value_as_of(ENTRIES, date(2024, 1, 5)) == Decimal("100")

    def test_aware_and_naive_timestamps_compare(self):
        as_of = datetime(2024, 1, 5, 12, 0, tzinfo=timezone.utc)
        assert value_as_of(ENTRIES, as_of) == Decimal("150")

    def test_zero_balance_is_not_absent(self):
        entries = [LedgerEntry(Decimal("0"), JAN_1)]
        assert value_as_of(entries, FEB_1) == Decimal("0")

    def test_no_entries(self):
        assert value_as_of([], FEB_1) is None

    def test_tie_keeps_first_seen(self):
        first = LedgerEntry(Decimal("1"), JAN_1)
        second = LedgerEntry(Decimal("2"), JAN_1)
        assert latest_entry_as_of([first, second], FEB_1) is first

    def test_lookup_is_monotonic_in_time(self):
        """A later lookup never returns an older entry."""
        moments = [datetime(2024, 1, d) for d in range(1, 10)]
        found = [latest_entry_as_of(ENTRIES, m) for m in moments]
        stamps = [e.recorded_at for e in found if e is not None]
        assert stamps == sorted(stamps)


class TestIsDebtType:
    def test_configured_types(self):
        assert is_debt_type("Mortgage") is True
        assert is_debt_type("Savings") is False

    def test_missing_type_is_asset(self):
        assert is_debt_type(None) is False

    def test_explicit_list(self):
        assert is_debt_type("HELOC", ["HELOC"]) is True


class TestExternalTotals:
    def _histories(self):
        return [
            AccountHistory("a", "Savings", [LedgerEntry(Decimal("100"), JAN_1)]),
            AccountHistory("b", "Mortgage", [LedgerEntry(Decimal("2000"), JAN_1)]),
            AccountHistory("c", "Loan", [LedgerEntry(Decimal("-300"), JAN_5)]),
        ]

    def test_debt_is_subtracted_not_added(self):
        totals = external_totals_as_of(self._histories(), JAN_1)
        assert totals.assets == Decimal("100")
        assert totals.debt == Decimal("2000")
        assert totals.net_worth == Decimal("-1900")

    def test_negative_debt_entry_counts_as_magnitude(self):
        totals = external_totals_as_of(self._histories(), FEB_1)
        assert totals.debt == Decimal("2300")

    def test_accounts_without_value_are_skipped(self):
        totals = external_totals_as_of(self._histories(), datetime(2023, 12, 1))
        assert totals.assets == Decimal("0")
        assert totals.debt == Decimal("0")
