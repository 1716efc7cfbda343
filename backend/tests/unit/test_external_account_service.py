"""Tests for ExternalAccountService."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy import event

from models import ExternalAccount, ExternalAccountEntry
from services.exceptions import NotFoundError
from services.external_account_service import INITIAL_BALANCE_NOTE, ExternalAccountService
from tests.fixtures import OTHER_USER_ID, USER_ID, create_external_account


class TestCreateAccount:
    def test_initial_value_creates_entry(self, db):
        account = ExternalAccountService.create_account(
            db, USER_ID, "  Big Bank ", "Chequing", "Chequing", initial_value=Decimal("250.00")
        )
        assert account.institution_name == "Big Bank"
        entries = ExternalAccountService.list_entries(db, USER_ID, account.id)
        assert len(entries) == 1
        assert entries[0].value == Decimal("250.00")
        assert entries[0].note == INITIAL_BALANCE_NOTE

    def test_without_initial_value(self, db):
        account = ExternalAccountService.create_account(db, USER_ID, "Big Bank", "Chequing")
        assert account.account_type is None
        assert ExternalAccountService.list_entries(db, USER_ID, account.id) == []


class TestListAccounts:
    def test_latest_value_and_count(self, db, external_account, mortgage_account):
        items = ExternalAccountService.list_accounts(db, USER_ID)
        by_name = {item.account.account_name: item for item in items}

        savings = by_name["Savings"]
        assert savings.latest_value == Decimal("1500.00")
        assert savings.latest_recorded_at == datetime(2024, 2, 1, 12, 0)
        assert savings.entry_count == 2
        assert by_name["Home"].entry_count == 1

    def test_ordered_by_institution_then_name(self, db):
        create_external_account(db, "Zeta Credit Union", "A")
        create_external_account(db, "Alpha Bank", "B")
        create_external_account(db, "Alpha Bank", "A")
        names = [
            (i.account.institution_name, i.account.account_name)
            for i in ExternalAccountService.list_accounts(db, USER_ID)
        ]
        assert names == [("Alpha Bank", "A"), ("Alpha Bank", "B"), ("Zeta Credit Union", "A")]

    def test_inactive_and_foreign_accounts_hidden(self, db):
        create_external_account(db, "Bank", "Closed", is_active=False)
        create_external_account(db, "Bank", "Theirs", user_id=OTHER_USER_ID)
        assert ExternalAccountService.list_accounts(db, USER_ID) == []

    def test_account_without_entries(self, db):
        create_external_account(db, "Bank", "Empty")
        item = ExternalAccountService.list_accounts(db, USER_ID)[0]
        assert item.latest_value is None
        assert item.entry_count == 0

    def test_entries_load_in_one_extra_query(self, db):
        for name in ("A", "B", "C"):
            create_external_account(
                db, "Bank", name, entries=[(Decimal("10.00"), datetime(2024, 1, 1))]
            )
        db.expire_all()
        statements = []
        engine = db.get_bind()

        def record(conn, cursor, statement, parameters, context, executemany):
            statements.append(statement)

        event.listen(engine, "before_cursor_execute", record)
        try:
            items = ExternalAccountService.list_accounts(db, USER_ID)
            assert [i.entry_count for i in items] == [1, 1, 1]
        finally:
            event.remove(engine, "before_cursor_execute", record)
        assert len(statements) == 2


class TestAddEntry:
    def test_appends_and_becomes_latest(self, db, external_account):
        entry = ExternalAccountService.add_entry(
            db,
            USER_ID,
            external_account.id,
            Decimal("1750.00"),
            note=" bonus ",
            recorded_at=datetime(2024, 3, 1, tzinfo=timezone.utc),
        )
        assert entry.note == "bonus"
        entries = ExternalAccountService.list_entries(db, USER_ID, external_account.id)
        assert [e.value for e in entries] == [Decimal("1750.00"), Decimal("1500.00"), Decimal("1000.00")]

    def test_foreign_account_is_not_found(self, db, external_account):
        with pytest.raises(NotFoundError, match="Account not found"):
            ExternalAccountService.add_entry(db, OTHER_USER_ID, external_account.id, Decimal("1"))
        assert db.query(ExternalAccountEntry).count() == 2


class TestDeleteAccount:
    def test_delete_cascades_entries(self, db, external_account):
        ExternalAccountService.delete_account(db, USER_ID, external_account.id)
        assert db.query(ExternalAccount).count() == 0
        assert db.query(ExternalAccountEntry).count() == 0

    def test_delete_foreign_account_is_not_found(self, db, external_account):
        with pytest.raises(NotFoundError):
            ExternalAccountService.delete_account(db, OTHER_USER_ID, external_account.id)


class TestLoadHistories:
    def test_includes_inactive_accounts(self, db, external_account):
        create_external_account(
            db, "Bank", "Closed", entries=[(Decimal("5"), datetime(2023, 1, 1))], is_active=False
        )
        histories = ExternalAccountService.load_histories(db, USER_ID)
        assert len(histories) == 2
        savings = next(h for h in histories if h.account_id == external_account.id)
        assert [e.value for e in savings.entries] == [Decimal("1500.00"), Decimal("1000.00")]
        assert savings.institution_name == "Big Bank"
