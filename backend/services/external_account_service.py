"""Service for manually tracked external accounts and their balance history."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from integrations.parsing_utils import to_naive_utc
from models import ExternalAccount, ExternalAccountEntry
from services.exceptions import NotFoundError, PersistenceError
from services.ledger import AccountHistory, LedgerEntry

logger = logging.getLogger(__name__)

INITIAL_BALANCE_NOTE = "Initial balance"


@dataclass
class AccountWithLatest:
    """An account plus the summary of its entries."""

    account: ExternalAccount
    latest_value: Optional[Decimal]
    latest_recorded_at: Optional[datetime]
    entry_count: int


class ExternalAccountService:
    """CRUD for external accounts; entries are append-only."""

    @staticmethod
    def _commit(db: Session, action: str) -> None:
        try:
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.error("Failed to %s", action, exc_info=True)
            raise PersistenceError(f"Failed to {action}")

    @staticmethod
    def get_account(db: Session, user_id: str, account_id: str) -> ExternalAccount:
        """Get one of the user's accounts.

        Raises:
            NotFoundError: If it does not exist or belongs to someone else.
        """
        account = (
            db.query(ExternalAccount)
            .filter(ExternalAccount.id == account_id, ExternalAccount.user_id == user_id)
            .first()
        )
        if account is None:
            raise NotFoundError("Account")
        return account

    @staticmethod
    def list_accounts(db: Session, user_id: str) -> list[AccountWithLatest]:
        """List active accounts by institution then name, with latest values."""
        accounts = (
            db.query(ExternalAccount)
            .options(selectinload(ExternalAccount.entries))
            .filter(ExternalAccount.user_id == user_id, ExternalAccount.is_active.is_(True))
            .order_by(ExternalAccount.institution_name, ExternalAccount.account_name)
            .all()
        )
        result = []
        for account in accounts:
            # account.entries is ordered newest first
            latest = account.entries[0] if account.entries else None
            result.append(
                AccountWithLatest(
                    account=account,
                    latest_value=latest.value if latest else None,
                    latest_recorded_at=latest.recorded_at if latest else None,
                    entry_count=len(account.entries),
                )
            )
        return result

    @staticmethod
    def list_entries(db: Session, user_id: str, account_id: str) -> list[ExternalAccountEntry]:
        """All entries of an account, newest first."""
        ExternalAccountService.get_account(db, user_id, account_id)
        return (
            db.query(ExternalAccountEntry)
            .filter(ExternalAccountEntry.account_id == account_id)
            .order_by(ExternalAccountEntry.recorded_at.desc())
            .all()
        )

    @staticmethod
    def create_account(
        db: Session,
        user_id: str,
        institution_name: str,
        account_name: str,
        account_type: Optional[str] = None,
        initial_value: Optional[Decimal] = None,
    ) -> ExternalAccount:
        """Create an account, optionally recording its first balance.

        Args:
            db: Database session
            user_id: Owner
            institution_name: Bank or lender name
            account_name: Account display name
            account_type: e.g. "Savings", "Mortgage"; debt types are liabilities
            initial_value: If given, stored as the first entry

        Returns:
            The created ExternalAccount
        """
        account = ExternalAccount(
            user_id=user_id,
            institution_name=institution_name.strip(),
            account_name=account_name.strip(),
            account_type=(account_type or "").strip() or None,
            is_active=True,
        )
        db.add(account)
        try:
            db.flush()
            if initial_value is not None:
                db.add(
                    ExternalAccountEntry(
                        account_id=account.id,
                        value=initial_value,
                        note=INITIAL_BALANCE_NOTE,
                    )
                )
        except SQLAlchemyError:
            db.rollback()
            logger.error("Failed to create external account", exc_info=True)
            raise PersistenceError("Failed to create account")
        ExternalAccountService._commit(db, "create account")
        db.refresh(account)
        logger.info(
            "External account created: %s / %s (id=%s)",
            account.institution_name, account.account_name, account.id,
        )
        return account

    @staticmethod
    def add_entry(
        db: Session,
        user_id: str,
        account_id: str,
        value: Decimal,
        note: Optional[str] = None,
        recorded_at: Optional[datetime] = None,
    ) -> ExternalAccountEntry:
        """Append a new balance to an account.

        Existing entries are never modified; the newest entry becomes the
        account's current value.

        Raises:
            NotFoundError: If the account does not exist or is not the user's.
        """
        ExternalAccountService.get_account(db, user_id, account_id)
        entry = ExternalAccountEntry(
            account_id=account_id,
            value=value,
            note=(note or "").strip() or None,
            recorded_at=to_naive_utc(recorded_at or datetime.now(timezone.utc)),
        )
        db.add(entry)
        ExternalAccountService._commit(db, "add entry")
        db.refresh(entry)
        logger.info("Recorded balance for external account %s", account_id)
        return entry

    @staticmethod
    def delete_account(db: Session, user_id: str, account_id: str) -> None:
        """Delete an account and all of its entries.

        Raises:
            NotFoundError: If the account does not exist or is not the user's.
        """
        account = ExternalAccountService.get_account(db, user_id, account_id)
        db.delete(account)
        ExternalAccountService._commit(db, "delete account")
        logger.info("Deleted external account %s", account_id)

    @staticmethod
    def load_histories(db: Session, user_id: str) -> list[AccountHistory]:
        """All of the user's accounts with their entries, for ledger lookups."""
        accounts = (
            db.query(ExternalAccount)
            .filter(ExternalAccount.user_id == user_id)
            .order_by(ExternalAccount.institution_name, ExternalAccount.account_name)
            .all()
        )
        return [
            AccountHistory(
                account_id=account.id,
                account_type=account.account_type,
                institution_name=account.institution_name,
                entries=[
                    LedgerEntry(value=e.value, recorded_at=e.recorded_at)
                    for e in account.entries
                ],
            )
            for account in accounts
        ]
