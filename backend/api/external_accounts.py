"""External account API endpoints."""

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from api.helpers import get_current_user_id
from database import get_db
from models import ExternalAccount
from schemas import (
    EntryCreate,
    EntryResponse,
    ExternalAccountCreate,
    ExternalAccountDetail,
    ExternalAccountResponse,
)
from services.external_account_service import AccountWithLatest, ExternalAccountService
from services.ledger import is_debt_type

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/external-accounts", tags=["external-accounts"])


def _account_response_dict(account: ExternalAccount) -> dict:
    """Build a response dict for an ExternalAccount without entry summary."""
    return {
        "id": account.id,
        "institution_name": account.institution_name,
        "account_name": account.account_name,
        "account_type": account.account_type,
        "is_active": account.is_active,
        "is_debt": is_debt_type(account.account_type),
        "created_at": account.created_at,
    }


def _summary_response_dict(item: AccountWithLatest) -> dict:
    result = _account_response_dict(item.account)
    result["latest_value"] = item.latest_value
    result["latest_recorded_at"] = item.latest_recorded_at
    result["entry_count"] = item.entry_count
    return result


@router.get("", response_model=list[ExternalAccountResponse])
def list_external_accounts(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """List active external accounts with their latest balances."""
    return [_summary_response_dict(item) for item in ExternalAccountService.list_accounts(db, user_id)]


@router.post("", response_model=ExternalAccountDetail, status_code=201)
def create_external_account(
    data: ExternalAccountCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Create an external account, optionally with an initial balance."""
    account = ExternalAccountService.create_account(
        db,
        user_id,
        institution_name=data.institution_name,
        account_name=data.account_name,
        account_type=data.account_type,
        initial_value=data.initial_value,
    )
    return _detail_response(db, user_id, account)


@router.get("/{account_id}", response_model=ExternalAccountDetail)
def get_external_account(
    account_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Get an account with its full balance history, newest first."""
    account = ExternalAccountService.get_account(db, user_id, account_id)
    return _detail_response(db, user_id, account)


@router.post("/{account_id}/entries", response_model=EntryResponse, status_code=201)
def add_external_account_entry(
    account_id: str,
    data: EntryCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Record a new balance for an account."""
    return ExternalAccountService.add_entry(
        db,
        user_id,
        account_id,
        value=data.value,
        note=data.note,
        recorded_at=data.recorded_at,
    )


@router.delete("/{account_id}", status_code=204)
def delete_external_account(
    account_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Delete an account and its balance history."""
    ExternalAccountService.delete_account(db, user_id, account_id)
    return Response(status_code=204)


def _detail_response(db: Session, user_id: str, account: ExternalAccount) -> dict:
    entries = ExternalAccountService.list_entries(db, user_id, account.id)
    result = _account_response_dict(account)
    result["latest_value"] = entries[0].value if entries else None
    result["latest_recorded_at"] = entries[0].recorded_at if entries else None
    result["entry_count"] = len(entries)
    result["entries"] = entries
    return result
