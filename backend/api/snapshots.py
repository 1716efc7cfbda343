"""Snapshot API endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from api.helpers import get_current_user_id
from database import get_db
from schemas import HoldingResponse, SnapshotResponse
from services.snapshot_service import SnapshotService
from utils.query_params import parse_source

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/snapshots", tags=["snapshots"])


@router.get("", response_model=list[SnapshotResponse])
def list_snapshots(
    source: Optional[str] = Query(None, description="Only snapshots from this source"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """List the user's snapshots with metrics, newest first."""
    parsed = parse_source(source)
    return SnapshotService.list_snapshots(db, user_id, parsed.value if parsed else None)


@router.get("/{snapshot_id}", response_model=SnapshotResponse)
def get_snapshot(
    snapshot_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return SnapshotService.get_snapshot(db, user_id, snapshot_id)


@router.get("/{snapshot_id}/holdings", response_model=list[HoldingResponse])
def get_snapshot_holdings(
    snapshot_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Holdings of a snapshot, largest market value first."""
    return SnapshotService.holdings_for(db, user_id, snapshot_id)


@router.delete("/{snapshot_id}", status_code=204)
def delete_snapshot(
    snapshot_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Delete a snapshot with its holdings and metrics."""
    SnapshotService.delete_snapshot(db, user_id, snapshot_id)
    return Response(status_code=204)
