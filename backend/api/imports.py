"""CSV import API endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy.orm import Session

from api.helpers import get_current_user_id
from config import settings
from database import get_db
from integrations.parsing_utils import parse_iso_datetime
from schemas import SnapshotResponse
from services.import_service import ImportService
from utils.query_params import parse_source

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/imports", tags=["imports"])


def _read_upload(file: UploadFile) -> bytes:
    """Read an uploaded file, enforcing the configured size limit."""
    if not file.filename:
        raise HTTPException(status_code=400, detail="Filename is required")
    content = file.file.read(settings.MAX_UPLOAD_BYTES + 1)
    if len(content) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"File exceeds {settings.MAX_UPLOAD_BYTES} bytes",
        )
    return content


@router.post("", response_model=SnapshotResponse, status_code=201)
def import_snapshot(
    file: UploadFile = File(...),
    snapshot_date: Optional[str] = Form(None),
    source: Optional[str] = Form(None),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Import a brokerage CSV export as a new snapshot.

    The source is detected from the header unless given explicitly.
    """
    expected_source = parse_source(source)
    effective_date = None
    if snapshot_date:
        effective_date = parse_iso_datetime(snapshot_date)
        if effective_date is None:
            raise HTTPException(status_code=400, detail=f"Invalid snapshot_date: {snapshot_date}")

    content = _read_upload(file)
    return ImportService.import_csv(
        db,
        user_id,
        content,
        filename=file.filename,
        snapshot_date=effective_date,
        source=expected_source,
    )
