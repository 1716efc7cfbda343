"""Shared API helpers for route handlers."""

import uuid
from typing import Optional

from fastapi import Header, HTTPException


def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """Resolve the requesting user from the X-User-Id header.

    Authentication happens upstream; this only checks that the id is a UUID.

    Raises:
        HTTPException: 401 if the header is missing or not a UUID.
    """
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    try:
        return str(uuid.UUID(x_user_id.strip()))
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid X-User-Id header")
