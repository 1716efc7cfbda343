"""Snapshot service - read and delete a user's imported snapshots."""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from models import Holding, Snapshot
from services.exceptions import NotFoundError, PersistenceError

logger = logging.getLogger(__name__)


class SnapshotService:
    """Service for snapshot queries scoped to one user."""

    @staticmethod
    def list_snapshots(
        db: Session, user_id: str, source: Optional[str] = None
    ) -> list[Snapshot]:
        """List a user's snapshots with metrics, newest snapshot date first."""
        query = (
            db.query(Snapshot)
            .options(joinedload(Snapshot.metrics))
            .filter(Snapshot.user_id == user_id)
        )
        if source is not None:
            query = query.filter(Snapshot.source == source)
        return query.order_by(Snapshot.snapshot_date.desc(), Snapshot.imported_at.desc()).all()

    @staticmethod
    def get_snapshot(db: Session, user_id: str, snapshot_id: str) -> Snapshot:
        """Get one of the user's snapshots.

        Raises:
            NotFoundError: If it does not exist or belongs to someone else.
        """
        snapshot = (
            db.query(Snapshot)
            .options(joinedload(Snapshot.metrics))
            .filter(Snapshot.id == snapshot_id, Snapshot.user_id == user_id)
            .first()
        )
        if snapshot is None:
            raise NotFoundError("Snapshot")
        return snapshot

    @staticmethod
    def latest_snapshot(
        db: Session, user_id: str, source: Optional[str] = None
    ) -> Snapshot | None:
        """Most recent snapshot by snapshot date (ties: latest import)."""
        query = db.query(Snapshot).filter(Snapshot.user_id == user_id)
        if source is not None:
            query = query.filter(Snapshot.source == source)
        return (
            query.order_by(Snapshot.snapshot_date.desc(), Snapshot.imported_at.desc())
            .limit(1)
            .first()
        )

    @staticmethod
    def holdings_for(db: Session, user_id: str, snapshot_id: str) -> list[Holding]:
        """Holdings of one of the user's snapshots, largest market value first."""
        SnapshotService.get_snapshot(db, user_id, snapshot_id)
        return (
            db.query(Holding)
            .filter(Holding.snapshot_id == snapshot_id)
            .order_by(Holding.market_value.desc(), Holding.symbol)
            .all()
        )

    @staticmethod
    def delete_snapshot(db: Session, user_id: str, snapshot_id: str) -> None:
        """Delete a snapshot together with its holdings and metrics.

        Raises:
            NotFoundError: If it does not exist or belongs to someone else.
            PersistenceError: If the delete could not be committed.
        """
        snapshot = SnapshotService.get_snapshot(db, user_id, snapshot_id)
        try:
            db.delete(snapshot)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.error("Failed to delete snapshot %s", snapshot_id, exc_info=True)
            raise PersistenceError("Failed to delete snapshot")
        logger.info("Deleted snapshot %s (%s)", snapshot_id, snapshot.source)
