"""Snapshot model - one CSV import for one source on one user-declared date."""


from sqlalchemy import Column, DateTime, Index, Integer, String
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid, utc_now


class Snapshot(Base):
    """A single brokerage export imported by a user.

    ``snapshot_date`` is the date the user says the export describes, which is
    usually earlier than ``imported_at``. Several snapshots may share the same
    (user, source, snapshot_date); ``imported_at`` orders them.
    """

    __tablename__ = "snapshots"
    __table_args__ = (
        Index("ix_snapshots_user_source_date", "user_id", "source", "snapshot_date"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), nullable=False, index=True)
    source = Column(String, nullable=False)  # PortfolioSource value
    snapshot_date = Column(DateTime, nullable=False)
    imported_at = Column(DateTime, default=utc_now)
    filename = Column(String(255), nullable=True)
    record_count = Column(Integer, nullable=False, default=0)

    # Relationships
    holdings = relationship(
        "Holding",
        back_populates="snapshot",
        cascade="all, delete-orphan",
    )
    metrics = relationship(
        "PortfolioMetrics",
        back_populates="snapshot",
        uselist=False,
        cascade="all, delete-orphan",
    )
