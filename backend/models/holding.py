"""Holding model - one normalized position within a snapshot."""

from sqlalchemy import Column, ForeignKey, Numeric, String
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid


class Holding(Base):
    """A holding record within a snapshot.

    Values are stored exactly as the normalizer rounded them. Client and
    account identifiers from the export are never persisted.
    """

    __tablename__ = "holdings"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    snapshot_id = Column(
        String(36),
        ForeignKey("snapshots.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    symbol = Column(String(50), nullable=True)
    name = Column(String(255), nullable=True)
    asset_category = Column(String(100), nullable=True)
    industry = Column(String(100), nullable=True)
    account_label = Column(String(255), nullable=True)  # e.g. "Investment Account - TFSA"
    quantity = Column(Numeric(18, 6), nullable=True)
    price = Column(Numeric(18, 4), nullable=True)
    average_cost = Column(Numeric(18, 4), nullable=True)
    book_value = Column(Numeric(18, 2), nullable=True)
    market_value = Column(Numeric(18, 2), nullable=True)
    accrued_interest = Column(Numeric(18, 2), nullable=True)
    gain_loss = Column(Numeric(18, 2), nullable=True)
    gain_loss_percent = Column(Numeric(10, 4), nullable=True)
    percent_of_portfolio = Column(Numeric(10, 4), nullable=True)

    # Relationships
    snapshot = relationship("Snapshot", back_populates="holdings")
