"""PortfolioMetrics model - pre-computed totals for one snapshot."""

from decimal import Decimal

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from database import Base
from models.utils import utc_now


class PortfolioMetrics(Base):
    """Aggregate totals for a snapshot, written once right after its holdings."""

    __tablename__ = "portfolio_metrics"

    snapshot_id = Column(
        String(36),
        ForeignKey("snapshots.id", ondelete="CASCADE"),
        primary_key=True,
    )
    total_market_value = Column(Numeric(18, 2), nullable=False, default=Decimal("0"))
    total_book_value = Column(Numeric(18, 2), nullable=False, default=Decimal("0"))
    total_gain_loss = Column(Numeric(18, 2), nullable=False, default=Decimal("0"))
    total_gain_loss_percent = Column(Numeric(10, 4), nullable=False, default=Decimal("0"))
    holdings_count = Column(Integer, nullable=False, default=0)
    accounts_count = Column(Integer, nullable=False, default=0)
    calculated_at = Column(DateTime, default=utc_now)

    # Relationships
    snapshot = relationship("Snapshot", back_populates="metrics")
