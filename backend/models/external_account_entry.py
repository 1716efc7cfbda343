"""ExternalAccountEntry model - one immutable balance observation."""


from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid, utc_now


class ExternalAccountEntry(Base):
    """A recorded balance for an external account.

    Entries are append-only: a new balance is a new row, and rows are only
    removed when their account is deleted.
    """

    __tablename__ = "external_account_entries"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    account_id = Column(
        String(36),
        ForeignKey("external_accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    value = Column(Numeric(18, 2), nullable=False)
    note = Column(String(500), nullable=True)
    recorded_at = Column(
        DateTime, nullable=False, default=utc_now, index=True
    )

    # Relationships
    account = relationship("ExternalAccount", back_populates="entries")
