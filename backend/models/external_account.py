"""ExternalAccount model - a manually tracked account outside the imports."""


from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid, utc_now


class ExternalAccount(Base):
    """A bank, mortgage, loan, etc. whose balance the user records by hand.

    Whether the account is an asset or a liability is derived from
    ``account_type`` (see ``services.ledger.is_debt_type``).
    """

    __tablename__ = "external_accounts"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), nullable=False, index=True)
    institution_name = Column(String(255), nullable=False)
    account_name = Column(String(255), nullable=False)
    account_type = Column(String(100), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utc_now)

    # Relationships
    entries = relationship(
        "ExternalAccountEntry",
        back_populates="account",
        cascade="all, delete-orphan",
        order_by="ExternalAccountEntry.recorded_at.desc()",
    )
