"""SQLAlchemy ORM models."""

from .external_account import ExternalAccount
from .external_account_entry import ExternalAccountEntry
from .holding import Holding
from .portfolio_metrics import PortfolioMetrics
from .snapshot import Snapshot
from .utils import generate_uuid

__all__ = ["ExternalAccount", "ExternalAccountEntry", "Holding", "PortfolioMetrics", "Snapshot", "generate_uuid"]
