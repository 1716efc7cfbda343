"""API route handlers."""
from . import analytics, external_accounts, imports, snapshots

__all__ = ["analytics", "external_accounts", "imports", "snapshots"]
