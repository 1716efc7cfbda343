"""Pydantic schemas for API request/response validation."""

from schemas.analytics import (
    AllocationResponse,
    AnalyticsSummaryResponse,
    CombinedGrowthPointResponse,
    GrowthPointResponse,
    InstitutionBalanceResponse,
    NetWorthResponse,
    PerformerResponse,
)
from schemas.external_account import (
    EntryCreate,
    EntryResponse,
    ExternalAccountCreate,
    ExternalAccountDetail,
    ExternalAccountResponse,
)
from schemas.snapshot import HoldingResponse, MetricsResponse, SnapshotResponse

__all__ = [
    "AllocationResponse",
    "AnalyticsSummaryResponse",
    "CombinedGrowthPointResponse",
    "EntryCreate",
    "EntryResponse",
    "ExternalAccountCreate",
    "ExternalAccountDetail",
    "ExternalAccountResponse",
    "GrowthPointResponse",
    "HoldingResponse",
    "InstitutionBalanceResponse",
    "MetricsResponse",
    "NetWorthResponse",
    "PerformerResponse",
    "SnapshotResponse",
]
