"""Pydantic schemas for analytics, growth and net-worth responses."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict

from schemas.snapshot import SnapshotResponse


class GrowthPointResponse(BaseModel):
    """One point of a single-source growth series."""

    snapshot_id: str
    source: str
    date: datetime
    portfolio_value: Decimal
    book_value: Decimal
    gain_loss: Decimal
    gain_loss_percent: Decimal
    holdings_count: int
    external_assets: Decimal
    external_debt: Decimal
    combined_value: Decimal
    period_change: Decimal
    period_change_percent: Decimal
    external_is_live: bool

    model_config = ConfigDict(from_attributes=True)


class CombinedGrowthPointResponse(BaseModel):
    """One point of the merged growth series."""

    date: date
    source_values: dict[str, Decimal]
    total_portfolio_value: Decimal
    book_value: Decimal
    gain_loss: Decimal
    external_assets: Decimal
    external_debt: Decimal
    combined_value: Decimal
    net_worth: Decimal
    period_change: Decimal
    period_change_percent: Decimal

    model_config = ConfigDict(from_attributes=True)


class PerformerResponse(BaseModel):
    symbol: Optional[str] = None
    name: Optional[str] = None
    market_value: Decimal
    book_value: Decimal
    gain_loss: Decimal
    gain_loss_percent: Decimal

    model_config = ConfigDict(from_attributes=True)


class AllocationResponse(BaseModel):
    category: str
    market_value: Decimal
    percent: Decimal

    model_config = ConfigDict(from_attributes=True)


class AnalyticsSummaryResponse(BaseModel):
    """Summary of one snapshot for the analytics page."""

    snapshot: SnapshotResponse
    top_performers: list[PerformerResponse]
    bottom_performers: list[PerformerResponse]
    allocation: list[AllocationResponse]

    model_config = ConfigDict(from_attributes=True)


class InstitutionBalanceResponse(BaseModel):
    institution_name: str
    assets: Decimal
    debt: Decimal

    model_config = ConfigDict(from_attributes=True)


class NetWorthResponse(BaseModel):
    """Current net worth; debt figures are positive magnitudes."""

    external_assets: Decimal
    external_debt: Decimal
    external_net_worth: Decimal
    portfolio_by_source: dict[str, Decimal]
    total_portfolio_value: Decimal
    total_net_worth: Decimal
    institutions: list[InstitutionBalanceResponse]

    model_config = ConfigDict(from_attributes=True)
