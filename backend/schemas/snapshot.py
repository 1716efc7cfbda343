"""Pydantic schemas for snapshot and holding responses."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict


class MetricsResponse(BaseModel):
    """Portfolio totals stored with a snapshot."""

    total_market_value: Decimal
    total_book_value: Decimal
    total_gain_loss: Decimal
    total_gain_loss_percent: Decimal
    holdings_count: int
    accounts_count: int
    calculated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SnapshotResponse(BaseModel):
    """Schema for Snapshot API response."""

    id: str
    source: str
    snapshot_date: datetime
    imported_at: datetime
    filename: Optional[str] = None
    record_count: int
    metrics: Optional[MetricsResponse] = None

    model_config = ConfigDict(from_attributes=True)


class HoldingResponse(BaseModel):
    """Schema for Holding API response. Absent cells stay null."""

    id: str
    snapshot_id: str
    symbol: Optional[str] = None
    name: Optional[str] = None
    asset_category: Optional[str] = None
    industry: Optional[str] = None
    account_label: Optional[str] = None
    quantity: Optional[Decimal] = None
    price: Optional[Decimal] = None
    average_cost: Optional[Decimal] = None
    book_value: Optional[Decimal] = None
    market_value: Optional[Decimal] = None
    accrued_interest: Optional[Decimal] = None
    gain_loss: Optional[Decimal] = None
    gain_loss_percent: Optional[Decimal] = None
    percent_of_portfolio: Optional[Decimal] = None

    model_config = ConfigDict(from_attributes=True)
