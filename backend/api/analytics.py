"""Analytics API endpoints."""

import logging
from typing import Optional, Union

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.helpers import get_current_user_id
from database import get_db
from schemas import (
    AnalyticsSummaryResponse,
    CombinedGrowthPointResponse,
    GrowthPointResponse,
    NetWorthResponse,
)
from services.analytics_service import AnalyticsService, NetWorthService
from services.growth_series import TimeRange, filter_by_range
from services.growth_service import GrowthService
from utils.query_params import parse_source, parse_sources

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.get("", response_model=AnalyticsSummaryResponse)
def get_analytics_summary(
    snapshot_id: Optional[str] = Query(None, description="Snapshot to summarize; latest if omitted"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Top and bottom performers and allocation for one snapshot."""
    summary = AnalyticsService.summary(db, user_id, snapshot_id)
    return AnalyticsSummaryResponse.model_validate(summary, from_attributes=True)


@router.get(
    "/growth",
    response_model=Union[list[GrowthPointResponse], list[CombinedGrowthPointResponse]],
)
def get_growth(
    source: Optional[str] = Query(None, description="Single source series"),
    sources: Optional[str] = Query(None, description="Comma-separated sources to combine"),
    time_range: TimeRange = Query(TimeRange.all, alias="range", description="Chart window"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Growth series for charting.

    With ``source`` the response is that source's per-snapshot series;
    otherwise it is the merged series across ``sources`` (default: all)
    plus external accounts.
    """
    service = GrowthService()
    single = parse_source(source)
    if single is not None:
        points = service.source_series(db, user_id, single.value)
    else:
        points = service.combined_series(db, user_id, parse_sources(sources))
    return filter_by_range(points, time_range)


@router.get("/net-worth", response_model=NetWorthResponse)
def get_net_worth(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Current net worth with a per-institution breakdown."""
    return NetWorthService.current(db, user_id)
