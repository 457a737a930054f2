from fastapi import APIRouter, Query
from pydantic import BaseModel
from typing import Any, Dict, List

from api import state
from logshield.analytics.aggregator import filter_records
from logshield.models.series import MetricStats, TrafficPoint, VectorPoint
from logshield.utils.logger import log

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


class LiveToggle(BaseModel):
    enabled: bool


class LiveStatus(BaseModel):
    live: bool


class LogsResponse(BaseModel):
    total: int
    records: List[Dict[str, Any]]


@router.get("/stats", response_model=MetricStats)
async def get_stats():
    return state.dashboard.snapshot.stats


@router.get("/vectors", response_model=List[VectorPoint])
async def get_vectors():
    return state.dashboard.snapshot.vectors


@router.get("/traffic", response_model=List[TrafficPoint])
async def get_traffic():
    return state.dashboard.snapshot.traffic


@router.get("/logs", response_model=LogsResponse)
async def get_logs(
    breach_only: bool = False,
    search: str = "",
    limit: int = Query(200, ge=1, le=5000),
):
    matched = filter_records(state.history.snapshot(), breach_only=breach_only, search_term=search)
    return LogsResponse(total=len(matched), records=[r.to_dict() for r in matched[:limit]])


@router.delete("/history")
async def clear_history():
    state.history.clear()
    log.info("[dashboard] history cleared")
    return {"cleared": True}


@router.get("/live", response_model=LiveStatus)
async def get_live():
    return LiveStatus(live=state.live_feed.live)


@router.post("/live", response_model=LiveStatus)
async def set_live(toggle: LiveToggle):
    state.live_feed.set_live(toggle.enabled)
    return LiveStatus(live=state.live_feed.live)
