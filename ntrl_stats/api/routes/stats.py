"""Stats Routes — the UI-facing surface: record sessions, read overview and breakdowns.

Invariants:
    - The UI never reads raw session/cache storage; only these projections
    - POST /sessions answers 202 even when stats bookkeeping failed (logged server-side)
    - Unknown range values → 400 INVALID_RANGE
"""

from datetime import date

from fastapi import APIRouter, Depends, Query, Request, Response, status

from ntrl_stats.schemas.stats import (
    BreakdownResponse, OverviewResponse, ReadingSessionCreate, WeeklyInsightsResponse,
)
from ntrl_stats.services.stats_aggregator import parse_range
from ntrl_stats.services.stats_engine import StatsEngine

router = APIRouter(prefix="/api/v1/stats", tags=["stats"])


def get_engine(request: Request) -> StatsEngine:
    """Dependency: the StatsEngine built in the app lifespan."""
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise RuntimeError("Stats engine not initialized")
    return engine


@router.post("/sessions", status_code=status.HTTP_202_ACCEPTED)
async def record_session(
    body: ReadingSessionCreate, engine: StatsEngine = Depends(get_engine),
):
    """Record a reading session (and fold it into the stats when completed)."""
    await engine.record_session(body.to_domain())
    return {"status": "accepted", "story_id": body.story_id}


@router.get("/overview", response_model=OverviewResponse)
async def get_overview(engine: StatsEngine = Depends(get_engine)):
    """All-time figures for the My Stats card."""
    return OverviewResponse.from_domain(await engine.get_overview())


@router.get("/breakdown", response_model=BreakdownResponse)
async def get_breakdown(
    range_: str = Query("week", alias="range"),
    anchor: date | None = Query(None),
    engine: StatsEngine = Depends(get_engine),
):
    """Range breakdown: total, chart series and category list."""
    stats_range = parse_range(range_)
    breakdown = await engine.get_breakdown(stats_range, anchor)
    return BreakdownResponse.from_domain(stats_range.value, breakdown)


@router.get("/weekly", response_model=WeeklyInsightsResponse)
async def get_weekly_insights(engine: StatsEngine = Depends(get_engine)):
    """Last seven days: minutes read, articles completed, terms neutralized."""
    return WeeklyInsightsResponse.from_domain(await engine.get_weekly_insights())


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def reset_stats(engine: StatsEngine = Depends(get_engine)):
    """Forget every session, cached span count and total."""
    await engine.reset()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
