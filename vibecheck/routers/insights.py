"""Partner insights: headline counters plus synthetic and live venue dashboards.

Every route here sits behind the dashboard PIN.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from vibecheck.dependencies import get_check_in_store, get_db, require_insights_pin
from vibecheck.routers.venues import get_venue_or_404
from vibecheck.schemas import InsightsStats, SplitsResponse
from vibecheck.services.live_insights import DEFAULT_PERIOD, load_insights
from vibecheck.services.sources import get_insights_source
from vibecheck.services.stats import get_insights_stats
from vibecheck.services.store import SqlCheckInStore
from vibecheck.services.synthetic import dashboard_overview

router = APIRouter(prefix="/api", tags=["insights"], dependencies=[Depends(require_insights_pin)])

TIME_RANGES = (7, 14, 30, 90)


def _check_days(days: int) -> int:
    if days not in TIME_RANGES:
        raise HTTPException(status_code=422, detail="days must be 7, 14, 30 or 90")
    return days


@router.get("/insights-stats", response_model=InsightsStats)
def insights_stats(db: Session = Depends(get_db)):
    return get_insights_stats(db)


@router.get("/insights/venues/{venue_id}/overview")
def venue_overview(venue_id: str, days: int = Query(30), db: Session = Depends(get_db)):
    get_venue_or_404(db, venue_id)
    return dashboard_overview(venue_id, _check_days(days))


@router.get("/insights/venues/{venue_id}/live")
def venue_live_insights(
    venue_id: str,
    period: int = Query(DEFAULT_PERIOD),
    db: Session = Depends(get_db),
    store: SqlCheckInStore = Depends(get_check_in_store),
):
    get_venue_or_404(db, venue_id)
    return load_insights(store, venue_id, period)


@router.get("/insights/venues/{venue_id}/splits", response_model=SplitsResponse)
def venue_splits(
    venue_id: str,
    days: int = Query(30),
    source: str = Query("synthetic"),
    db: Session = Depends(get_db),
    store: SqlCheckInStore = Depends(get_check_in_store),
):
    get_venue_or_404(db, venue_id)
    try:
        insights = get_insights_source(source, store)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    days = _check_days(days)
    return {
        "venue_id": venue_id,
        "days": days,
        "source": insights.name,
        "activity": insights.activity_series(venue_id, days),
        **insights.category_splits(venue_id, days),
    }
