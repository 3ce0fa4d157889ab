from datetime import datetime, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func
from sqlalchemy.orm import Session

from vibecheck.config import settings
from vibecheck.dependencies import get_check_in_store, get_db
from vibecheck.models import Venue
from vibecheck.schemas import LiveVenuesResponse, VenueDetailResponse, VenueResponse
from vibecheck.services.aggregation import (
    AGE_BANDS,
    INTENTS,
    LIVE_TIME_WINDOWS,
    SORT_MODES,
    demographics,
    filter_by_time_window,
    has_enough_demographics,
    has_enough_intent_data,
    heatmap_weight,
    intent_distribution,
    sort_venues_by_mode,
    venue_stats,
    venue_summaries,
)
from vibecheck.services.peak_times import peak_hours, summarize_peak_times
from vibecheck.services.store import SqlCheckInStore

router = APIRouter(prefix="/api/venues", tags=["venues"])


def get_venue_or_404(db: Session, venue_id: str) -> Venue:
    venue = db.query(Venue).filter(Venue.id == venue_id).first()
    if not venue:
        raise HTTPException(status_code=404, detail="Venue not found")
    return venue


@router.get("", response_model=list[VenueResponse])
def list_venues(city: str | None = None, db: Session = Depends(get_db)):
    q = db.query(Venue)
    if city:
        q = q.filter(func.lower(Venue.city) == city.strip().lower())
    return q.order_by(Venue.name).all()


@router.get("/live", response_model=LiveVenuesResponse)
def live_venues(
    mode: str = Query("activity"),
    window: int = Query(60),
    age_bands: list[str] = Query(default=[]),
    intents: list[str] = Query(default=[]),
    db: Session = Depends(get_db),
    store: SqlCheckInStore = Depends(get_check_in_store),
):
    if mode not in SORT_MODES:
        raise HTTPException(status_code=422, detail=f"mode must be one of: {', '.join(SORT_MODES)}")
    if window not in LIVE_TIME_WINDOWS:
        raise HTTPException(status_code=422, detail="window must be 60, 120 or 180 minutes")
    unknown = [band for band in age_bands if band not in AGE_BANDS] + [i for i in intents if i not in INTENTS]
    if unknown:
        raise HTTPException(status_code=422, detail=f"Unknown filter values: {', '.join(unknown)}")

    now = datetime.utcnow()
    # One snapshot over the widest window, narrowed per request
    snapshot = store.since(now - timedelta(minutes=max(LIVE_TIME_WINDOWS)))
    check_ins = filter_by_time_window(snapshot, window, now)

    weights: dict[str, float] = {}
    for c in check_ins:
        weights[c.venue_id] = weights.get(c.venue_id, 0.0) + heatmap_weight(c, now, window)

    summaries = venue_summaries(db.query(Venue).all(), check_ins)
    for s in summaries:
        s["heat_weight"] = round(weights.get(s["id"], 0.0), 3)

    ranked = sort_venues_by_mode(summaries, mode, age_bands, intents)
    return {"mode": mode, "window_minutes": window, "venues": ranked}


@router.get("/{venue_id}", response_model=VenueDetailResponse)
def venue_detail(
    venue_id: str,
    db: Session = Depends(get_db),
    store: SqlCheckInStore = Depends(get_check_in_store),
):
    venue = get_venue_or_404(db, venue_id)
    now = datetime.utcnow()

    recent = store.for_venue(venue_id, since=now - timedelta(minutes=settings.LIVE_WINDOW_MINUTES))
    history = store.for_venue(venue_id)

    count = len(recent)
    demo = demographics(recent)

    return {
        "venue": VenueResponse.model_validate(venue),
        "stats": venue_stats(recent),
        "demographics": demo if has_enough_demographics(count, demo) else None,
        "intent_distribution": intent_distribution(recent) if has_enough_intent_data(count) else None,
        "peak_summary": summarize_peak_times(peak_hours(history)),
        "recent_check_ins": list(reversed(recent))[: settings.RECENT_CHECKINS_LIMIT],
    }
