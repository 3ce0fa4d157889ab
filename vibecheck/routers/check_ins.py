import logging
from datetime import datetime, timedelta

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from vibecheck.dependencies import get_check_in_store, get_db
from vibecheck.routers.venues import get_venue_or_404
from vibecheck.schemas import CheckInCreate, CheckInResponse
from vibecheck.services.store import CheckInRecord, SqlCheckInStore
from vibecheck.services.users import touch_user

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/check-ins", tags=["check-ins"])


@router.post("", response_model=CheckInResponse, status_code=status.HTTP_201_CREATED)
def create_check_in(
    body: CheckInCreate,
    db: Session = Depends(get_db),
    store: SqlCheckInStore = Depends(get_check_in_store),
):
    get_venue_or_404(db, body.venue_id)
    now = datetime.utcnow()

    user_id = None
    if body.user_id:
        user_id = touch_user(db, body.user_id, now).id
        db.flush()

    record = store.add(CheckInRecord(
        venue_id=body.venue_id,
        user_id=user_id,
        created_at=now,
        vibe_score=body.vibe_score,
        intent=body.intent,
        relationship_status=body.relationship_status,
        ons_intent=body.ons_intent,
        gender=body.gender,
        age_band=body.age_band,
    ))
    log.info("Check-in %s at venue %s (%s)", record.id, record.venue_id, record.vibe_score)
    return record


@router.get("", response_model=list[CheckInResponse])
def list_check_ins(
    venue_id: str | None = None,
    minutes: int = Query(180, ge=1, le=60 * 24),
    store: SqlCheckInStore = Depends(get_check_in_store),
):
    since = datetime.utcnow() - timedelta(minutes=minutes)
    if venue_id:
        return store.for_venue(venue_id, since=since)
    return store.since(since)
