"""Headline counters for the partner dashboard."""

import logging
from datetime import datetime, timedelta

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vibecheck.config import settings
from vibecheck.models import CheckIn, Venue, VibeUser
from vibecheck.services.cache import cached
from vibecheck.services.errors import BackendUnavailableError

log = logging.getLogger(__name__)

ACTIVE_USER_MINUTES = 10


def _count(db: Session, column, *filters) -> int:
    return db.query(func.count(column)).filter(*filters).scalar() or 0


def compute_insights_stats(db: Session, now: datetime | None = None) -> dict:
    now = now or datetime.utcnow()
    day_ago = now - timedelta(hours=24)
    hour_ago = now - timedelta(hours=1)
    active_cutoff = now - timedelta(minutes=ACTIVE_USER_MINUTES)

    try:
        return {
            "total_users": _count(db, VibeUser.id),
            "active_users_last_10_min": _count(db, VibeUser.id, VibeUser.last_seen_at >= active_cutoff),
            "check_ins_last_24h": _count(db, CheckIn.id, CheckIn.created_at >= day_ago),
            "check_ins_last_hour": _count(db, CheckIn.id, CheckIn.created_at >= hour_ago),
            "total_venues": _count(db, Venue.id),
            "active_venues_last_24h": _count(db, func.distinct(CheckIn.venue_id), CheckIn.created_at >= day_ago),
            "generated_at": now.isoformat(),
        }
    except SQLAlchemyError as e:
        log.error("Insights stats query failed: %s", e)
        raise BackendUnavailableError("Stats unavailable", cause=e)


@cached("insights_stats", ttl=settings.STATS_CACHE_TTL)
def get_insights_stats(db: Session) -> dict:
    return compute_insights_stats(db)
