"""Notification sessions ("radar mode"): short-lived filter snapshots per user.

Starting a session closes any session the user already has open. A session
is valid while it is active and ``ends_at`` is in the future; expired ones
are switched off the first time somebody checks them.
"""

import logging
from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vibecheck.config import settings
from vibecheck.models import NotificationSession
from vibecheck.services.errors import BackendUnavailableError, NotFoundError
from vibecheck.services.users import touch_user

log = logging.getLogger(__name__)


def _commit(db: Session, action: str):
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        log.error("Failed to %s notification session: %s", action, e)
        raise BackendUnavailableError("Database unavailable", cause=e)


def start_session(
    db: Session,
    user_id: str | None,
    filters: dict,
    duration_hours: int | None = None,
    now: datetime | None = None,
) -> NotificationSession:
    now = now or datetime.utcnow()
    hours = duration_hours or settings.NOTIFICATION_SESSION_HOURS
    user = touch_user(db, user_id, now)
    db.flush()

    db.query(NotificationSession).filter(
        NotificationSession.user_id == user.id,
        NotificationSession.is_active.is_(True),
    ).update({"is_active": False}, synchronize_session=False)

    session = NotificationSession(
        user_id=user.id,
        filters=filters or {},
        started_at=now,
        ends_at=now + timedelta(hours=hours),
        is_active=True,
        created_at=now,
    )
    db.add(session)
    _commit(db, "start")
    db.refresh(session)
    log.info("Notification session %s started for user %s (%dh)", session.id, user.id, hours)
    return session


def _get(db: Session, session_id: str) -> NotificationSession:
    session = db.query(NotificationSession).filter(NotificationSession.id == session_id).first()
    if session is None:
        raise NotFoundError("Notification session not found")
    return session


def stop_session(db: Session, session_id: str, now: datetime | None = None) -> NotificationSession:
    session = _get(db, session_id)
    if session.is_active:
        session.is_active = False
        session.ends_at = now or datetime.utcnow()
        _commit(db, "stop")
    return session


def check_session(db: Session, session_id: str, now: datetime | None = None) -> NotificationSession:
    """Return the session, deactivating it first if it has run past ``ends_at``."""
    now = now or datetime.utcnow()
    session = _get(db, session_id)
    if session.is_active and session.ends_at <= now:
        session.is_active = False
        _commit(db, "expire")
    return session


def is_valid(session: NotificationSession, now: datetime | None = None) -> bool:
    now = now or datetime.utcnow()
    return bool(session.is_active) and session.ends_at > now
