from datetime import datetime

from sqlalchemy.orm import Session

from vibecheck.models import VibeUser


def touch_user(db: Session, user_id: str | None, now: datetime | None = None) -> VibeUser:
    """Fetch or create the anonymous user and bump ``last_seen_at``. Does not commit."""
    now = now or datetime.utcnow()
    user = db.query(VibeUser).filter(VibeUser.id == user_id).first() if user_id else None
    if user is None:
        user = VibeUser(last_seen_at=now, created_at=now)
        if user_id:
            user.id = user_id
        db.add(user)
    else:
        user.last_seen_at = now
    return user
