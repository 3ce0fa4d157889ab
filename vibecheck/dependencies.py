import hmac
import logging

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from vibecheck.config import settings
from vibecheck.database import SessionLocal
from vibecheck.services.errors import MSG_INSIGHTS_DISABLED, MSG_UNAUTHORIZED
from vibecheck.services.store import SqlCheckInStore

log = logging.getLogger(__name__)

PIN_HEADER = "x-insights-pin"


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_check_in_store(db: Session = Depends(get_db)) -> SqlCheckInStore:
    return SqlCheckInStore(db)


def require_insights_pin(request: Request) -> None:
    """Gate partner insights behind the shared dashboard PIN."""
    expected = settings.INSIGHTS_DASHBOARD_PIN
    if not expected:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=MSG_INSIGHTS_DISABLED)

    provided = request.headers.get(PIN_HEADER, "")
    if not hmac.compare_digest(provided.encode(), expected.encode()):
        log.warning("Rejected insights PIN from %s", request.client.host if request.client else "unknown")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=MSG_UNAUTHORIZED)
