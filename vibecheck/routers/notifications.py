from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from vibecheck.dependencies import get_db
from vibecheck.models import NotificationSession
from vibecheck.schemas import NotificationSessionCreate, NotificationSessionResponse
from vibecheck.services.notifications import check_session, is_valid, start_session, stop_session

router = APIRouter(prefix="/api/notification-sessions", tags=["notifications"])


def _response(session: NotificationSession) -> NotificationSessionResponse:
    result = NotificationSessionResponse.model_validate(session)
    result.is_valid = is_valid(session)
    return result


@router.post("", response_model=NotificationSessionResponse, status_code=status.HTTP_201_CREATED)
def create_session(body: NotificationSessionCreate, db: Session = Depends(get_db)):
    return _response(start_session(db, body.user_id, body.filters, body.duration_hours))


@router.get("/{session_id}", response_model=NotificationSessionResponse)
def get_session(session_id: str, db: Session = Depends(get_db)):
    return _response(check_session(db, session_id))


@router.delete("/{session_id}", response_model=NotificationSessionResponse)
def delete_session(session_id: str, db: Session = Depends(get_db)):
    return _response(stop_session(db, session_id))
