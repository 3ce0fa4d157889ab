"""Check-in repository: append plus time-window reads.

Aggregators never touch the database; they get an immutable snapshot of
``CheckInRecord`` from one of these stores.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from vibecheck.models import CheckIn, new_id
from vibecheck.services.errors import BackendUnavailableError, VibeCheckError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckInRecord:
    venue_id: str
    created_at: datetime
    vibe_score: str
    intent: str
    relationship_status: Optional[str] = None
    ons_intent: Optional[str] = None
    gender: Optional[str] = None
    age_band: Optional[str] = None
    user_id: Optional[str] = None
    id: str = ""

    @classmethod
    def from_row(cls, row: CheckIn) -> "CheckInRecord":
        return cls(
            id=row.id,
            venue_id=row.venue_id,
            user_id=row.user_id,
            created_at=row.created_at,
            vibe_score=row.vibe_score,
            intent=row.intent,
            relationship_status=row.relationship_status,
            ons_intent=row.ons_intent,
            gender=row.gender,
            age_band=row.age_band,
        )


class CheckInStore(ABC):
    """Where check-ins come from. In-memory for tests, SQL in production."""

    @abstractmethod
    def add(self, record: CheckInRecord) -> CheckInRecord:
        """Persist a new check-in and return it with its id filled in."""

    @abstractmethod
    def for_venue(
        self, venue_id: str, since: Optional[datetime] = None, until: Optional[datetime] = None,
    ) -> list[CheckInRecord]:
        """Check-ins for one venue in ``[since, until)``, oldest first."""

    @abstractmethod
    def since(self, since: datetime, until: Optional[datetime] = None) -> list[CheckInRecord]:
        """All check-ins in ``[since, until)``, oldest first."""

    def by_venue(self, since: datetime, until: Optional[datetime] = None) -> dict[str, list[CheckInRecord]]:
        grouped: dict[str, list[CheckInRecord]] = {}
        for record in self.since(since, until):
            grouped.setdefault(record.venue_id, []).append(record)
        return grouped


def _in_window(created_at: datetime, since: Optional[datetime], until: Optional[datetime]) -> bool:
    if since is not None and created_at < since:
        return False
    if until is not None and created_at >= until:
        return False
    return True


class InMemoryCheckInStore(CheckInStore):
    def __init__(self, records: Optional[list[CheckInRecord]] = None):
        self._records: list[CheckInRecord] = []
        for record in records or []:
            self.add(record)

    def add(self, record: CheckInRecord) -> CheckInRecord:
        if not record.id:
            record = replace(record, id=new_id())
        self._records.append(record)
        return record

    def for_venue(self, venue_id, since=None, until=None):
        return sorted(
            (r for r in self._records if r.venue_id == venue_id and _in_window(r.created_at, since, until)),
            key=lambda r: r.created_at,
        )

    def since(self, since, until=None):
        return sorted(
            (r for r in self._records if _in_window(r.created_at, since, until)),
            key=lambda r: r.created_at,
        )


class SqlCheckInStore(CheckInStore):
    def __init__(self, db: Session):
        self.db = db

    def add(self, record: CheckInRecord) -> CheckInRecord:
        row = CheckIn(
            id=record.id or new_id(),
            venue_id=record.venue_id,
            user_id=record.user_id,
            vibe_score=record.vibe_score,
            intent=record.intent,
            relationship_status=record.relationship_status,
            ons_intent=record.ons_intent,
            gender=record.gender,
            age_band=record.age_band,
            created_at=record.created_at,
        )
        try:
            self.db.add(row)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            log.error("Failed to store check-in for venue %s: %s", record.venue_id, e)
            raise _translate(e)
        return CheckInRecord.from_row(row)

    def for_venue(self, venue_id, since=None, until=None):
        q = self.db.query(CheckIn).filter(CheckIn.venue_id == venue_id)
        return self._run(q, since, until)

    def since(self, since, until=None):
        return self._run(self.db.query(CheckIn), since, until)

    def _run(self, q, since, until) -> list[CheckInRecord]:
        if since is not None:
            q = q.filter(CheckIn.created_at >= since)
        if until is not None:
            q = q.filter(CheckIn.created_at < until)
        try:
            rows = q.order_by(CheckIn.created_at).all()
        except SQLAlchemyError as e:
            log.error("Check-in query failed: %s", e)
            raise _translate(e)
        return [CheckInRecord.from_row(r) for r in rows]


def _translate(exc: SQLAlchemyError) -> VibeCheckError:
    if isinstance(exc, OperationalError):
        return BackendUnavailableError("Database unavailable", cause=exc)
    return VibeCheckError("Database error", cause=exc)
