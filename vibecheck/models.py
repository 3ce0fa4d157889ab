import uuid
from datetime import datetime

from sqlalchemy import (
    JSON, Boolean, Column, DateTime, Float, ForeignKey, Index, String,
)
from sqlalchemy.orm import relationship

from vibecheck.database import Base


def new_id() -> str:
    return str(uuid.uuid4())


# ── Venue ─────────────────────────────────────────────────────────────────────

class Venue(Base):
    __tablename__ = "venues"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    address = Column(String(500))
    city = Column(String(255))
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    category = Column(String(50), nullable=False, default="bar")
    external_place_id = Column(String(255), unique=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    check_ins = relationship("CheckIn", back_populates="venue", cascade="all, delete-orphan")


# ── Anonymous user ────────────────────────────────────────────────────────────

class VibeUser(Base):
    __tablename__ = "vibe_users"

    id = Column(String(36), primary_key=True, default=new_id)
    last_seen_at = Column(DateTime, default=datetime.utcnow, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    check_ins = relationship("CheckIn", back_populates="user")
    notification_sessions = relationship("NotificationSession", back_populates="user", cascade="all, delete-orphan")


# ── Check-in ──────────────────────────────────────────────────────────────────

class CheckIn(Base):
    __tablename__ = "check_ins"
    __table_args__ = (
        Index("ix_check_ins_venue_created", "venue_id", "created_at"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    venue_id = Column(String(36), ForeignKey("venues.id"), nullable=False)
    user_id = Column(String(36), ForeignKey("vibe_users.id"), nullable=True)
    vibe_score = Column(String(10), nullable=False)
    intent = Column(String(20), nullable=False)
    relationship_status = Column(String(30))
    ons_intent = Column(String(30))
    gender = Column(String(30))
    age_band = Column(String(10))
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    venue = relationship("Venue", back_populates="check_ins")
    user = relationship("VibeUser", back_populates="check_ins")


# ── Notification session ──────────────────────────────────────────────────────

class NotificationSession(Base):
    __tablename__ = "notification_sessions"
    __table_args__ = (
        Index("ix_notification_sessions_user_active", "user_id", "is_active"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("vibe_users.id"), nullable=False)
    filters = Column(JSON, default=dict)
    started_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    ends_at = Column(DateTime, nullable=False)
    is_active = Column(Boolean, default=True)
    last_notified_at = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("VibeUser", back_populates="notification_sessions")
