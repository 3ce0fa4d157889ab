from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from vibecheck.services.aggregation import (
    AGE_BANDS, GENDERS, INTENTS, ONS_INTENTS, RELATIONSHIP_STATUSES, VIBE_SCORES,
)


def _one_of(value, allowed, field: str):
    if value is not None and value not in allowed:
        raise ValueError(f"{field} must be one of: {', '.join(allowed)}")
    return value


# ── Check-ins ─────────────────────────────────────────────────────────────────

class CheckInCreate(BaseModel):
    venue_id: str
    user_id: Optional[str] = None
    vibe_score: str
    intent: str
    relationship_status: Optional[str] = None
    ons_intent: Optional[str] = None
    gender: Optional[str] = None
    age_band: Optional[str] = None

    @field_validator("vibe_score")
    @classmethod
    def check_vibe(cls, v):
        return _one_of(v, VIBE_SCORES, "vibe_score")

    @field_validator("intent")
    @classmethod
    def check_intent(cls, v):
        return _one_of(v, INTENTS, "intent")

    @field_validator("relationship_status")
    @classmethod
    def check_relationship(cls, v):
        return _one_of(v, RELATIONSHIP_STATUSES, "relationship_status")

    @field_validator("ons_intent")
    @classmethod
    def check_ons(cls, v):
        return _one_of(v, ONS_INTENTS, "ons_intent")

    @field_validator("gender")
    @classmethod
    def check_gender(cls, v):
        return _one_of(v, GENDERS, "gender")

    @field_validator("age_band")
    @classmethod
    def check_age_band(cls, v):
        return _one_of(v, AGE_BANDS, "age_band")


class CheckInResponse(BaseModel):
    id: str
    venue_id: str
    user_id: Optional[str] = None
    vibe_score: str
    intent: str
    relationship_status: Optional[str] = None
    ons_intent: Optional[str] = None
    gender: Optional[str] = None
    age_band: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


# ── Venues ────────────────────────────────────────────────────────────────────

class VenueResponse(BaseModel):
    id: str
    name: str
    address: Optional[str] = None
    city: Optional[str] = None
    latitude: float
    longitude: float
    category: str

    model_config = {"from_attributes": True}


class VenueStats(BaseModel):
    check_in_count: int
    dominant_vibe: Optional[str] = None
    heat_score: int
    single_ratio: Optional[float] = None
    ons_ratio: Optional[float] = None
    boost_score: float


class LiveVenue(VenueStats):
    id: str
    name: str
    category: str
    latitude: float
    longitude: float
    heat_weight: float = 0


class LiveVenuesResponse(BaseModel):
    mode: str
    window_minutes: int
    venues: list[LiveVenue]


class VenueDetailResponse(BaseModel):
    venue: VenueResponse
    stats: VenueStats
    demographics: Optional[dict] = None
    intent_distribution: Optional[dict] = None
    peak_summary: str
    recent_check_ins: list[CheckInResponse]


# ── Notification sessions ─────────────────────────────────────────────────────

class NotificationSessionCreate(BaseModel):
    user_id: Optional[str] = None
    filters: dict = Field(default_factory=dict)
    duration_hours: Optional[int] = Field(default=None, ge=1, le=12)


class NotificationSessionResponse(BaseModel):
    id: str
    user_id: str
    filters: dict
    started_at: datetime
    ends_at: datetime
    is_active: bool
    is_valid: bool = False

    model_config = {"from_attributes": True}


# ── Partner insights ──────────────────────────────────────────────────────────

class InsightsStats(BaseModel):
    total_users: int
    active_users_last_10_min: int
    check_ins_last_24h: int
    check_ins_last_hour: int
    total_venues: int
    active_venues_last_24h: int
    generated_at: str


class SplitItem(BaseModel):
    label: str
    value: float


class SplitsResponse(BaseModel):
    venue_id: str
    days: int
    source: str
    activity: list[SplitItem]
    age: list[SplitItem]
    relationship: list[SplitItem]
    intent: list[SplitItem]
    vibe: list[SplitItem]
    ons: list[SplitItem]
