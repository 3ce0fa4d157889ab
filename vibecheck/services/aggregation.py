"""Pure folds over check-in snapshots: demographics, intent mix, venue ratios."""

import math
from datetime import datetime, timedelta
from typing import Optional, Sequence

from vibecheck.services.series import percentage
from vibecheck.services.store import CheckInRecord

VIBE_SCORES = ["hot", "good", "ok", "quiet"]
INTENTS = ["party", "chill", "date_night", "with_friends", "solo"]
AGE_BANDS = ["18_25", "25_30", "30_35", "35_40", "40_plus"]
GENDERS = ["male", "female", "other", "prefer_not_to_say"]
RELATIONSHIP_STATUSES = ["single", "in_relationship", "complicated", "prefer_not_to_say"]
ONS_INTENTS = ["open", "maybe", "not_interested", "prefer_not_to_say"]

AGE_BAND_LABELS = {
    "18_25": "18-25",
    "25_30": "25-30",
    "30_35": "30-35",
    "35_40": "35-40",
    "40_plus": "40+",
}

VIBE_SCORE_WEIGHT = {"hot": 1.0, "good": 0.75, "ok": 0.5, "quiet": 0.25}

LIVE_TIME_WINDOWS = (60, 120, 180)

MIN_DEMOGRAPHIC_CHECKINS = 3
MIN_DEMOGRAPHIC_RESPONSES = 2
MIN_INTENT_CHECKINS = 2

SORT_MODES = ("activity", "single", "ons", "ons_boost", "age", "intent")


# ── Demographics ──────────────────────────────────────────────────────────────

def _most_common(counts: dict[str, int]) -> Optional[str]:
    best, best_count = None, 0
    for key, count in counts.items():
        if count > best_count:
            best, best_count = key, count
    return best


def demographics(check_ins: Sequence[CheckInRecord]) -> dict:
    """Gender and age-band split as a percentage of people who answered.

    Check-ins without the field are ignored, so percentages are of responses,
    not of all check-ins.
    """
    age_counts = {band: 0 for band in AGE_BANDS}
    male = female = other = 0
    total_age = 0

    for c in check_ins:
        if c.gender == "male":
            male += 1
        elif c.gender == "female":
            female += 1
        elif c.gender in ("other", "prefer_not_to_say"):
            other += 1

        if c.age_band in age_counts:
            age_counts[c.age_band] += 1
            total_age += 1

    total_gender = male + female + other

    most_common_gender = None
    if total_gender > 0:
        if female >= male and female >= other:
            most_common_gender = "female"
        elif male >= female and male >= other:
            most_common_gender = "male"
        else:
            most_common_gender = "other"

    return {
        "male_pct": percentage(male, total_gender),
        "female_pct": percentage(female, total_gender),
        "other_pct": percentage(other, total_gender),
        "male_count": male,
        "female_count": female,
        "other_count": other,
        "total_gender_responses": total_gender,
        "most_common_gender": most_common_gender,
        "age_band_pct": {band: percentage(n, total_age) for band, n in age_counts.items()},
        "age_band_counts": age_counts,
        "total_age_responses": total_age,
        "most_common_age_band": _most_common(age_counts),
    }


def age_band_percentage(stats: dict, bands: Sequence[str]) -> int:
    if not bands or stats["total_age_responses"] == 0:
        return 0
    return sum(stats["age_band_pct"].get(band, 0) for band in bands)


def has_enough_demographics(check_in_count: int, stats: dict) -> bool:
    """Whether a demographics panel may be shown for this many check-ins."""
    if check_in_count < MIN_DEMOGRAPHIC_CHECKINS:
        return False
    return (
        stats["total_gender_responses"] >= MIN_DEMOGRAPHIC_RESPONSES
        or stats["total_age_responses"] >= MIN_DEMOGRAPHIC_RESPONSES
    )


# ── Intent ────────────────────────────────────────────────────────────────────

def intent_distribution(check_ins: Sequence[CheckInRecord]) -> dict:
    """Share of all check-ins per intent; ``dominant_intent`` is None without data."""
    counts = {intent: 0 for intent in INTENTS}
    for c in check_ins:
        if c.intent in counts:
            counts[c.intent] += 1

    total = len(check_ins)
    dominant = _most_common(counts)

    return {
        **{intent: percentage(n, total) for intent, n in counts.items()},
        "total": total,
        "dominant_intent": dominant,
        "dominant_pct": percentage(counts[dominant], total) if dominant else 0,
    }


def intent_percentage(distribution: dict, intents: Sequence[str]) -> int:
    if not intents or distribution["total"] == 0:
        return 0
    return sum(distribution[intent] for intent in intents if intent in INTENTS)


def has_enough_intent_data(check_in_count: int) -> bool:
    return check_in_count >= MIN_INTENT_CHECKINS


# ── Venue stats ───────────────────────────────────────────────────────────────

def venue_stats(check_ins: Sequence[CheckInRecord]) -> dict:
    vibes = {v: 0 for v in VIBE_SCORES}
    single_count = single_total = 0
    ons_open = ons_total = 0
    ons_weighted = 0.0

    for c in check_ins:
        if c.vibe_score in vibes:
            vibes[c.vibe_score] += 1

        if c.relationship_status is not None:
            single_total += 1
            if c.relationship_status == "single":
                single_count += 1

        if c.ons_intent is not None:
            ons_total += 1
            if c.ons_intent in ("open", "maybe"):
                ons_open += 1
        if c.ons_intent == "open":
            ons_weighted += 1.0
        elif c.ons_intent == "maybe":
            ons_weighted += 0.6

    count = len(check_ins)
    single_ratio = single_count / single_total if single_total > 0 else None
    ons_ratio = ons_open / ons_total if ons_total > 0 else None

    # ONS intensity dominates; singles scale it up to 1.5x; log2 activity breaks ties
    ons_intensity = ons_weighted / ons_total if ons_total > 0 else 0
    single_factor = 1.0 + single_ratio * 0.5 if single_ratio is not None else 1.0
    boost_score = ons_intensity * single_factor * 10 + math.log2(count + 1) * 0.5

    return {
        "check_in_count": count,
        "dominant_vibe": _most_common(vibes),
        "heat_score": min(100, count * 10),
        "single_count": single_count,
        "single_total": single_total,
        "single_ratio": single_ratio,
        "ons_open_count": ons_open,
        "ons_total": ons_total,
        "ons_ratio": ons_ratio,
        "boost_score": boost_score,
    }


def venue_summaries(venues: Sequence, check_ins: Sequence[CheckInRecord]) -> list[dict]:
    """Stats, demographics and intent mix for every venue in one pass over check-ins."""
    by_venue: dict[str, list[CheckInRecord]] = {}
    for c in check_ins:
        by_venue.setdefault(c.venue_id, []).append(c)

    summaries = []
    for venue in venues:
        venue_check_ins = by_venue.get(venue.id, [])
        summaries.append({
            "id": venue.id,
            "name": venue.name,
            "category": venue.category,
            "latitude": venue.latitude,
            "longitude": venue.longitude,
            **venue_stats(venue_check_ins),
            "demographics": demographics(venue_check_ins),
            "intent_distribution": intent_distribution(venue_check_ins),
        })
    return summaries


def _ratio_key(field: str):
    # Venues without answers sort last, by activity among themselves
    def key(v: dict):
        ratio = v[field]
        if ratio is None:
            return (1, -v["check_in_count"])
        return (0, -ratio)
    return key


def sort_venues_by_mode(
    venues: Sequence[dict],
    mode: str,
    age_bands: Optional[Sequence[str]] = None,
    intents: Optional[Sequence[str]] = None,
) -> list[dict]:
    if mode in ("single", "ons"):
        return sorted(venues, key=_ratio_key(f"{mode}_ratio"))

    if mode == "ons_boost":
        return sorted(venues, key=lambda v: -v["boost_score"])

    if mode == "age":
        bands = list(age_bands) if age_bands else ["25_30"]
        return sorted(venues, key=lambda v: _pct_then_activity(v, age_band_percentage(v["demographics"], bands)))

    if mode == "intent":
        if intents:
            return sorted(venues, key=lambda v: _pct_then_activity(v, intent_percentage(v["intent_distribution"], intents)))
        return sorted(venues, key=lambda v: -v["intent_distribution"]["dominant_pct"])

    return sorted(venues, key=lambda v: -v["check_in_count"])


def _pct_then_activity(v: dict, pct: int) -> tuple:
    if pct == 0:
        return (1, -v["check_in_count"])
    return (0, -pct)


# ── Live map weighting ────────────────────────────────────────────────────────

def recency_weight(created_at: datetime, now: datetime, max_age_minutes: int = 60) -> float:
    age_minutes = (now - created_at).total_seconds() / 60
    if age_minutes >= max_age_minutes:
        return 0.0
    return 1 - age_minutes / max_age_minutes


def heatmap_weight(check_in: CheckInRecord, now: datetime, max_age_minutes: int = 60) -> float:
    vibe = VIBE_SCORE_WEIGHT.get(check_in.vibe_score, 0.0)
    return vibe * (0.5 + 0.5 * recency_weight(check_in.created_at, now, max_age_minutes))


def filter_by_time_window(
    check_ins: Sequence[CheckInRecord], window_minutes: int, now: datetime,
) -> list[CheckInRecord]:
    cutoff = now - timedelta(minutes=window_minutes)
    return [c for c in check_ins if c.created_at >= cutoff]
