"""Partner insights computed from real check-ins for a venue and period."""

from datetime import datetime, timedelta
from typing import Optional, Sequence

from vibecheck.services.aggregation import AGE_BAND_LABELS, AGE_BANDS, INTENTS
from vibecheck.services.series import percentage, round_half_up
from vibecheck.services.store import CheckInRecord, CheckInStore

INSIGHTS_PERIODS = (7, 30, 90)
DEFAULT_PERIOD = 30

GENDER_LABELS = {"male": "Men", "female": "Women", "other": "Other"}
RELATIONSHIP_LABELS = {"single": "Single", "in_relationship": "In a relationship", "other": "Other"}


def period_days(period: int) -> int:
    return period if period in INSIGHTS_PERIODS else DEFAULT_PERIOD


def _date_keys(days: int, now: datetime) -> list[str]:
    return [(now - timedelta(days=i)).date().isoformat() for i in range(days - 1, -1, -1)]


def _day_key(c: CheckInRecord) -> str:
    return c.created_at.date().isoformat()


# ── Series ────────────────────────────────────────────────────────────────────

def activity_series(check_ins: Sequence[CheckInRecord], days: int, now: datetime) -> list[dict]:
    """Check-ins per calendar day, zero-filled over the period."""
    counts = {key: 0 for key in _date_keys(days, now)}
    for c in check_ins:
        key = _day_key(c)
        counts[key] = counts.get(key, 0) + 1
    return [{"date": key, "visits": counts[key]} for key in sorted(counts)]


def intent_series(check_ins: Sequence[CheckInRecord], days: int, now: datetime) -> list[dict]:
    buckets = {key: {intent: 0 for intent in INTENTS} for key in _date_keys(days, now)}
    for c in check_ins:
        bucket = buckets.setdefault(_day_key(c), {intent: 0 for intent in INTENTS})
        if c.intent in bucket:
            bucket[c.intent] += 1
    return [{"date": key, **buckets[key]} for key in sorted(buckets)]


# ── Distributions ─────────────────────────────────────────────────────────────

def age_distribution(check_ins: Sequence[CheckInRecord]) -> list[dict]:
    counts = {band: 0 for band in AGE_BANDS}
    for c in check_ins:
        if c.age_band in counts:
            counts[c.age_band] += 1
    total = sum(counts.values())
    return [
        {"band": band, "label": AGE_BAND_LABELS[band], "percentage": percentage(counts[band], total)}
        for band in AGE_BANDS
    ]


def _bucketed_distribution(values: Sequence[Optional[str]], labels: dict[str, str]) -> list[dict]:
    # Any answer that is not a named bucket counts as "other"
    counts = {key: 0 for key in labels}
    for value in values:
        if not value:
            continue
        counts[value if value in counts else "other"] += 1
    total = sum(counts.values())
    return [
        {"label": key, "display_label": labels[key], "percentage": percentage(counts[key], total)}
        for key in labels
    ]


def gender_distribution(check_ins: Sequence[CheckInRecord]) -> list[dict]:
    return _bucketed_distribution([c.gender for c in check_ins], GENDER_LABELS)


def relationship_distribution(check_ins: Sequence[CheckInRecord]) -> list[dict]:
    return _bucketed_distribution([c.relationship_status for c in check_ins], RELATIONSHIP_LABELS)


# ── KPIs ──────────────────────────────────────────────────────────────────────

def pct_change(current: float, previous: float) -> int:
    if previous == 0:
        return 100 if current > 0 else 0
    return round_half_up((current - previous) / previous * 100)


def _share(check_ins: Sequence[CheckInRecord], predicate) -> float:
    return sum(1 for c in check_ins if predicate(c)) / (len(check_ins) or 1)


def build_kpis(current: Sequence[CheckInRecord], previous: Sequence[CheckInRecord]) -> dict:
    party_now = _share(current, lambda c: c.intent == "party")
    party_before = _share(previous, lambda c: c.intent == "party")
    single_now = _share(current, lambda c: c.relationship_status == "single")
    single_before = _share(previous, lambda c: c.relationship_status == "single")

    age_now = age_distribution(current)
    age_before = {a["band"]: a["percentage"] for a in age_distribution(previous)}
    top = max(age_now, key=lambda a: a["percentage"])

    return {
        "total_visits": {"value": len(current), "delta_pct": pct_change(len(current), len(previous))},
        "party_intent_index": {"value": round_half_up(party_now * 100), "delta_pct": pct_change(party_now, party_before)},
        "single_rate": {"value": round_half_up(single_now * 100), "delta_pct": pct_change(single_now, single_before)},
        "dominant_age_band": {
            "label": top["label"],
            "delta_points": top["percentage"] - age_before.get(top["band"], 0),
        },
    }


# ── Area comparison ───────────────────────────────────────────────────────────

RANKING_METRICS = [
    ("Activity", "activity"),
    ("Party intensity", "party"),
    ("Single rate", "singles"),
    ("18-25 share", "youth"),
]


def venue_scores(check_ins_by_venue: dict[str, Sequence[CheckInRecord]]) -> dict[str, dict[str, float]]:
    scores: dict[str, dict[str, float]] = {key: {} for _, key in RANKING_METRICS}
    for venue_id, records in check_ins_by_venue.items():
        total = len(records) or 1
        scores["activity"][venue_id] = total
        scores["party"][venue_id] = sum(1 for c in records if c.intent == "party") / total
        scores["singles"][venue_id] = sum(1 for c in records if c.relationship_status == "single") / total
        scores["youth"][venue_id] = sum(1 for c in records if c.age_band == "18_25") / total
    return scores


def build_rankings(venue_id: str, scores: dict[str, dict[str, float]]) -> list[dict]:
    """Rank ``venue_id`` against every venue with check-ins, per metric."""
    rankings = []
    for label, key in RANKING_METRICS:
        metric = scores[key]
        ordered = sorted(metric.items(), key=lambda item: -(item[1] or 0))
        total = len(ordered)
        ids = [vid for vid, _ in ordered]
        rank = ids.index(venue_id) + 1 if venue_id in ids else total

        best = max(list(metric.values()) + [0])
        value = metric.get(venue_id, 0)
        rankings.append({
            "label": label,
            "rank": rank,
            "total": total or 1,
            "score": value / best if best else 0,
        })
    return rankings


# ── Entry point ───────────────────────────────────────────────────────────────

def load_insights(store: CheckInStore, venue_id: str, period: int, now: Optional[datetime] = None) -> dict:
    now = now or datetime.utcnow()
    days = period_days(period)
    current_from = now - timedelta(days=days)
    previous_from = current_from - timedelta(days=days)

    current = store.for_venue(venue_id, since=current_from)
    previous = store.for_venue(venue_id, since=previous_from, until=current_from)
    area = store.by_venue(since=current_from)

    return {
        "venue_id": venue_id,
        "period": days,
        "kpi": build_kpis(current, previous),
        "activity_series": activity_series(current, days, now),
        "intent_series": intent_series(current, days, now),
        "age_distribution": age_distribution(current),
        "gender_distribution": gender_distribution(current),
        "relationship_distribution": relationship_distribution(current),
        "comparison": build_rankings(venue_id, venue_scores(area)),
    }
