"""Deterministic placeholder data for the partner insights dashboard.

Every value here is derived from a venue id and a time range through a
trigonometric hash, so two people looking at the same venue and range see the
same charts. None of this is real data; the live counterparts live in
``vibecheck.services.live_insights``.
"""

import math
from typing import Optional

from vibecheck.services.series import (
    WEEKDAY_ABBREVIATIONS, bucket_count, clamp, normalize_split,
    round_half_up, smooth, time_labels,
)

HEATMAP_HOURS = ["18:00", "19:00", "20:00", "21:00", "22:00", "23:00", "00:00", "01:00", "02:00", "03:00"]

DEFAULT_SEED = 42

VIBE_CATEGORIES = ["hot", "good", "ok", "quiet"]

AGE_SPLIT_BASE = [("18-24", 25), ("25-30", 32), ("31-35", 22), ("36-40", 12), ("40+", 9)]

POPULAR_VIBES = ["Party", "Chill", "Date night", "Afterwork"]
KPI_PEAK_DAYS = ["Friday", "Saturday", "Thursday"]

BOOST_BEST_DAYS = ["Friday", "Saturday", "Sunday", "Thursday"]
BOOST_TIME_SLOTS = ["22:00-01:00", "23:00-02:00", "21:00-00:00", "20:00-23:00"]


# ── Seeds ─────────────────────────────────────────────────────────────────────

def seeded_random(seed: int, offset: int = 0) -> float:
    x = math.sin(seed * 9999 + offset * 123) * 10000
    return x - math.floor(x)


def _index_random(seed: int, index: int) -> float:
    # Activity trend hashes the raw index, without the 123 multiplier
    x = math.sin(seed * 9999 + index) * 10000
    return x - math.floor(x)


def venue_seed(venue_id: str) -> int:
    """Sum of the UTF-16 code units of ``venue_id``."""
    if not venue_id:
        return 0
    data = venue_id.encode("utf-16-le")
    return sum(int.from_bytes(data[i:i + 2], "little") for i in range(0, len(data), 2))


def _seed_or_default(venue_id: Optional[str]) -> int:
    return venue_seed(venue_id) if venue_id else DEFAULT_SEED


def _trend_direction(value: float, threshold: float) -> str:
    if value >= threshold:
        return "up"
    if value <= -threshold:
        return "down"
    return "neutral"


# ── Daily series ──────────────────────────────────────────────────────────────

def activity_trend(time_range: int, venue_id: str) -> list[dict]:
    seed = venue_seed(venue_id)
    points = bucket_count(time_range)
    labels = time_labels(time_range, target_label_count=10)

    venue_base = 40 + seed % 30
    data = []
    for i in range(points):
        is_weekend = i % 7 in (5, 6)
        weekend_bonus = 25 if is_weekend else 0
        variation = _index_random(seed, i) * 20 - 10
        trend = (i / points) * 15
        data.append({
            "label": labels[i],
            "value": clamp(venue_base + weekend_bonus + variation + trend, 20, 100),
        })
    return data


def vibe_category_trend(time_range: int, venue_id: str) -> list[dict]:
    """Per-day share of each vibe category with venue-specific waves."""
    seed = venue_seed(venue_id)
    points = bucket_count(time_range)
    labels = time_labels(time_range, target_label_count=7)

    hot_phase = seeded_random(seed, 100) * math.pi * 2
    good_phase = seeded_random(seed, 101) * math.pi * 2
    ok_phase = seeded_random(seed, 102) * math.pi * 2
    quiet_phase = seeded_random(seed, 103) * math.pi * 2

    venue_offset = (seed % 15) / 100

    data = []
    for i in range(points):
        is_weekend = i % 7 in (5, 6)
        progress = i / points

        hot_wave = math.sin(progress * math.pi * 4 + hot_phase) * 8
        good_wave = math.sin(progress * math.pi * 3 + good_phase) * 6
        ok_wave = math.sin(progress * math.pi * 2.5 + ok_phase) * 5
        quiet_wave = math.sin(progress * math.pi * 3.5 + quiet_phase) * 4

        hot_noise = (seeded_random(seed, i * 4) - 0.5) * 6
        good_noise = (seeded_random(seed, i * 4 + 1) - 0.5) * 5
        ok_noise = (seeded_random(seed, i * 4 + 2) - 0.5) * 4
        quiet_noise = (seeded_random(seed, i * 4 + 3) - 0.5) * 3

        hot = 38 + hot_wave + hot_noise + (10 if is_weekend else -3) + venue_offset * 60
        good = 32 + good_wave + good_noise + (3 if is_weekend else 0) - venue_offset * 20
        ok = 20 + ok_wave + ok_noise + (-2 if is_weekend else 2)
        quiet = 10 + quiet_wave + quiet_noise + (-4 if is_weekend else 3) - venue_offset * 15

        data.append({
            "label": labels[i],
            "hot": clamp(hot, 25, 55),
            "good": clamp(good, 22, 42),
            "ok": clamp(ok, 12, 28),
            "quiet": clamp(quiet, 4, 18),
        })
    return data


# ── Heatmaps ──────────────────────────────────────────────────────────────────

def activity_heatmap(time_range: int, venue_id: str) -> list[list[float]]:
    """Check-in intensity grid: one row per hour 18:00-03:00, one column per weekday."""
    seed = venue_seed(venue_id)
    time_variance = time_range / 30
    venue_base = 0.1 + seeded_random(seed, 100) * 0.2

    grid = []
    for hour_index in range(len(HEATMAP_HOURS)):
        row = []
        for day_index in range(7):
            is_weekend = day_index >= 4
            is_peak_hour = 4 <= hour_index <= 8

            value = venue_base + seeded_random(seed, hour_index * 10 + day_index) * 0.2 * time_variance
            if is_weekend:
                value += 0.25 + seeded_random(seed, hour_index + day_index * 7) * 0.15
            if is_peak_hour:
                value += 0.2 + seeded_random(seed, hour_index * 3) * 0.1
            if is_weekend and is_peak_hour:
                value += 0.15
            row.append(clamp(value, 0, 1))
        grid.append(row)
    return grid


def vibe_heatmap(time_range: int, venue_id: str) -> list[list[float]]:
    seed = venue_seed(venue_id)
    time_variance = time_range / 30
    venue_base = 0.4 + seeded_random(seed, 200) * 0.2

    grid = []
    for hour_index in range(len(HEATMAP_HOURS)):
        row = []
        for day_index in range(7):
            is_weekend = day_index >= 4
            is_peak_vibe = 5 <= hour_index <= 7
            is_late_night = hour_index >= 8

            value = venue_base + seeded_random(seed, hour_index * 10 + day_index + 50) * 0.2 * time_variance
            if is_weekend:
                value += 0.12 + seeded_random(seed, hour_index + day_index * 11) * 0.08
            if is_peak_vibe:
                value += 0.15 + seeded_random(seed, hour_index * 5) * 0.1
            if is_late_night:
                value -= 0.08
            row.append(clamp(value, 0.1, 1))
        grid.append(row)
    return grid


def heatmap_summary(grid: list[list[float]]) -> dict:
    cells = [(value, h, d) for h, row in enumerate(grid) for d, value in enumerate(row)]
    if not cells:
        return {"average": 0.0, "peak_value": 0.0, "peak_day": None, "peak_hour": None}
    best, hour_index, day_index = max(cells, key=lambda c: c[0])
    return {
        "average": sum(c[0] for c in cells) / len(cells),
        "peak_value": best,
        "peak_day": WEEKDAY_ABBREVIATIONS[day_index],
        "peak_hour": HEATMAP_HOURS[hour_index],
    }


# ── Category splits ───────────────────────────────────────────────────────────

def _labeled(labels: list[str], values: list[int]) -> list[dict]:
    return [{"label": label, "value": value} for label, value in zip(labels, values)]


def demographic_splits(time_range: int, venue_id: str) -> dict:
    """Age, relationship, intent, vibe and ONS splits, each in percent."""
    seed = venue_seed(venue_id)
    time_variance = time_range / 30

    age_raw = [
        max(3, round_half_up(base + (seeded_random(seed, i) * 10 - 5) * time_variance))
        for i, (_, base) in enumerate(AGE_SPLIT_BASE)
    ]
    age = _labeled([label for label, _ in AGE_SPLIT_BASE], normalize_split(age_raw))

    single = 55 + round_half_up(seeded_random(seed, 10) * 20)
    in_relationship = round_half_up((100 - single) * 0.75)
    complicated = 100 - single - in_relationship
    relationship = _labeled(["Single", "In a relationship", "Complicated"], [single, in_relationship, complicated])

    intent_raw = [
        35 + seeded_random(seed, 20) * 15,
        22 + seeded_random(seed, 21) * 10,
        15 + seeded_random(seed, 22) * 10,
        18 + seeded_random(seed, 23) * 8,
        3 + seeded_random(seed, 24) * 5,
    ]
    intent = _labeled(["Party", "Chill", "Date night", "With friends", "Solo"], normalize_split(intent_raw))

    vibe_raw = [
        35 + seeded_random(seed, 30) * 20,
        30 + seeded_random(seed, 31) * 15,
        18 + seeded_random(seed, 32) * 10,
        5 + seeded_random(seed, 33) * 8,
    ]
    vibe = _labeled(["Hot", "Good", "OK", "Quiet"], normalize_split(vibe_raw))

    ons_yes = round_half_up(35 + seeded_random(seed, 40) * 20)
    ons_maybe = round_half_up(25 + seeded_random(seed, 41) * 15)
    ons = _labeled(["Yes", "Maybe", "No"], [ons_yes, ons_maybe, 100 - ons_yes - ons_maybe])

    return {
        "age": age,
        "relationship": relationship,
        "intent": intent,
        "vibe": vibe,
        "ons": ons,
    }


# ── KPI cards ─────────────────────────────────────────────────────────────────

def kpi_values(time_range: int, venue_id: str) -> dict:
    seed = venue_seed(venue_id)

    base_check_ins = round_half_up((150 + seed % 100) * (time_range / 7))
    check_in_variation = round_half_up(seeded_random(seed, 1) * 200)

    vibe_score = float(f"{7 + seeded_random(seed, 2) * 2.5:.1f}")
    vibe_change = float(f"{seeded_random(seed, 3) * 0.6 - 0.2:.1f}")

    single_percent = round_half_up(55 + seeded_random(seed, 4) * 20)
    single_change = round_half_up(seeded_random(seed, 5) * 8 - 4)

    ons_rate = round_half_up(30 + seeded_random(seed, 6) * 20)
    ons_change = round_half_up(seeded_random(seed, 7) * 10 - 3)

    popular_vibe = POPULAR_VIBES[math.floor(seeded_random(seed, 8) * len(POPULAR_VIBES))]
    peak_hour = 21 + math.floor(seeded_random(seed, 9) * 4)
    peak_day = KPI_PEAK_DAYS[math.floor(seeded_random(seed, 10) * len(KPI_PEAK_DAYS))]

    check_in_trend = round_half_up(seeded_random(seed, 11) * 20 - 5)

    if abs(single_change) <= 2:
        single_direction = "neutral"
    else:
        single_direction = "up" if single_change > 0 else "down"

    return {
        "base_check_ins": base_check_ins,
        "total_check_ins": base_check_ins + check_in_variation,
        "check_in_trend_pct": check_in_trend,
        "check_in_trend_direction": _trend_direction(check_in_trend, 2),
        "vibe_score": vibe_score,
        "vibe_change": vibe_change,
        "vibe_trend_direction": _trend_direction(vibe_change, 0.1),
        "single_pct": single_percent,
        "single_change": single_change,
        "single_trend_direction": single_direction,
        "ons_rate": ons_rate,
        "ons_change": ons_change,
        "ons_trend_direction": _trend_direction(ons_change, 2),
        "popular_vibe": popular_vibe,
        "peak_time": f"{peak_hour}:00",
        "peak_day": peak_day,
    }


# ── Vibe impact ───────────────────────────────────────────────────────────────

def vibe_impact(venue_id: Optional[str], time_range: int) -> dict:
    """Estimated share of traffic driven by vibe, with a confidence margin."""
    seed = _seed_or_default(venue_id)

    base_estimate = 18 + seeded_random(seed, 20) * 17
    if time_range >= 30:
        margin_base = 5
    elif time_range >= 14:
        margin_base = 8
    else:
        margin_base = 12
    margin_variation = seeded_random(seed, 21) * 4
    time_adjustment = (time_range - 30) / 90 * 5

    estimate = round_half_up(base_estimate + time_adjustment)
    return {
        "estimate": estimate,
        "margin": round_half_up(margin_base + margin_variation),
        "bar_position": clamp(estimate * 2, 0, 100),
    }


def vibe_traffic(venue_id: Optional[str], time_range: int) -> list[dict]:
    seed = _seed_or_default(venue_id)
    time_variance = time_range / 30
    return [
        {"vibe": "Hot", "index": 1.6 + seeded_random(seed, 1) * 0.4 + time_variance * 0.1},
        {"vibe": "Good", "index": 1.2 + seeded_random(seed, 2) * 0.3},
        {"vibe": "OK", "index": 0.95 + seeded_random(seed, 3) * 0.15},
        {"vibe": "Quiet", "index": 0.5 + seeded_random(seed, 4) * 0.3},
    ]


def vibe_boost(venue_id: Optional[str], time_range: int) -> dict:
    """Traffic index per vibe plus the headline VibeBoost percentage."""
    traffic = vibe_traffic(venue_id, time_range)
    avg_high = (traffic[0]["index"] + traffic[1]["index"]) / 2
    avg_low = (traffic[2]["index"] + traffic[3]["index"]) / 2

    seed = _seed_or_default(venue_id)
    return {
        "traffic": traffic,
        "boost_pct": round_half_up((avg_high / avg_low - 1) * 100),
        "best_day": BOOST_BEST_DAYS[math.floor(seeded_random(seed, 10) * 2)],
        "best_time": BOOST_TIME_SLOTS[math.floor(seeded_random(seed, 11) * len(BOOST_TIME_SLOTS))],
        "top_vibe": "Good" if seeded_random(seed, 12) > 0.7 else "Hot",
    }


# ── Dashboard bundle ──────────────────────────────────────────────────────────

def smoothed_vibe_trend(points: list[dict]) -> dict:
    return {category: smooth([p[category] for p in points]) for category in VIBE_CATEGORIES}


def dashboard_overview(venue_id: str, time_range: int) -> dict:
    vibe_points = vibe_category_trend(time_range, venue_id)
    activity_grid = activity_heatmap(time_range, venue_id)
    vibe_grid = vibe_heatmap(time_range, venue_id)
    return {
        "venue_id": venue_id,
        "time_range": time_range,
        "kpis": kpi_values(time_range, venue_id),
        "activity_trend": activity_trend(time_range, venue_id),
        "vibe_trend": vibe_points,
        "vibe_trend_smoothed": smoothed_vibe_trend(vibe_points),
        "activity_heatmap": {"hours": HEATMAP_HOURS, "grid": activity_grid, **heatmap_summary(activity_grid)},
        "vibe_heatmap": {"hours": HEATMAP_HOURS, "grid": vibe_grid, **heatmap_summary(vibe_grid)},
        "demographics": demographic_splits(time_range, venue_id),
        "impact": vibe_impact(venue_id, time_range),
        "boost": vibe_boost(venue_id, time_range),
    }
