from datetime import datetime, timedelta

from vibecheck.services.live_insights import (
    activity_series,
    build_kpis,
    build_rankings,
    load_insights,
    pct_change,
    period_days,
    venue_scores,
)
from vibecheck.services.sources import CheckInInsightsSource, SyntheticInsightsSource
from vibecheck.services.store import CheckInRecord, InMemoryCheckInStore

NOW = datetime(2026, 10, 17, 23, 0)


def _ci(venue_id="v1", days_ago=0, intent="party", **kw):
    return CheckInRecord(
        venue_id=venue_id,
        created_at=NOW - timedelta(days=days_ago, minutes=5),
        vibe_score="good",
        intent=intent,
        **kw,
    )


def test_period_defaults_to_30():
    assert period_days(7) == 7
    assert period_days(90) == 90
    assert period_days(12) == 30


def test_activity_series_zero_filled():
    series = activity_series([_ci(days_ago=0), _ci(days_ago=0), _ci(days_ago=3)], 7, NOW)
    assert len(series) == 7
    assert series[-1] == {"date": "2026-10-17", "visits": 2}
    assert series[-4]["visits"] == 1
    assert sum(p["visits"] for p in series) == 3


def test_pct_change():
    assert pct_change(10, 0) == 100
    assert pct_change(0, 0) == 0
    assert pct_change(15, 10) == 50
    assert pct_change(5, 10) == -50


def test_kpis_compare_periods():
    current = [
        _ci(relationship_status="single", age_band="18_25"),
        _ci(intent="chill", age_band="18_25"),
    ]
    previous = [_ci(intent="chill", age_band="25_30")]
    kpis = build_kpis(current, previous)
    assert kpis["total_visits"] == {"value": 2, "delta_pct": 100}
    assert kpis["party_intent_index"] == {"value": 50, "delta_pct": 100}
    assert kpis["single_rate"]["value"] == 50
    assert kpis["dominant_age_band"] == {"label": "18-25", "delta_points": 100}


def test_rankings():
    scores = venue_scores({
        "v1": [_ci("v1"), _ci("v1", intent="chill")],
        "v2": [_ci("v2"), _ci("v2"), _ci("v2"), _ci("v2")],
    })
    rankings = {r["label"]: r for r in build_rankings("v1", scores)}
    assert rankings["Activity"] == {"label": "Activity", "rank": 2, "total": 2, "score": 0.5}
    assert rankings["Party intensity"]["rank"] == 2
    assert rankings["Party intensity"]["score"] == 0.5


def test_rankings_for_venue_without_check_ins():
    rankings = build_rankings("ghost", venue_scores({}))
    assert all(r["rank"] == 0 and r["total"] == 1 and r["score"] == 0 for r in rankings)


def test_load_insights_reads_store():
    store = InMemoryCheckInStore([
        _ci(days_ago=1),
        _ci(days_ago=10),
        _ci(days_ago=40, intent="chill"),
        _ci("v2", days_ago=2),
    ])
    insights = load_insights(store, "v1", 30, now=NOW)
    assert insights["period"] == 30
    assert len(insights["activity_series"]) == 30
    assert insights["kpi"]["total_visits"]["value"] == 2
    assert insights["kpi"]["total_visits"]["delta_pct"] == 100
    assert {r["total"] for r in insights["comparison"]} == {2}
    assert len(insights["intent_series"]) == 30


def test_live_source_matches_synthetic_shape():
    store = InMemoryCheckInStore([_ci(ons_intent="open", age_band="25_30")])
    live = CheckInInsightsSource(store, now=NOW)
    synthetic = SyntheticInsightsSource()

    live_splits = live.category_splits("v1", 30)
    assert set(live_splits) == set(synthetic.category_splits("v1", 30))
    assert {"label": "Yes", "value": 100} in live_splits["ons"]
    assert len(live.activity_series("v1", 7)) == 7


def test_live_source_without_check_ins_returns_zeros():
    live = CheckInInsightsSource(InMemoryCheckInStore(), now=NOW)
    splits = live.category_splits("v1", 30)
    for items in splits.values():
        assert all(item["value"] == 0 for item in items)
