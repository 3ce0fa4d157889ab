from datetime import datetime, timedelta

from vibecheck.services.aggregation import (
    demographics,
    filter_by_time_window,
    has_enough_demographics,
    has_enough_intent_data,
    heatmap_weight,
    intent_distribution,
    intent_percentage,
    recency_weight,
    sort_venues_by_mode,
    venue_stats,
    venue_summaries,
)
from vibecheck.services.store import CheckInRecord

NOW = datetime(2026, 10, 17, 23, 0)


def _ci(venue_id="v1", minutes_ago=5, vibe="good", intent="party", **kw):
    return CheckInRecord(
        venue_id=venue_id,
        created_at=NOW - timedelta(minutes=minutes_ago),
        vibe_score=vibe,
        intent=intent,
        **kw,
    )


class _Venue:
    def __init__(self, id, name):
        self.id = id
        self.name = name
        self.category = "bar"
        self.latitude = 59.91
        self.longitude = 10.75


def test_empty_inputs():
    stats = demographics([])
    assert stats["total_gender_responses"] == 0
    assert stats["most_common_age_band"] is None
    assert stats["most_common_gender"] is None

    vs = venue_stats([])
    assert vs["single_ratio"] is None
    assert vs["ons_ratio"] is None
    assert vs["dominant_vibe"] is None

    intents = intent_distribution([])
    assert intents["dominant_intent"] is None
    assert intents["dominant_pct"] == 0


def test_demographics_percent_of_responses():
    check_ins = [
        _ci(gender="male", age_band="25_30"),
        _ci(gender="female", age_band="25_30"),
        _ci(gender="female", age_band="18_25"),
        _ci(gender="prefer_not_to_say"),
        _ci(),
    ]
    stats = demographics(check_ins)
    assert stats["total_gender_responses"] == 4
    assert stats["female_pct"] == 50
    assert stats["male_pct"] == 25
    assert stats["other_pct"] == 25
    assert stats["most_common_gender"] == "female"
    assert stats["total_age_responses"] == 3
    assert stats["age_band_pct"]["25_30"] == 67
    assert stats["most_common_age_band"] == "25_30"


def test_most_common_age_band_first_wins_ties():
    stats = demographics([_ci(age_band="30_35"), _ci(age_band="18_25")])
    assert stats["most_common_age_band"] == "18_25"


def test_demographics_gating():
    two = [_ci(gender="male"), _ci(gender="female")]
    assert not has_enough_demographics(2, demographics(two))

    three = two + [_ci()]
    assert has_enough_demographics(3, demographics(three))

    sparse = [_ci(gender="male"), _ci(), _ci()]
    assert not has_enough_demographics(3, demographics(sparse))


def test_intent_gating():
    assert not has_enough_intent_data(1)
    assert has_enough_intent_data(2)


def test_intent_distribution_dominant():
    check_ins = [_ci(intent="chill"), _ci(intent="chill"), _ci(intent="party"), _ci(intent="solo")]
    dist = intent_distribution(check_ins)
    assert dist["dominant_intent"] == "chill"
    assert dist["dominant_pct"] == 50
    assert dist["party"] == 25
    assert dist["total"] == 4


def test_intent_tie_goes_to_first_in_order():
    dist = intent_distribution([_ci(intent="solo"), _ci(intent="party")])
    assert dist["dominant_intent"] == "party"


def test_venue_stats_ratios():
    check_ins = [
        _ci(vibe="hot", relationship_status="single", ons_intent="open"),
        _ci(vibe="hot", relationship_status="in_relationship", ons_intent="not_interested"),
        _ci(vibe="ok", relationship_status="single", ons_intent="maybe"),
        _ci(vibe="quiet"),
    ]
    stats = venue_stats(check_ins)
    assert stats["check_in_count"] == 4
    assert stats["dominant_vibe"] == "hot"
    assert stats["heat_score"] == 40
    assert stats["single_count"] == 2
    assert stats["single_total"] == 3
    assert abs(stats["single_ratio"] - 2 / 3) < 1e-9
    assert abs(stats["ons_ratio"] - 2 / 3) < 1e-9


def test_heat_score_capped():
    assert venue_stats([_ci() for _ in range(15)])["heat_score"] == 100


def test_sort_by_activity_and_single():
    venues = venue_summaries(
        [_Venue("a", "A"), _Venue("b", "B"), _Venue("c", "C")],
        [
            _ci("a"), _ci("a"), _ci("a", relationship_status="in_relationship"),
            _ci("b", relationship_status="single"),
            _ci("c"),
        ],
    )
    assert [v["id"] for v in sort_venues_by_mode(venues, "activity")] == ["a", "b", "c"]
    # c has no answers and sorts after a, which has a 0% single ratio
    assert [v["id"] for v in sort_venues_by_mode(venues, "single")] == ["b", "a", "c"]


def test_sort_by_age_band():
    venues = venue_summaries(
        [_Venue("a", "A"), _Venue("b", "B")],
        [_ci("a", age_band="40_plus"), _ci("b", age_band="18_25"), _ci("b", age_band="40_plus")],
    )
    ranked = sort_venues_by_mode(venues, "age", age_bands=["40_plus"])
    assert [v["id"] for v in ranked] == ["a", "b"]


def test_recency_and_heatmap_weight():
    assert recency_weight(NOW, NOW) == 1.0
    assert recency_weight(NOW - timedelta(minutes=30), NOW) == 0.5
    assert recency_weight(NOW - timedelta(minutes=90), NOW) == 0.0

    assert heatmap_weight(_ci(vibe="hot", minutes_ago=0), NOW) == 1.0
    assert heatmap_weight(_ci(vibe="quiet", minutes_ago=120), NOW) == 0.125


def test_filter_by_time_window():
    check_ins = [_ci(minutes_ago=30), _ci(minutes_ago=90), _ci(minutes_ago=150)]
    assert len(filter_by_time_window(check_ins, 60, NOW)) == 1
    assert len(filter_by_time_window(check_ins, 120, NOW)) == 2
    assert len(filter_by_time_window(check_ins, 180, NOW)) == 3


def test_boost_score_weights_ons_and_singles():
    check_ins = [
        _ci(ons_intent="open", relationship_status="single"),
        _ci(ons_intent="maybe", relationship_status="in_relationship"),
        _ci(ons_intent="not_interested"),
    ]
    # ONS intensity (1.0 + 0.6) / 3, single factor 1 + 0.5 * 0.5, activity log2(4) * 0.5
    expected = (1.6 / 3) * 1.25 * 10 + 1.0
    assert abs(venue_stats(check_ins)["boost_score"] - expected) < 1e-9
    assert abs(expected - 23 / 3) < 1e-9


def test_boost_score_without_answers_is_activity_only():
    assert venue_stats([_ci(), _ci(), _ci()])["boost_score"] == 1.0
    assert venue_stats([])["boost_score"] == 0.0


def _summaries(check_ins, ids=("a", "b", "c", "d")):
    return venue_summaries([_Venue(i, i.upper()) for i in ids], check_ins)


def test_sort_by_ons_unanswered_last_by_activity():
    venues = _summaries([
        _ci("a", ons_intent="open"), _ci("a", ons_intent="not_interested"),
        _ci("b", ons_intent="maybe"),
        _ci("c"), _ci("c"),
        _ci("d"),
    ])
    assert [v["id"] for v in sort_venues_by_mode(venues, "ons")] == ["b", "a", "c", "d"]


def test_sort_by_ons_boost():
    venues = _summaries([
        _ci("a", ons_intent="maybe"),
        _ci("b", ons_intent="open", relationship_status="single"),
        _ci("c"), _ci("c"), _ci("c"),
    ], ids=("a", "b", "c"))
    assert [v["id"] for v in sort_venues_by_mode(venues, "ons_boost")] == ["b", "a", "c"]


def test_sort_by_target_intents():
    venues = _summaries([
        _ci("a", intent="party"), _ci("a", intent="party"), _ci("a", intent="chill"),
        _ci("b", intent="chill"),
        _ci("c", intent="solo"), _ci("c", intent="solo"),
    ], ids=("a", "b", "c"))
    ranked = sort_venues_by_mode(venues, "intent", intents=["chill"])
    assert [v["id"] for v in ranked] == ["b", "a", "c"]


def test_sort_by_intent_falls_back_to_dominant_share():
    venues = _summaries([
        _ci("a", intent="party"), _ci("a", intent="party"), _ci("a", intent="chill"),
        _ci("b", intent="chill"),
    ], ids=("a", "b"))
    assert [v["id"] for v in sort_venues_by_mode(venues, "intent")] == ["b", "a"]


def test_intent_percentage_ignores_unknown_keys():
    dist = intent_distribution([_ci(intent="party"), _ci(intent="chill")])
    assert intent_percentage(dist, ["party", "karaoke", "total", "dominant_intent"]) == 50
