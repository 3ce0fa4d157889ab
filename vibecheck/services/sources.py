"""Synthetic and live insights behind one interface.

Both sources return the same shapes, so the dashboard endpoints can switch
from placeholder data to real aggregation without changing their output.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Optional

from vibecheck.services import synthetic
from vibecheck.services.aggregation import INTENTS, VIBE_SCORES, intent_distribution
from vibecheck.services.live_insights import activity_series, age_distribution, relationship_distribution
from vibecheck.services.series import percentage
from vibecheck.services.store import CheckInStore

SPLIT_KEYS = ("age", "relationship", "intent", "vibe", "ons")

INTENT_LABELS = {
    "party": "Party",
    "chill": "Chill",
    "date_night": "Date night",
    "with_friends": "With friends",
    "solo": "Solo",
}
VIBE_LABELS = {"hot": "Hot", "good": "Good", "ok": "OK", "quiet": "Quiet"}
ONS_LABELS = {"open": "Yes", "maybe": "Maybe", "not_interested": "No"}


class InsightsSource(ABC):
    name = ""

    @abstractmethod
    def activity_series(self, venue_id: str, days: int) -> list[dict]:
        """``[{label, value}]`` per day, oldest first."""

    @abstractmethod
    def category_splits(self, venue_id: str, days: int) -> dict[str, list[dict]]:
        """Percent splits keyed by ``SPLIT_KEYS``, each ``[{label, value}]``."""


class SyntheticInsightsSource(InsightsSource):
    name = "synthetic"

    def activity_series(self, venue_id, days):
        return synthetic.activity_trend(days, venue_id)

    def category_splits(self, venue_id, days):
        return synthetic.demographic_splits(days, venue_id)


class CheckInInsightsSource(InsightsSource):
    name = "live"

    def __init__(self, store: CheckInStore, now: Optional[datetime] = None):
        self.store = store
        self.now = now

    def _check_ins(self, venue_id: str, days: int):
        now = self.now or datetime.utcnow()
        return self.store.for_venue(venue_id, since=now - timedelta(days=days)), now

    def activity_series(self, venue_id, days):
        check_ins, now = self._check_ins(venue_id, days)
        return [{"label": p["date"], "value": p["visits"]} for p in activity_series(check_ins, days, now)]

    def category_splits(self, venue_id, days):
        check_ins, _ = self._check_ins(venue_id, days)
        total = len(check_ins)

        intents = intent_distribution(check_ins)
        vibe_counts = {v: sum(1 for c in check_ins if c.vibe_score == v) for v in VIBE_SCORES}
        ons_answers = [c.ons_intent for c in check_ins if c.ons_intent in ONS_LABELS]

        return {
            "age": [{"label": a["label"], "value": a["percentage"]} for a in age_distribution(check_ins)],
            "relationship": [
                {"label": r["display_label"], "value": r["percentage"]}
                for r in relationship_distribution(check_ins)
            ],
            "intent": [{"label": INTENT_LABELS[i], "value": intents[i]} for i in INTENTS],
            "vibe": [{"label": VIBE_LABELS[v], "value": percentage(vibe_counts[v], total)} for v in VIBE_SCORES],
            "ons": [
                {"label": label, "value": percentage(ons_answers.count(key), len(ons_answers))}
                for key, label in ONS_LABELS.items()
            ],
        }


def get_insights_source(name: str, store: Optional[CheckInStore] = None) -> InsightsSource:
    if name == SyntheticInsightsSource.name:
        return SyntheticInsightsSource()
    if name == CheckInInsightsSource.name:
        if store is None:
            raise ValueError("Live insights need a check-in store")
        return CheckInInsightsSource(store)
    raise ValueError(f"Unknown insights source: {name}")
