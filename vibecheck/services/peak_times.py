from collections import Counter
from typing import NamedTuple, Sequence

from vibecheck.services.store import CheckInRecord

# Sunday first, matching the day-of-week numbering the clients use
DAY_NAMES_PLURAL = ["Sundays", "Mondays", "Tuesdays", "Wednesdays", "Thursdays", "Fridays", "Saturdays"]
WEEKEND_DOWS = (5, 6)

MIN_PEAK_CHECKINS = 2
PEAK_WINDOW_HOURS = 2

MSG_LITTLE_HISTORY = "Not much history at this venue yet."


class PeakHour(NamedTuple):
    dow: int
    hour: int
    checkin_count: int


def day_of_week(c: CheckInRecord) -> int:
    """0 = Sunday .. 6 = Saturday."""
    return (c.created_at.weekday() + 1) % 7


def peak_hours(check_ins: Sequence[CheckInRecord]) -> list[PeakHour]:
    counts = Counter((day_of_week(c), c.created_at.hour) for c in check_ins)
    return [PeakHour(dow, hour, n) for (dow, hour), n in sorted(counts.items())]


def _format_hour(hour: int) -> str:
    return f"{hour:02d}:00"


def summarize_peak_times(peaks: Sequence[PeakHour]) -> str:
    """One sentence describing when a venue is usually busiest.

    Friday and Saturday buckets win when present. A busiest bucket with fewer
    than two check-ins is not worth reporting.
    """
    if not peaks:
        return MSG_LITTLE_HISTORY

    weekend = [p for p in peaks if p.dow in WEEKEND_DOWS]
    base = weekend or list(peaks)

    top = max(base, key=lambda p: p.checkin_count)
    if top.checkin_count < MIN_PEAK_CHECKINS:
        return MSG_LITTLE_HISTORY

    start = _format_hour(top.hour)
    end = _format_hour((top.hour + PEAK_WINDOW_HOURS) % 24)
    if weekend:
        return f"Usually busiest around {start}-{end} on weekends"
    return f"Usually busiest around {start}-{end} on {DAY_NAMES_PLURAL[top.dow]}"
