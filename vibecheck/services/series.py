"""Small numeric helpers shared by the synthetic generators and the live insights.

Rounding here follows JavaScript's ``Math.round`` (half up toward +inf) so the
numbers match what the web dashboard has always displayed.
"""

import math
from typing import Sequence

WEEKDAY_ABBREVIATIONS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def smooth(values: Sequence[float]) -> list[float]:
    """One-pass 3-point weighted smoother.

    End points are averaged with their single neighbour; interior points use
    0.25/0.5/0.25 weights. Output length always equals input length.
    """
    if len(values) < 2:
        return list(values)

    last = len(values) - 1
    smoothed = []
    for i, v in enumerate(values):
        if i == 0:
            smoothed.append((values[0] + values[1]) / 2)
        elif i == last:
            smoothed.append((values[i - 1] + v) / 2)
        else:
            smoothed.append(values[i - 1] * 0.25 + v * 0.5 + values[i + 1] * 0.25)
    return smoothed


def normalize_split(values: Sequence[float]) -> list[int]:
    """Scale raw category weights to whole percentages.

    Each share is rounded on its own, so the total may land a point or two
    away from 100.
    """
    total = sum(values)
    if total <= 0:
        return [0 for _ in values]
    return [round_half_up(v / total * 100) for v in values]


def percentage(count: int, total: int) -> int:
    return round_half_up(count / total * 100) if total > 0 else 0


def bucket_count(time_range: int, cap: int = 30) -> int:
    return max(0, min(time_range, cap))


def time_labels(time_range: int, target_label_count: int = 7) -> list[str]:
    """X-axis labels for a daily series of ``min(time_range, 30)`` buckets.

    Up to a week every bucket gets a weekday; up to two weeks every second
    bucket gets ``D{n}``; beyond that labels are thinned to roughly
    ``target_label_count``.
    """
    points = bucket_count(time_range)
    if time_range <= 7:
        return [WEEKDAY_ABBREVIATIONS[i % 7] for i in range(points)]
    if time_range <= 14:
        return [f"D{i + 1}" if i % 2 == 0 else "" for i in range(points)]

    step = max(1, math.ceil(points / target_label_count))
    return [f"D{i + 1}" if i % step == 0 else "" for i in range(points)]
