"""Direction of a monthly series: increasing, decreasing or stable."""

from __future__ import annotations

from typing import Sequence

INCREASING = "increasing"
DECREASING = "decreasing"
STABLE = "stable"

DEFAULT_THRESHOLD = 5.0


def percent_change(values: Sequence[float]) -> float:
    """Change of the second-half average against the first-half average.

    The split point is ``len(values) // 2``. Returns 0 when there are fewer
    than two values or the first-half average is not positive.
    """

    if len(values) < 2:
        return 0.0
    middle = len(values) // 2
    first, second = values[:middle], values[middle:]
    first_avg = sum(first) / len(first)
    second_avg = sum(second) / len(second)
    if first_avg <= 0:
        return 0.0
    return (second_avg - first_avg) / first_avg * 100


def classify(values: Sequence[float], threshold: float = DEFAULT_THRESHOLD) -> str:
    change = percent_change(values)
    if change > threshold:
        return INCREASING
    if change < -threshold:
        return DECREASING
    return STABLE
