"""Descriptive statistics over recorded hit magnitudes."""

from __future__ import annotations

import statistics
from collections.abc import Sequence

from eqsim.records import HitStats


def mode(values: Sequence[int]) -> int:
    """The value that first reaches the highest count while scanning in order.

    With [1, 2, 2, 1] this is 2: it gets to two occurrences before 1 does.
    (statistics.mode would say 1, the first-seen of the tied values.)
    """
    counts: dict[int, int] = {}
    best, best_count = values[0], 0
    for v in values:
        counts[v] = counts.get(v, 0) + 1
        if counts[v] > best_count:
            best, best_count = v, counts[v]
    return best


def hit_stats(values: Sequence[int]) -> HitStats:
    """Min, max, mean, median and mode; all None for an empty list.

    The median of an even-length list is the mean of its two middle values.
    """
    if not values:
        return HitStats()
    return HitStats(
        min=min(values),
        max=max(values),
        mean=sum(values) / len(values),
        median=statistics.median(values),
        mode=mode(values),
    )
