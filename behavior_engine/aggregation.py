"""Calendar bucket aggregation of time-stamped samples."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Hashable, Iterable, TypeVar

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


@dataclass(frozen=True)
class BucketStats:
    """Summary of the values that fell into one bucket."""

    sum: float
    count: int

    @property
    def mean(self) -> float:
        return self.sum / self.count if self.count else 0.0


def aggregate(
    points: Iterable[T],
    key_fn: Callable[[T], K],
    value_fn: Callable[[T], float],
) -> dict[K, BucketStats]:
    """Group points by a caller-supplied key and reduce each bucket to sum/count/mean."""

    sums: dict[K, float] = defaultdict(float)
    counts: dict[K, int] = defaultdict(int)
    for point in points:
        key = key_fn(point)
        sums[key] += float(value_fn(point))
        counts[key] += 1

    return {key: BucketStats(sum=sums[key], count=counts[key]) for key in sums}


def weekday_hour(point) -> tuple[int, int]:
    """Bucket key (weekday, hour) for a FocusDataPoint; Monday is 0."""

    return point.date.weekday(), point.hour
