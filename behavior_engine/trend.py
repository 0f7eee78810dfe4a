"""Lightweight trend and correlation estimates."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from behavior_engine.errors import InvalidInputError


def slope(series: Sequence[float]) -> float:
    """Ordinary least-squares slope of the series against its index."""

    n = len(series)
    if n < 2:
        return 0.0

    x = np.arange(n, dtype=float)
    y = np.asarray(series, dtype=float)
    numerator = n * float(np.dot(x, y)) - float(x.sum()) * float(y.sum())
    denominator = n * float(np.dot(x, x)) - float(x.sum()) ** 2
    if denominator == 0:
        return 0.0
    return numerator / denominator


def pearson(xs: Sequence[float], ys: Sequence[float]) -> float:
    """Pearson correlation coefficient, 0.0 when undefined."""

    if len(xs) != len(ys):
        raise InvalidInputError(f"pearson needs equal-length series, got {len(xs)} and {len(ys)}")
    if len(xs) < 3:
        return 0.0

    x = np.asarray(xs, dtype=float)
    y = np.asarray(ys, dtype=float)
    dx = x - x.mean()
    dy = y - y.mean()
    denominator = float(np.sqrt(np.dot(dx, dx) * np.dot(dy, dy)))
    if denominator == 0:
        return 0.0
    return max(-1.0, min(1.0, float(np.dot(dx, dy)) / denominator))


def trend_label(delta: float, threshold: float = 0.5) -> str:
    """Classify a change as increasing, stable or decreasing."""

    if delta > threshold:
        return "increasing"
    if delta < -threshold:
        return "decreasing"
    return "stable"
