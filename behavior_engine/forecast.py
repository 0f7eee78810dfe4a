"""Same-weekday hourly energy forecast."""

from __future__ import annotations

from datetime import date
from typing import Iterable

from behavior_engine.aggregation import aggregate
from behavior_engine.results import EnergyForecast, HourlyPrediction, clamp, round_half_up
from behavior_engine.schema import EnergyDataPoint
from behavior_engine.trend import trend_label

FORECAST_HOURS = range(6, 24)
DEFAULT_ENERGY = 3.0
DEFAULT_CONFIDENCE = 0.3
MAX_CONFIDENCE = 0.9
TREND_THRESHOLD = 0.5


def _factors(hour: int) -> tuple[str, ...]:
    factors = []
    if 6 <= hour < 10:
        factors.append("morning boost")
    if 14 <= hour < 16:
        factors.append("afternoon dip")
    if hour >= 20:
        factors.append("evening wind-down")
    return tuple(factors)


def forecast_energy(points: Iterable[EnergyDataPoint], target_date: date) -> EnergyForecast:
    """Predict energy for hours 6-23 of target_date from same-weekday history."""

    weekday = target_date.weekday()
    by_hour = aggregate(
        (p for p in points if p.timestamp.weekday() == weekday),
        lambda p: p.timestamp.hour,
        lambda p: p.energy_level,
    )

    predictions = []
    for hour in FORECAST_HOURS:
        stats = by_hour.get(hour)
        if stats is None or stats.count == 0:
            predicted, confidence = DEFAULT_ENERGY, DEFAULT_CONFIDENCE
        else:
            predicted = clamp(round_half_up(stats.mean, 1), 1.0, 5.0)
            confidence = min(stats.count / 10, MAX_CONFIDENCE)
        predictions.append(
            HourlyPrediction(hour=hour, predicted_energy=predicted, confidence=confidence, factors=_factors(hour))
        )

    first = sum(p.predicted_energy for p in predictions[:6]) / 6
    last = sum(p.predicted_energy for p in predictions[-6:]) / 6

    return EnergyForecast(
        target_date=target_date,
        hourly_predictions=tuple(predictions),
        overall_trend=trend_label(last - first, TREND_THRESHOLD),
    )
