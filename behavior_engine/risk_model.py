"""Trend-based burnout risk scoring."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional, Sequence

from behavior_engine.logging_config import get_logger
from behavior_engine.results import BurnoutRisk, RiskFactor, clamp, round_half_up
from behavior_engine.schema import check_range
from behavior_engine.trend import slope

logger = get_logger(__name__)

WORK_HOURS_LIMIT = 8.0
DECLINE_SLOPE = -0.1

_LEVELS = (
    (70, "critical", 1, "Take immediate action. Consider taking a day off and speaking with a healthcare provider."),
    (50, "high", 3, "Reduce your workload and prioritize rest. Schedule breaks throughout the day."),
    (30, "moderate", 7, "Be mindful of your energy. Add more self-care activities to your routine."),
)
_LOW = ("low", 7, "You're doing great! Keep maintaining healthy work-rest balance.")


def _validate(name: str, values: Sequence[float], low: float, high: float | None = None) -> None:
    for index, value in enumerate(values):
        check_range(f"{name}[{index}]", value, low, high)


def _decline_contribution(series: Sequence[float]) -> float:
    trend = slope(series)
    if trend >= DECLINE_SLOPE:
        return 0.0
    return min(abs(trend) / 2, 0.3)


def score_burnout(
    focus_hours: Sequence[float],
    energy_levels: Sequence[float],
    completion_rates: Sequence[float],
    today: Optional[date] = None,
) -> BurnoutRisk:
    """Combine work load, energy decline and completion decline into one risk score."""

    _validate("focus_hours", focus_hours, 0, 24)
    _validate("energy_levels", energy_levels, 1, 5)
    _validate("completion_rates", completion_rates, 0)

    factors = []
    total = 0.0

    avg_hours = sum(focus_hours) / len(focus_hours) if focus_hours else 0.0
    if avg_hours > WORK_HOURS_LIMIT:
        contribution = min((avg_hours - WORK_HOURS_LIMIT) / WORK_HOURS_LIMIT, 0.4)
        factors.append(RiskFactor("Long work hours", contribution, "worsening"))
        total += contribution * 100

    for name, series in (
        ("Declining energy levels", energy_levels),
        ("Decreasing task completion", completion_rates),
    ):
        contribution = _decline_contribution(series)
        if contribution > 0:
            factors.append(RiskFactor(name, contribution, "worsening"))
            total += contribution * 100

    total = clamp(total, 0.0, 100.0)
    level, days, recommendation = _LOW
    for threshold, name, check_in_days, text in _LEVELS:
        if total > threshold:
            level, days, recommendation = name, check_in_days, text
            break

    today = today or date.today()
    logger.debug("burnout_scored", score=total, level=level, factors=len(factors))
    return BurnoutRisk(
        risk_level=level,
        score=int(round_half_up(total)),
        factors=tuple(factors),
        recommendation=recommendation,
        next_check_in=today + timedelta(days=days),
    )
