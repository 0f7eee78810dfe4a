"""Rule-based break recommendations."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from behavior_engine.results import BreakRecommendation
from behavior_engine.schema import check_range

_URGENCY_ORDER = {"high": 0, "medium": 1, "low": 2}


def recommend_breaks(
    focus_minutes: float,
    energy_level: float,
    now: Optional[datetime] = None,
) -> list[BreakRecommendation]:
    """Return every applicable break, most urgent first."""

    check_range("focus_minutes", focus_minutes, 0)
    check_range("energy_level", energy_level, 1, 5)
    now = now or datetime.now()

    recommendations = []
    if focus_minutes >= 25:
        recommendations.append(
            BreakRecommendation(
                suggested_time=now + timedelta(minutes=5),
                duration_minutes=5,
                kind="micro",
                reason="You've been focusing for 25+ minutes. Time for a quick stretch!",
                urgency="medium",
            )
        )
    if energy_level <= 2:
        recommendations.append(
            BreakRecommendation(
                suggested_time=now,
                duration_minutes=15,
                kind="short",
                reason="Your energy is low. A longer break will help you recharge.",
                urgency="high",
            )
        )
    if focus_minutes >= 120:
        recommendations.append(
            BreakRecommendation(
                suggested_time=now,
                duration_minutes=30,
                kind="long",
                reason="You've been working for 2+ hours. Time for a proper break!",
                urgency="high",
            )
        )

    return sorted(recommendations, key=lambda r: _URGENCY_ORDER[r.urgency])
