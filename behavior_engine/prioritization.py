"""Context-aware task prioritization.

Each pending task is scored against a live context snapshot on seven
components (energy match, urgency, importance, procrastination risk, time of
day, weather, streak protection). The composite uses fixed weights; the streak
weight stays in the formula even when no streak is at risk, in which case its
component is zero.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, Optional, Sequence

from behavior_engine.logging_config import get_logger
from behavior_engine.results import ComponentScores, PrioritizedTask, clamp, round_half_up
from behavior_engine.schema import (
    Deadline,
    EnergyLevel,
    PrioritizationContext,
    ProcrastinationEvent,
    TaskSnapshot,
)

logger = get_logger(__name__)

WEIGHTS = {
    "energy": 0.25,
    "urgency": 0.30,
    "importance": 0.20,
    "procrastination": 0.10,
    "time_of_day": 0.10,
    "weather": 0.05,
    "streak": 0.10,
}

_URGENCY_STEPS = ((0, 1.0), (2, 0.95), (6, 0.9), (24, 0.8), (72, 0.6), (168, 0.4))
_TIME_OF_DAY_ENERGY = {
    "morning": EnergyLevel.HIGH,
    "afternoon": EnergyLevel.MEDIUM,
    "evening": EnergyLevel.LOW,
    "night": EnergyLevel.LOW,
}
_WEATHER_ENERGY = {
    "sunny": EnergyLevel.HIGH,
    "cloudy": EnergyLevel.MEDIUM,
    "rainy": EnergyLevel.LOW,
    "stormy": EnergyLevel.LOW,
    "foggy": EnergyLevel.LOW,
}
_PEAK_HOURS = {
    EnergyLevel.LOW: (21, 22, 23, 0),
    EnergyLevel.MEDIUM: (13, 14, 15, 16),
    EnergyLevel.HIGH: (9, 10, 11),
}
DEADLINE_BUFFER = timedelta(hours=4)
RECENT_WINDOW = timedelta(hours=24)
DEFAULT_ESTIMATE_MINUTES = 60


def energy_match(task: TaskSnapshot, current_energy: float) -> float:
    return clamp(1 - abs(task.energy_level.numeric - current_energy) / 4)


def urgency_for_hours(hours_until_due: float) -> float:
    """Step function from hours-until-due to urgency."""

    for limit, score in _URGENCY_STEPS:
        if hours_until_due < limit:
            return score
    return 0.2


def urgency(task: TaskSnapshot, deadlines: Sequence[Deadline], now: datetime) -> float:
    if task.due_date is None:
        return 0.3
    entry = next((d for d in deadlines if d.task_id == task.id), None)
    if entry is not None:
        hours = entry.hours_until_due
    else:
        hours = (task.due_date - now).total_seconds() / 3600.0
    return urgency_for_hours(hours)


def importance(task: TaskSnapshot) -> float:
    score = task.priority / 10
    if task.dependencies:
        score += 0.1
    if task.collaborators:
        score += 0.15
    return clamp(min(score, 1.0))


def procrastination_risk(task: TaskSnapshot, events: Sequence[ProcrastinationEvent], now: datetime) -> float:
    own = [e for e in events if e.task_id == task.id]
    if not own:
        return 0.3
    base = min(len(own) * 0.2, 0.7)
    recent = 0.3 if any(now - e.recorded_at < RECENT_WINDOW for e in own) else 0.0
    return clamp(base + recent)


def time_of_day_score(task: TaskSnapshot, time_of_day: str) -> float:
    return 1.0 if task.energy_level == _TIME_OF_DAY_ENERGY[time_of_day] else 0.5


def weather_score(task: TaskSnapshot, weather: Optional[str]) -> float:
    if weather is None:
        return 0.5
    return 1.0 if task.energy_level == _WEATHER_ENERGY[weather] else 0.6


def streak_protection(task: TaskSnapshot) -> float:
    """Favor quick, easy wins when the streak needs saving."""

    minutes = task.estimated_minutes if task.estimated_minutes is not None else DEFAULT_ESTIMATE_MINUTES
    is_quick = minutes <= 15
    is_easy = task.difficulty is not None and task.difficulty <= 3
    if is_quick and is_easy:
        return 1.0
    if is_quick or is_easy:
        return 0.7
    return 0.3


def _reasons(task: TaskSnapshot, scores: dict[str, float], context: PrioritizationContext) -> tuple[str, ...]:
    reasons: list[str] = []
    if scores["urgency"] > 0.8:
        reasons.append("Due very soon")
    elif scores["urgency"] > 0.6:
        reasons.append("Approaching deadline")

    if scores["energy"] > 0.8:
        reasons.append("Perfect energy match")
    elif scores["energy"] < 0.4:
        reasons.append("Energy mismatch - consider later")

    if scores["importance"] > 0.8:
        reasons.append("High importance")
    if scores["procrastination"] > 0.7:
        reasons.append("High procrastination risk - tackle early")
    if context.streak_at_risk and scores["streak"] > 0.7:
        reasons.append("Streak saver")
    if task.has_blockers:
        reasons.append("Has blockers")
    if task.collaborators:
        reasons.append("Team is waiting")

    return tuple(dict.fromkeys(reasons))


def suggest_time(task: TaskSnapshot, now: datetime) -> datetime:
    """Four hours before the deadline if still ahead, else the next peak hour for the task's energy."""

    if task.due_date is not None:
        buffered = task.due_date - DEADLINE_BUFFER
        if buffered > now:
            return buffered

    peak_hours = _PEAK_HOURS[task.energy_level]
    top_of_hour = now.replace(minute=0, second=0, microsecond=0)
    candidates = (top_of_hour + timedelta(hours=offset) for offset in range(1, 25))
    return next(c for c in candidates if c.hour in peak_hours)


def score_task(task: TaskSnapshot, context: PrioritizationContext, now: datetime) -> PrioritizedTask:
    """Score one task against the context."""

    scores = {
        "energy": energy_match(task, context.current_energy),
        "urgency": urgency(task, context.upcoming_deadlines, now),
        "importance": importance(task),
        "procrastination": procrastination_risk(task, context.recent_procrastination, now),
        "time_of_day": time_of_day_score(task, context.time_of_day),
        "weather": weather_score(task, context.weather),
        "streak": streak_protection(task) if context.streak_at_risk else 0.0,
    }

    composite = (
        scores["energy"] * WEIGHTS["energy"]
        + scores["urgency"] * WEIGHTS["urgency"]
        + scores["importance"] * WEIGHTS["importance"]
        + (1 - scores["procrastination"]) * WEIGHTS["procrastination"]
        + scores["time_of_day"] * WEIGHTS["time_of_day"]
        + scores["weather"] * WEIGHTS["weather"]
        + scores["streak"] * WEIGHTS["streak"]
    )

    return PrioritizedTask(
        task_id=task.id,
        title=task.title,
        priority_score=int(clamp(round_half_up(composite * 100), 0, 100)),
        reasons=_reasons(task, scores, context),
        suggested_time=suggest_time(task, now),
        component_scores=ComponentScores(
            energy_match=scores["energy"],
            urgency=scores["urgency"],
            importance=scores["importance"],
            procrastination_risk=scores["procrastination"],
        ),
    )


def prioritize(
    tasks: Iterable[TaskSnapshot],
    context: PrioritizationContext,
    now: Optional[datetime] = None,
) -> list[PrioritizedTask]:
    """Rank tasks by priority score, then urgency, then task id."""

    now = now or datetime.now()
    ranked = [score_task(task, context, now) for task in tasks]
    ranked.sort(key=lambda t: (-t.priority_score, -t.component_scores.urgency, t.task_id))
    logger.debug("tasks_prioritized", count=len(ranked), time_of_day=context.time_of_day)
    return ranked


def current_time_of_day(now: Optional[datetime] = None) -> str:
    """Map the clock hour to morning, afternoon, evening or night."""

    hour = (now or datetime.now()).hour
    if 5 <= hour < 12:
        return "morning"
    if 12 <= hour < 17:
        return "afternoon"
    if 17 <= hour < 21:
        return "evening"
    return "night"


def build_context(
    tasks: Iterable[TaskSnapshot],
    now: Optional[datetime] = None,
    current_energy: float = 3,
    weather: Optional[str] = None,
    procrastination: Iterable[ProcrastinationEvent] = (),
    current_streak: int = 0,
    completed_today: int = 0,
) -> PrioritizationContext:
    """Assemble a context from data the host has already fetched."""

    now = now or datetime.now()
    deadlines = sorted(
        (
            Deadline(task.id, (task.due_date - now).total_seconds() / 3600.0)
            for task in tasks
            if task.due_date is not None
        ),
        key=lambda d: (d.hours_until_due, d.task_id),
    )
    return PrioritizationContext(
        current_energy=current_energy,
        time_of_day=current_time_of_day(now),
        weather=weather,
        upcoming_deadlines=tuple(deadlines),
        recent_procrastination=tuple(procrastination),
        streak_at_risk=current_streak > 0 and completed_today == 0,
    )
