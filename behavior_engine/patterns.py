"""Behavioral pattern recognition over focus, estimate and energy history."""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Sequence

from behavior_engine.aggregation import aggregate, weekday_hour
from behavior_engine.logging_config import get_logger
from behavior_engine.results import (
    CrashTrigger,
    KeywordEstimate,
    ProductivityCondition,
    RecognizedPattern,
    clamp,
    round_half_up,
)
from behavior_engine.schema import EnergyDataPoint, FocusDataPoint, TaskEstimateSample
from behavior_engine.trend import pearson

logger = get_logger(__name__)

DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

AFTERNOON_DIP = "afternoon dip (2-4pm)"
TASK_SUCCESSION = "completing multiple tasks in succession"
LONG_SESSION = "long work sessions without breaks"
UNKNOWN_TRIGGER = "unknown trigger"

_TRIGGER_SLUGS = {
    AFTERNOON_DIP: "afternoon-dip",
    TASK_SUCCESSION: "task-succession",
    LONG_SESSION: "long-session",
    UNKNOWN_TRIGGER: "unknown",
}
_TRIGGER_ADVICE = {
    AFTERNOON_DIP: "Plan light or routine work between 2pm and 5pm",
    TASK_SUCCESSION: "Take a short reset after finishing several tasks in a row",
    LONG_SESSION: "Break up sessions longer than 90 minutes",
    UNKNOWN_TRIGGER: "Log what you were doing before energy drops to reveal the cause",
}

MIN_KEYWORD_SAMPLES = 3
MIN_KEYWORD_LENGTH = 4
KEYWORD_DELTA_THRESHOLD = 20.0
CRASH_DROP = 2
LONG_SESSION_MINUTES = 90
MIN_CONDITION_SAMPLES = 6
MORNING_MULTIPLIER = 1.5
HIGH_ENERGY_MULTIPLIER = 1.3
MIN_CORRELATION_SAMPLES = 10
CORRELATION_THRESHOLD = 0.5

MORNING_CONDITION = "working in the morning"
HIGH_ENERGY_CONDITION = "having high energy levels"
_CONDITION_TEXT = {
    MORNING_CONDITION: ("morning", "Block your mornings for your most important work"),
    HIGH_ENERGY_CONDITION: ("high-energy", "Save demanding tasks for when you feel energized"),
}


def find_optimal_focus_times(points: Iterable[FocusDataPoint], top: int = 3) -> list[RecognizedPattern]:
    """Rank (weekday, hour) buckets by mean focus quality."""

    buckets = aggregate(points, weekday_hour, lambda p: p.quality)
    ranked = sorted(buckets.items(), key=lambda item: (-item[1].mean, -item[1].count, item[0]))

    patterns = []
    for index, ((weekday, hour), stats) in enumerate(ranked[:top]):
        day_name = DAY_NAMES[weekday]
        time_str = f"{hour}:00"
        patterns.append(
            RecognizedPattern(
                id=f"optimal-time-{index}",
                kind="time-of-day",
                confidence=clamp(stats.count / 10),
                insight=f"You focus best at {time_str} on {day_name}s",
                metric="focus-quality",
                value=round_half_up(stats.mean),
                context=f"Based on {stats.count} sessions",
                recommendation=f"Schedule your most important tasks for {day_name}s at {time_str}",
                impact="high",
            )
        )
    return patterns


def _keywords(title: str) -> list[str]:
    return [word for word in title.lower().split() if len(word) >= MIN_KEYWORD_LENGTH]


def keyword_estimates(samples: Iterable[TaskEstimateSample]) -> list[KeywordEstimate]:
    """Find title keywords whose tasks are consistently mis-estimated."""

    estimated: dict[str, list[float]] = defaultdict(list)
    actual: dict[str, list[float]] = defaultdict(list)
    for sample in samples:
        for word in _keywords(sample.title):
            estimated[word].append(sample.estimated_minutes)
            actual[word].append(sample.actual_minutes)

    found = []
    for keyword, estimates in estimated.items():
        count = len(estimates)
        if count < MIN_KEYWORD_SAMPLES:
            continue
        avg_estimated = sum(estimates) / count
        if avg_estimated == 0:
            continue
        avg_actual = sum(actual[keyword]) / count
        delta = (avg_actual - avg_estimated) / avg_estimated * 100.0
        if abs(delta) <= KEYWORD_DELTA_THRESHOLD:
            continue
        found.append((abs(delta), keyword, avg_estimated, avg_actual, delta, count))

    found.sort(key=lambda row: (-row[0], row[1]))
    return [
        KeywordEstimate(
            keyword=keyword,
            avg_estimated_minutes=int(round_half_up(avg_estimated)),
            avg_actual_minutes=int(round_half_up(avg_actual)),
            accuracy_delta=round_half_up(delta),
            sample_size=count,
            confidence=clamp(count / 10),
        )
        for _, keyword, avg_estimated, avg_actual, delta, count in found
    ]


def analyze_task_estimation_accuracy(samples: Iterable[TaskEstimateSample]) -> list[RecognizedPattern]:
    """Report keyword estimation bias as recognized patterns."""

    patterns = []
    for estimate in keyword_estimates(samples):
        magnitude = int(abs(estimate.accuracy_delta))
        if estimate.accuracy_delta > 0:
            insight = f"Tasks mentioning '{estimate.keyword}' take {magnitude}% longer than you estimate"
            recommendation = f"Add a {magnitude}% buffer when estimating '{estimate.keyword}' tasks"
        else:
            insight = f"Tasks mentioning '{estimate.keyword}' take {magnitude}% less time than you estimate"
            recommendation = f"You can budget less time for '{estimate.keyword}' tasks"
        patterns.append(
            RecognizedPattern(
                id=f"task-keyword-{estimate.keyword}",
                kind="task-keyword",
                confidence=estimate.confidence,
                insight=insight,
                metric="estimation-accuracy-delta",
                value=estimate.accuracy_delta,
                context=f"Based on {estimate.sample_size} tasks",
                recommendation=recommendation,
                impact="high" if magnitude > 50 else "medium",
            )
        )
    return patterns


def _classify_crash(before: EnergyDataPoint, minutes_between: float) -> str:
    if 14 <= before.timestamp.hour <= 16:
        return AFTERNOON_DIP
    if before.tasks_completed > 5:
        return TASK_SUCCESSION
    if minutes_between > LONG_SESSION_MINUTES:
        return LONG_SESSION
    return UNKNOWN_TRIGGER


def crash_triggers(points: Iterable[EnergyDataPoint]) -> list[CrashTrigger]:
    """Group energy drops of two or more levels by their likely trigger."""

    ordered = sorted(points, key=lambda p: p.timestamp)
    totals: dict[str, list[float]] = {}
    for before, after in zip(ordered, ordered[1:]):
        if before.energy_level - after.energy_level < CRASH_DROP:
            continue
        minutes_between = (after.timestamp - before.timestamp).total_seconds() / 60.0
        trigger = _classify_crash(before, minutes_between)
        row = totals.setdefault(trigger, [0, 0.0, 0.0, 0.0])
        row[0] += 1
        row[1] += before.energy_level
        row[2] += after.energy_level
        row[3] += minutes_between

    triggers = [
        CrashTrigger(
            trigger=trigger,
            before_energy=before_sum / count,
            after_energy=after_sum / count,
            time_delta_minutes=int(round_half_up(minutes_sum / count)),
            occurrences=int(count),
            confidence=clamp(count / 5),
        )
        for trigger, (count, before_sum, after_sum, minutes_sum) in totals.items()
    ]
    return sorted(triggers, key=lambda t: (-t.occurrences, t.trigger))


def detect_energy_crash_triggers(points: Iterable[EnergyDataPoint]) -> list[RecognizedPattern]:
    """Report energy crash triggers as recognized patterns."""

    patterns = []
    for trigger in crash_triggers(points):
        if trigger.trigger == UNKNOWN_TRIGGER:
            impact = "low"
        else:
            impact = "high" if trigger.occurrences >= 3 else "medium"
        patterns.append(
            RecognizedPattern(
                id=f"energy-crash-{_TRIGGER_SLUGS[trigger.trigger]}",
                kind="energy-crash",
                confidence=trigger.confidence,
                insight=f"Your energy tends to crash after {trigger.trigger}",
                metric="energy-drop",
                value=round_half_up(trigger.before_energy - trigger.after_energy, 1),
                context=f"{trigger.occurrences} crashes, about {trigger.time_delta_minutes} minutes apart",
                recommendation=_TRIGGER_ADVICE[trigger.trigger],
                impact=impact,
            )
        )
    return patterns


def _mean_tasks(points: Sequence[EnergyDataPoint]) -> float:
    return sum(p.tasks_completed for p in points) / len(points) if points else 0.0


def productivity_conditions(points: Iterable[EnergyDataPoint]) -> list[ProductivityCondition]:
    """Compare subgroup completion rates against the overall mean."""

    data = list(points)
    overall = _mean_tasks(data)
    if overall == 0:
        return []

    subgroups = (
        (
            MORNING_CONDITION,
            [p for p in data if 6 <= p.timestamp.hour < 12],
            MORNING_MULTIPLIER,
            ("6am-12pm",),
        ),
        (
            HIGH_ENERGY_CONDITION,
            [p for p in data if p.energy_level >= 4],
            HIGH_ENERGY_MULTIPLIER,
            ("energy level 4-5",),
        ),
    )

    conditions = []
    for name, subgroup, threshold, contexts in subgroups:
        if len(subgroup) < MIN_CONDITION_SAMPLES:
            continue
        multiplier = _mean_tasks(subgroup) / overall
        if multiplier <= threshold:
            continue
        conditions.append(
            ProductivityCondition(
                condition=name,
                multiplier=round_half_up(multiplier, 1),
                sample_size=len(subgroup),
                contexts=contexts,
                confidence=clamp(len(subgroup) / 20),
            )
        )
    return sorted(conditions, key=lambda c: (-c.multiplier, c.condition))


def find_productivity_conditions(points: Iterable[EnergyDataPoint]) -> list[RecognizedPattern]:
    """Report high-productivity conditions as recognized patterns."""

    patterns = []
    for condition in productivity_conditions(points):
        slug, advice = _CONDITION_TEXT[condition.condition]
        patterns.append(
            RecognizedPattern(
                id=f"condition-{slug}",
                kind="productivity-condition",
                confidence=condition.confidence,
                insight=f"You're {condition.multiplier}x more productive when {condition.condition}",
                metric="productivity-multiplier",
                value=condition.multiplier,
                context=f"Based on {condition.sample_size} check-ins ({', '.join(condition.contexts)})",
                recommendation=advice,
                impact="high" if condition.multiplier >= 2 else "medium",
            )
        )
    return patterns


def energy_productivity_correlation(points: Iterable[EnergyDataPoint]) -> float:
    """Pearson correlation between energy level and tasks completed."""

    data = list(points)
    return pearson([p.energy_level for p in data], [p.tasks_completed for p in data])


def find_energy_correlation(points: Iterable[EnergyDataPoint]) -> list[RecognizedPattern]:
    """Surface a strong energy/productivity link as a productivity-condition pattern."""

    data = list(points)
    if len(data) < MIN_CORRELATION_SAMPLES:
        return []
    r = energy_productivity_correlation(data)
    if abs(r) < CORRELATION_THRESHOLD:
        return []

    direction = "more" if r > 0 else "fewer"
    return [
        RecognizedPattern(
            id="condition-energy-correlation",
            kind="productivity-condition",
            confidence=clamp(len(data) / 20),
            insight=f"You complete {direction} tasks when your energy is higher",
            metric="energy-productivity-correlation",
            value=round_half_up(r, 2),
            context=f"Pearson r over {len(data)} check-ins",
            recommendation="Match demanding tasks to your high-energy check-ins",
            impact="medium",
        )
    ]


def recognize_patterns(
    focus_points: Iterable[FocusDataPoint] = (),
    estimate_samples: Iterable[TaskEstimateSample] = (),
    energy_points: Iterable[EnergyDataPoint] = (),
    limit: int | None = None,
) -> list[RecognizedPattern]:
    """Run every analysis and merge the results by confidence."""

    energy = list(energy_points)
    merged = [
        *find_optimal_focus_times(focus_points),
        *analyze_task_estimation_accuracy(estimate_samples),
        *detect_energy_crash_triggers(energy),
        *find_productivity_conditions(energy),
        *find_energy_correlation(energy),
    ]
    merged.sort(key=lambda p: (-p.confidence, p.id))
    logger.debug("patterns_recognized", count=len(merged), limit=limit)
    return merged if limit is None else merged[:limit]
