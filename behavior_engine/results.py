"""Value objects returned by the analytics components."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


PATTERN_KINDS = ("time-of-day", "task-keyword", "energy-crash", "productivity-condition")


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """Bound a value to [low, high]."""

    return max(low, min(high, value))


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves toward positive infinity."""

    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


@dataclass(frozen=True)
class RecognizedPattern:
    """A ranked, confidence-scored behavioral insight."""

    id: str
    kind: str
    confidence: float
    insight: str
    metric: str
    value: float
    context: str
    recommendation: str
    impact: str


@dataclass(frozen=True)
class KeywordEstimate:
    keyword: str
    avg_estimated_minutes: int
    avg_actual_minutes: int
    accuracy_delta: float
    sample_size: int
    confidence: float


@dataclass(frozen=True)
class CrashTrigger:
    trigger: str
    before_energy: float
    after_energy: float
    time_delta_minutes: int
    occurrences: int
    confidence: float


@dataclass(frozen=True)
class ProductivityCondition:
    condition: str
    multiplier: float
    sample_size: int
    contexts: tuple[str, ...]
    confidence: float


@dataclass(frozen=True)
class HourlyPrediction:
    hour: int
    predicted_energy: float
    confidence: float
    factors: tuple[str, ...]


@dataclass(frozen=True)
class EnergyForecast:
    target_date: date
    hourly_predictions: tuple[HourlyPrediction, ...]
    overall_trend: str


@dataclass(frozen=True)
class RiskFactor:
    factor_name: str
    contribution: float
    trend: str


@dataclass(frozen=True)
class BurnoutRisk:
    risk_level: str
    score: int
    factors: tuple[RiskFactor, ...]
    recommendation: str
    next_check_in: date


@dataclass(frozen=True)
class ScheduleSlot:
    task_id: str
    task_title: str
    start_time: datetime
    end_time: datetime
    reason: str
    energy_level: float
    confidence: float


@dataclass(frozen=True)
class OptimalSchedule:
    date: date
    slots: tuple[ScheduleSlot, ...]


@dataclass(frozen=True)
class BreakRecommendation:
    suggested_time: datetime
    duration_minutes: int
    kind: str
    reason: str
    urgency: str


@dataclass(frozen=True)
class ComponentScores:
    energy_match: float
    urgency: float
    importance: float
    procrastination_risk: float


@dataclass(frozen=True)
class PrioritizedTask:
    """One entry of the context-aware task ranking."""

    task_id: str
    title: str
    priority_score: int
    reasons: tuple[str, ...]
    suggested_time: Optional[datetime]
    component_scores: ComponentScores

    @property
    def reasoning(self) -> str:
        return " • ".join(self.reasons) if self.reasons else "Standard priority"


@dataclass(frozen=True)
class SummaryStats:
    total_focus_minutes: float
    avg_focus_quality: float
    avg_energy_level: float
    tasks_completed: int
    total_distractions: int


@dataclass(frozen=True)
class HeatmapCell:
    date: date
    hour: int
    value: int


@dataclass(frozen=True)
class LandscapePoint:
    hour: int
    weekday: int
    quality: float
    color: str
    label: Optional[str] = None


@dataclass(frozen=True)
class ProductivityLandscape:
    points: tuple[LandscapePoint, ...]
    peaks: tuple[LandscapePoint, ...]
    valleys: tuple[LandscapePoint, ...]
