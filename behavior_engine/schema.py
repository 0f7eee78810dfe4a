"""Core input records for behavioral analytics."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional

from behavior_engine.errors import InvalidInputError


class EnergyLevel(str, Enum):
    """Declared energy a task demands."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @property
    def numeric(self) -> int:
        return _ENERGY_NUMERIC[self]


_ENERGY_NUMERIC = {EnergyLevel.LOW: 2, EnergyLevel.MEDIUM: 3, EnergyLevel.HIGH: 4}

TIMES_OF_DAY = ("morning", "afternoon", "evening", "night")
WEATHER_KINDS = ("sunny", "cloudy", "rainy", "stormy", "foggy")


def check_range(name: str, value: float, low: float, high: float | None = None) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"{name} must be numeric, got {value!r}")
    if not math.isfinite(value):
        raise InvalidInputError(f"{name} must be finite, got {value!r}")
    if value < low or (high is not None and value > high):
        bounds = f"[{low}, {high}]" if high is not None else f">= {low}"
        raise InvalidInputError(f"{name} must be {bounds}, got {value!r}")


def check_type(name: str, value, expected: type) -> None:
    if not isinstance(value, expected):
        raise InvalidInputError(f"{name} must be {expected.__name__}, got {type(value).__name__}")


def check_id(name: str, value) -> None:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(f"{name} must be a non-empty string, got {value!r}")


def parse_energy_level(value) -> EnergyLevel:
    """Coerce a LOW/MEDIUM/HIGH label into an EnergyLevel."""

    if isinstance(value, EnergyLevel):
        return value
    try:
        return EnergyLevel(str(value).strip().upper())
    except ValueError as exc:
        raise InvalidInputError(f"energy_level must be one of LOW, MEDIUM, HIGH, got {value!r}") from exc


@dataclass(frozen=True)
class FocusDataPoint:
    """Focus quality observed for one calendar hour."""

    date: date
    hour: int
    focus_minutes: float
    quality: float
    distraction_count: int = 0

    def __post_init__(self) -> None:
        check_type("date", self.date, date)
        if isinstance(self.hour, bool) or not isinstance(self.hour, int):
            raise InvalidInputError(f"hour must be an integer, got {self.hour!r}")
        check_range("hour", self.hour, 0, 23)
        check_range("focus_minutes", self.focus_minutes, 0)
        check_range("quality", self.quality, 0, 100)
        check_range("distraction_count", self.distraction_count, 0)


@dataclass(frozen=True)
class EnergyDataPoint:
    """Energy self-report with the productivity observed alongside it."""

    timestamp: datetime
    energy_level: float
    tasks_completed: int = 0
    focus_quality: float = 0.0
    working_memory_score: Optional[float] = None

    def __post_init__(self) -> None:
        check_type("timestamp", self.timestamp, datetime)
        check_range("energy_level", self.energy_level, 1, 5)
        check_range("tasks_completed", self.tasks_completed, 0)
        check_range("focus_quality", self.focus_quality, 0, 100)
        if self.working_memory_score is not None:
            check_range("working_memory_score", self.working_memory_score, 0)


@dataclass(frozen=True)
class TaskEstimateSample:
    """A completed task with its estimated and actual duration in minutes."""

    title: str
    estimated_minutes: float
    actual_minutes: float

    def __post_init__(self) -> None:
        check_type("title", self.title, str)
        check_range("estimated_minutes", self.estimated_minutes, 0)
        check_range("actual_minutes", self.actual_minutes, 0)


@dataclass(frozen=True)
class TaskSnapshot:
    """Pending task as seen by the prioritization engine."""

    id: str
    title: str
    energy_level: EnergyLevel
    priority: float
    estimated_minutes: Optional[float] = None
    due_date: Optional[datetime] = None
    difficulty: Optional[float] = None
    dependencies: frozenset[str] = field(default_factory=frozenset)
    has_blockers: bool = False
    collaborators: frozenset[str] = field(default_factory=frozenset)
    tags: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        check_id("task id", self.id)
        check_type("title", self.title, str)
        object.__setattr__(self, "energy_level", parse_energy_level(self.energy_level))
        check_range("priority", self.priority, 0, 10)
        if self.estimated_minutes is not None:
            check_range("estimated_minutes", self.estimated_minutes, 0)
        if self.due_date is not None:
            check_type("due_date", self.due_date, datetime)
        if self.difficulty is not None:
            check_range("difficulty", self.difficulty, 1, 10)
        for name in ("dependencies", "collaborators", "tags"):
            object.__setattr__(self, name, frozenset(getattr(self, name)))


@dataclass(frozen=True)
class PendingTask:
    """Task waiting for a slot in the optimal schedule."""

    id: str
    title: str
    energy_required: float
    estimated_minutes: float

    def __post_init__(self) -> None:
        check_id("task id", self.id)
        check_range("energy_required", self.energy_required, 1, 5)
        check_range("estimated_minutes", self.estimated_minutes, 0)

    @classmethod
    def from_snapshot(cls, task: TaskSnapshot, default_minutes: float = 60) -> "PendingTask":
        minutes = task.estimated_minutes if task.estimated_minutes is not None else default_minutes
        return cls(task.id, task.title, float(task.energy_level.numeric), minutes)


@dataclass(frozen=True)
class Deadline:
    """Hours remaining until a task is due; negative when overdue."""

    task_id: str
    hours_until_due: float

    def __post_init__(self) -> None:
        check_id("task_id", self.task_id)
        check_range("hours_until_due", self.hours_until_due, -math.inf)


@dataclass(frozen=True)
class ProcrastinationEvent:
    """A recorded deferral, skip or avoidance of a task."""

    task_id: str
    recorded_at: datetime

    def __post_init__(self) -> None:
        check_id("task_id", self.task_id)
        check_type("recorded_at", self.recorded_at, datetime)


@dataclass(frozen=True)
class PrioritizationContext:
    """Live snapshot of the user's situation at prioritization time."""

    current_energy: float
    time_of_day: str
    weather: Optional[str] = None
    upcoming_deadlines: tuple[Deadline, ...] = ()
    recent_procrastination: tuple[ProcrastinationEvent, ...] = ()
    streak_at_risk: bool = False

    def __post_init__(self) -> None:
        check_range("current_energy", self.current_energy, 1, 5)
        if self.time_of_day not in TIMES_OF_DAY:
            raise InvalidInputError(f"time_of_day must be one of {TIMES_OF_DAY}, got {self.time_of_day!r}")
        if self.weather is not None and self.weather not in WEATHER_KINDS:
            raise InvalidInputError(f"weather must be one of {WEATHER_KINDS}, got {self.weather!r}")
        object.__setattr__(self, "upcoming_deadlines", tuple(self.upcoming_deadlines))
        object.__setattr__(self, "recent_procrastination", tuple(self.recent_procrastination))
