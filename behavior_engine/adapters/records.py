"""Field conversion shared by the file adapters.

Raw items use the camelCase wire names. Values may be native JSON types or
CSV strings; every failure is reported with the caller's row/item label.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable, TypeVar

from behavior_engine.errors import InvalidInputError
from behavior_engine.schema import EnergyDataPoint, FocusDataPoint, TaskEstimateSample, TaskSnapshot

R = TypeVar("R")

FOCUS_FIELDS = ("date", "hour", "focusMinutes", "quality")
ENERGY_FIELDS = ("timestamp", "energyLevel")
ESTIMATE_FIELDS = ("title", "estimatedTime", "actualTime")
TASK_FIELDS = ("id", "title", "energyLevel", "priority")


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _require(item: dict, required: tuple[str, ...]) -> None:
    missing = [field for field in required if _blank(item.get(field))]
    if missing:
        raise InvalidInputError(f"missing required fields {missing}")


def _number(item: dict, key: str, default: Any = None) -> Any:
    raw = item.get(key)
    if _blank(raw):
        return default
    if isinstance(raw, bool):
        raise InvalidInputError(f"invalid {key}")
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"invalid {key}") from exc


def _integer(item: dict, key: str, default: Any = None) -> Any:
    value = _number(item, key, default)
    if value is None:
        return value
    if not float(value).is_integer():
        raise InvalidInputError(f"{key} must be a whole number")
    return int(value)


def _timestamp(item: dict, key: str) -> datetime | None:
    raw = item.get(key)
    if _blank(raw):
        return None
    try:
        return datetime.fromisoformat(str(raw).strip())
    except ValueError as exc:
        raise InvalidInputError(f"malformed {key}") from exc


def _calendar_date(item: dict, key: str) -> date:
    try:
        return date.fromisoformat(str(item[key]).strip()[:10])
    except ValueError as exc:
        raise InvalidInputError(f"malformed {key}") from exc


def _id_set(item: dict, key: str) -> frozenset[str]:
    raw = item.get(key)
    if _blank(raw):
        return frozenset()
    if isinstance(raw, str):
        return frozenset(part.strip() for part in raw.split(";") if part.strip())
    return frozenset(str(part).strip() for part in raw)


def _flag(item: dict, key: str) -> bool:
    raw = item.get(key)
    if isinstance(raw, str):
        return raw.strip().lower() in {"1", "true", "yes"}
    return bool(raw)


def _labelled(where: str, item: dict, required: tuple[str, ...], build: Callable[[], R]) -> R:
    try:
        _require(item, required)
        return build()
    except InvalidInputError as exc:
        raise InvalidInputError(f"{where}: {exc}") from exc


def focus_from(item: dict, where: str) -> FocusDataPoint:
    return _labelled(
        where,
        item,
        FOCUS_FIELDS,
        lambda: FocusDataPoint(
            date=_calendar_date(item, "date"),
            hour=_integer(item, "hour"),
            focus_minutes=_number(item, "focusMinutes"),
            quality=_number(item, "quality"),
            distraction_count=_integer(item, "distractionCount", 0),
        ),
    )


def energy_from(item: dict, where: str) -> EnergyDataPoint:
    return _labelled(
        where,
        item,
        ENERGY_FIELDS,
        lambda: EnergyDataPoint(
            timestamp=_timestamp(item, "timestamp"),
            energy_level=_number(item, "energyLevel"),
            tasks_completed=_integer(item, "tasksCompleted", 0),
            focus_quality=_number(item, "focusQuality", 0.0),
            working_memory_score=_number(item, "workingMemoryScore"),
        ),
    )


def estimate_from(item: dict, where: str) -> TaskEstimateSample:
    return _labelled(
        where,
        item,
        ESTIMATE_FIELDS,
        lambda: TaskEstimateSample(
            title=str(item["title"]).strip(),
            estimated_minutes=_number(item, "estimatedTime"),
            actual_minutes=_number(item, "actualTime"),
        ),
    )


def task_from(item: dict, where: str) -> TaskSnapshot:
    return _labelled(
        where,
        item,
        TASK_FIELDS,
        lambda: TaskSnapshot(
            id=str(item["id"]).strip(),
            title=str(item["title"]).strip(),
            energy_level=item["energyLevel"],
            priority=_number(item, "priority"),
            estimated_minutes=_number(item, "estimatedTime"),
            due_date=_timestamp(item, "dueDate"),
            difficulty=_number(item, "difficulty"),
            dependencies=_id_set(item, "dependencies"),
            has_blockers=_flag(item, "hasBlockers"),
            collaborators=_id_set(item, "collaborators"),
            tags=_id_set(item, "tags"),
        ),
    )
