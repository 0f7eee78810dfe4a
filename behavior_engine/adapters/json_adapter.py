"""JSON adapter for activity records and result payloads."""

from __future__ import annotations

import json
from dataclasses import fields, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, TypeVar

from behavior_engine.adapters.records import energy_from, estimate_from, focus_from, task_from
from behavior_engine.errors import InvalidInputError
from behavior_engine.logging_config import get_logger
from behavior_engine.results import PrioritizedTask
from behavior_engine.schema import EnergyDataPoint, FocusDataPoint, TaskEstimateSample, TaskSnapshot

logger = get_logger(__name__)

R = TypeVar("R")


def _load(file_path: str, convert: Callable[[dict, str], R]) -> list[R]:
    with open(file_path, encoding="utf-8") as handle:
        try:
            payload = json.load(handle)
        except json.JSONDecodeError as exc:
            raise InvalidInputError(f"{file_path}: malformed JSON") from exc

    if not isinstance(payload, list):
        raise InvalidInputError("JSON payload must be a list of objects")

    records = []
    for index, item in enumerate(payload, start=1):
        if not isinstance(item, dict):
            raise InvalidInputError(f"Item {index}: expected an object")
        records.append(convert(item, f"Item {index}"))
    logger.debug("json_records_parsed", path=file_path, count=len(records))
    return records


def parse_focus(file_path: str) -> list[FocusDataPoint]:
    """Parse a JSON list of focus heatmap points."""

    return _load(file_path, focus_from)


def parse_energy(file_path: str) -> list[EnergyDataPoint]:
    """Parse a JSON list of energy check-ins."""

    return _load(file_path, energy_from)


def parse_estimates(file_path: str) -> list[TaskEstimateSample]:
    """Parse a JSON list of completed tasks with estimated and actual time."""

    return _load(file_path, estimate_from)


def parse_tasks(file_path: str) -> list[TaskSnapshot]:
    """Parse a JSON list of pending task snapshots."""

    return _load(file_path, task_from)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def to_payload(value: Any) -> Any:
    """Render a result value object as JSON-ready data with camelCase keys."""

    if is_dataclass(value) and not isinstance(value, type):
        payload = {_camel(f.name): to_payload(getattr(value, f.name)) for f in fields(value)}
        if isinstance(value, PrioritizedTask):
            payload["reasoning"] = value.reasoning
        return payload
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return sorted(to_payload(v) for v in value)
    if isinstance(value, (list, tuple)):
        return [to_payload(v) for v in value]
    if isinstance(value, dict):
        return {str(k): to_payload(v) for k, v in value.items()}
    return value
