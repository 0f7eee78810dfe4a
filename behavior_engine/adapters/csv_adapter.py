"""CSV adapter for activity records."""

from __future__ import annotations

import csv
from typing import Callable, TypeVar

from behavior_engine.adapters.records import energy_from, estimate_from, focus_from, task_from
from behavior_engine.logging_config import get_logger
from behavior_engine.schema import EnergyDataPoint, FocusDataPoint, TaskEstimateSample, TaskSnapshot

logger = get_logger(__name__)

R = TypeVar("R")


def _load(file_path: str, convert: Callable[[dict, str], R]) -> list[R]:
    with open(file_path, newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return []

        records: list[R] = []
        for row_number, row in enumerate(reader, start=2):
            records.append(convert(row, f"Row {row_number}"))
    logger.debug("csv_records_parsed", path=file_path, count=len(records))
    return records


def parse_focus(file_path: str) -> list[FocusDataPoint]:
    """Parse CSV file of focus heatmap points."""

    return _load(file_path, focus_from)


def parse_energy(file_path: str) -> list[EnergyDataPoint]:
    """Parse CSV file of energy check-ins."""

    return _load(file_path, energy_from)


def parse_estimates(file_path: str) -> list[TaskEstimateSample]:
    """Parse CSV file of completed tasks with estimated and actual time."""

    return _load(file_path, estimate_from)


def parse_tasks(file_path: str) -> list[TaskSnapshot]:
    """Parse CSV file of pending task snapshots; set fields are `;`-separated."""

    return _load(file_path, task_from)
