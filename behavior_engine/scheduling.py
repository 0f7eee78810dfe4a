"""Greedy matching of pending tasks to forecast energy."""

from __future__ import annotations

from datetime import datetime, time, timedelta
from typing import Iterable

from behavior_engine.results import EnergyForecast, OptimalSchedule, ScheduleSlot
from behavior_engine.schema import PendingTask

MIN_SLOT_CONFIDENCE = 0.5


def build_schedule(forecast: EnergyForecast, pending: Iterable[PendingTask]) -> OptimalSchedule:
    """Place each task at the first confident forecast hour with enough energy.

    Tasks are placed from most to least demanding. A task with no qualifying
    hour is left out. Slots may overlap: an hour already used by one task is
    still offered to the next.
    """

    hours = sorted(forecast.hourly_predictions, key=lambda p: p.hour)
    slots = []
    for task in sorted(pending, key=lambda t: -t.energy_required):
        match = next(
            (
                p
                for p in hours
                if p.predicted_energy >= task.energy_required and p.confidence > MIN_SLOT_CONFIDENCE
            ),
            None,
        )
        if match is None:
            continue
        start = datetime.combine(forecast.target_date, time(hour=match.hour))
        slots.append(
            ScheduleSlot(
                task_id=task.id,
                task_title=task.title,
                start_time=start,
                end_time=start + timedelta(minutes=task.estimated_minutes),
                reason=f"Your energy is predicted to be {match.predicted_energy:.1f}/5 at this time",
                energy_level=match.predicted_energy,
                confidence=match.confidence,
            )
        )

    slots.sort(key=lambda s: s.start_time)
    return OptimalSchedule(date=forecast.target_date, slots=tuple(slots))
