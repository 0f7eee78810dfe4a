"""Summary metrics and dashboard grids over focus and energy history."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable

from behavior_engine.aggregation import aggregate, weekday_hour
from behavior_engine.results import (
    HeatmapCell,
    LandscapePoint,
    ProductivityLandscape,
    SummaryStats,
    round_half_up,
)
from behavior_engine.schema import EnergyDataPoint, FocusDataPoint

PEAK_QUALITY = 85
VALLEY_QUALITY = 30
_COLOR_BANDS = ((80, "#10B981"), (60, "#EAB308"), (40, "#F59E0B"))
_LOW_COLOR = "#EF4444"


def _day(value: date) -> date:
    return value.date() if isinstance(value, datetime) else value


def compute_stats(focus: Iterable[FocusDataPoint], energy: Iterable[EnergyDataPoint]) -> SummaryStats:
    """Compute focus time, quality, energy, completion and distraction totals."""

    focus = list(focus)
    energy = list(energy)

    completed_by_day: dict[date, int] = {}
    for point in energy:
        day = point.timestamp.date()
        completed_by_day[day] = max(completed_by_day.get(day, 0), int(point.tasks_completed))

    return SummaryStats(
        total_focus_minutes=sum(p.focus_minutes for p in focus),
        avg_focus_quality=sum(p.quality for p in focus) / len(focus) if focus else 0.0,
        avg_energy_level=sum(p.energy_level for p in energy) / len(energy) if energy else 0.0,
        tasks_completed=sum(completed_by_day.values()),
        total_distractions=sum(int(p.distraction_count) for p in focus),
    )


def focus_heatmap(points: Iterable[FocusDataPoint], start: date, end: date) -> list[HeatmapCell]:
    """One cell per day and hour between start and end inclusive."""

    buckets = aggregate(points, lambda p: (_day(p.date), p.hour), lambda p: p.quality)
    cells = []
    day = _day(start)
    last = _day(end)
    while day <= last:
        for hour in range(24):
            stats = buckets.get((day, hour))
            value = int(round_half_up(stats.mean)) if stats else 0
            cells.append(HeatmapCell(date=day, hour=hour, value=value))
        day += timedelta(days=1)
    return cells


def _color(quality: float) -> str:
    for floor, color in _COLOR_BANDS:
        if quality > floor:
            return color
    return _LOW_COLOR


def productivity_landscape(points: Iterable[FocusDataPoint]) -> ProductivityLandscape:
    """Weekday by hour quality surface with its top peaks and deepest valleys."""

    buckets = aggregate(points, weekday_hour, lambda p: p.quality)
    surface = []
    for weekday in range(7):
        for hour in range(6, 24):
            stats = buckets.get((weekday, hour))
            if stats is None:
                continue
            surface.append(LandscapePoint(hour=hour, weekday=weekday, quality=stats.mean, color=_color(stats.mean)))

    peaks = sorted((p for p in surface if p.quality > PEAK_QUALITY), key=lambda p: (-p.quality, p.weekday, p.hour))
    valleys = sorted((p for p in surface if p.quality < VALLEY_QUALITY), key=lambda p: (p.quality, p.weekday, p.hour))

    return ProductivityLandscape(
        points=tuple(surface),
        peaks=tuple(LandscapePoint(p.hour, p.weekday, p.quality, p.color, "Peak") for p in peaks[:3]),
        valleys=tuple(LandscapePoint(p.hour, p.weekday, p.quality, p.color, "Valley") for p in valleys[:3]),
    )
