"""Demo script for behavior-engine."""

import json
import sys
from datetime import date, datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from behavior_engine.adapters import csv_adapter, json_adapter
from behavior_engine.engine import AnalyticsEngine
from behavior_engine.logging_config import setup_logging
from behavior_engine.prioritization import build_context
from behavior_engine.schema import PendingTask

HERE = Path(__file__).resolve().parent


def main() -> None:
    setup_logging()
    focus = csv_adapter.parse_focus(str(HERE / "sample_focus.csv"))
    energy = json_adapter.parse_energy(str(HERE / "sample_energy.json"))
    tasks = json_adapter.parse_tasks(str(HERE / "sample_tasks.json"))

    engine = AnalyticsEngine(user_id="demo")
    now = datetime(2025, 1, 19, 9, 30)

    forecast = engine.forecast(energy, date(2025, 1, 20))
    context = build_context(tasks, now=now, current_energy=4, weather="sunny", current_streak=3)
    report = {
        "patterns": engine.patterns(focus_points=focus, energy_points=energy),
        "stats": engine.stats(focus, energy),
        "forecast": forecast,
        "burnout": engine.burnout([8.5, 9, 9.5], [4, 3, 2], [0.9, 0.7, 0.5], today=now.date()),
        "schedule": engine.schedule(forecast, [PendingTask.from_snapshot(t) for t in tasks]),
        "breaks": engine.breaks(130, 2, now=now),
        "ranking": engine.prioritize(tasks, context, now=now),
    }
    print(json.dumps(json_adapter.to_payload(report), indent=2))


if __name__ == "__main__":
    main()
