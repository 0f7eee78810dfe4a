import random
from datetime import date, datetime, timedelta

import pytest

from behavior_engine.patterns import (
    AFTERNOON_DIP,
    LONG_SESSION,
    TASK_SUCCESSION,
    UNKNOWN_TRIGGER,
    analyze_task_estimation_accuracy,
    crash_triggers,
    detect_energy_crash_triggers,
    energy_productivity_correlation,
    find_energy_correlation,
    find_optimal_focus_times,
    find_productivity_conditions,
    keyword_estimates,
    productivity_conditions,
    recognize_patterns,
)
from behavior_engine.schema import EnergyDataPoint, FocusDataPoint, TaskEstimateSample

MONDAY = date(2025, 1, 6)


def focus(day, hour, quality):
    return FocusDataPoint(day, hour, 30, quality)


def energy(when, level, tasks=0):
    return EnergyDataPoint(when, level, tasks_completed=tasks)


def test_optimal_focus_times_scenario():
    points = [focus(MONDAY, 9, 90), focus(MONDAY, 9, 92), focus(MONDAY, 14, 40)]
    patterns = find_optimal_focus_times(points)

    assert [p.id for p in patterns] == ["optimal-time-0", "optimal-time-1"]
    assert patterns[0].insight == "You focus best at 9:00 on Mondays"
    assert patterns[0].confidence == pytest.approx(0.2)
    assert patterns[0].value == 91
    assert patterns[0].kind == "time-of-day"
    assert patterns[1].confidence == pytest.approx(0.1)


def test_optimal_focus_times_tie_breaks():
    tuesday = MONDAY + timedelta(days=1)
    points = [
        focus(tuesday, 9, 70),
        focus(MONDAY, 8, 80),
        focus(MONDAY, 11, 70),
        focus(MONDAY, 10, 80),
        focus(MONDAY, 10, 80),
    ]
    patterns = find_optimal_focus_times(points)

    assert [p.insight for p in patterns] == [
        "You focus best at 10:00 on Mondays",
        "You focus best at 8:00 on Mondays",
        "You focus best at 11:00 on Mondays",
    ]


def test_optimal_focus_times_is_deterministic():
    points = [focus(MONDAY + timedelta(days=d % 7), 6 + d % 12, (d * 37) % 101) for d in range(60)]
    assert find_optimal_focus_times(points) == find_optimal_focus_times(points)


def test_optimal_focus_times_confidence_capped():
    points = [focus(MONDAY, 9, 80) for _ in range(15)]
    assert find_optimal_focus_times(points)[0].confidence == 1.0


def estimate_samples():
    return [
        *[TaskEstimateSample("Write report", 30, 60) for _ in range(3)],
        *[TaskEstimateSample("Review slides", 60, 30) for _ in range(3)],
        *[TaskEstimateSample("Clean inbox", 20, 22) for _ in range(3)],
        *[TaskEstimateSample("fix bug now", 10, 50) for _ in range(3)],
        *[TaskEstimateSample("Plan sprint", 10, 40) for _ in range(2)],
    ]


def test_keyword_estimates_filter_and_order():
    estimates = keyword_estimates(estimate_samples())

    assert [e.keyword for e in estimates] == ["report", "write", "review", "slides"]
    assert estimates[0].accuracy_delta == 100
    assert estimates[0].sample_size == 3
    assert estimates[0].confidence == pytest.approx(0.3)
    assert estimates[2].accuracy_delta == -50


def test_keyword_estimates_skip_zero_estimates():
    samples = [TaskEstimateSample("Quick stretch", 0, 5) for _ in range(3)]
    assert keyword_estimates(samples) == []


def test_task_estimation_patterns():
    patterns = analyze_task_estimation_accuracy(estimate_samples())

    assert patterns[0].id == "task-keyword-report"
    assert patterns[0].kind == "task-keyword"
    assert "100% longer" in patterns[0].insight
    assert patterns[0].impact == "high"
    review = next(p for p in patterns if p.id == "task-keyword-review")
    assert "less time" in review.insight
    assert review.impact == "medium"


def crash_points():
    base = datetime(2025, 1, 6)
    points = [
        energy(base.replace(hour=14), 5),
        energy(base.replace(hour=14, minute=30), 2),
        energy(base + timedelta(days=1, hours=9), 4, tasks=6),
        energy(base + timedelta(days=1, hours=9, minutes=30), 2),
        energy(base + timedelta(days=2, hours=10), 4),
        energy(base + timedelta(days=2, hours=12), 2),
        energy(base + timedelta(days=3, hours=15), 4),
        energy(base + timedelta(days=3, hours=15, minutes=20), 2),
        energy(base + timedelta(days=4, hours=11), 4),
        energy(base + timedelta(days=4, hours=11, minutes=30), 3),
    ]
    random.Random(7).shuffle(points)
    return points


def test_crash_triggers_classified_and_sorted():
    triggers = crash_triggers(crash_points())

    assert [t.trigger for t in triggers] == [AFTERNOON_DIP, TASK_SUCCESSION, LONG_SESSION]
    dip = triggers[0]
    assert dip.occurrences == 2
    assert dip.before_energy == pytest.approx(4.5)
    assert dip.after_energy == pytest.approx(2.0)
    assert dip.time_delta_minutes == 25
    assert dip.confidence == pytest.approx(0.4)
    assert triggers[2].time_delta_minutes == 120


def test_crash_triggers_unknown_label():
    start = datetime(2025, 1, 6, 11)
    triggers = crash_triggers([energy(start, 4), energy(start + timedelta(minutes=20), 2)])
    assert [t.trigger for t in triggers] == [UNKNOWN_TRIGGER]
    patterns = detect_energy_crash_triggers([energy(start, 4), energy(start + timedelta(minutes=20), 2)])
    assert patterns[0].impact == "low"
    assert patterns[0].id == "energy-crash-unknown"


def test_crash_triggers_empty():
    assert crash_triggers([]) == []
    assert detect_energy_crash_triggers([energy(datetime(2025, 1, 6, 9), 3)]) == []


def test_productivity_conditions_morning():
    base = datetime(2025, 1, 6)
    points = [energy(base + timedelta(days=d, hours=9), 3, tasks=6) for d in range(6)]
    points += [energy(base + timedelta(days=d, hours=19), 3, tasks=0) for d in range(6)]

    conditions = productivity_conditions(points)
    assert len(conditions) == 1
    assert conditions[0].condition == "working in the morning"
    assert conditions[0].multiplier == 2.0
    assert conditions[0].sample_size == 6
    assert conditions[0].confidence == pytest.approx(0.3)

    patterns = find_productivity_conditions(points)
    assert patterns[0].id == "condition-morning"
    assert patterns[0].impact == "high"


def test_productivity_conditions_high_energy():
    base = datetime(2025, 1, 6, 19)
    points = [energy(base + timedelta(days=d), 5, tasks=4) for d in range(6)]
    points += [energy(base + timedelta(days=d, minutes=30), 2, tasks=1) for d in range(6)]

    conditions = productivity_conditions(points)
    assert [c.condition for c in conditions] == ["having high energy levels"]
    assert conditions[0].multiplier == pytest.approx(1.6)


def test_productivity_conditions_guards():
    base = datetime(2025, 1, 6, 9)
    assert productivity_conditions([]) == []
    assert productivity_conditions([energy(base + timedelta(days=d), 5) for d in range(8)]) == []
    few = [energy(base + timedelta(days=d), 5, tasks=9) for d in range(5)]
    few += [energy(base + timedelta(days=d, hours=10), 2, tasks=0) for d in range(5)]
    assert productivity_conditions(few) == []


def test_energy_correlation_pattern():
    base = datetime(2025, 1, 6, 9)
    points = [energy(base + timedelta(hours=i), 1 + i % 5, tasks=2 * (1 + i % 5)) for i in range(10)]

    assert energy_productivity_correlation(points) == pytest.approx(1.0)
    patterns = find_energy_correlation(points)
    assert patterns[0].id == "condition-energy-correlation"
    assert patterns[0].value == 1.0
    assert find_energy_correlation(points[:9]) == []


def test_recognize_patterns_merges_by_confidence():
    points = [focus(MONDAY, 9, 90), focus(MONDAY, 9, 92), focus(MONDAY, 14, 40)]
    merged = recognize_patterns(points, estimate_samples(), crash_points())

    confidences = [p.confidence for p in merged]
    assert confidences == sorted(confidences, reverse=True)
    assert {p.kind for p in merged} == {"time-of-day", "task-keyword", "energy-crash"}
    assert all(0.0 <= p.confidence <= 1.0 for p in merged)
    assert len(recognize_patterns(points, estimate_samples(), crash_points(), limit=2)) == 2
    assert recognize_patterns() == []


def test_keyword_averages_reported_in_whole_minutes():
    samples = [
        TaskEstimateSample("Review draft", 10, 20),
        TaskEstimateSample("Review draft", 10, 21),
        TaskEstimateSample("Review draft", 11, 21),
    ]
    review = next(e for e in keyword_estimates(samples) if e.keyword == "review")
    assert review.avg_estimated_minutes == 10
    assert review.avg_actual_minutes == 21
    assert review.accuracy_delta == 100
