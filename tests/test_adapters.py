import json
from datetime import date, datetime

import pytest

from behavior_engine.adapters import csv_adapter, json_adapter
from behavior_engine.adapters.json_adapter import to_payload
from behavior_engine.prioritization import prioritize
from behavior_engine.risk_model import score_burnout
from behavior_engine.schema import EnergyLevel, PrioritizationContext, TaskSnapshot


def test_csv_parse_focus(tmp_path):
    path = tmp_path / "focus.csv"
    path.write_text(
        "date,hour,focusMinutes,quality,distractionCount\n"
        "2025-01-06,9,45,90,1\n"
        "2025-01-06,14,20,35,\n",
        encoding="utf-8",
    )
    points = csv_adapter.parse_focus(str(path))
    assert len(points) == 2
    assert points[0].date == date(2025, 1, 6)
    assert points[0].hour == 9
    assert points[1].distraction_count == 0


def test_csv_parse_invalid_row(tmp_path):
    path = tmp_path / "focus.csv"
    path.write_text("date,hour,focusMinutes,quality\n2025-01-06,9,45,90\n2025-01-06,25,45,90\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Row 3"):
        csv_adapter.parse_focus(str(path))


def test_csv_parse_missing_field(tmp_path):
    path = tmp_path / "energy.csv"
    path.write_text("timestamp,energyLevel\n2025-01-06T09:00:00,\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Row 2: missing required fields"):
        csv_adapter.parse_energy(str(path))


def test_csv_parse_tasks_with_sets(tmp_path):
    path = tmp_path / "tasks.csv"
    path.write_text(
        "id,title,energyLevel,priority,dueDate,collaborators,hasBlockers\n"
        "t1,Ship release,high,8,2025-01-21T17:00:00,sam; kim,true\n",
        encoding="utf-8",
    )
    tasks = csv_adapter.parse_tasks(str(path))
    assert tasks[0].energy_level is EnergyLevel.HIGH
    assert tasks[0].collaborators == frozenset({"sam", "kim"})
    assert tasks[0].has_blockers is True
    assert tasks[0].due_date == datetime(2025, 1, 21, 17)


def test_csv_empty_file(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("", encoding="utf-8")
    assert csv_adapter.parse_estimates(str(path)) == []


def test_json_parse_energy(tmp_path):
    path = tmp_path / "energy.json"
    payload = [
        {"timestamp": "2025-01-06T09:00:00", "energyLevel": 4, "tasksCompleted": 2},
        {"timestamp": "2025-01-06T14:00:00", "energyLevel": 2.5, "workingMemoryScore": 7},
    ]
    path.write_text(json.dumps(payload), encoding="utf-8")
    points = json_adapter.parse_energy(str(path))
    assert len(points) == 2
    assert points[0].tasks_completed == 2
    assert points[1].working_memory_score == 7


def test_json_parse_estimates(tmp_path):
    path = tmp_path / "estimates.json"
    path.write_text(json.dumps([{"title": "Write report", "estimatedTime": 30, "actualTime": 55}]), encoding="utf-8")
    samples = json_adapter.parse_estimates(str(path))
    assert samples[0].title == "Write report"
    assert samples[0].actual_minutes == 55


def test_json_parse_malformed(tmp_path):
    path = tmp_path / "energy.json"
    path.write_text(json.dumps([{"timestamp": "bad", "energyLevel": 3}]), encoding="utf-8")
    with pytest.raises(ValueError, match="Item 1"):
        json_adapter.parse_energy(str(path))


def test_json_rejects_non_list_and_bad_json(tmp_path):
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps({"id": "t1"}), encoding="utf-8")
    with pytest.raises(ValueError):
        json_adapter.parse_tasks(str(path))

    path.write_text("[{", encoding="utf-8")
    with pytest.raises(ValueError, match="malformed JSON"):
        json_adapter.parse_tasks(str(path))


def test_json_rejects_bad_energy_label(tmp_path):
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps([{"id": "t1", "title": "x", "energyLevel": "EXTREME", "priority": 3}]), encoding="utf-8")
    with pytest.raises(ValueError, match="Item 1: energy_level"):
        json_adapter.parse_tasks(str(path))


def test_to_payload_uses_camel_case():
    now = datetime(2025, 1, 20, 10)
    task = TaskSnapshot("t1", "Write report", EnergyLevel.MEDIUM, 9, collaborators={"sam"})
    ranked = prioritize([task], PrioritizationContext(current_energy=3, time_of_day="afternoon"), now=now)

    payload = to_payload(ranked)
    assert payload[0]["taskId"] == "t1"
    assert payload[0]["suggestedTime"] == "2025-01-20T13:00:00"
    assert payload[0]["componentScores"]["energyMatch"] == 1.0
    assert payload[0]["reasoning"] == "Perfect energy match • High importance • Team is waiting"
    assert json.loads(json.dumps(payload)) == payload


def test_to_payload_plain_values():
    task = TaskSnapshot("t1", "x", "low", 2, tags={"b", "a"})
    payload = to_payload(task)
    assert payload["energyLevel"] == "LOW"
    assert payload["tags"] == ["a", "b"]
    assert payload["dueDate"] is None
    assert to_payload({"day": date(2025, 1, 6)}) == {"day": "2025-01-06"}


def test_to_payload_burnout_factor_names():
    risk = score_burnout([12, 12], [3, 3], [0.5, 0.5], today=date(2025, 1, 20))
    payload = to_payload(risk)
    assert payload["riskLevel"] == "moderate"
    assert payload["factors"] == [{"factorName": "Long work hours", "contribution": 0.4, "trend": "worsening"}]
    assert payload["nextCheckIn"] == "2025-01-27"


def test_json_parse_focus(tmp_path):
    path = tmp_path / "focus.json"
    payload = [
        {"date": "2025-01-06", "hour": 9, "focusMinutes": 45, "quality": 90, "distractionCount": 2},
        {"date": "2025-01-07T00:00:00", "hour": 14, "focusMinutes": 20, "quality": 35},
    ]
    path.write_text(json.dumps(payload), encoding="utf-8")
    points = json_adapter.parse_focus(str(path))
    assert [p.date for p in points] == [date(2025, 1, 6), date(2025, 1, 7)]
    assert points[0].distraction_count == 2
    assert points[1].distraction_count == 0


def test_json_parse_focus_labels_bad_item(tmp_path):
    path = tmp_path / "focus.json"
    payload = [
        {"date": "2025-01-06", "hour": 9, "focusMinutes": 45, "quality": 90},
        {"date": "2025-01-06", "hour": 9.5, "focusMinutes": 45, "quality": 90},
    ]
    path.write_text(json.dumps(payload), encoding="utf-8")
    with pytest.raises(ValueError, match="Item 2: hour must be a whole number"):
        json_adapter.parse_focus(str(path))


def test_json_parse_tasks(tmp_path):
    path = tmp_path / "tasks.json"
    payload = [
        {
            "id": "t1",
            "title": "Ship release",
            "energyLevel": "MEDIUM",
            "priority": 7,
            "estimatedTime": 45,
            "difficulty": 4,
            "dependencies": ["t0"],
            "hasBlockers": False,
            "tags": ["release", "ops"],
        }
    ]
    path.write_text(json.dumps(payload), encoding="utf-8")
    task = json_adapter.parse_tasks(str(path))[0]
    assert task.energy_level is EnergyLevel.MEDIUM
    assert task.estimated_minutes == 45
    assert task.dependencies == frozenset({"t0"})
    assert task.tags == frozenset({"release", "ops"})
    assert task.due_date is None


def test_json_parse_tasks_labels_missing_field(tmp_path):
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps([{"id": "t1", "title": "x", "energyLevel": "LOW"}]), encoding="utf-8")
    with pytest.raises(ValueError, match=r"Item 1: missing required fields \['priority'\]"):
        json_adapter.parse_tasks(str(path))


def test_csv_parse_energy(tmp_path):
    path = tmp_path / "energy.csv"
    path.write_text(
        "timestamp,energyLevel,tasksCompleted,focusQuality,workingMemoryScore\n"
        "2025-01-06T09:00:00,4,3,80,\n"
        "2025-01-06T15:30:00,2,0,,6\n",
        encoding="utf-8",
    )
    points = csv_adapter.parse_energy(str(path))
    assert points[0].timestamp == datetime(2025, 1, 6, 9)
    assert points[0].tasks_completed == 3
    assert points[0].working_memory_score is None
    assert points[1].focus_quality == 0.0
    assert points[1].working_memory_score == 6


def test_csv_parse_estimates(tmp_path):
    path = tmp_path / "estimates.csv"
    path.write_text("title,estimatedTime,actualTime\nWrite report,30,55\n", encoding="utf-8")
    samples = csv_adapter.parse_estimates(str(path))
    assert samples[0].title == "Write report"
    assert samples[0].estimated_minutes == 30
    assert samples[0].actual_minutes == 55


def test_csv_parse_estimates_labels_bad_row(tmp_path):
    path = tmp_path / "estimates.csv"
    path.write_text("title,estimatedTime,actualTime\nWrite report,30,55\nReview,thirty,40\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Row 3: invalid estimatedTime"):
        csv_adapter.parse_estimates(str(path))
