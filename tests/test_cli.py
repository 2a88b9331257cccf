import json

import pytest
import requests
from click.testing import CliRunner

from campus2prolog.cli import main


def _invoke(campus_yaml, *args):
    return CliRunner().invoke(main, ["--facility", str(campus_yaml), *args])


def test_floor_plan_command(campus_yaml):
    result = _invoke(campus_yaml, "floor-plan", "fB1")

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["floorPlanHeight"] == 4
    assert payload["floorPlanWidth"] == 4
    assert len(payload["floorPlanCells"]) == 16


def test_floor_plan_unknown_floor_exits_nonzero(campus_yaml):
    result = _invoke(campus_yaml, "floor-plan", "nope")
    assert result.exit_code == 1


def test_campus_command(campus_yaml):
    result = _invoke(campus_yaml, "campus")

    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["connects"] == ["connects(bA,bB)"]


def test_robot_tasks_command(campus_yaml):
    result = _invoke(campus_yaml, "robot-tasks", "rb1")

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {
        "robot": "robot(fA1,cel(2,3))",
        "tasks": ["task(1,fA1,fA1,cel(2,3),cel(3,2))"],
    }


def test_validate_command(campus_yaml, tmp_path):
    report = tmp_path / "report.json"
    result = _invoke(campus_yaml, "validate", "--report", str(report))

    assert result.exit_code == 0
    assert "Facility OK" in result.output
    assert json.loads(report.read_text(encoding="utf-8"))["ok"] is True


def test_missing_facility_file(tmp_path):
    result = CliRunner().invoke(main, ["--facility", str(tmp_path / "none.yaml"), "campus"])
    assert result.exit_code != 0


def test_sequence_rejects_unknown_algorithm(campus_yaml):
    result = _invoke(campus_yaml, "sequence", "--algorithm", "annealing")
    assert result.exit_code == 2


class SolverResponse:
    def __init__(self, body, status_code=200):
        self.status_code = status_code
        self.ok = status_code < 400
        self.url = "http://solver.test"
        self.text = ""
        self._body = body

    def json(self):
        return self._body


@pytest.fixture
def solver(monkeypatch):
    """Answer solver GETs from a dict keyed by the last URL segment."""
    answers = {}
    calls = []

    def fake_get(self, url, params=None, headers=None, timeout=None):
        calls.append((url.rsplit("/", 1)[-1], params))
        body = answers[url.rsplit("/", 1)[-1]]
        if callable(body):
            body = body(params)
        return SolverResponse(body)

    monkeypatch.setattr(requests.Session, "get", fake_get)
    return answers, calls


def test_path_command(campus_yaml, solver):
    answers, calls = solver
    answers["paths"] = {"path": ["cel(2,3)", "cor(fA1,fB1)", "cel(1,3)"], "cost": 12.456}

    result = _invoke(campus_yaml, "path", "fA1", "A101", "fB1", "B101")

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == [
        {"path": "cell(2,3) - passage(A_1 > B_1) - cell(1,3)", "cost": "12.46"}
    ]
    assert calls[0][1]["originCel"] == "cel(2,3)"


def test_path_command_unknown_room(campus_yaml, solver):
    result = _invoke(campus_yaml, "path", "fA1", "nope", "fB1", "B101")

    assert result.exit_code == 1
    assert solver[1] == []


def test_sequence_command(campus_yaml, solver):
    answers, calls = solver
    sequences = {"rb1": ["d", "1", "d"], "rb2": ["d", "4", "2", "d"]}
    answers["taskSequenceGeneticAlgorithm"] = lambda params: {
        "Sequence": sequences[params["robisepId"]],
        "cost": 3,
    }

    result = _invoke(campus_yaml, "sequence", "--algorithm", "genetic")

    assert result.exit_code == 0, result.output
    scout, mule = json.loads(result.output)
    assert scout["robisepNickname"] == "Scout"
    assert [s["taskCode"] for s in scout["Sequence"]] == [1]
    assert mule["robisepNickname"] == "Mule"
    assert [s["taskCode"] for s in mule["Sequence"]] == [4, 2]
    assert [c[1] for c in calls] == [{"robisepId": "rb1"}, {"robisepId": "rb2"}]


def test_floor_map_command(campus_yaml):
    result = _invoke(campus_yaml, "floor-map", "A", "1")

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["size"] == {"width": 6, "length": 5}
    assert payload["connections"][0]["destFloorId"] == {"2": "A"}


def test_floor_map_unknown_floor(campus_yaml):
    result = _invoke(campus_yaml, "floor-map", "Z", "9")
    assert result.exit_code == 1


def test_invalid_facility_file(tmp_path):
    bad = tmp_path / "campus.yaml"
    bad.write_text("floors:\n  - building: b\n", encoding="utf-8")
    result = CliRunner().invoke(main, ["--facility", str(bad), "campus"])

    assert result.exit_code == 1
    assert "Invalid facility file" in result.output
