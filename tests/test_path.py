import pytest

from campus2prolog.core.result import FailureType, Result
from campus2prolog.gateways.base import PathGateway, PathResult
from campus2prolog.services.path import PathOrchestrator, format_cost


class FakePathGateway(PathGateway):
    def __init__(self, answer):
        super().__init__()
        self.answer = answer
        self.calls = []

    def get_lowest_cost_path(self, origin_floor_id, origin_cell, destination_floor_id, destination_cell):
        self.calls.append((origin_floor_id, origin_cell, destination_floor_id, destination_cell))
        return self.answer


class CountingRepo:
    """Wraps a repository and counts domain-id lookups."""

    def __init__(self, inner):
        self.inner = inner
        self.lookups = []

    def find_by_domain_id(self, domain_id):
        self.lookups.append(domain_id)
        return self.inner.find_by_domain_id(domain_id)


ROUTE = ["cel(2,3)", "cel(2,4)", "cor(fA1,fB1)", "cel(1,3)", "ele(fA1,fA2)", "foo(1)"]


def _orchestrator(repos, answer):
    gateway = FakePathGateway(answer)
    return PathOrchestrator(repos.floors, repos.rooms, gateway), gateway


def test_resolve_path_renders_route(repos):
    orchestrator, gateway = _orchestrator(repos, Result.ok(PathResult(ROUTE, 12.456)))
    result = orchestrator.resolve_path("fA1", "A101", "fB1", "B101")

    assert gateway.calls == [("fA1", "cel(2,3)", "fB1", "cel(1,3)")]
    assert len(result.value) == 1
    view = result.value[0]
    assert view.path == (
        "cell(2,3) - cell(2,4) - passage(A_1 > B_1) - cell(1,3) - elevator(A_1 > A_2)"
    )
    assert view.cost == "12.46"
    assert view.to_dict() == {"path": view.path, "cost": "12.46"}


@pytest.mark.parametrize(
    "args, message",
    [
        (("nope", "nope", "nope", "nope"), "The origin floor does not exist."),
        (("fA1", "nope", "nope", "nope"), "The destination floor does not exist."),
        (("fA1", "nope", "fB1", "nope"), "The origin room does not exist."),
        (("fA1", "A101", "fB1", "nope"), "The destination room does not exist."),
    ],
)
def test_missing_entities_in_order(repos, args, message):
    orchestrator, gateway = _orchestrator(repos, Result.ok(PathResult()))
    result = orchestrator.resolve_path(*args)

    assert result.failure_type is FailureType.ENTITY_DOES_NOT_EXIST
    assert result.error == message
    assert gateway.calls == []


def test_lookups_stop_at_first_missing_floor(repos):
    floors = CountingRepo(repos.floors)
    rooms = CountingRepo(repos.rooms)
    orchestrator = PathOrchestrator(floors, rooms, FakePathGateway(Result.ok(PathResult())))

    orchestrator.resolve_path("nope", "A101", "fB1", "B101")

    assert floors.lookups == ["nope"]
    assert rooms.lookups == []


def test_gateway_failure_is_propagated(repos):
    answer = Result.fail("Cells are not reachable", FailureType.INVALID_INPUT)
    orchestrator, _ = _orchestrator(repos, answer)
    result = orchestrator.resolve_path("fA1", "A101", "fB1", "B101")

    assert result.failure_type is FailureType.INVALID_INPUT
    assert result.error == "Cells are not reachable"


def test_unknown_floor_in_route(repos):
    answer = Result.ok(PathResult(["cel(1,1)", "cor(fA1,fZ9)"], 3))
    orchestrator, _ = _orchestrator(repos, answer)
    result = orchestrator.resolve_path("fA1", "A101", "fB1", "B101")

    assert result.failure_type is FailureType.ENTITY_DOES_NOT_EXIST
    assert result.error == "The floor fZ9 in the returned path does not exist."


def test_empty_route(repos):
    orchestrator, _ = _orchestrator(repos, Result.ok(PathResult([], 0)))
    view = orchestrator.resolve_path("fA1", "A101", "fA1", "A102").value[0]
    assert view.path == ""
    assert view.cost == "0"


def test_repo_exception_is_database_error(repos):
    class Broken:
        def find_by_domain_id(self, domain_id):
            raise RuntimeError("timeout")

    orchestrator = PathOrchestrator(Broken(), repos.rooms, FakePathGateway(Result.ok(PathResult())))
    result = orchestrator.resolve_path("fA1", "A101", "fB1", "B101")
    assert result.failure_type is FailureType.DATABASE_ERROR


@pytest.mark.parametrize(
    "cost, expected",
    [
        (12.456, "12.46"),
        (12.5, "12.5"),
        (3.0, "3"),
        (0.004, "0"),
        (7.125, "7.13"),
        (41.1, "41.1"),
    ],
)
def test_format_cost(cost, expected):
    assert format_cost(cost) == expected
