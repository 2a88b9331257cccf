import pytest
import requests

from campus2prolog.config import SolverApiConfig
from campus2prolog.core.result import FailureType
from campus2prolog.gateways.base import SequencingAlgorithm
from campus2prolog.gateways.http import GENERIC_ERROR, HttpPathGateway, HttpTaskGateway


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=""):
        self.status_code = status_code
        self.ok = status_code < 400
        self.url = "http://solver.test"
        self.text = text
        self._body = body

    def json(self):
        if self._body is None:
            raise ValueError("no JSON")
        return self._body


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


CONFIG = SolverApiConfig(host="http://solver.test/", timeout_sec=5)


def test_base_url_strips_trailing_slash():
    assert CONFIG.base_url == "http://solver.test/api/prolog"


class TestHttpPathGateway:
    def _call(self, session):
        gateway = HttpPathGateway(CONFIG, session=session)
        return gateway.get_lowest_cost_path("fA1", "cel(2,3)", "fB1", "cel(1,3)")

    def test_request_and_payload(self):
        session = FakeSession(FakeResponse(body={"path": ["cel(2,3)", "cor(fA1,fB1)"], "cost": 7}))
        result = self._call(session)

        assert result.value.path == ["cel(2,3)", "cor(fA1,fB1)"]
        assert result.value.cost == 7.0
        call = session.calls[0]
        assert call["url"] == "http://solver.test/api/prolog/paths"
        assert call["timeout"] == 5
        assert call["params"] == {
            "originFloor": "fA1",
            "destinationFloor": "fB1",
            "originCel": "cel(2,3)",
            "destinationCel": "cel(1,3)",
        }

    def test_bad_request_uses_solver_message(self):
        session = FakeSession(FakeResponse(400, body={"error": "No path between cells"}))
        result = self._call(session)
        assert result.failure_type is FailureType.INVALID_INPUT
        assert result.error == "No path between cells"

    def test_server_error_is_generic(self):
        result = self._call(FakeSession(FakeResponse(500, text="boom")))
        assert result.failure_type is FailureType.UNKNOWN
        assert result.error == GENERIC_ERROR

    def test_timeout_is_generic(self):
        result = self._call(FakeSession(error=requests.Timeout("slow")))
        assert result.is_failure
        assert result.error == GENERIC_ERROR

    def test_connection_error_is_generic(self):
        result = self._call(FakeSession(error=requests.ConnectionError("refused")))
        assert result.error == GENERIC_ERROR

    def test_non_json_body(self):
        result = self._call(FakeSession(FakeResponse(200, text="<html>")))
        assert result.error == GENERIC_ERROR


class TestHttpTaskGateway:
    def _call(self, session, algorithm=SequencingAlgorithm.PERMUTATION):
        return HttpTaskGateway(CONFIG, session=session).get_task_sequence("rb2", algorithm)

    @pytest.mark.parametrize(
        "algorithm, suffix",
        [
            (SequencingAlgorithm.PERMUTATION, "/taskSequencePermutation"),
            (SequencingAlgorithm.GENETIC, "/taskSequenceGeneticAlgorithm"),
        ],
    )
    def test_endpoint_per_algorithm(self, algorithm, suffix):
        session = FakeSession(FakeResponse(body={"Sequence": ["d", 4, "d"], "cost": "3.5"}))
        result = self._call(session, algorithm)

        assert session.calls[0]["url"] == "http://solver.test/api/prolog" + suffix
        assert session.calls[0]["params"] == {"robisepId": "rb2"}
        assert result.value.sequence == ["d", "4", "d"]
        assert result.value.cost == 3.5

    def test_unauthorized(self):
        result = self._call(FakeSession(FakeResponse(401)))
        assert result.failure_type is FailureType.UNAUTHORIZED
        assert result.error == "Unauthorized."

    def test_not_found(self):
        result = self._call(FakeSession(FakeResponse(404)))
        assert result.failure_type is FailureType.ENTITY_DOES_NOT_EXIST
        assert result.error == "Robisep not found."

    def test_bad_request(self):
        result = self._call(FakeSession(FakeResponse(400, body={"error": "no tasks"})))
        assert result.failure_type is FailureType.INVALID_INPUT
        assert result.error == "no tasks"
