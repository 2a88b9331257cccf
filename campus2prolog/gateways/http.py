"""HTTP gateways to the Prolog solver service.

Each call is a GET with query parameters named by :class:`SolverApiConfig`.
Timeouts and connection errors are reported as generic failures, the same as
an unexpected status code.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from campus2prolog.config import SolverApiConfig
from campus2prolog.core.result import FailureType, Result
from campus2prolog.gateways.base import (
    PathGateway,
    PathResult,
    SequencingAlgorithm,
    TaskGateway,
    TaskSequence,
)

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Something went wrong."


def _error_body(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or GENERIC_ERROR
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return GENERIC_ERROR


class _HttpSolverClient:
    def __init__(
        self,
        config: Optional[SolverApiConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config or SolverApiConfig()
        self.session = session or requests.Session()

    def _get(self, url: str, params: dict[str, Any]) -> Result[Any]:
        try:
            response = self.session.get(
                url,
                params=params,
                headers={"Content-Type": "application/json"},
                timeout=self.config.timeout_sec,
            )
        except requests.Timeout:
            logger.warning("Solver request to %s timed out after %ss", url, self.config.timeout_sec)
            return Result.fail(GENERIC_ERROR, FailureType.UNKNOWN)
        except requests.RequestException as exc:
            logger.warning("Solver request to %s failed: %s", url, exc)
            return Result.fail(GENERIC_ERROR, FailureType.UNKNOWN)

        if not response.ok:
            return self._failure(response)

        try:
            return Result.ok(response.json())
        except ValueError:
            logger.warning("Solver at %s returned a non-JSON body", url)
            return Result.fail(GENERIC_ERROR, FailureType.UNKNOWN)

    def _failure(self, response: requests.Response) -> Result[Any]:
        logger.info("Solver answered %d for %s", response.status_code, response.url)
        if response.status_code == 400:
            return Result.fail(_error_body(response), FailureType.INVALID_INPUT)
        return Result.fail(GENERIC_ERROR, FailureType.UNKNOWN)


class HttpPathGateway(_HttpSolverClient, PathGateway):
    def get_lowest_cost_path(
        self,
        origin_floor_id: str,
        origin_cell: str,
        destination_floor_id: str,
        destination_cell: str,
    ) -> Result[PathResult]:
        cfg = self.config
        params = {
            cfg.param_origin_floor: origin_floor_id,
            cfg.param_destination_floor: destination_floor_id,
            cfg.param_origin_cel: origin_cell,
            cfg.param_destination_cel: destination_cell,
        }
        body = self._get(f"{cfg.base_url}{cfg.url_paths}", params)
        if body.is_failure:
            return body.propagate()
        data = body.value or {}
        try:
            return Result.ok(
                PathResult(path=[str(t) for t in data.get("path", [])], cost=float(data.get("cost", 0)))
            )
        except (AttributeError, TypeError, ValueError):
            logger.warning("Unexpected path solver payload: %r", data)
            return Result.fail(GENERIC_ERROR, FailureType.UNKNOWN)


class HttpTaskGateway(_HttpSolverClient, TaskGateway):
    def get_task_sequence(
        self,
        robisep_id: str,
        algorithm: SequencingAlgorithm,
    ) -> Result[TaskSequence]:
        cfg = self.config
        path = cfg.url_permutations if algorithm is SequencingAlgorithm.PERMUTATION else cfg.url_genetic
        body = self._get(f"{cfg.base_url}{path}", {cfg.param_robisep_id: robisep_id})
        if body.is_failure:
            return body.propagate()
        data = body.value or {}
        try:
            return Result.ok(
                TaskSequence(
                    sequence=[str(t) for t in data.get("Sequence", [])],
                    cost=float(data.get("cost", 0)),
                )
            )
        except (AttributeError, TypeError, ValueError):
            logger.warning("Unexpected task sequence payload: %r", data)
            return Result.fail(GENERIC_ERROR, FailureType.UNKNOWN)

    def _failure(self, response: requests.Response) -> Result[Any]:
        if response.status_code == 401:
            return Result.fail("Unauthorized.", FailureType.UNAUTHORIZED)
        if response.status_code == 404:
            return Result.fail("Robisep not found.", FailureType.ENTITY_DOES_NOT_EXIST)
        return super()._failure(response)
