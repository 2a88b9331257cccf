"""Abstract gateways to the external Prolog solver."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from campus2prolog.config import SolverApiConfig
from campus2prolog.core.result import Result


class SequencingAlgorithm(str, Enum):
    PERMUTATION = "PERMUTATION"
    GENETIC = "GENETIC"

    @classmethod
    def from_str(cls, value: str) -> "SequencingAlgorithm":
        normalized = str(value).strip().upper()
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(
            f"Unknown sequencing algorithm '{value}'; expected one of "
            + ", ".join(m.value for m in cls)
        )


@dataclass
class PathResult:
    path: list[str] = field(default_factory=list)
    cost: float = 0.0


@dataclass
class TaskSequence:
    """Solver answer: first and last entries are depot markers, the rest task codes."""

    sequence: list[str] = field(default_factory=list)
    cost: float = 0.0


class SolverGateway(ABC):
    def __init__(self, config: Optional[SolverApiConfig] = None) -> None:
        self.config = config or SolverApiConfig()


class PathGateway(SolverGateway):
    @abstractmethod
    def get_lowest_cost_path(
        self,
        origin_floor_id: str,
        origin_cell: str,
        destination_floor_id: str,
        destination_cell: str,
    ) -> Result[PathResult]:
        """Ask the solver for the cheapest route between two cells.

        Returns an ``InvalidInput`` failure when the solver rejects the
        request, a generic failure for any other error.
        """


class TaskGateway(SolverGateway):
    @abstractmethod
    def get_task_sequence(
        self,
        robisep_id: str,
        algorithm: SequencingAlgorithm,
    ) -> Result[TaskSequence]:
        """Ask the solver for the best order of a robot's accepted tasks."""
