"""Global configuration and defaults for campus2prolog."""

from __future__ import annotations

import yaml
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class GridConfig:
    """Coordinate conventions shared with the solver."""

    prolog_increment: int = 1  # domain cells are 0-indexed, solver cells 1-indexed


@dataclass
class SolverApiConfig:
    """Location of the Prolog solver service and its query-parameter names."""

    host: str = "http://127.0.0.1:5000"
    url_prefix: str = "/api"
    url_prolog_api: str = "/prolog"
    url_paths: str = "/paths"
    url_permutations: str = "/taskSequencePermutation"
    url_genetic: str = "/taskSequenceGeneticAlgorithm"
    param_origin_floor: str = "originFloor"
    param_origin_cel: str = "originCel"
    param_destination_floor: str = "destinationFloor"
    param_destination_cel: str = "destinationCel"
    param_robisep_id: str = "robisepId"
    timeout_sec: float = 30.0

    @property
    def base_url(self) -> str:
        return f"{self.host.rstrip('/')}{self.url_prefix}{self.url_prolog_api}"


@dataclass
class Config:
    """Top-level configuration."""

    grid: GridConfig = field(default_factory=GridConfig)
    solver_api: SolverApiConfig = field(default_factory=SolverApiConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from a YAML file."""
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}

        grid_data = data.get("grid", {})
        api_data = data.get("solver_api", {})

        return cls(
            grid=GridConfig(**grid_data) if grid_data else GridConfig(),
            solver_api=SolverApiConfig(**api_data) if api_data else SolverApiConfig(),
        )

    @classmethod
    def default(cls) -> "Config":
        return cls()
