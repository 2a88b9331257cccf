"""Command-line interface for campus2prolog.

Usage
-----
    campus2prolog --facility campus.yaml floor-plan F1
    campus2prolog --facility campus.yaml campus
    campus2prolog --facility campus.yaml floor-map A 1
    campus2prolog --facility campus.yaml path F1 R101 F2 R201
    campus2prolog --facility campus.yaml sequence --algorithm genetic
    campus2prolog --facility campus.yaml validate --report report.json
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import click

from campus2prolog.config import Config
from campus2prolog.core.result import Result
from campus2prolog.gateways.base import SequencingAlgorithm
from campus2prolog.gateways.http import HttpPathGateway, HttpTaskGateway
from campus2prolog.prolog.campus import CampusFactsCompiler
from campus2prolog.prolog.floor_plan import SpatialGridCompiler
from campus2prolog.prolog.tasks import RobotTaskFactsCompiler
from campus2prolog.repos.loader import FacilityLoader, FacilityLoadError
from campus2prolog.repos.memory import Repositories
from campus2prolog.services.floor_map import FloorMapGenerator
from campus2prolog.services.path import PathOrchestrator
from campus2prolog.services.sequencing import TaskSequenceOrchestrator
from campus2prolog.validate.checks import campus_warnings, validate_facility
from campus2prolog.validate.reports import build_validation_report, save_validation_report

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s %(name)s: %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger("campus2prolog.cli")


class _Context:
    def __init__(self, cfg: Config, facility_path: str) -> None:
        self.cfg = cfg
        self.facility_path = facility_path
        self._loader = FacilityLoader(facility_path)
        self._facility = None
        self._repos: Optional[Repositories] = None

    @property
    def facility(self):
        if self._facility is None:
            try:
                self._facility = self._loader.load()
            except FacilityLoadError as exc:
                raise click.ClickException(f"Invalid facility file: {exc}") from exc
        return self._facility

    @property
    def repos(self) -> Repositories:
        if self._repos is None:
            self._repos = Repositories.from_facility(self.facility)
        return self._repos


def _emit(result: Result[Any]) -> None:
    if result.is_failure:
        logger.error("%s: %s", result.failure_type.value if result.failure_type else "Failure", result.error)
        raise SystemExit(1)
    value = result.value
    if isinstance(value, list):
        payload = [v.to_dict() for v in value]
    else:
        payload = value.to_dict()
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))


@click.group()
@click.option("--facility", "-f", "facility_path", required=True, type=click.Path(exists=True, dir_okay=False), help="Facility description (YAML)")
@click.option("--config", "-c", "config_path", default=None, help="YAML configuration file")
@click.option("--solver-host", envvar="PATH_API_HOST", default=None, help="Prolog solver base URL")
@click.option("--timeout", type=float, default=None, help="Solver request timeout in seconds")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def main(
    ctx: click.Context,
    facility_path: str,
    config_path: Optional[str],
    solver_host: Optional[str],
    timeout: Optional[float],
    verbose: bool,
) -> None:
    """Compile a campus into Prolog facts and query the Prolog solver."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    cfg = Config.from_yaml(config_path) if config_path else Config.default()
    if solver_host:
        cfg.solver_api.host = solver_host
    if timeout is not None:
        cfg.solver_api.timeout_sec = timeout
    ctx.obj = _Context(cfg, facility_path)


@main.command("floor-plan")
@click.argument("floor_id")
@click.pass_obj
def floor_plan(obj: _Context, floor_id: str) -> None:
    """Print the m/4 occupancy facts of FLOOR_ID."""
    r = obj.repos
    compiler = SpatialGridCompiler(r.floors, r.rooms, r.elevators, obj.cfg.grid)
    _emit(compiler.compile_floor_plan(floor_id))


@main.command("floor-map")
@click.argument("building_code")
@click.argument("floor_number", type=int)
@click.pass_obj
def floor_map(obj: _Context, building_code: str, floor_number: int) -> None:
    """Print the renderable map of floor FLOOR_NUMBER of building BUILDING_CODE."""
    r = obj.repos
    generator = FloorMapGenerator(r.floors, r.rooms, r.elevators, r.passages)
    _emit(generator.get_floor_map(building_code, floor_number))


@main.command("campus")
@click.pass_obj
def campus(obj: _Context) -> None:
    """Print the floors/elevator/passage/connects facts of the whole campus."""
    r = obj.repos
    compiler = CampusFactsCompiler(r.buildings, r.floors, r.elevators, r.passages, obj.cfg.grid)
    _emit(compiler.compile_campus())


@main.command("robot-tasks")
@click.argument("robisep_id")
@click.pass_obj
def robot_tasks(obj: _Context, robisep_id: str) -> None:
    """Print the robot/2 and task/5 facts of ROBISEP_ID."""
    r = obj.repos
    compiler = RobotTaskFactsCompiler(
        r.robiseps, r.surveillance_tasks, r.pick_up_and_delivery_tasks, obj.cfg.grid
    )
    _emit(compiler.compile_robot_tasks(robisep_id))


@main.command("path")
@click.argument("origin_floor")
@click.argument("origin_room")
@click.argument("destination_floor")
@click.argument("destination_room")
@click.pass_obj
def path(obj: _Context, origin_floor: str, origin_room: str, destination_floor: str, destination_room: str) -> None:
    """Ask the solver for the lowest-cost path between two rooms."""
    r = obj.repos
    orchestrator = PathOrchestrator(r.floors, r.rooms, HttpPathGateway(obj.cfg.solver_api), obj.cfg.grid)
    logger.info("Resolving path %s/%s -> %s/%s", origin_floor, origin_room, destination_floor, destination_room)
    _emit(orchestrator.resolve_path(origin_floor, origin_room, destination_floor, destination_room))


@main.command("sequence")
@click.option(
    "--algorithm",
    "-a",
    default="permutation",
    show_default=True,
    type=click.Choice([a.value for a in SequencingAlgorithm], case_sensitive=False),
    help="Sequencing algorithm run by the solver",
)
@click.pass_obj
def sequence(obj: _Context, algorithm: str) -> None:
    """Sequence every robot's accepted tasks and mark them planned."""
    r = obj.repos
    orchestrator = TaskSequenceOrchestrator(
        r.surveillance_tasks,
        r.pick_up_and_delivery_tasks,
        r.robiseps,
        HttpTaskGateway(obj.cfg.solver_api),
    )
    logger.info("Sequencing accepted tasks with %s", algorithm.upper())
    _emit(orchestrator.compute_sequences(algorithm))


@main.command("validate")
@click.option("--report", "report_path", default=None, help="Write a JSON validation report here")
@click.pass_obj
def validate(obj: _Context, report_path: Optional[str]) -> None:
    """Check room footprints, doors, elevators and tasks of the facility."""
    errors = validate_facility(obj.facility, obj.cfg.grid)
    warnings = campus_warnings(obj.facility)
    for w in warnings:
        logger.warning("Campus warning: %s", w)
    for e in errors:
        logger.error("Facility error: %s", e)

    report = build_validation_report(errors, warnings)
    if report_path:
        save_validation_report(report, Path(report_path))
        logger.info("Validation report saved to %s", report_path)
    if errors:
        raise SystemExit(1)
    click.echo("Facility OK")


if __name__ == "__main__":
    main()
