"""Lowest-cost path between two rooms, answered by the path solver."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

from campus2prolog.config import GridConfig
from campus2prolog.core.result import FailureType, Result
from campus2prolog.domain.model import Room
from campus2prolog.gateways.base import PathGateway
from campus2prolog.geometry.coords import threshold_cell
from campus2prolog.prolog.tokens import CellStep, CorridorStep, ElevatorStep, RouteStep, parse_route
from campus2prolog.repos.base import FloorRepo, RoomRepo

logger = logging.getLogger(__name__)

STEP_SEPARATOR = " - "


@dataclass(frozen=True)
class PathView:
    path: str
    cost: str

    def to_dict(self) -> dict:
        return {"path": self.path, "cost": self.cost}


class UnknownFloorError(LookupError):
    def __init__(self, floor_id: str) -> None:
        super().__init__(f"The floor {floor_id} in the returned path does not exist.")
        self.floor_id = floor_id


def format_cost(cost: float) -> str:
    """Round half-up to two decimals and drop trailing zeros (``12.5``, ``3``)."""
    rounded = math.floor(cost * 100 + 0.5) / 100
    text = f"{rounded:.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


class PathOrchestrator:
    def __init__(
        self,
        floor_repo: FloorRepo,
        room_repo: RoomRepo,
        path_gateway: PathGateway,
        config: Optional[GridConfig] = None,
    ) -> None:
        self.floor_repo = floor_repo
        self.room_repo = room_repo
        self.path_gateway = path_gateway
        self.config = config or GridConfig()

    def resolve_path(
        self,
        origin_floor_id: str,
        origin_room_id: str,
        destination_floor_id: str,
        destination_room_id: str,
    ) -> Result[list[PathView]]:
        try:
            return self._resolve(
                origin_floor_id, origin_room_id, destination_floor_id, destination_room_id
            )
        except Exception as exc:
            logger.exception("Path resolution failed")
            return Result.fail(str(exc), FailureType.DATABASE_ERROR)

    def _resolve(
        self,
        origin_floor_id: str,
        origin_room_id: str,
        destination_floor_id: str,
        destination_room_id: str,
    ) -> Result[list[PathView]]:
        lookups = (
            (self.floor_repo, origin_floor_id, "The origin floor does not exist."),
            (self.floor_repo, destination_floor_id, "The destination floor does not exist."),
            (self.room_repo, origin_room_id, "The origin room does not exist."),
            (self.room_repo, destination_room_id, "The destination room does not exist."),
        )
        found = []
        for repo, domain_id, message in lookups:
            entity = repo.find_by_domain_id(domain_id)
            if entity is None:
                return Result.fail(message, FailureType.ENTITY_DOES_NOT_EXIST)
            found.append(entity)
        origin_room, destination_room = found[2], found[3]

        answer = self.path_gateway.get_lowest_cost_path(
            origin_floor_id,
            self._door_cell(origin_room),
            destination_floor_id,
            self._door_cell(destination_room),
        )
        if answer.is_failure:
            return answer.propagate()

        try:
            steps = [self._render(step) for step in parse_route(answer.value.path)]
        except UnknownFloorError as exc:
            return Result.fail(str(exc), FailureType.ENTITY_DOES_NOT_EXIST)

        view = PathView(path=STEP_SEPARATOR.join(steps), cost=format_cost(answer.value.cost))
        return Result.ok([view])

    def _door_cell(self, room: Room) -> str:
        x, y = room.door_position
        return threshold_cell(x, y, room.door_orientation, self.config.prolog_increment).to_fact()

    def _floor_label(self, floor_id: str) -> str:
        floor = self.floor_repo.find_by_domain_id(floor_id)
        if floor is None:
            raise UnknownFloorError(floor_id)
        return floor.label

    def _render(self, step: RouteStep) -> str:
        if isinstance(step, CellStep):
            return step.render()
        origin = self._floor_label(step.origin_floor_id)
        destination = self._floor_label(step.destination_floor_id)
        if isinstance(step, CorridorStep):
            return f"passage({origin} > {destination})"
        if isinstance(step, ElevatorStep):
            return f"elevator({origin} > {destination})"
        raise TypeError(f"Unsupported route step: {step!r}")
