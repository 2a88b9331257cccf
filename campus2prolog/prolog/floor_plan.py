"""Floor occupancy grid compiled to ``m/4`` facts for the path solver.

Rooms are solid except for their doorway; an elevator blocks its own cell
and frees its threshold.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from campus2prolog.config import GridConfig
from campus2prolog.core.result import FailureType, Result
from campus2prolog.geometry.coords import threshold_cell
from campus2prolog.geometry.grid import BLOCKED, FREE, OccupancyGrid
from campus2prolog.prolog.facts import grid_fact
from campus2prolog.repos.base import ElevatorRepo, FloorRepo, RoomRepo

logger = logging.getLogger(__name__)


@dataclass
class FloorPlanFacts:
    height: int
    width: int
    cells: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "floorPlanHeight": self.height,
            "floorPlanWidth": self.width,
            "floorPlanCells": list(self.cells),
        }


class SpatialGridCompiler:
    def __init__(
        self,
        floor_repo: FloorRepo,
        room_repo: RoomRepo,
        elevator_repo: ElevatorRepo,
        config: Optional[GridConfig] = None,
    ) -> None:
        self.floor_repo = floor_repo
        self.room_repo = room_repo
        self.elevator_repo = elevator_repo
        self.config = config or GridConfig()

    def build_grid(self, floor_id: str) -> Optional[OccupancyGrid]:
        """Return the floor's occupancy grid, or ``None`` if the floor is unknown."""
        floor = self.floor_repo.find_by_domain_id(floor_id)
        if floor is None:
            return None

        offset = self.config.prolog_increment
        grid = OccupancyGrid(floor.building.length, floor.building.width)

        rooms = self.room_repo.find_by_floor_id(floor_id)
        grid.fill_rooms(rooms)
        for room in rooms:
            door_x, door_y = room.door_position
            y, x = threshold_cell(door_x, door_y, room.door_orientation, offset).grid_index(offset)
            grid.set(y, x, FREE, what=f"door threshold of room '{room.room_id}'")

        for elevator in self.elevator_repo.find_all_by_floor_id(floor_id):
            ex, ey = elevator.position
            grid.set(ey, ex, BLOCKED, what=f"elevator '{elevator.elevator_id}'")
            y, x = threshold_cell(ex, ey, elevator.orientation, offset).grid_index(offset)
            grid.set(y, x, FREE, what=f"threshold of elevator '{elevator.elevator_id}'")

        return grid

    def compile_floor_plan(self, floor_id: str) -> Result[FloorPlanFacts]:
        grid = self.build_grid(floor_id)
        if grid is None:
            return Result.fail(
                f"Floor with id {floor_id} does not exist",
                FailureType.ENTITY_DOES_NOT_EXIST,
            )

        offset = self.config.prolog_increment
        cells = [
            grid_fact(floor_id, x + offset, y + offset, value)
            for x, y, value in grid.iter_cells()
        ]
        logger.debug("Compiled %d grid facts for floor %s", len(cells), floor_id)
        return Result.ok(FloorPlanFacts(height=grid.height, width=grid.width, cells=cells))
