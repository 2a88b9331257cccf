"""Renderable floor map: wall/door codes, floor elements and connections.

The map is one cell larger than the floor in each direction so the right and
bottom walls have somewhere to go. Codes:

0 empty, 1 vertical wall, 2 horizontal wall, 3 corner,
4 door in a vertical wall, 5 door in a horizontal wall,
6-9 elevator facing NORTH/SOUTH/EAST/WEST,
12-21 passage ends on the top/left/right/bottom walls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from campus2prolog.core.result import FailureType, Result
from campus2prolog.domain.model import Building, Cell, Elevator, Floor, Orientation, Passage, PassagePoint, Room
from campus2prolog.geometry.grid import OccupancyGrid
from campus2prolog.repos.base import ElevatorRepo, FloorRepo, PassageRepo, RoomRepo

logger = logging.getLogger(__name__)

EMPTY = 0
WALL_VERTICAL = 1
WALL_HORIZONTAL = 2
CORNER = 3
DOOR_VERTICAL = 4
DOOR_HORIZONTAL = 5

_ELEVATOR_CODES = {
    Orientation.NORTH: 6,
    Orientation.SOUTH: 7,
    Orientation.EAST: 8,
    Orientation.WEST: 9,
}

# heading (degrees) of a robot leaving the elevator
_ELEVATOR_DIRECTIONS = {
    Orientation.NORTH: 180,
    Orientation.SOUTH: 0,
    Orientation.EAST: 90,
    Orientation.WEST: 270,
}


class ConnectionType(str, Enum):
    PASSAGE = "passage"
    ELEVATOR = "elevator"


@dataclass
class Connection:
    connection_type: ConnectionType
    coords: Cell
    destination_floors: dict[int, str]  # floor number -> building code
    destination_coords: Cell
    destination_direction: Optional[int]

    def to_dict(self) -> dict:
        return {
            "connectionType": self.connection_type.value,
            "connectionCoords": list(self.coords),
            "destFloorId": dict(self.destination_floors),
            "destFloorInitiCoords": list(self.destination_coords),
            "destFloorInitiDirection": self.destination_direction,
        }


@dataclass
class FloorElement:
    initial: Cell
    final: Cell
    display_name: str = ""

    def to_dict(self) -> dict:
        return {
            "initCoords": list(self.initial),
            "finalCoords": list(self.final),
            "displayName": self.display_name,
        }


@dataclass
class FloorMap:
    width: int
    length: int
    map: list[list[int]]
    connections: list[Connection] = field(default_factory=list)
    floor_elements: list[FloorElement] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "size": {"width": self.width, "length": self.length},
            "map": [list(row) for row in self.map],
            "connections": [c.to_dict() for c in self.connections],
            "floorElements": [e.to_dict() for e in self.floor_elements],
        }


def passage_direction(first: Cell, last: Cell, building: Building) -> Optional[int]:
    """Heading of a robot arriving through a passage end lying on a floor edge."""
    (fx, fy), (lx, ly) = first, last
    if fx == 0 and lx == 0:
        return 90
    if fy == 0 and ly == 0:
        return 0
    if fx == building.width - 1 and lx == building.width - 1:
        return 270
    if fy == building.length - 1 and ly == building.length - 1:
        return 180
    return None


def _passage_marks(first: Cell, last: Cell, width: int, length: int) -> list[tuple[int, int, int]]:
    """``(y, x, code)`` for both ends of a passage on this floor."""
    (fx, fy), (lx, ly) = first, last
    if {fx, lx} == {0, 1} and fy == 0:
        low, high = 20, 13
        cells = ((fy, fx), (ly, lx))
        forward = fx < lx
    elif {fy, ly} == {0, 1} and fx == 0:
        low, high = 21, 15
        cells = ((fy, fx), (ly, lx))
        forward = fy < ly
    elif fy == 0 and ly == 0:
        low, high = 12, 13
        cells = ((fy, fx), (ly, lx))
        forward = fx < lx
    elif fx == 0 and lx == 0:
        low, high = 14, 15
        cells = ((fy, fx), (ly, lx))
        forward = fy < ly
    elif fx == width - 1:
        low, high = 16, 17
        cells = ((fy, fx + 1), (ly, lx + 1))
        forward = fy < ly
    elif fy == length - 1:
        low, high = 18, 19
        cells = ((fy + 1, fx), (ly + 1, lx))
        forward = fx < lx
    else:
        return []
    codes = (low, high) if forward else (high, low)
    return [(y, x, code) for (y, x), code in zip(cells, codes)]


class FloorMapGenerator:
    def __init__(
        self,
        floor_repo: FloorRepo,
        room_repo: RoomRepo,
        elevator_repo: ElevatorRepo,
        passage_repo: PassageRepo,
    ) -> None:
        self.floor_repo = floor_repo
        self.room_repo = room_repo
        self.elevator_repo = elevator_repo
        self.passage_repo = passage_repo

    def get_floor_map(self, building_code: str, floor_number: int) -> Result[FloorMap]:
        try:
            floor = self.floor_repo.find_by_building_code_and_number(building_code, floor_number)
            if floor is None:
                return Result.fail(
                    f"Floor with number {floor_number} does not exist in building with code {building_code}",
                    FailureType.ENTITY_DOES_NOT_EXIST,
                )
            return Result.ok(self.calculate_floor_map(floor))
        except Exception as exc:
            logger.exception("Failed to build the floor map")
            return Result.fail(str(exc), FailureType.DATABASE_ERROR)

    def calculate_floor_map(self, floor: Floor) -> FloorMap:
        width = floor.building.width  # x-axis
        length = floor.building.length  # y-axis
        grid = self._outline(width, length)
        connections: list[Connection] = []
        elements: list[FloorElement] = []

        for room in self.room_repo.find_by_floor_id(floor.floor_id):
            self._draw_room(grid, elements, room, width, length)
        for elevator in self.elevator_repo.find_all_by_floor_id(floor.floor_id):
            self._draw_elevator(grid, connections, elements, floor, elevator)
        for passage in self.passage_repo.find_by_floor_id(floor.floor_id):
            self._draw_passage(grid, connections, elements, floor, passage)

        logger.debug(
            "Floor map %s: %d connections, %d elements",
            floor.label, len(connections), len(elements),
        )
        return FloorMap(width, length, grid.rows(), connections, elements)

    # ------------------------------------------------------------------ #
    # Drawing
    # ------------------------------------------------------------------ #

    @staticmethod
    def _outline(width: int, length: int) -> OccupancyGrid:
        grid = OccupancyGrid(length + 1, width + 1)
        # the right wall wins over both horizontal walls, the left wall loses to them
        grid.cells[:, 0] = WALL_VERTICAL
        grid.cells[0, :] = WALL_HORIZONTAL
        grid.cells[length, :] = WALL_HORIZONTAL
        grid.cells[:, width] = WALL_VERTICAL
        grid.cells[0, 0] = CORNER
        grid.cells[length, width] = EMPTY
        return grid

    @staticmethod
    def _draw_room(
        grid: OccupancyGrid,
        elements: list[FloorElement],
        room: Room,
        width: int,
        length: int,
    ) -> None:
        x0, y0 = room.initial_position
        x1, y1 = room.final_position
        door = room.door_position
        what = f"wall of room '{room.room_id}'"
        for y in range(y0, y1 + 1):
            for x in range(x0, x1 + 1):
                grid.set(y, x, EMPTY, what)
                if x == x1:
                    grid.set(y, x + 1, WALL_VERTICAL, what)
                if y == y1:
                    grid.set(y + 1, x, WALL_HORIZONTAL, what)
                if x == x0:
                    grid.set(y, x, WALL_VERTICAL, what)
                if y == y0:
                    grid.set(y, x, WALL_HORIZONTAL, what)
                if x == x0 and y == y0:
                    grid.set(y, x, CORNER, what)
                # rooms against the top or left floor edge close their corner
                if x == x1 and y == 0 and x != width - 1:
                    grid.set(y, x + 1, CORNER, what)
                if y == y1 and x == 0 and y != length - 1:
                    grid.set(y + 1, x, CORNER, what)

                if (x, y) == door:
                    cell = FloorMapGenerator._draw_door(grid, room.door_orientation, x, y)
                    elements.append(FloorElement(cell, cell, room.name))

    @staticmethod
    def _draw_door(grid: OccupancyGrid, orientation: Orientation, x: int, y: int) -> Cell:
        if orientation is Orientation.SOUTH:
            x, y, code = x, y + 1, DOOR_HORIZONTAL
        elif orientation is Orientation.EAST:
            x, y, code = x + 1, y, DOOR_VERTICAL
        elif orientation is Orientation.NORTH:
            code = DOOR_HORIZONTAL
        else:
            code = DOOR_VERTICAL
        grid.set(y, x, code, what="door")
        return x, y

    def _draw_elevator(
        self,
        grid: OccupancyGrid,
        connections: list[Connection],
        elements: list[FloorElement],
        floor: Floor,
        elevator: Elevator,
    ) -> None:
        x, y = elevator.position
        destinations = {
            other.floor.number: other.floor.building.code
            for other in self.elevator_repo.find_by_building_id(floor.building.building_id)
            if other.number == elevator.number and other.floor.floor_id != floor.floor_id
        }
        connections.append(
            Connection(
                ConnectionType.ELEVATOR,
                (x, y),
                destinations,
                (x, y),
                _ELEVATOR_DIRECTIONS[elevator.orientation],
            )
        )
        elements.append(FloorElement((x, y), (x, y), str(elevator.number)))
        grid.set(y, x, _ELEVATOR_CODES[elevator.orientation], what=f"elevator '{elevator.elevator_id}'")

    @staticmethod
    def _draw_passage(
        grid: OccupancyGrid,
        connections: list[Connection],
        elements: list[FloorElement],
        floor: Floor,
        passage: Passage,
    ) -> None:
        here: PassagePoint
        there: PassagePoint
        if passage.start.floor.floor_id == floor.floor_id:
            here, there = passage.start, passage.end
        else:
            here, there = passage.end, passage.start

        destinations = {there.floor.number: there.floor.building.code}
        direction = passage_direction(there.first, there.last, there.floor.building)
        elements.append(FloorElement(here.first, here.last))
        connections.append(
            Connection(ConnectionType.PASSAGE, here.first, dict(destinations), there.first, direction)
        )
        connections.append(
            Connection(ConnectionType.PASSAGE, here.last, dict(destinations), there.last, direction)
        )

        building = floor.building
        for y, x, code in _passage_marks(here.first, here.last, building.width, building.length):
            grid.set(y, x, code, what=f"passage '{passage.passage_id}'")
