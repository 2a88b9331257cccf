"""Validation checks for a loaded facility."""

from __future__ import annotations

from shapely.geometry import box

from campus2prolog.config import GridConfig
from campus2prolog.domain.graph import CampusGraph
from campus2prolog.domain.model import (
    Facility,
    PickUpAndDeliveryTask,
    Room,
    SurveillanceTask,
)
from campus2prolog.geometry.coords import threshold_cell


def _room_box(room: Room):
    x0, y0 = room.initial_position
    x1, y1 = room.final_position
    return box(x0, y0, x1 + 1, y1 + 1)


def _in_grid(y: int, x: int, length: int, width: int) -> bool:
    return 0 <= y < length and 0 <= x < width


def check_room_overlaps(rooms: list[Room], tol: float = 0.0) -> list[str]:
    """Return a list of overlap descriptions between rooms of the same floor."""
    issues: list[str] = []
    for i in range(len(rooms)):
        for j in range(i + 1, len(rooms)):
            a, b = rooms[i], rooms[j]
            if a.floor.floor_id != b.floor.floor_id:
                continue
            inter = _room_box(a).intersection(_room_box(b))
            if inter.area > tol:
                issues.append(
                    f"Overlap between rooms '{a.room_id}' and '{b.room_id}' "
                    f"on floor '{a.floor.floor_id}': {inter.area:.0f} cells"
                )
    return issues


def validate_facility(facility: Facility, config: GridConfig | None = None) -> list[str]:
    """Return a list of facility-level validation errors."""
    offset = (config or GridConfig()).prolog_increment
    errors: list[str] = []

    for room in facility.rooms:
        building = room.floor.building
        footprint = box(0, 0, building.width, building.length)
        x0, y0 = room.initial_position
        x1, y1 = room.final_position
        if x0 > x1 or y0 > y1:
            errors.append(f"Room '{room.room_id}' has its initial position after its final position.")
        elif not footprint.covers(_room_box(room)):
            errors.append(
                f"Room '{room.room_id}' lies outside building '{building.building_id}' "
                f"({building.length}x{building.width})."
            )
        dx, dy = room.door_position
        if not room.contains(dx, dy):
            errors.append(f"Room '{room.room_id}' door ({dx}, {dy}) is not on the room footprint.")
        y, x = threshold_cell(dx, dy, room.door_orientation, offset).grid_index(offset)
        if not _in_grid(y, x, building.length, building.width):
            errors.append(f"Room '{room.room_id}' door opens outside the floor grid.")

    errors.extend(check_room_overlaps(facility.rooms))

    for elevator in facility.elevators:
        building = elevator.floor.building
        ex, ey = elevator.position
        if not _in_grid(ey, ex, building.length, building.width):
            errors.append(f"Elevator '{elevator.elevator_id}' lies outside the floor grid.")
        y, x = threshold_cell(ex, ey, elevator.orientation, offset).grid_index(offset)
        if not _in_grid(y, x, building.length, building.width):
            errors.append(f"Elevator '{elevator.elevator_id}' opens outside the floor grid.")

    for task in facility.tasks:
        if isinstance(task, SurveillanceTask):
            start, end = task.starting_point_to_watch, task.ending_point_to_watch
            if start.room_id == end.room_id:
                errors.append(f"Surveillance task {task.task_code} starts and ends in the same room.")
            elif start.floor.floor_id != end.floor.floor_id:
                errors.append(f"Surveillance task {task.task_code} spans two floors.")
        elif isinstance(task, PickUpAndDeliveryTask):
            if task.pick_up_room.room_id == task.delivery_room.room_id:
                errors.append(f"Transport task {task.task_code} picks up and delivers in the same room.")

    return errors


def campus_warnings(facility: Facility) -> list[str]:
    """Floors that cannot be reached from the rest of the campus."""
    graph = CampusGraph.from_parts(facility.floors, facility.passages, facility.elevators)
    return [
        f"Floors {', '.join(group)} are not connected to the rest of the campus."
        for group in graph.isolated_groups()
    ]
