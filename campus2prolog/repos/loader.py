"""YAML facility loader.

Reads a campus description (buildings, floors, rooms, elevators, passages,
robot types, robots and tasks) and converts it into a :class:`Facility`.
References between sections use the ids declared in earlier sections.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional

import yaml

from campus2prolog.domain.model import (
    Building,
    Cell,
    Elevator,
    Facility,
    Floor,
    Orientation,
    Passage,
    PassagePoint,
    PersonContact,
    PickUpAndDeliveryTask,
    Robisep,
    RobisepType,
    Room,
    SurveillanceTask,
    Task,
    TaskState,
    TaskType,
)

logger = logging.getLogger(__name__)


class FacilityLoadError(ValueError):
    """The facility file is malformed or references an unknown entity."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #


def _cell(raw: Any, path: str) -> Cell:
    if isinstance(raw, dict):
        raw = (raw.get("x"), raw.get("y"))
    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        raise FacilityLoadError(path, "expected an [x, y] pair")
    try:
        return int(raw[0]), int(raw[1])
    except (TypeError, ValueError) as exc:
        raise FacilityLoadError(path, f"expected integer coordinates, got {raw!r}") from exc


def _ref(index: dict[str, Any], key: Any, path: str) -> Any:
    if key is None:
        raise FacilityLoadError(path, "missing reference")
    found = index.get(str(key))
    if found is None:
        raise FacilityLoadError(path, f"unknown reference '{key}'")
    return found


def _optional_ref(index: dict[str, Any], key: Any, path: str) -> Optional[Any]:
    return None if key is None else _ref(index, key, path)


def _orientation(raw: Any, path: str) -> Orientation:
    try:
        return Orientation.from_str(str(raw))
    except ValueError as exc:
        raise FacilityLoadError(path, str(exc)) from exc


def _contact(raw: Optional[dict]) -> Optional[PersonContact]:
    if not raw:
        return None
    return PersonContact(name=str(raw.get("name", "")), phone_number=str(raw.get("phone", "")))


@contextmanager
def _entry(path: str, kind: str) -> Iterator[None]:
    """Turn a malformed entry into a :class:`FacilityLoadError` tagged with *path*."""
    try:
        yield
    except FacilityLoadError:
        raise
    except KeyError as exc:
        raise FacilityLoadError(path, f"{kind} is missing field {exc}") from exc
    except (TypeError, ValueError, AttributeError) as exc:
        raise FacilityLoadError(path, f"invalid {kind}: {exc}") from exc


def _section(data: dict[str, Any], name: str) -> list[Any]:
    raw = data.get(name) or []
    if not isinstance(raw, list):
        raise FacilityLoadError(name, "expected a list")
    return raw


# --------------------------------------------------------------------------- #
# Loader
# --------------------------------------------------------------------------- #


class FacilityLoader:
    """Load a YAML facility file into domain objects."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> Facility:
        with open(self.path, "r", encoding="utf-8") as fh:
            try:
                data = yaml.safe_load(fh) or {}
            except yaml.YAMLError as exc:
                raise FacilityLoadError(str(self.path), f"invalid YAML: {exc}") from exc
        if not isinstance(data, dict):
            raise FacilityLoadError(str(self.path), "top-level YAML must be a mapping")
        facility = self.from_dict(data)
        logger.debug(
            "Loaded %d buildings, %d floors, %d rooms, %d tasks from %s",
            len(facility.buildings),
            len(facility.floors),
            len(facility.rooms),
            len(facility.tasks),
            self.path,
        )
        return facility

    @staticmethod
    def from_dict(data: dict[str, Any]) -> Facility:
        f = Facility()

        buildings: dict[str, Building] = {}
        for i, raw in enumerate(_section(data, "buildings")):
            with _entry(f"buildings[{i}]", "building"):
                dims = raw.get("dimensions") or {}
                building = Building(
                    building_id=str(raw["id"]),
                    code=str(raw.get("code", raw["id"])),
                    dimensions=(int(dims["length"]), int(dims["width"])),
                    name=str(raw.get("name", "")),
                )
            buildings[building.building_id] = building
            f.buildings.append(building)

        floors: dict[str, Floor] = {}
        for i, raw in enumerate(_section(data, "floors")):
            path = f"floors[{i}]"
            with _entry(path, "floor"):
                floor = Floor(
                    floor_id=str(raw["id"]),
                    building=_ref(buildings, raw.get("building"), f"{path}.building"),
                    number=int(raw.get("number", 0)),
                    description=str(raw.get("description", "")),
                )
            floors[floor.floor_id] = floor
            f.floors.append(floor)

        rooms: dict[str, Room] = {}
        for i, raw in enumerate(_section(data, "rooms")):
            path = f"rooms[{i}]"
            with _entry(path, "room"):
                room = Room(
                    room_id=str(raw["id"]),
                    name=str(raw.get("name", raw["id"])),
                    floor=_ref(floors, raw.get("floor"), f"{path}.floor"),
                    initial_position=_cell(raw.get("initial_position"), f"{path}.initial_position"),
                    final_position=_cell(raw.get("final_position"), f"{path}.final_position"),
                    door_position=_cell(raw.get("door_position"), f"{path}.door_position"),
                    door_orientation=_orientation(raw.get("door_orientation"), f"{path}.door_orientation"),
                    description=str(raw.get("description", "")),
                )
            rooms[room.room_id] = room
            f.rooms.append(room)

        for i, raw in enumerate(_section(data, "elevators")):
            path = f"elevators[{i}]"
            with _entry(path, "elevator"):
                f.elevators.append(
                    Elevator(
                        elevator_id=str(raw["id"]),
                        floor=_ref(floors, raw.get("floor"), f"{path}.floor"),
                        number=int(raw.get("number", 1)),
                        position=_cell(raw.get("position"), f"{path}.position"),
                        orientation=_orientation(raw.get("orientation"), f"{path}.orientation"),
                    )
                )

        for i, raw in enumerate(_section(data, "passages")):
            path = f"passages[{i}]"
            with _entry(path, "passage"):
                points = []
                for side in ("start", "end"):
                    point = raw.get(side) or {}
                    points.append(
                        PassagePoint(
                            floor=_ref(floors, point.get("floor"), f"{path}.{side}.floor"),
                            first=_cell(point.get("first"), f"{path}.{side}.first"),
                            last=_cell(point.get("last"), f"{path}.{side}.last"),
                        )
                    )
                f.passages.append(Passage(passage_id=str(raw["id"]), start=points[0], end=points[1]))

        types: dict[str, RobisepType] = {}
        for i, raw in enumerate(_section(data, "robisep_types")):
            with _entry(f"robisep_types[{i}]", "robisep type"):
                rtype = RobisepType(
                    robisep_type_id=str(raw["id"]),
                    designation=str(raw.get("designation", raw["id"])),
                    task_types=frozenset(TaskType.from_str(t) for t in raw.get("task_types") or []),
                    brand=str(raw.get("brand", "")),
                    model=str(raw.get("model", "")),
                )
            types[rtype.robisep_type_id] = rtype
            f.robisep_types.append(rtype)

        robiseps: dict[str, Robisep] = {}
        for i, raw in enumerate(_section(data, "robiseps")):
            path = f"robiseps[{i}]"
            with _entry(path, "robisep"):
                robisep = Robisep(
                    robisep_id=str(raw["id"]),
                    nickname=str(raw.get("nickname", raw["id"])),
                    robisep_type=_ref(types, raw.get("type"), f"{path}.type"),
                    room=_ref(rooms, raw.get("room"), f"{path}.room"),
                    code=str(raw.get("code", "")),
                    serial_number=str(raw.get("serial_number", "")),
                )
            robiseps[robisep.robisep_id] = robisep
            f.robiseps.append(robisep)

        codes: set[int] = set()
        for i, raw in enumerate(_section(data, "tasks")):
            path = f"tasks[{i}]"
            with _entry(path, "task"):
                task = _task(raw, path, rooms, types, robiseps)
            if task.task_code in codes:
                raise FacilityLoadError(f"{path}.code", f"duplicate task code {task.task_code}")
            codes.add(task.task_code)
            f.tasks.append(task)

        return f


def _task(
    raw: dict[str, Any],
    path: str,
    rooms: dict[str, Room],
    types: dict[str, RobisepType],
    robiseps: dict[str, Robisep],
) -> Task:
    kind = TaskType.from_str(str(raw.get("kind", "")))
    state = TaskState(str(raw.get("state", "REQUESTED")).upper())
    common = dict(
        task_code=int(raw["code"]),
        robisep_type=_ref(types, raw.get("robisep_type"), f"{path}.robisep_type"),
        email=str(raw.get("email", "")),
        task_state=state,
        robisep=_optional_ref(robiseps, raw.get("robisep"), f"{path}.robisep"),
    )
    if kind is TaskType.SURVEILLANCE:
        return SurveillanceTask(
            **common,
            starting_point_to_watch=_ref(rooms, raw.get("start_room"), f"{path}.start_room"),
            ending_point_to_watch=_ref(rooms, raw.get("end_room"), f"{path}.end_room"),
        )
    return PickUpAndDeliveryTask(
        **common,
        pick_up_room=_ref(rooms, raw.get("pick_up_room"), f"{path}.pick_up_room"),
        delivery_room=_ref(rooms, raw.get("delivery_room"), f"{path}.delivery_room"),
        pick_up_contact=_contact(raw.get("pick_up_contact")),
        delivery_contact=_contact(raw.get("delivery_contact")),
        confirmation_code=raw.get("confirmation_code"),
        description=str(raw.get("description", "")),
    )
