"""Dict-backed repositories.

Entities are returned in insertion order so every compiler that iterates a
repository produces the same output for the same data.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Generic, Iterable, Optional, TypeVar

from campus2prolog.domain.model import (
    Building,
    Elevator,
    Facility,
    Floor,
    Passage,
    PickUpAndDeliveryTask,
    Robisep,
    Room,
    SurveillanceTask,
    TaskState,
)
from campus2prolog.repos import base

logger = logging.getLogger(__name__)

E = TypeVar("E")


class _MemoryStore(Generic[E]):
    def __init__(self, key: Callable[[E], str], items: Iterable[E] = ()) -> None:
        self._key = key
        self._items: dict[str, E] = {}
        for item in items:
            self.save(item)

    def save(self, item: E) -> E:
        self._items[self._key(item)] = item
        return item

    def find_by_domain_id(self, domain_id: str) -> Optional[E]:
        return self._items.get(str(domain_id))

    def find_all(self) -> list[E]:
        return list(self._items.values())


class MemoryBuildingRepo(_MemoryStore[Building], base.BuildingRepo):
    def __init__(self, items: Iterable[Building] = ()) -> None:
        super().__init__(lambda b: b.building_id, items)


class MemoryFloorRepo(_MemoryStore[Floor], base.FloorRepo):
    def __init__(self, items: Iterable[Floor] = ()) -> None:
        super().__init__(lambda f: f.floor_id, items)

    def find_by_building_id(self, building_id: str) -> list[Floor]:
        return [f for f in self.find_all() if f.building.building_id == building_id]

    def find_by_building_code_and_number(self, building_code: str, number: int) -> Optional[Floor]:
        for f in self.find_all():
            if f.building.code == building_code and f.number == number:
                return f
        return None


class MemoryRoomRepo(_MemoryStore[Room], base.RoomRepo):
    def __init__(self, items: Iterable[Room] = ()) -> None:
        super().__init__(lambda r: r.room_id, items)

    def find_by_floor_id(self, floor_id: str) -> list[Room]:
        return [r for r in self.find_all() if r.floor.floor_id == floor_id]


class MemoryElevatorRepo(_MemoryStore[Elevator], base.ElevatorRepo):
    def __init__(self, items: Iterable[Elevator] = ()) -> None:
        super().__init__(lambda e: e.elevator_id, items)

    def find_all_by_floor_id(self, floor_id: str) -> list[Elevator]:
        return [e for e in self.find_all() if e.floor.floor_id == floor_id]

    def find_by_building_id(self, building_id: str) -> list[Elevator]:
        return [e for e in self.find_all() if e.floor.building.building_id == building_id]


class MemoryPassageRepo(_MemoryStore[Passage], base.PassageRepo):
    def __init__(self, items: Iterable[Passage] = ()) -> None:
        super().__init__(lambda p: p.passage_id, items)

    def find_by_floor_id(self, floor_id: str) -> list[Passage]:
        return [p for p in self.find_all() if p.serves(floor_id)]


class MemoryRobisepRepo(_MemoryStore[Robisep], base.RobisepRepo):
    def __init__(self, items: Iterable[Robisep] = ()) -> None:
        super().__init__(lambda r: r.robisep_id, items)


class _MemoryTaskRepo:
    def __init__(self, items: Iterable = ()) -> None:
        self._items: dict[int, object] = {}
        for item in items:
            self.update(item)

    def find_by_code(self, code: int):
        return self._items.get(int(code))

    def find_all(self) -> list:
        return list(self._items.values())

    def find_by_state(self, states: Iterable[TaskState]) -> list:
        wanted = set(states)
        return [t for t in self._items.values() if t.task_state in wanted]

    def find_by_state_and_robisep_id(self, states: Iterable[TaskState], robisep_id: str) -> list:
        return [
            t
            for t in self.find_by_state(states)
            if t.robisep is not None and t.robisep.robisep_id == robisep_id
        ]

    def update(self, task):
        self._items[task.task_code] = task
        logger.debug("Stored task %d in state %s", task.task_code, task.task_state.value)
        return task


class MemorySurveillanceTaskRepo(_MemoryTaskRepo, base.SurveillanceTaskRepo):
    pass


class MemoryPickUpAndDeliveryTaskRepo(_MemoryTaskRepo, base.PickUpAndDeliveryTaskRepo):
    pass


@dataclass
class Repositories:
    """The full set of repositories wired into the services."""

    buildings: base.BuildingRepo = field(default_factory=MemoryBuildingRepo)
    floors: base.FloorRepo = field(default_factory=MemoryFloorRepo)
    rooms: base.RoomRepo = field(default_factory=MemoryRoomRepo)
    elevators: base.ElevatorRepo = field(default_factory=MemoryElevatorRepo)
    passages: base.PassageRepo = field(default_factory=MemoryPassageRepo)
    robiseps: base.RobisepRepo = field(default_factory=MemoryRobisepRepo)
    surveillance_tasks: base.SurveillanceTaskRepo = field(
        default_factory=MemorySurveillanceTaskRepo
    )
    pick_up_and_delivery_tasks: base.PickUpAndDeliveryTaskRepo = field(
        default_factory=MemoryPickUpAndDeliveryTaskRepo
    )

    @classmethod
    def from_facility(cls, facility: Facility) -> "Repositories":
        return cls(
            buildings=MemoryBuildingRepo(facility.buildings),
            floors=MemoryFloorRepo(facility.floors),
            rooms=MemoryRoomRepo(facility.rooms),
            elevators=MemoryElevatorRepo(facility.elevators),
            passages=MemoryPassageRepo(facility.passages),
            robiseps=MemoryRobisepRepo(facility.robiseps),
            surveillance_tasks=MemorySurveillanceTaskRepo(
                t for t in facility.tasks if isinstance(t, SurveillanceTask)
            ),
            pick_up_and_delivery_tasks=MemoryPickUpAndDeliveryTaskRepo(
                t for t in facility.tasks if isinstance(t, PickUpAndDeliveryTask)
            ),
        )
