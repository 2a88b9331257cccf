"""Internal facility data model.

Building   – rectangular footprint shared by all of its floors
Floor      – one storey of a building
Room       – rectangular footprint with a single door
Elevator   – per-floor record of an elevator shaft
Passage    – corridor joining floors of two buildings
RobisepType / Robisep – robot model and robot instance
SurveillanceTask / PickUpAndDeliveryTask – task requests and their state machine
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Optional

Cell = tuple[int, int]  # 0-indexed (x, y)


# --------------------------------------------------------------------------- #
# Enumerations
# --------------------------------------------------------------------------- #


class Orientation(str, Enum):
    NORTH = "NORTH"
    SOUTH = "SOUTH"
    EAST = "EAST"
    WEST = "WEST"

    @classmethod
    def from_str(cls, value: str) -> "Orientation":
        normalized = value.strip().upper()
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"Unknown orientation: {value!r}")


class TaskType(str, Enum):
    SURVEILLANCE = "SURVEILLANCE"
    TRANSPORT = "TRANSPORT"

    @classmethod
    def from_str(cls, value: str) -> "TaskType":
        normalized = value.strip().upper()
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"Unknown task type: {value!r}")


class TaskState(str, Enum):
    REQUESTED = "REQUESTED"
    ACCEPTED = "ACCEPTED"
    REFUSED = "REFUSED"
    PLANNED = "PLANNED"


_TRANSITIONS: dict[TaskState, frozenset[TaskState]] = {
    TaskState.REQUESTED: frozenset({TaskState.ACCEPTED, TaskState.REFUSED}),
    TaskState.ACCEPTED: frozenset({TaskState.PLANNED}),
    TaskState.REFUSED: frozenset(),
    TaskState.PLANNED: frozenset(),
}


class IllegalTransitionError(ValueError):
    """A task was asked to move to a state its current state cannot reach."""

    def __init__(self, current: TaskState, target: TaskState) -> None:
        super().__init__(f"Cannot move a task from {current.value} to {target.value}.")
        self.current = current
        self.target = target


class CapabilityError(ValueError):
    """A robisep's type cannot perform the kind of task it was assigned."""


# --------------------------------------------------------------------------- #
# Spatial entities
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class Building:
    building_id: str
    code: str
    dimensions: tuple[int, int]  # (length, width) in cells
    name: str = ""

    @property
    def length(self) -> int:
        return self.dimensions[0]

    @property
    def width(self) -> int:
        return self.dimensions[1]


@dataclass(frozen=True)
class Floor:
    floor_id: str
    building: Building
    number: int
    description: str = ""

    @property
    def label(self) -> str:
        """Human-readable ``{buildingCode}_{floorNumber}`` label."""
        return f"{self.building.code}_{self.number}"


@dataclass(frozen=True)
class Room:
    room_id: str
    name: str
    floor: Floor
    initial_position: Cell
    final_position: Cell
    door_position: Cell
    door_orientation: Orientation
    description: str = ""

    def contains(self, x: int, y: int) -> bool:
        """True when (x, y) lies inside the inclusive footprint."""
        x0, y0 = self.initial_position
        x1, y1 = self.final_position
        return x0 <= x <= x1 and y0 <= y <= y1


@dataclass(frozen=True)
class Elevator:
    elevator_id: str
    floor: Floor
    number: int  # shaft number, shared by the records of one shaft
    position: Cell
    orientation: Orientation


@dataclass(frozen=True)
class PassagePoint:
    floor: Floor
    first: Cell
    last: Cell


@dataclass(frozen=True)
class Passage:
    passage_id: str
    start: PassagePoint
    end: PassagePoint

    def serves(self, floor_id: str) -> bool:
        return floor_id in (self.start.floor.floor_id, self.end.floor.floor_id)


# --------------------------------------------------------------------------- #
# Fleet
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class RobisepType:
    robisep_type_id: str
    designation: str
    task_types: frozenset[TaskType] = frozenset()
    brand: str = ""
    model: str = ""

    def can_perform(self, task_type: TaskType) -> bool:
        return task_type in self.task_types


@dataclass(frozen=True)
class Robisep:
    robisep_id: str
    nickname: str
    robisep_type: RobisepType
    room: Room
    code: str = ""
    serial_number: str = ""


# --------------------------------------------------------------------------- #
# Tasks
# --------------------------------------------------------------------------- #


@dataclass(eq=False)
class Task(ABC):
    """Base task with its state machine.

    Subclasses set :attr:`task_type` and implement :meth:`goal_rooms`.
    """

    task_code: int
    robisep_type: RobisepType
    email: str
    task_state: TaskState = TaskState.REQUESTED
    robisep: Optional[Robisep] = None

    task_type: ClassVar[TaskType]

    def __post_init__(self) -> None:
        if self.task_code <= 0:
            raise ValueError("Task code must be a positive integer.")

    @abstractmethod
    def goal_rooms(self) -> tuple[Room, Room]:
        """The two rooms the robot travels between."""

    @property
    def goal(self) -> str:
        start, end = self.goal_rooms()
        return f"start: {start.name} - End: {end.name}"

    def _transition(self, target: TaskState) -> None:
        if target not in _TRANSITIONS[self.task_state]:
            raise IllegalTransitionError(self.task_state, target)
        self.task_state = target

    def accept(self, robisep: Robisep) -> None:
        if not robisep.robisep_type.can_perform(self.task_type):
            raise CapabilityError(
                f"Robisep '{robisep.nickname}' cannot perform {self.task_type.value} tasks."
            )
        self._transition(TaskState.ACCEPTED)
        self.robisep = robisep

    def refuse(self) -> None:
        self._transition(TaskState.REFUSED)

    def mark_as_planned(self) -> None:
        self._transition(TaskState.PLANNED)


@dataclass(eq=False)
class SurveillanceTask(Task):
    starting_point_to_watch: Optional[Room] = None
    ending_point_to_watch: Optional[Room] = None

    task_type: ClassVar[TaskType] = TaskType.SURVEILLANCE

    def goal_rooms(self) -> tuple[Room, Room]:
        return self.starting_point_to_watch, self.ending_point_to_watch


@dataclass(frozen=True)
class PersonContact:
    name: str
    phone_number: str


@dataclass(eq=False)
class PickUpAndDeliveryTask(Task):
    pick_up_room: Optional[Room] = None
    delivery_room: Optional[Room] = None
    pick_up_contact: Optional[PersonContact] = None
    delivery_contact: Optional[PersonContact] = None
    confirmation_code: Optional[int] = None
    description: str = ""

    task_type: ClassVar[TaskType] = TaskType.TRANSPORT

    def goal_rooms(self) -> tuple[Room, Room]:
        return self.pick_up_room, self.delivery_room


@dataclass
class Facility:
    """Everything loaded for one campus, in declaration order."""

    buildings: list[Building] = field(default_factory=list)
    floors: list[Floor] = field(default_factory=list)
    rooms: list[Room] = field(default_factory=list)
    elevators: list[Elevator] = field(default_factory=list)
    passages: list[Passage] = field(default_factory=list)
    robisep_types: list[RobisepType] = field(default_factory=list)
    robiseps: list[Robisep] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)
