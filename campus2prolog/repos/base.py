"""Abstract repositories consumed by the compilers and orchestrators.

Storage technology is outside this package; anything implementing these
lookups (a database mapper, the in-memory store in
:mod:`campus2prolog.repos.memory`) can be injected.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Iterable, Optional, TypeVar

from campus2prolog.domain.model import (
    Building,
    Elevator,
    Floor,
    Passage,
    PickUpAndDeliveryTask,
    Robisep,
    Room,
    SurveillanceTask,
    TaskState,
)

E = TypeVar("E")
TaskT = TypeVar("TaskT", SurveillanceTask, PickUpAndDeliveryTask)


class DomainRepo(ABC, Generic[E]):
    """Lookup by domain identifier."""

    @abstractmethod
    def find_by_domain_id(self, domain_id: str) -> Optional[E]:
        """Return the entity or ``None`` when it does not exist."""

    @abstractmethod
    def find_all(self) -> list[E]:
        ...


class BuildingRepo(DomainRepo[Building]):
    pass


class FloorRepo(DomainRepo[Floor]):
    @abstractmethod
    def find_by_building_id(self, building_id: str) -> list[Floor]:
        ...

    @abstractmethod
    def find_by_building_code_and_number(self, building_code: str, number: int) -> Optional[Floor]:
        ...


class RoomRepo(DomainRepo[Room]):
    @abstractmethod
    def find_by_floor_id(self, floor_id: str) -> list[Room]:
        ...


class ElevatorRepo(DomainRepo[Elevator]):
    @abstractmethod
    def find_all_by_floor_id(self, floor_id: str) -> list[Elevator]:
        ...

    @abstractmethod
    def find_by_building_id(self, building_id: str) -> list[Elevator]:
        ...


class PassageRepo(DomainRepo[Passage]):
    @abstractmethod
    def find_by_floor_id(self, floor_id: str) -> list[Passage]:
        ...


class RobisepRepo(DomainRepo[Robisep]):
    pass


class TaskRepo(ABC, Generic[TaskT]):
    """Persistence for one task kind, keyed by task code."""

    @abstractmethod
    def find_by_code(self, code: int) -> Optional[TaskT]:
        ...

    @abstractmethod
    def find_by_state(self, states: Iterable[TaskState]) -> list[TaskT]:
        ...

    @abstractmethod
    def find_by_state_and_robisep_id(
        self, states: Iterable[TaskState], robisep_id: str
    ) -> list[TaskT]:
        ...

    @abstractmethod
    def update(self, task: TaskT) -> TaskT:
        """Persist the task's current state and return it."""


class SurveillanceTaskRepo(TaskRepo[SurveillanceTask]):
    pass


class PickUpAndDeliveryTaskRepo(TaskRepo[PickUpAndDeliveryTask]):
    pass
