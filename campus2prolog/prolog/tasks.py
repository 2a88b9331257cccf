"""Robot position and accepted-task facts for the sequencing solver."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from campus2prolog.config import GridConfig
from campus2prolog.core.result import FailureType, Result
from campus2prolog.domain.model import Room, Task, TaskState
from campus2prolog.geometry.coords import threshold_cell
from campus2prolog.prolog.facts import robot_fact, task_fact
from campus2prolog.repos.base import PickUpAndDeliveryTaskRepo, RobisepRepo, SurveillanceTaskRepo


@dataclass
class RobotTaskFacts:
    robot: str
    tasks: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"robot": self.robot, "tasks": list(self.tasks)}


def room_cell(room: Room, offset: int = 1) -> str:
    """The solver cell just outside *room*'s door."""
    x, y = room.door_position
    return threshold_cell(x, y, room.door_orientation, offset).to_fact()


class RobotTaskFactsCompiler:
    def __init__(
        self,
        robisep_repo: RobisepRepo,
        surveillance_task_repo: SurveillanceTaskRepo,
        pick_up_and_delivery_task_repo: PickUpAndDeliveryTaskRepo,
        config: Optional[GridConfig] = None,
    ) -> None:
        self.robisep_repo = robisep_repo
        self.surveillance_task_repo = surveillance_task_repo
        self.pick_up_and_delivery_task_repo = pick_up_and_delivery_task_repo
        self.config = config or GridConfig()

    def compile_robot_tasks(self, robisep_id: str) -> Result[RobotTaskFacts]:
        robisep = self.robisep_repo.find_by_domain_id(robisep_id)
        if robisep is None:
            return Result.fail(
                f"The robisep with id {robisep_id} does not exist.",
                FailureType.ENTITY_DOES_NOT_EXIST,
            )

        offset = self.config.prolog_increment
        robot = robot_fact(robisep.room.floor.floor_id, room_cell(robisep.room, offset))

        accepted: list[Task] = [
            *self.surveillance_task_repo.find_by_state_and_robisep_id([TaskState.ACCEPTED], robisep_id),
            *self.pick_up_and_delivery_task_repo.find_by_state_and_robisep_id([TaskState.ACCEPTED], robisep_id),
        ]
        tasks = []
        for task in accepted:
            origin, destination = task.goal_rooms()
            tasks.append(
                task_fact(
                    task.task_code,
                    origin.floor.floor_id,
                    destination.floor.floor_id,
                    room_cell(origin, offset),
                    room_cell(destination, offset),
                )
            )
        return Result.ok(RobotTaskFacts(robot=robot, tasks=tasks))
