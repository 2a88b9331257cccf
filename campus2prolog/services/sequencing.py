"""Per-robot task sequencing through the sequencing solver.

For every robot holding accepted tasks the solver returns an ordered list of
task codes framed by two depot markers. Matched tasks move to ``PLANNED`` and
are persisted. A solver failure for one robot yields an empty sequence for
that robot; the batch carries on.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field

from campus2prolog.core.result import FailureType, Result
from campus2prolog.domain.model import (
    IllegalTransitionError,
    PickUpAndDeliveryTask,
    SurveillanceTask,
    Task,
    TaskState,
)
from campus2prolog.gateways.base import SequencingAlgorithm, TaskGateway, TaskSequence
from campus2prolog.repos.base import (
    PickUpAndDeliveryTaskRepo,
    RobisepRepo,
    SurveillanceTaskRepo,
    TaskRepo,
)

logger = logging.getLogger(__name__)


@dataclass
class SequenceEntry:
    task_code: int
    task_type: str
    robisep_type: str
    task_state: str
    goal: str

    def to_dict(self) -> dict:
        return {
            "taskCode": self.task_code,
            "taskType": self.task_type,
            "robisepType": self.robisep_type,
            "taskState": self.task_state,
            "goal": self.goal,
        }


@dataclass
class TaskSequenceResult:
    robisep_nickname: str
    sequence: list[SequenceEntry] = field(default_factory=list)
    cost: float = 0

    def to_dict(self) -> dict:
        return {
            "robisepNickname": self.robisep_nickname,
            "Sequence": [e.to_dict() for e in self.sequence],
            "cost": self.cost,
        }


class TaskSequenceOrchestrator:
    """Ask the solver for each robot's task order and mark those tasks planned.

    A per-robot lock serializes the solver call and the planning of that
    robot's tasks; :meth:`accepted_robisep_ids` runs outside it. A task only
    moves ACCEPTED -> PLANNED once, so a concurrent or repeated run cannot plan
    it twice. One lock is kept for every robot id seen for the lifetime of the
    orchestrator.
    """

    def __init__(
        self,
        surveillance_task_repo: SurveillanceTaskRepo,
        pick_up_and_delivery_task_repo: PickUpAndDeliveryTaskRepo,
        robisep_repo: RobisepRepo,
        task_gateway: TaskGateway,
    ) -> None:
        self.surveillance_task_repo = surveillance_task_repo
        self.pick_up_and_delivery_task_repo = pick_up_and_delivery_task_repo
        self.robisep_repo = robisep_repo
        self.task_gateway = task_gateway
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def compute_sequences(self, algorithm: str) -> Result[list[TaskSequenceResult]]:
        try:
            chosen = SequencingAlgorithm.from_str(algorithm)
        except ValueError as exc:
            return Result.fail(str(exc), FailureType.INVALID_INPUT)

        try:
            robisep_ids = self.accepted_robisep_ids()
            if not robisep_ids:
                return Result.fail("There are no tasks to be sequenced.", FailureType.INVALID_INPUT)

            results = []
            for robisep_id in robisep_ids:
                with self._lock_for(robisep_id):
                    results.append(self._sequence_robot(robisep_id, chosen))
            return Result.ok(results)
        except Exception as exc:
            logger.exception("Task sequencing failed")
            return Result.fail(str(exc), FailureType.DATABASE_ERROR)

    def accepted_robisep_ids(self) -> list[str]:
        """Distinct robots assigned to accepted tasks, surveillance first, first-seen order."""
        tasks: list[Task] = [
            *self.surveillance_task_repo.find_by_state([TaskState.ACCEPTED]),
            *self.pick_up_and_delivery_task_repo.find_by_state([TaskState.ACCEPTED]),
        ]
        return list(dict.fromkeys(t.robisep.robisep_id for t in tasks if t.robisep is not None))

    # ------------------------------------------------------------------ #
    # Per-robot work
    # ------------------------------------------------------------------ #

    def _lock_for(self, robisep_id: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(robisep_id, threading.Lock())

    def _sequence_robot(self, robisep_id: str, algorithm: SequencingAlgorithm) -> TaskSequenceResult:
        answer = self.task_gateway.get_task_sequence(robisep_id, algorithm)
        if answer.is_failure:
            logger.warning(
                "Sequencing failed for robisep %s (%s): %s",
                robisep_id,
                answer.failure_type.value if answer.failure_type else "?",
                answer.error,
            )
            return TaskSequenceResult(robisep_nickname=self._nickname(robisep_id), sequence=[], cost=0)

        surveillance, transport, entries = self._plan_tasks(answer.value)
        planned = [*surveillance, *transport]
        if planned and planned[0].robisep is not None:
            nickname = planned[0].robisep.nickname
        else:
            nickname = self._nickname(robisep_id)
        return TaskSequenceResult(robisep_nickname=nickname, sequence=entries, cost=answer.value.cost)

    def _plan_tasks(
        self, answer: TaskSequence
    ) -> tuple[list[SurveillanceTask], list[PickUpAndDeliveryTask], list[SequenceEntry]]:
        surveillance: list[SurveillanceTask] = []
        transport: list[PickUpAndDeliveryTask] = []
        entries: list[SequenceEntry] = []

        for token in answer.sequence[1:-1]:
            try:
                code = int(token)
            except (TypeError, ValueError):
                logger.warning("Skipping non-numeric sequence token %r", token)
                continue

            repo: TaskRepo
            task = self.pick_up_and_delivery_task_repo.find_by_code(code)
            repo = self.pick_up_and_delivery_task_repo
            if task is None:
                task = self.surveillance_task_repo.find_by_code(code)
                repo = self.surveillance_task_repo
            if task is None:
                logger.warning("Sequence returned task code %d that matches no task; skipping", code)
                continue

            try:
                task.mark_as_planned()
            except IllegalTransitionError as exc:
                logger.warning("Not planning task %d: %s", code, exc)
                continue
            repo.update(task)

            if isinstance(task, PickUpAndDeliveryTask):
                transport.append(task)
            else:
                surveillance.append(task)
            entries.append(
                SequenceEntry(
                    task_code=code,
                    task_type=task.task_type.value,
                    robisep_type=task.robisep_type.designation,
                    task_state=TaskState.PLANNED.value,
                    goal=task.goal,
                )
            )
        return surveillance, transport, entries

    def _nickname(self, robisep_id: str) -> str:
        robisep = self.robisep_repo.find_by_domain_id(robisep_id)
        if robisep is None:
            logger.warning("Robisep %s not found; reporting its id as nickname", robisep_id)
            return robisep_id
        return robisep.nickname
