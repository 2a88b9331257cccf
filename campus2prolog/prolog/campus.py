"""Campus-wide connectivity facts: floors, elevators, passages and connects."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from campus2prolog.config import GridConfig
from campus2prolog.core.result import FailureType, Result
from campus2prolog.domain.graph import shaft_floor_ids
from campus2prolog.geometry.coords import threshold_cell
from campus2prolog.prolog.facts import (
    cel,
    connects_fact,
    elevator_fact,
    floors_fact,
    passage_fact,
)
from campus2prolog.repos.base import BuildingRepo, ElevatorRepo, FloorRepo, PassageRepo

logger = logging.getLogger(__name__)


@dataclass
class CampusFacts:
    floors: list[str] = field(default_factory=list)
    elevators: list[str] = field(default_factory=list)
    passages: list[str] = field(default_factory=list)
    connects: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "floors": list(self.floors),
            "elevators": list(self.elevators),
            "passages": list(self.passages),
            "connects": list(self.connects),
        }


class CampusFactsCompiler:
    def __init__(
        self,
        building_repo: BuildingRepo,
        floor_repo: FloorRepo,
        elevator_repo: ElevatorRepo,
        passage_repo: PassageRepo,
        config: Optional[GridConfig] = None,
    ) -> None:
        self.building_repo = building_repo
        self.floor_repo = floor_repo
        self.elevator_repo = elevator_repo
        self.passage_repo = passage_repo
        self.config = config or GridConfig()

    def compile_campus(self) -> Result[CampusFacts]:
        try:
            return Result.ok(self._compile())
        except Exception as exc:
            logger.exception("Failed to compile campus facts")
            return Result.fail(str(exc), FailureType.DATABASE_ERROR)

    def _compile(self) -> CampusFacts:
        offset = self.config.prolog_increment
        facts = CampusFacts()

        for building in self.building_repo.find_all():
            floors = self.floor_repo.find_by_building_id(building.building_id)
            facts.floors.append(floors_fact(building.building_id, [f.floor_id for f in floors]))

            elevators = self.elevator_repo.find_by_building_id(building.building_id)
            first_record = {}
            for e in elevators:
                first_record.setdefault(e.number, e)
            for (_, number), floor_ids in shaft_floor_ids(elevators).items():
                e = first_record[number]
                cell = threshold_cell(e.position[0], e.position[1], e.orientation, offset)
                facts.elevators.append(
                    elevator_fact(building.building_id, floor_ids, cell.to_fact())
                )

        passages = self.passage_repo.find_all()
        for p in passages:
            (ax, ay), (bx, by) = p.start.first, p.end.first
            facts.passages.append(
                passage_fact(
                    p.start.floor.building.building_id,
                    p.end.floor.building.building_id,
                    p.start.floor.floor_id,
                    p.end.floor.floor_id,
                    cel(ax + offset, ay + offset),
                    cel(bx + offset, by + offset),
                )
            )

        # one fact per unordered building pair, in passage order, start building first
        seen: set[frozenset[str]] = set()
        for p in passages:
            start = p.start.floor.building.building_id
            end = p.end.floor.building.building_id
            pair = frozenset((start, end))
            if start == end or pair in seen:
                continue
            seen.add(pair)
            facts.connects.append(connects_fact(start, end))

        logger.debug(
            "Campus facts: %d floors, %d elevators, %d passages, %d connects",
            len(facts.floors), len(facts.elevators), len(facts.passages), len(facts.connects),
        )
        return facts
