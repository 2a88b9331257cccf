"""CampusGraph – NetworkX-backed graph of floors joined by passages and elevators."""

from __future__ import annotations

import logging
from typing import Iterable

import networkx as nx

from campus2prolog.domain.model import Elevator, Floor, Passage

logger = logging.getLogger(__name__)


class CampusGraph:
    """Undirected graph where nodes are floor ids and edges are passages or
    elevator hops.

    Node attributes keep the :class:`Floor`; edge attributes record whether a
    passage and/or an elevator joins the two floors.
    """

    def __init__(self) -> None:
        self._g: nx.Graph = nx.Graph()

    # ------------------------------------------------------------------ #
    # Construction
    # ------------------------------------------------------------------ #

    def add_floor(self, floor: Floor) -> None:
        self._g.add_node(floor.floor_id, floor=floor)

    def add_passage(self, passage: Passage) -> None:
        a = passage.start.floor.floor_id
        b = passage.end.floor.floor_id
        self._validate_node(a)
        self._validate_node(b)
        existing = self._g.get_edge_data(a, b, {})
        self._g.add_edge(a, b, passage=True, elevator=existing.get("elevator", False))

    def add_elevator_shaft(self, floor_ids: list[str]) -> None:
        """Join every pair of consecutive floors served by one shaft."""
        for fid in floor_ids:
            self._validate_node(fid)
        for a, b in zip(floor_ids, floor_ids[1:]):
            existing = self._g.get_edge_data(a, b, {})
            self._g.add_edge(a, b, passage=existing.get("passage", False), elevator=True)

    # ------------------------------------------------------------------ #
    # Query helpers
    # ------------------------------------------------------------------ #

    @property
    def floors(self) -> list[Floor]:
        return [data["floor"] for _, data in self._g.nodes(data=True)]

    def isolated_groups(self) -> list[list[str]]:
        """Connected components other than the largest one, as sorted id lists."""
        components = sorted(
            (sorted(c) for c in nx.connected_components(self._g)),
            key=lambda c: (-len(c), c),
        )
        return components[1:]

    def __len__(self) -> int:
        return len(self._g.nodes)

    def _validate_node(self, floor_id: str) -> None:
        if floor_id not in self._g.nodes:
            raise ValueError(
                f"Floor '{floor_id}' referenced in a connection but not defined as a node."
            )

    # ------------------------------------------------------------------ #
    # Factory
    # ------------------------------------------------------------------ #

    @classmethod
    def from_parts(
        cls,
        floors: Iterable[Floor],
        passages: Iterable[Passage],
        elevators: Iterable[Elevator],
    ) -> "CampusGraph":
        g = cls()
        for f in floors:
            g.add_floor(f)
        for p in passages:
            try:
                g.add_passage(p)
            except ValueError as exc:
                logger.warning("Skipping invalid passage: %s", exc)
        for floor_ids in shaft_floor_ids(elevators).values():
            try:
                g.add_elevator_shaft(floor_ids)
            except ValueError as exc:
                logger.warning("Skipping invalid elevator shaft: %s", exc)
        return g


def shaft_floor_ids(elevators: Iterable[Elevator]) -> dict[tuple[str, int], list[str]]:
    """Group elevator records by (building id, shaft number), keeping first-seen order."""
    shafts: dict[tuple[str, int], list[str]] = {}
    for e in elevators:
        key = (e.floor.building.building_id, e.number)
        ids = shafts.setdefault(key, [])
        if e.floor.floor_id not in ids:
            ids.append(e.floor.floor_id)
    return shafts
