"""Prolog fact formatting.

Every string the solver consumes is built here so the wire format lives in
one place.
"""

from __future__ import annotations

from typing import Iterable


def grid_fact(floor_id: str, column: int, row: int, value: int) -> str:
    """``m(floor,column,row,value)`` with 1-indexed column (x) and row (y)."""
    return f"m({floor_id},{column},{row},{value})"


def cel(x: int, y: int) -> str:
    return f"cel({x},{y})"


def _id_list(ids: Iterable[str]) -> str:
    return "[" + ",".join(str(i) for i in ids) + "]"


def floors_fact(building_id: str, floor_ids: Iterable[str]) -> str:
    return f"floors({building_id},{_id_list(floor_ids)})"


def elevator_fact(building_id: str, floor_ids: Iterable[str], cell: str) -> str:
    return f"elevator({building_id},{_id_list(floor_ids)},{cell})"


def passage_fact(
    building_a: str,
    building_b: str,
    floor_a: str,
    floor_b: str,
    cell_a: str,
    cell_b: str,
) -> str:
    return f"passage({building_a},{building_b},{floor_a},{floor_b},{cell_a},{cell_b})"


def connects_fact(building_a: str, building_b: str) -> str:
    return f"connects({building_a},{building_b})"


def robot_fact(floor_id: str, cell: str) -> str:
    return f"robot({floor_id},{cell})"


def task_fact(code: int, origin_floor: str, destination_floor: str, origin_cell: str, destination_cell: str) -> str:
    return f"task({code},{origin_floor},{destination_floor},{origin_cell},{destination_cell})"
