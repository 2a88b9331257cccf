"""Occupancy grid of one floor.

A ``height × width`` matrix of small cell codes indexed ``[y, x]``. The
solver grid only uses ``1`` (blocked) and ``0`` (free); the floor map stores
its wall, door, elevator and passage codes in the same structure.
"""

from __future__ import annotations

import logging
from typing import Iterable

import numpy as np

from campus2prolog.domain.model import Room

logger = logging.getLogger(__name__)

FREE = 0
BLOCKED = 1


class OccupancyGrid:
    def __init__(self, height: int, width: int) -> None:
        if height < 0 or width < 0:
            raise ValueError(f"Grid dimensions must be non-negative, got {height}x{width}.")
        self.cells = np.zeros((height, width), dtype=np.uint8)

    @property
    def height(self) -> int:
        return int(self.cells.shape[0])

    @property
    def width(self) -> int:
        return int(self.cells.shape[1])

    def in_bounds(self, y: int, x: int) -> bool:
        return 0 <= y < self.height and 0 <= x < self.width

    def fill_rooms(self, rooms: Iterable[Room]) -> None:
        """Mark every cell inside a room's inclusive footprint as blocked."""
        for room in rooms:
            x0, y0 = room.initial_position
            x1, y1 = room.final_position
            ys = slice(max(y0, 0), max(min(y1 + 1, self.height), 0))
            xs = slice(max(x0, 0), max(min(x1 + 1, self.width), 0))
            self.cells[ys, xs] = BLOCKED

    def set(self, y: int, x: int, value: int, what: str = "cell") -> bool:
        """Set one cell; out-of-range cells are skipped and reported."""
        if not self.in_bounds(y, x):
            logger.warning(
                "Skipping %s at (x=%d, y=%d): outside the %dx%d grid",
                what, x, y, self.height, self.width,
            )
            return False
        self.cells[y, x] = value
        return True

    def __getitem__(self, index: tuple[int, int]) -> int:
        return int(self.cells[index])

    def rows(self) -> list[list[int]]:
        return self.cells.tolist()

    def iter_cells(self):
        """Yield ``(x, y, value)`` rows outer, columns inner."""
        for y in range(self.height):
            for x in range(self.width):
                yield x, y, int(self.cells[y, x])
