"""Door/elevator threshold cells in the solver's coordinate convention.

The solver counts cells from 1 and names them with the axes swapped relative
to the domain: a threshold's ``column`` follows the domain y-axis and its
``row`` the domain x-axis. The solver term is ``cel(row, column)``, which lines
up with the grid fact ``m(floor, x + 1, y + 1, value)``.
"""

from __future__ import annotations

from typing import NamedTuple

from campus2prolog.domain.model import Orientation

# (column, row) offsets, already in swapped-axis form
_OFFSETS: dict[Orientation, tuple[int, int]] = {
    Orientation.SOUTH: (1, 0),
    Orientation.NORTH: (-1, 0),
    Orientation.EAST: (0, 1),
    Orientation.WEST: (0, -1),
}


class ThresholdCell(NamedTuple):
    column: int
    row: int

    def to_fact(self) -> str:
        return f"cel({self.row},{self.column})"

    def grid_index(self, offset: int = 1) -> tuple[int, int]:
        """0-indexed ``(y, x)`` index into a row-major occupancy grid."""
        return self.column - offset, self.row - offset


def threshold_cell(
    door_x: int,
    door_y: int,
    orientation: Orientation,
    offset: int = 1,
) -> ThresholdCell:
    """Return the cell just outside a door facing *orientation*."""
    sx = door_x + offset
    sy = door_y + offset
    d_col, d_row = _OFFSETS[orientation]
    return ThresholdCell(column=sy + d_col, row=sx + d_row)
