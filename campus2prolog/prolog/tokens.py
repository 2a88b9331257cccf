"""Parser for the route tokens returned by the path solver.

The solver answers with terms such as ``cel(3,4)``, ``cor(f1,f2)`` and
``ele(f1,f2)``. They are parsed into :class:`CellStep`, :class:`CorridorStep`
and :class:`ElevatorStep`; anything else parses to ``None``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Union

logger = logging.getLogger(__name__)

_TERM = re.compile(r"^\s*([a-z]\w*)\((.*)\)\s*$", re.IGNORECASE)


@dataclass(frozen=True)
class CellStep:
    args: str  # coordinates pass through untouched

    def render(self) -> str:
        return f"cell({self.args})"


@dataclass(frozen=True)
class CorridorStep:
    origin_floor_id: str
    destination_floor_id: str


@dataclass(frozen=True)
class ElevatorStep:
    origin_floor_id: str
    destination_floor_id: str


RouteStep = Union[CellStep, CorridorStep, ElevatorStep]


def _floor_pair(args: str) -> Optional[tuple[str, str]]:
    parts = [p.strip() for p in args.split(",")]
    if len(parts) != 2 or not all(parts):
        return None
    return parts[0], parts[1]


def parse_token(token: str) -> Optional[RouteStep]:
    """Parse one solver term; returns ``None`` for unrecognised terms."""
    m = _TERM.match(token)
    if m is None:
        return None
    functor, args = m.group(1).lower(), m.group(2)
    prefix = functor[:3]
    if prefix == "cel":
        return CellStep(args)
    if prefix in ("cor", "ele"):
        pair = _floor_pair(args)
        if pair is None:
            return None
        return CorridorStep(*pair) if prefix == "cor" else ElevatorStep(*pair)
    return None


def parse_route(tokens: list[str]) -> list[RouteStep]:
    steps = []
    for token in tokens:
        step = parse_token(str(token))
        if step is None:
            logger.debug("Dropping unrecognised route token %r", token)
            continue
        steps.append(step)
    return steps
