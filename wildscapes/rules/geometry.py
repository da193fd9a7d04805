"""Axial coordinate helpers for the Wildscapes hex board.

Coordinate System:
    - Axial coordinates (q, r), derived s = -q - r
    - Board centre at (0, 0)
    - Ring radius = max(|q|, |r|, |s|); the board is every cell with
      radius <= 3 (37 cells)

Direction order (clockwise from East):
    0 = East     : (+1,  0)
    1 = Northeast: (+1, -1)
    2 = Northwest: ( 0, -1)
    3 = West     : (-1,  0)
    4 = Southwest: (-1, +1)
    5 = Southeast: ( 0, +1)
"""
from __future__ import annotations

from typing import List, Tuple

from ..models import HexPosition
from .core import BOARD_RADIUS

AXIAL_DIRECTIONS: List[Tuple[int, int]] = [
    (+1,  0),
    (+1, -1),
    ( 0, -1),
    (-1,  0),
    (-1, +1),
    ( 0, +1),
]


def axial_add(position: HexPosition, direction: int) -> HexPosition:
    """Step one cell from ``position`` in ``direction`` (0-5)."""
    dq, dr = AXIAL_DIRECTIONS[direction % 6]
    return HexPosition(q=position.q + dq, r=position.r + dr)


def neighbors(position: HexPosition) -> List[HexPosition]:
    """Return the six neighbours of ``position``.

    Off-board neighbours are included; callers filter by occupancy or
    :func:`is_valid_position`.
    """
    return [axial_add(position, edge) for edge in range(6)]


def ring_radius(position: HexPosition) -> int:
    """Distance from the board centre."""
    return max(abs(position.q), abs(position.r), abs(position.s))


def axial_distance(a: HexPosition, b: HexPosition) -> int:
    """Number of steps between two cells."""
    dq = a.q - b.q
    dr = a.r - b.r
    ds = -(dq + dr)
    return max(abs(dq), abs(dr), abs(ds))


def is_valid_position(position: HexPosition, radius: int = BOARD_RADIUS) -> bool:
    """Return True if ``position`` lies on a hex board of ``radius``."""
    return ring_radius(position) <= radius


def is_adjacent(a: HexPosition, b: HexPosition) -> bool:
    return axial_distance(a, b) == 1


def all_board_positions(radius: int = BOARD_RADIUS) -> List[HexPosition]:
    """Every legal cell of a hex board, ordered by q then r."""
    positions: List[HexPosition] = []
    for q in range(-radius, radius + 1):
        for r in range(-radius, radius + 1):
            if abs(-q - r) <= radius:
                positions.append(HexPosition(q=q, r=r))
    return positions


__all__ = [
    "AXIAL_DIRECTIONS",
    "all_board_positions",
    "axial_add",
    "axial_distance",
    "is_adjacent",
    "is_valid_position",
    "neighbors",
    "ring_radius",
]
