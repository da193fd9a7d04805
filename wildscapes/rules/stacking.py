"""Token stacking legality.

Rules, in priority order:

1. An empty cell accepts any token at level 0.
2. A cell at height 3 accepts nothing.
3. Field and water only go on an empty cell and never carry anything.
4. Nothing goes on a treetop.
5. A building may sit on a trunk, mountain or building.
6. A mountain may sit on a mountain.
7. A trunk may sit on a single trunk; a treetop may sit on any trunk.
8. Everything else is rejected.
"""

from __future__ import annotations

from typing import NamedTuple, Sequence

from ..models import HexPosition, PlacedAnimalEmoji, PlacedToken, TerrainType
from .core import (
    BUILDING_BASES,
    FLAT_TERRAINS,
    MAX_STACK_HEIGHT,
    MAX_TRUNK_HEIGHT,
)
from .geometry import is_valid_position


class PlacementCheck(NamedTuple):
    """Outcome of a placement check.

    ``resulting_level`` is the level the token would occupy; it is reported
    even when the placement is rejected.
    """
    allowed: bool
    resulting_level: int


def can_stack_on(stack_types: Sequence[TerrainType], candidate: TerrainType) -> bool:
    """Return True if ``candidate`` may go on top of ``stack_types``.

    ``stack_types`` lists the terrains of an existing stack bottom to top.
    """
    height = len(stack_types)
    if height == 0:
        return True
    if height >= MAX_STACK_HEIGHT:
        return False

    top = stack_types[-1]
    if top in FLAT_TERRAINS or candidate in FLAT_TERRAINS:
        return False
    if top == TerrainType.TREETOP:
        return False
    if candidate == TerrainType.BUILDING and top in BUILDING_BASES:
        return True
    if top == TerrainType.MOUNTAIN:
        return candidate == TerrainType.MOUNTAIN
    if top == TerrainType.TRUNK:
        if candidate == TerrainType.TRUNK:
            return height + 1 <= MAX_TRUNK_HEIGHT
        return candidate == TerrainType.TREETOP
    return False


def can_place(
    existing_stack: Sequence[PlacedToken], candidate: TerrainType
) -> PlacementCheck:
    """Decide whether ``candidate`` may be added to ``existing_stack``.

    ``existing_stack`` must be sorted by stack level.
    """
    types = [placed.token.type for placed in existing_stack]
    return PlacementCheck(can_stack_on(types, candidate), len(types))


def check_board_placement(
    board: Sequence[PlacedToken],
    emojis: Sequence[PlacedAnimalEmoji],
    position: HexPosition,
    candidate: TerrainType,
) -> PlacementCheck:
    """Full placement check against a player's board.

    Adds the board-bound and animal-lock checks to :func:`can_place`.
    """
    stack = sorted(
        (placed for placed in board if placed.position == position),
        key=lambda placed: placed.stack_level,
    )
    check = can_place(stack, candidate)
    if not check.allowed:
        return check
    if not is_valid_position(position):
        return PlacementCheck(False, check.resulting_level)
    if any(emoji.position == position for emoji in emojis):
        return PlacementCheck(False, check.resulting_level)
    return check


__all__ = [
    "PlacementCheck",
    "can_place",
    "can_stack_on",
    "check_board_placement",
]
