"""Rule constants shared by the Wildscapes rules layer."""

from __future__ import annotations

from ..models import TerrainType

BOARD_RADIUS = 3
# 1 + 3 * r * (r + 1) cells for a hexagon of radius r.
BOARD_CELL_COUNT = 1 + 3 * BOARD_RADIUS * (BOARD_RADIUS + 1)

MAX_STACK_HEIGHT = 3
MAX_TRUNK_HEIGHT = 2
MAX_HAND_SIZE = 4
TOKENS_PER_SLOT = 3

SLOTS_NORMAL = 5
SLOTS_SOLO = 3
FACE_UP_NORMAL = 5
FACE_UP_SOLO = 3

# Game ends when a player finishes a turn with this many empty cells or fewer.
END_GAME_EMPTY_CELLS = 2

TOKEN_COUNTS: dict[TerrainType, int] = {
    TerrainType.FIELD: 15,
    TerrainType.WATER: 15,
    TerrainType.MOUNTAIN: 12,
    TerrainType.TRUNK: 12,
    TerrainType.TREETOP: 10,
    TerrainType.BUILDING: 8,
}

# Terrains that only sit on an empty cell and never carry anything.
FLAT_TERRAINS = frozenset({TerrainType.FIELD, TerrainType.WATER})
BUILDING_BASES = frozenset(
    {TerrainType.TRUNK, TerrainType.MOUNTAIN, TerrainType.BUILDING}
)


def slot_count(solo_mode: bool) -> int:
    return SLOTS_SOLO if solo_mode else SLOTS_NORMAL


def face_up_count(solo_mode: bool) -> int:
    return FACE_UP_SOLO if solo_mode else FACE_UP_NORMAL


__all__ = [
    "BOARD_CELL_COUNT",
    "BOARD_RADIUS",
    "BUILDING_BASES",
    "END_GAME_EMPTY_CELLS",
    "FACE_UP_NORMAL",
    "FACE_UP_SOLO",
    "FLAT_TERRAINS",
    "MAX_HAND_SIZE",
    "MAX_STACK_HEIGHT",
    "MAX_TRUNK_HEIGHT",
    "SLOTS_NORMAL",
    "SLOTS_SOLO",
    "TOKENS_PER_SLOT",
    "TOKEN_COUNTS",
    "face_up_count",
    "slot_count",
]
