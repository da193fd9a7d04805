"""Environment scoring for a single player board.

Each category is computed fresh from the placed tokens; nothing is cached.

- Trees: every treetop stack scores by height (1 + trunks below it).
- Mountains: regions of adjacent mountain stacks of the same height; every
  mountain in a region scores by that height.
- Fields: regions of adjacent fields; each pair in a region scores.
- Buildings: every stack with a roof over a trunk, mountain or building.
- Rivers: regions of adjacent water scored by length.
"""

from __future__ import annotations

from typing import Sequence

from .board_manager import BoardManager
from .models import EnvironmentScore, PlacedToken, PlayerState, TerrainType
from .rules.core import BUILDING_BASES

TREE_POINTS: dict[int, int] = {1: 1, 2: 3, 3: 7}
MOUNTAIN_POINTS: dict[int, int] = {1: 1, 2: 3, 3: 6}
FIELD_PAIR_POINTS = 5
BUILDING_POINTS = 2
RIVER_POINTS: dict[int, int] = {1: 0, 2: 2, 3: 5, 4: 8, 5: 11, 6: 15}
RIVER_POINTS_PER_EXTRA_TILE = 4


def score_trees(board: Sequence[PlacedToken]) -> int:
    score = 0
    for stack in BoardManager.stacks(board).values():
        treetop = next(
            (placed for placed in stack if placed.token.type == TerrainType.TREETOP),
            None,
        )
        if treetop is None:
            continue
        height = 1 + sum(
            1
            for placed in stack
            if placed.token.type == TerrainType.TRUNK
            and placed.stack_level < treetop.stack_level
        )
        score += TREE_POINTS.get(height, 0)
    return score


def score_mountains(board: Sequence[PlacedToken]) -> int:
    regions = BoardManager.find_regions(
        board,
        include=lambda top: top.token.type == TerrainType.MOUNTAIN,
        linked=lambda seed, other: seed.stack_level == other.stack_level,
    )
    tops = BoardManager.top_tokens(board)
    score = 0
    for region in regions:
        height = tops[region[0]].stack_level + 1
        score += MOUNTAIN_POINTS.get(height, 0) * len(region)
    return score


def score_fields(board: Sequence[PlacedToken]) -> int:
    regions = BoardManager.find_regions(
        board, include=lambda top: top.token.type == TerrainType.FIELD
    )
    return sum((len(region) // 2) * FIELD_PAIR_POINTS for region in regions)


def score_buildings(board: Sequence[PlacedToken]) -> int:
    score = 0
    for stack in BoardManager.stacks(board).values():
        # One award per stack, however many roofs it carries.
        has_roof_over_base = any(
            roof.token.type == TerrainType.BUILDING
            and any(
                base.token.type in BUILDING_BASES and base.stack_level < roof.stack_level
                for base in stack
            )
            for roof in stack
        )
        if has_roof_over_base:
            score += BUILDING_POINTS
    return score


def river_points(length: int) -> int:
    if length <= 0:
        return 0
    if length in RIVER_POINTS:
        return RIVER_POINTS[length]
    return RIVER_POINTS[6] + RIVER_POINTS_PER_EXTRA_TILE * (length - 6)


def score_rivers(board: Sequence[PlacedToken]) -> int:
    regions = BoardManager.find_regions(
        board, include=lambda top: top.token.type == TerrainType.WATER
    )
    return sum(river_points(len(region)) for region in regions)


def score_environment(board: Sequence[PlacedToken]) -> EnvironmentScore:
    """Score all five categories of ``board``."""
    trees = score_trees(board)
    mountains = score_mountains(board)
    fields = score_fields(board)
    buildings = score_buildings(board)
    rivers = score_rivers(board)
    return EnvironmentScore(
        trees=trees,
        mountains=mountains,
        fields=fields,
        buildings=buildings,
        rivers=rivers,
        total=trees + mountains + fields + buildings + rivers,
    )


def animal_score(player: PlayerState) -> int:
    """Points from completed animal cards; incomplete cards score nothing."""
    return sum(card.points for card in player.completed_cards)


def final_score(player: PlayerState) -> int:
    return animal_score(player) + score_environment(player.board).total


__all__ = [
    "animal_score",
    "final_score",
    "river_points",
    "score_buildings",
    "score_environment",
    "score_fields",
    "score_mountains",
    "score_rivers",
    "score_trees",
]
