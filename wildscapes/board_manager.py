"""Board-level helpers for the Wildscapes engine.

A board is the tuple of :class:`PlacedToken` owned by one player. This
module provides stack and occupancy queries, invariant checks and the
flood-fill region detection used by environment scoring and game stats.
"""
from __future__ import annotations

import os
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from .errors import InvalidStateError
from .models import HexPosition, PlacedToken, TerrainType
from .rules.core import BOARD_CELL_COUNT, MAX_STACK_HEIGHT
from .rules.geometry import is_valid_position, neighbors

__all__ = ["BoardManager", "STRICT_INVARIANTS"]

# Board invariant checks run after every applied action unless disabled:
#   export WILDSCAPES_STRICT_INVARIANTS=false
STRICT_INVARIANTS = os.getenv(
    "WILDSCAPES_STRICT_INVARIANTS", "1"
).lower() in {"1", "true", "yes", "on"}

TokenPredicate = Callable[[PlacedToken], bool]
TokenLink = Callable[[PlacedToken, PlacedToken], bool]


class BoardManager:
    """Helper for board-level operations.

    It is side-effect-free; callers pass in boards and receive derived
    views.
    """

    @staticmethod
    def get_stack(
        board: Sequence[PlacedToken], position: HexPosition
    ) -> List[PlacedToken]:
        """Return the tokens at ``position`` sorted bottom to top."""
        return sorted(
            (placed for placed in board if placed.position == position),
            key=lambda placed: placed.stack_level,
        )

    @staticmethod
    def get_top_token(
        board: Sequence[PlacedToken], position: HexPosition
    ) -> Optional[PlacedToken]:
        """Return the highest token at ``position`` or ``None`` if empty."""
        top: Optional[PlacedToken] = None
        for placed in board:
            if placed.position != position:
                continue
            if top is None or placed.stack_level > top.stack_level:
                top = placed
        return top

    @staticmethod
    def get_top_terrain(
        board: Sequence[PlacedToken], position: HexPosition
    ) -> Optional[TerrainType]:
        top = BoardManager.get_top_token(board, position)
        return top.token.type if top is not None else None

    @staticmethod
    def stack_height(board: Sequence[PlacedToken], position: HexPosition) -> int:
        return sum(1 for placed in board if placed.position == position)

    @staticmethod
    def top_tokens(board: Iterable[PlacedToken]) -> Dict[HexPosition, PlacedToken]:
        """Map every occupied position to its top token."""
        tops: Dict[HexPosition, PlacedToken] = {}
        for placed in board:
            current = tops.get(placed.position)
            if current is None or placed.stack_level > current.stack_level:
                tops[placed.position] = placed
        return tops

    @staticmethod
    def stacks(board: Iterable[PlacedToken]) -> Dict[HexPosition, List[PlacedToken]]:
        """Map every occupied position to its sorted stack."""
        grouped: Dict[HexPosition, List[PlacedToken]] = {}
        for placed in board:
            grouped.setdefault(placed.position, []).append(placed)
        for stack in grouped.values():
            stack.sort(key=lambda placed: placed.stack_level)
        return grouped

    @staticmethod
    def occupied_positions(board: Iterable[PlacedToken]) -> List[HexPosition]:
        """Deduplicated occupied positions in first-placement order."""
        seen: Dict[HexPosition, None] = {}
        for placed in board:
            seen.setdefault(placed.position, None)
        return list(seen)

    @staticmethod
    def empty_cell_count(board: Iterable[PlacedToken]) -> int:
        return BOARD_CELL_COUNT - len(BoardManager.occupied_positions(board))

    @staticmethod
    def find_regions(
        board: Sequence[PlacedToken],
        include: TokenPredicate,
        linked: Optional[TokenLink] = None,
    ) -> List[List[HexPosition]]:
        """Connected components of occupied cells whose top token passes ``include``.

        Two neighbouring included cells share a region when ``linked`` (given
        the seed cell's top token and the neighbour's) returns True; without
        ``linked`` every included neighbour joins. Regions are returned in
        seed order, each listing positions in visit order.
        """
        tops = BoardManager.top_tokens(board)
        visited: set[HexPosition] = set()
        regions: List[List[HexPosition]] = []

        for seed_pos, seed_top in tops.items():
            if seed_pos in visited or not include(seed_top):
                continue

            region: List[HexPosition] = []
            frontier = [seed_pos]
            visited.add(seed_pos)
            while frontier:
                current = frontier.pop()
                region.append(current)
                for neighbor in neighbors(current):
                    if neighbor in visited:
                        continue
                    top = tops.get(neighbor)
                    if top is None or not include(top):
                        continue
                    if linked is not None and not linked(seed_top, top):
                        continue
                    visited.add(neighbor)
                    frontier.append(neighbor)
            regions.append(region)

        return regions

    @staticmethod
    def validate_board(board: Sequence[PlacedToken]) -> None:
        """Raise :class:`InvalidStateError` if the board breaks its invariants.

        At every position the stack levels must be exactly ``0..k-1`` with
        ``k <= 3``, and every position must lie on the board.
        """
        for position, stack in BoardManager.stacks(board).items():
            if not is_valid_position(position):
                raise InvalidStateError(
                    "Token placed off the board",
                    context={"position": position.to_key()},
                )
            levels = [placed.stack_level for placed in stack]
            if len(levels) > MAX_STACK_HEIGHT:
                raise InvalidStateError(
                    "Stack exceeds maximum height",
                    context={"position": position.to_key(), "height": len(levels)},
                )
            if levels != list(range(len(levels))):
                raise InvalidStateError(
                    "Stack levels are not contiguous from 0",
                    context={"position": position.to_key(), "levels": levels},
                )
