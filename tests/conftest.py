"""
Shared pytest fixtures for Wildscapes tests.

Factory fixtures build tokens, boards, cards and started games with
customizable defaults. Game state fixtures are function-scoped so every
test gets its own snapshot.
"""

from typing import Callable, Iterable, List, Optional, Sequence, Tuple

import pytest

from wildscapes.game_engine import GameEngine
from wildscapes.models import (
    AnimalCard,
    GameAction,
    GameState,
    HabitatCell,
    HexPosition,
    PlacedToken,
    PlayerSeat,
    TerrainToken,
    TerrainType,
)

# (q, r, [terrains bottom to top])
StackSpec = Tuple[int, int, Sequence[TerrainType]]


# =============================================================================
# FACTORY FIXTURES
# =============================================================================


@pytest.fixture
def pos() -> Callable[[int, int], HexPosition]:
    """Shorthand for HexPosition(q=..., r=...)."""

    def _pos(q: int, r: int) -> HexPosition:
        return HexPosition(q=q, r=r)

    return _pos


@pytest.fixture
def token_factory() -> Callable[..., TerrainToken]:
    """Factory for terrain tokens with unique ids."""
    counter = {"next": 0}

    def _create_token(terrain: TerrainType, token_id: Optional[str] = None) -> TerrainToken:
        if token_id is None:
            token_id = f"t-{counter['next']}"
            counter["next"] += 1
        return TerrainToken(id=token_id, type=terrain)

    return _create_token


@pytest.fixture
def board_factory(token_factory) -> Callable[[Iterable[StackSpec]], Tuple[PlacedToken, ...]]:
    """Factory for boards described as ``[(q, r, [bottom, ..., top]), ...]``."""

    def _create_board(stacks: Iterable[StackSpec]) -> Tuple[PlacedToken, ...]:
        board: List[PlacedToken] = []
        for q, r, terrains in stacks:
            for level, terrain in enumerate(terrains):
                board.append(
                    PlacedToken(
                        token=token_factory(terrain),
                        position=HexPosition(q=q, r=r),
                        stack_level=level,
                    )
                )
        return tuple(board)

    return _create_board


@pytest.fixture
def card_factory() -> Callable[..., AnimalCard]:
    """Factory for animal cards.

    ``habitat`` is a list of ``(terrain, stack_level)`` pairs.
    """

    def _create_card(
        card_id: str = "card",
        habitat: Sequence[Tuple[TerrainType, int]] = ((TerrainType.FIELD, 0),),
        points: int = 3,
        name: Optional[str] = None,
        emoji: str = "🦊",
    ) -> AnimalCard:
        return AnimalCard(
            id=card_id,
            name=name or card_id.title(),
            species="Testus " + card_id,
            habitat=tuple(
                HabitatCell(
                    terrain=terrain,
                    stack_level=level,
                    relative_pos=HexPosition(q=index, r=0),
                )
                for index, (terrain, level) in enumerate(habitat)
            ),
            points=points,
            emoji=emoji,
        )

    return _create_card


@pytest.fixture
def seats() -> Callable[[int], List[PlayerSeat]]:
    """Factory for ``n`` player seats."""

    def _seats(count: int = 2) -> List[PlayerSeat]:
        colors = ["forest", "river", "stone", "sunset"]
        return [
            PlayerSeat(name=f"Player {i + 1}", color=colors[i % len(colors)])
            for i in range(count)
        ]

    return _seats


@pytest.fixture
def started_state(seats) -> Callable[..., GameState]:
    """Factory for a game just after START_GAME."""

    def _started(
        num_players: int = 2,
        seed: int = 42,
        finish_round: bool = False,
        catalog: Optional[Sequence[AnimalCard]] = None,
    ) -> GameState:
        action = GameAction.start_game(
            seats(num_players), seed=seed, finish_round=finish_round
        )
        return GameEngine.apply_action(GameEngine.initial_state(), action, catalog=catalog)

    return _started


# =============================================================================
# HELPERS
# =============================================================================


def first_legal_placement(state: GameState) -> GameAction:
    """The first PLACE_TOKEN the engine lists for ``state``."""
    for action in GameEngine.get_valid_actions(state):
        if action.position is not None and action.token_index is not None:
            return action
    raise AssertionError("no legal placement available")


def play_to_take_card(state: GameState, slot_id: int = 0) -> GameState:
    """Select ``slot_id`` and place all of its tokens."""
    state = GameEngine.apply_action(state, GameAction.select_slot(slot_id))
    while state.tokens_to_place:
        state = GameEngine.apply_action(state, first_legal_placement(state))
    return state
