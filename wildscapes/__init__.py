"""Wildscapes board game engine.

A pure reducer over immutable game snapshots plus environment scoring::

    from wildscapes import GameAction, GameEngine, PlayerSeat

    state = GameEngine.initial_state()
    state = GameEngine.apply_action(
        state, GameAction.start_game([PlayerSeat(name="Ada", color="forest")], seed=1)
    )
"""

from .errors import (
    CatalogError,
    ConfigurationError,
    InvalidStateError,
    PersistenceError,
    WildscapesError,
)
from .game_engine import GameEngine, apply_action
from .models import (
    ActionType,
    AnimalCard,
    EnvironmentScore,
    GameAction,
    GamePhase,
    GameState,
    HabitatCell,
    HexPosition,
    PlacedAnimalEmoji,
    PlacedToken,
    PlayerSeat,
    PlayerState,
    TerrainToken,
    TerrainType,
    TokenSlot,
    TurnPhase,
)
from .scoring import score_environment

__version__ = "0.1.0"

__all__ = [
    "ActionType",
    "AnimalCard",
    "CatalogError",
    "ConfigurationError",
    "EnvironmentScore",
    "GameAction",
    "GameEngine",
    "GamePhase",
    "GameState",
    "HabitatCell",
    "HexPosition",
    "InvalidStateError",
    "PersistenceError",
    "PlacedAnimalEmoji",
    "PlacedToken",
    "PlayerSeat",
    "PlayerState",
    "TerrainToken",
    "TerrainType",
    "TokenSlot",
    "TurnPhase",
    "WildscapesError",
    "__version__",
    "apply_action",
    "score_environment",
]
