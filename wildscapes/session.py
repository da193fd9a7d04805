"""Caller-owned game session.

:class:`GameSession` holds the current :class:`GameState` and is the only
place that talks to persistence: once at game start to resolve player
identities and once at game end to save :class:`GameStats`. Persistence
failures never interrupt play; they are logged and surfaced on
:class:`GameResult`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .catalog import default_catalog, load_catalog
from .config import WildscapesConfig, load_config
from .errors import PersistenceError
from .game_engine import GameEngine
from .metrics import observe_action, observe_game_completed
from .models import AnimalCard, GameAction, GamePhase, GameState, GameStats, PlayerSeat
from .services.player_service import (
    PersistenceBackend,
    PlayerService,
    create_user_with_default_player,
)
from .stats import build_game_stats

logger = logging.getLogger(__name__)


@dataclass
class GameResult:
    """Outcome of a finished game.

    ``saved`` is True only if the stats record reached the backend;
    ``warning`` carries the persistence error message otherwise.
    """

    stats: GameStats
    saved: bool = False
    warning: Optional[str] = None


class GameSession:
    """Owns one game from START_GAME to the saved result."""

    def __init__(
        self,
        backend: Optional[PersistenceBackend] = None,
        config: Optional[WildscapesConfig] = None,
        catalog: Optional[Sequence[AnimalCard]] = None,
        game_id: Optional[str] = None,
    ):
        self.config = config or load_config()
        if backend is None and self.config.persistence_enabled:
            backend = PlayerService(
                self.config.api_base_url, timeout=self.config.api_timeout_sec
            )
        self.backend = backend
        if catalog is None:
            catalog = (
                load_catalog(self.config.catalog_path)
                if self.config.catalog_path
                else default_catalog()
            )
        self.catalog = tuple(catalog)
        self.game_id = game_id
        self._state = GameEngine.initial_state()
        self._result: Optional[GameResult] = None
        self.warnings: List[str] = []

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def result(self) -> Optional[GameResult]:
        return self._result

    def start(
        self,
        seats: Sequence[PlayerSeat],
        solo_mode: Optional[bool] = None,
        seed: Optional[int] = None,
        finish_round: Optional[bool] = None,
    ) -> GameState:
        """Resolve identities and dispatch START_GAME."""
        resolved = self._resolve_identities(seats)
        action = GameAction.start_game(
            resolved,
            solo_mode=solo_mode,
            seed=seed,
            finish_round=(
                self.config.finish_round if finish_round is None else finish_round
            ),
        )
        return self.dispatch(action)

    def dispatch(self, action: GameAction) -> GameState:
        """Apply ``action``; on the transition to ``ended`` save the result."""
        previous = self._state
        new_state = GameEngine.apply_action(previous, action, catalog=self.catalog)
        observe_action(action.type.value, applied=new_state is not previous)
        self._state = new_state

        if (
            new_state.phase == GamePhase.ENDED
            and previous.phase != GamePhase.ENDED
            and self._result is None
        ):
            self._result = self._finalize(new_state)
        return new_state

    # ------------------------------------------------------------------

    def _warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)

    def _resolve_identities(self, seats: Sequence[PlayerSeat]) -> List[PlayerSeat]:
        """Attach persistent player ids to seats that lack one.

        Looks up an existing player by display name, otherwise creates a
        user with a default player. Any failure leaves the seat anonymous.
        """
        if self.backend is None or all(seat.db_player_id for seat in seats):
            return list(seats)

        try:
            known: Dict[str, str] = {
                player.display_name: player.id for player in self.backend.get_players()
            }
        except PersistenceError as e:
            self._warn(f"Could not load players: {e.message}")
            return list(seats)

        resolved = []
        for seat in seats:
            if seat.db_player_id:
                resolved.append(seat)
                continue
            player_id = known.get(seat.name)
            if player_id is None:
                try:
                    _, player = create_user_with_default_player(self.backend, seat.name)
                    player_id = player.id
                    known[seat.name] = player_id
                except PersistenceError as e:
                    self._warn(f"Could not create player {seat.name!r}: {e.message}")
            resolved.append(seat.model_copy(update={"db_player_id": player_id}))
        return resolved

    def _finalize(self, state: GameState) -> GameResult:
        previous_games: Optional[List[GameStats]] = None
        if self.backend is not None:
            try:
                previous_games = self.backend.get_game_stats()
            except PersistenceError as e:
                logger.warning(f"Could not load previous game stats: {e.message}")

        stats = build_game_stats(state, game_id=self.game_id, previous=previous_games)
        observe_game_completed(stats.mode, state.round_number)
        logger.info(
            "Game %s ended after %d rounds; winner %s with %d",
            stats.game_id,
            state.round_number,
            stats.players[0].player_name if stats.players else "-",
            stats.players[0].final_score if stats.players else 0,
        )

        if self.backend is None:
            return GameResult(stats=stats)

        try:
            self.backend.create_game_stats(stats)
        except PersistenceError as e:
            message = f"Failed to save game stats: {e.message}"
            self._warn(message)
            return GameResult(stats=stats, saved=False, warning=message)
        return GameResult(stats=stats, saved=True)


__all__ = ["GameResult", "GameSession"]
