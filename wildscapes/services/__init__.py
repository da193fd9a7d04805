"""Clients for services outside the engine."""

from .player_service import (
    PersistenceBackend,
    PlayerService,
    create_user_with_default_player,
)

__all__ = ["PersistenceBackend", "PlayerService", "create_user_with_default_player"]
