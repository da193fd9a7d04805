"""HTTP client for the player and game-stats persistence service.

The service exposes three collections, each answering GET with a list and
POST with the created record:

- ``/user/``
- ``/player/``
- ``/game_stats/``

Responses may be wrapped in a ``{"body": ...}`` envelope and created
records may come back as a one-element list; both shapes are unwrapped.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, List, Optional, Protocol, Tuple, Type, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from ..errors import PersistenceError
from ..metrics import observe_persistence
from ..models import GameStats, Player, User

logger = logging.getLogger(__name__)

USER_ENDPOINT = "/user/"
PLAYER_ENDPOINT = "/player/"
GAME_STATS_ENDPOINT = "/game_stats/"

DEFAULT_COLOR_THEME = "forest"

ModelT = TypeVar("ModelT", bound=BaseModel)


class PersistenceBackend(Protocol):
    """What :class:`wildscapes.session.GameSession` needs from persistence."""

    def get_users(self) -> List[User]: ...

    def create_user(self, user: User) -> User: ...

    def get_players(self) -> List[Player]: ...

    def create_player(self, player: Player) -> Player: ...

    def get_game_stats(self) -> List[GameStats]: ...

    def create_game_stats(self, stats: GameStats) -> GameStats: ...


class PlayerService:
    """requests-based :class:`PersistenceBackend`.

    Every failure, whether transport, non-2xx status or an unparseable
    body, is raised as :class:`PersistenceError`.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    # -------- USERS --------

    def get_users(self) -> List[User]:
        return self._get_list(USER_ENDPOINT, User, "get_users")

    def create_user(self, user: User) -> User:
        return self._create(USER_ENDPOINT, user, "create_user")

    # -------- PLAYERS --------

    def get_players(self) -> List[Player]:
        return self._get_list(PLAYER_ENDPOINT, Player, "get_players")

    def create_player(self, player: Player) -> Player:
        return self._create(PLAYER_ENDPOINT, player, "create_player")

    # -------- GAME STATS --------

    def get_game_stats(self) -> List[GameStats]:
        return self._get_list(GAME_STATS_ENDPOINT, GameStats, "get_game_stats")

    def create_game_stats(self, stats: GameStats) -> GameStats:
        return self._create(GAME_STATS_ENDPOINT, stats, "create_game_stats")

    def create_user_with_default_player(
        self, display_name: str, handle: str = "", avatar_emoji: str = ""
    ) -> Tuple[User, Player]:
        return create_user_with_default_player(
            self, display_name, handle=handle, avatar_emoji=avatar_emoji
        )

    # ------------------------------------------------------------------

    def _get_list(
        self, path: str, model: Type[ModelT], operation: str
    ) -> List[ModelT]:
        data = self._request("GET", path, operation)
        if not isinstance(data, list):
            raise PersistenceError(
                f"Expected a list from {path}", operation=operation
            )
        return [self._parse(model, item, operation) for item in data]

    def _create(self, path: str, record: ModelT, operation: str) -> ModelT:
        payload = record.model_dump(mode="json", by_alias=True)
        data = self._request("POST", path, operation, payload=payload)
        if isinstance(data, list):
            if not data:
                # Some deployments answer an insert with an empty list.
                return record
            data = data[0]
        return self._parse(type(record), data, operation)

    def _parse(self, model: Type[ModelT], data: Any, operation: str) -> ModelT:
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise PersistenceError(
                f"Malformed {model.__name__} record",
                operation=operation,
                context={"errors": exc.error_count()},
            ) from exc

    def _request(
        self, method: str, path: str, operation: str, payload: Any = None
    ) -> Any:
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.request(
                method,
                url,
                json=payload,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            observe_persistence(operation, ok=False)
            logger.warning(f"{operation} failed: {exc}")
            raise PersistenceError(
                f"Request to {url} failed: {exc}", operation=operation
            ) from exc

        if not resp.ok:
            observe_persistence(operation, ok=False)
            raise PersistenceError(
                f"Failed to {operation}: {resp.status_code} {resp.text[:200]}",
                operation=operation,
                status_code=resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError as exc:
            observe_persistence(operation, ok=False)
            raise PersistenceError(
                f"Response from {url} is not JSON", operation=operation
            ) from exc

        observe_persistence(operation, ok=True)
        if isinstance(data, dict) and data.get("body") is not None:
            return data["body"]
        return data


def create_user_with_default_player(
    backend: PersistenceBackend,
    display_name: str,
    handle: str = "",
    avatar_emoji: str = "",
) -> Tuple[User, Player]:
    """Create a user and its linked default player profile.

    Ids are generated here so ``user.player_ids`` and ``player.user_id``
    can reference each other before either record exists.
    """
    now = datetime.now(timezone.utc)
    user_id = str(uuid.uuid4())
    player_id = str(uuid.uuid4())

    user = User(
        id=user_id,
        display_name=display_name,
        avatar_emoji=avatar_emoji,
        handle=handle,
        player_ids=[player_id],
        created_at=now,
        updated_at=now,
    )
    player = Player(
        id=player_id,
        user_id=user_id,
        display_name=display_name,
        avatar_emoji=avatar_emoji,
        color_theme=DEFAULT_COLOR_THEME,
        created_at=now,
        updated_at=now,
    )
    return backend.create_user(user), backend.create_player(player)


__all__ = [
    "PersistenceBackend",
    "PlayerService",
    "create_user_with_default_player",
]
