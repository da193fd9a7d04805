"""Prometheus metrics for the Wildscapes engine.

The reducer itself stays pure; :class:`wildscapes.session.GameSession`
records these as it dispatches actions and saves results.
"""

from __future__ import annotations

from typing import Final

from prometheus_client import Counter, Histogram


WILDSCAPES_ACTIONS: Final[Counter] = Counter(
    "wildscapes_actions_total",
    "Total dispatched game actions, labeled by action_type and outcome.",
    labelnames=("action_type", "outcome"),
)

WILDSCAPES_GAMES_COMPLETED: Final[Counter] = Counter(
    "wildscapes_games_completed_total",
    "Total finished games, labeled by mode (solo or local-multiplayer).",
    labelnames=("mode",),
)

WILDSCAPES_GAME_ROUNDS: Final[Histogram] = Histogram(
    "wildscapes_game_rounds",
    "Number of rounds played in finished games.",
    buckets=(5, 10, 15, 20, 25, 30, 40, 60),
)

WILDSCAPES_PERSISTENCE_REQUESTS: Final[Counter] = Counter(
    "wildscapes_persistence_requests_total",
    "Persistence service calls, labeled by operation and outcome.",
    labelnames=("operation", "outcome"),
)


def observe_action(action_type: str, applied: bool) -> None:
    WILDSCAPES_ACTIONS.labels(action_type, "applied" if applied else "rejected").inc()


def observe_game_completed(mode: str, rounds: int) -> None:
    WILDSCAPES_GAMES_COMPLETED.labels(mode).inc()
    WILDSCAPES_GAME_ROUNDS.observe(rounds)


def observe_persistence(operation: str, ok: bool) -> None:
    WILDSCAPES_PERSISTENCE_REQUESTS.labels(operation, "ok" if ok else "error").inc()


__all__ = [
    "WILDSCAPES_ACTIONS",
    "WILDSCAPES_GAMES_COMPLETED",
    "WILDSCAPES_GAME_ROUNDS",
    "WILDSCAPES_PERSISTENCE_REQUESTS",
    "observe_action",
    "observe_game_completed",
    "observe_persistence",
]
