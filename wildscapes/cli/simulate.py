#!/usr/bin/env python3
"""
Wildscapes self-play simulator.

Plays seeded games with :class:`RandomAI` at every seat and prints the final
scores.

Usage:
    # One two-player game
    wildscapes-simulate --players 2 --seed 7

    # Ten solo games, JSON output
    wildscapes-simulate --players 1 --games 10 --json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from ..ai.random_ai import RandomAI
from ..config import WildscapesConfig, load_config
from ..core.logging_config import configure_third_party_loggers, setup_logging
from ..errors import WildscapesError
from ..models import GamePhase, PlayerSeat
from ..scoring import animal_score, score_environment
from ..session import GameSession
from ..stats import rank_players

logger = logging.getLogger(__name__)

SEAT_COLORS = ("forest", "river", "stone", "sunset")
# Random play finishes well below this; it only guards against a stuck loop.
MAX_ACTIONS_PER_GAME = 20000


def play_game(
    num_players: int,
    seed: Optional[int],
    finish_round: bool = False,
    config: Optional[WildscapesConfig] = None,
) -> dict:
    """Play one game with random agents and return a result summary."""
    session = GameSession(config=config or WildscapesConfig())
    seats = [
        PlayerSeat(name=f"Player {i + 1}", color=SEAT_COLORS[i % len(SEAT_COLORS)])
        for i in range(num_players)
    ]
    session.start(seats, seed=seed, finish_round=finish_round)
    agent = RandomAI(seed)

    for _ in range(MAX_ACTIONS_PER_GAME):
        if session.state.phase != GamePhase.PLAYING:
            break
        action = agent.select_action(session.state)
        if action is None:
            break
        session.dispatch(action)
    else:
        logger.warning(f"Game with seed={seed} hit the action limit")

    state = session.state
    players = []
    for rank, player in enumerate(rank_players(state.players), start=1):
        environment = score_environment(player.board)
        animals = animal_score(player)
        players.append(
            {
                "rank": rank,
                "name": player.name,
                "total": animals + environment.total,
                "animals": animals,
                "environment": environment.model_dump(),
                "completedCards": len(player.completed_cards),
            }
        )
    return {
        "seed": seed,
        "ended": state.phase == GamePhase.ENDED,
        "rounds": state.round_number,
        "actions": agent.action_count,
        "saved": session.result.saved if session.result else False,
        "players": players,
    }


def print_table(results: List[dict]) -> None:
    for result in results:
        status = "ended" if result["ended"] else "unfinished"
        print(
            f"seed={result['seed']} rounds={result['rounds']} "
            f"actions={result['actions']} ({status})"
        )
        print(f"  {'#':<3}{'Player':<12}{'Total':>6}{'Animals':>9}{'Env':>6}")
        for player in result["players"]:
            print(
                f"  {player['rank']:<3}{player['name']:<12}{player['total']:>6}"
                f"{player['animals']:>9}{player['environment']['total']:>6}"
            )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wildscapes-simulate",
        description="Play Wildscapes games with random agents.",
    )
    parser.add_argument(
        "--players", type=int, default=2, choices=range(1, 5),
        help="Number of seats (1 plays solo)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed of the first game")
    parser.add_argument("--games", type=int, default=1, help="Number of games to play")
    parser.add_argument(
        "--finish-round", action="store_true", default=None,
        help="Finish the round after the end condition triggers",
    )
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--log-level", default=None, help="Override WILDSCAPES_LOG_LEVEL")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config()
    except WildscapesError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    setup_logging("wildscapes", level=args.log_level or config.log_level)
    configure_third_party_loggers(quiet=True)

    if args.games < 1:
        print("--games must be at least 1", file=sys.stderr)
        return 2

    finish_round = config.finish_round if args.finish_round is None else True
    results = []
    try:
        for index in range(args.games):
            seed = None if args.seed is None else args.seed + index
            results.append(play_game(args.players, seed, finish_round, config=config))
    except WildscapesError as e:
        logger.error(f"Simulation failed: {e}")
        return 2

    if args.json:
        print(json.dumps(results, indent=2))
    else:
        print_table(results)
    return 0 if all(result["ended"] for result in results) else 1


if __name__ == "__main__":
    sys.exit(main())
