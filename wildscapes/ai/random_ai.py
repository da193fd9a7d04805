"""Random AI implementation for Wildscapes.

This agent selects uniformly random legal actions using its own seeded
RNG. It is intended for self-play soak tests and baselines rather than
competitive play.
"""

from __future__ import annotations

import random
from typing import Optional

from ..game_engine import GameEngine
from ..models import GameAction, GameState


class RandomAI:
    """AI that selects random valid actions."""

    def __init__(self, seed: Optional[int] = None):
        self.rng = random.Random(seed)
        self.action_count = 0

    def select_action(self, game_state: GameState) -> Optional[GameAction]:
        """Select a random valid action for ``game_state``.

        Returns:
            A random valid :class:`GameAction` or ``None`` if none exist
            (game not in progress).
        """
        valid_actions = GameEngine.get_valid_actions(game_state)
        if not valid_actions:
            return None

        selected = self.rng.choice(valid_actions)
        self.action_count += 1
        return selected
