"""Core game engine for Wildscapes.

The engine is a pure reducer: :meth:`GameEngine.apply_action` takes an
immutable :class:`GameState` and a :class:`GameAction` and returns the next
snapshot. Illegal actions (wrong phase, bad target, rule violation) are
rejected by returning the *same* state object, so callers can detect a
rejection with ``new_state is state``. The engine never raises for them.

Turn phases advance strictly forward for the active player::

    selectSlot -> placeTokens -> takeCard -> placeCubes -> (END_TURN) -> selectSlot

and the global phase moves ``setup -> playing -> ended``.

End-of-game timing:

- By default the game ends as soon as the player who just finished a turn
  meets the end condition (bag below 3 tokens, or at most 2 empty cells on
  their board).
- With ``finish_round`` set at START_GAME, the condition only marks the
  game as ``end_triggered``; play continues until it wraps back to the first
  player so everyone has had the same number of turns.
"""

from __future__ import annotations

import logging
import random
from typing import Callable, Dict, List, Optional, Sequence

from .board_manager import STRICT_INVARIANTS, BoardManager
from .catalog import default_catalog
from .models import (
    ActionType,
    AnimalCard,
    GameAction,
    GamePhase,
    GameState,
    HexPosition,
    PlacedAnimalEmoji,
    PlacedToken,
    PlayerState,
    TurnPhase,
)
from .rules import habitat, supply
from .rules.core import (
    END_GAME_EMPTY_CELLS,
    MAX_HAND_SIZE,
    TOKENS_PER_SLOT,
    face_up_count,
    slot_count,
)
from .rules.geometry import all_board_positions, is_valid_position
from .rules.stacking import check_board_placement
from .scoring import animal_score, score_environment

logger = logging.getLogger(__name__)

Handler = Callable[[GameState, GameAction], Optional[GameState]]


class GameEngine:
    """Wildscapes turn/phase state machine.

    All methods are static; the engine holds no state of its own.
    """

    @staticmethod
    def initial_state() -> GameState:
        """The empty pre-game state (phase ``setup``)."""
        return GameState()

    @staticmethod
    def apply_action(
        state: GameState,
        action: GameAction,
        *,
        catalog: Optional[Sequence[AnimalCard]] = None,
    ) -> GameState:
        """
        Apply an action and return the new state.

        Args:
            state: The current game state.
            action: The action to apply.
            catalog: Animal cards to deal at START_GAME. Defaults to the
                bundled catalog.

        Returns:
            The next state, or ``state`` itself if the action is rejected.
        """
        if action.type == ActionType.START_GAME:
            new_state = GameEngine._apply_start_game(state, action, catalog)
        elif state.phase != GamePhase.PLAYING:
            new_state = None
        else:
            handler = _HANDLERS.get(action.type)
            new_state = handler(state, action) if handler is not None else None

        if new_state is None:
            logger.debug(
                "Rejected %s in phase=%s turn_phase=%s",
                action.type.value,
                state.phase.value,
                state.turn_phase.value,
            )
            return state

        if STRICT_INVARIANTS:
            for player in new_state.players:
                BoardManager.validate_board(player.board)
        return new_state

    @staticmethod
    def is_action_legal(state: GameState, action: GameAction) -> bool:
        """Return True if ``action`` would change ``state``."""
        if action.type == ActionType.START_GAME:
            return state.phase == GamePhase.SETUP and bool(action.players)
        return GameEngine.apply_action(state, action) is not state

    @staticmethod
    def active_player(state: GameState) -> Optional[PlayerState]:
        return state.current_player

    @staticmethod
    def is_placement_legal(
        state: GameState, position: HexPosition, token_index: int
    ) -> bool:
        """Return True if PLACE_TOKEN(position, token_index) would be accepted."""
        if state.phase != GamePhase.PLAYING:
            return False
        if state.turn_phase != TurnPhase.PLACE_TOKENS:
            return False
        if not 0 <= token_index < len(state.tokens_to_place):
            return False
        player = state.players[state.current_player_index]
        token = state.tokens_to_place[token_index]
        return check_board_placement(
            player.board, player.placed_emojis, position, token.type
        ).allowed

    @staticmethod
    def get_valid_actions(state: GameState) -> List[GameAction]:
        """Enumerate the actions the active player may take right now.

        START_GAME is never listed; it needs caller-supplied seats.
        """
        if state.phase != GamePhase.PLAYING:
            return []

        player = state.players[state.current_player_index]
        actions: List[GameAction] = []

        if state.turn_phase == TurnPhase.SELECT_SLOT:
            actions.extend(
                GameAction.select_slot(slot.id)
                for slot in state.central_slots
                if slot.tokens
            )

        elif state.turn_phase == TurnPhase.PLACE_TOKENS:
            positions = all_board_positions()
            for index, token in enumerate(state.tokens_to_place):
                for position in positions:
                    check = check_board_placement(
                        player.board, player.placed_emojis, position, token.type
                    )
                    if check.allowed:
                        actions.append(GameAction.place_token(position, index))

        elif state.turn_phase == TurnPhase.TAKE_CARD:
            if len(player.hand_cards) < MAX_HAND_SIZE:
                actions.extend(
                    GameAction.take_animal_card(card.id)
                    for card in state.face_up_animals
                )
            actions.append(GameAction.skip_take_card())

        elif state.turn_phase == TurnPhase.PLACE_CUBES:
            if state.selected_animal_card_id is not None:
                card = _find_card(player.hand_cards, state.selected_animal_card_id)
                if card is not None and state.selected_habitat_index is not None:
                    cell = card.habitat[state.selected_habitat_index]
                    actions.extend(
                        GameAction.place_animal_emoji(position)
                        for position in habitat.matching_positions(
                            player.board, player.placed_emojis, cell
                        )
                    )
            for card in player.hand_cards:
                for index, cell in enumerate(card.habitat):
                    if habitat.is_habitat_cell_filled(
                        player.placed_emojis, card.id, index
                    ):
                        continue
                    if habitat.matching_positions(
                        player.board, player.placed_emojis, cell
                    ):
                        actions.append(GameAction.select_habitat_cell(card.id, index))
            actions.append(GameAction.skip_place_cubes())
            actions.append(GameAction.end_turn())

        return actions

    # ------------------------------------------------------------------
    # Action handlers. Each returns the new state or None to reject.
    # ------------------------------------------------------------------

    @staticmethod
    def _apply_start_game(
        state: GameState,
        action: GameAction,
        catalog: Optional[Sequence[AnimalCard]],
    ) -> Optional[GameState]:
        if state.phase != GamePhase.SETUP or not action.players:
            return None

        solo_mode = bool(action.solo_mode) or len(action.players) == 1
        rng = random.Random(action.seed)

        bag = supply.generate_bag(rng)
        slots, bag = supply.deal_initial_slots(bag, slot_count(solo_mode))
        face_up, deck = supply.deal_animals(
            catalog if catalog is not None else default_catalog(),
            rng,
            face_up_count(solo_mode),
        )

        players = tuple(
            PlayerState(
                id=f"player-{index}",
                db_player_id=seat.db_player_id,
                name=seat.name,
                color=seat.color,
            )
            for index, seat in enumerate(action.players)
        )

        logger.info(
            "Starting game: players=%d solo=%s seed=%s finish_round=%s",
            len(players),
            solo_mode,
            action.seed,
            action.finish_round,
        )
        return GameState(
            phase=GamePhase.PLAYING,
            current_player_index=0,
            players=players,
            central_slots=slots,
            token_bag=bag,
            animal_deck=deck,
            face_up_animals=face_up,
            turn_phase=TurnPhase.SELECT_SLOT,
            solo_mode=solo_mode,
            finish_round=action.finish_round,
        )

    @staticmethod
    def _apply_select_slot(state: GameState, action: GameAction) -> Optional[GameState]:
        if state.turn_phase != TurnPhase.SELECT_SLOT:
            return None
        slot = next(
            (slot for slot in state.central_slots if slot.id == action.slot_id), None
        )
        if slot is None or not slot.tokens:
            return None

        return state.model_copy(
            update={
                "central_slots": supply.drain_slot(state.central_slots, slot.id),
                "tokens_to_place": slot.tokens,
                "selected_slot_id": slot.id,
                "turn_phase": TurnPhase.PLACE_TOKENS,
                "players": _update_player(
                    state, actions_taken=_active(state).actions_taken + 1
                ),
            }
        )

    @staticmethod
    def _apply_place_token(state: GameState, action: GameAction) -> Optional[GameState]:
        if state.turn_phase != TurnPhase.PLACE_TOKENS:
            return None
        if action.position is None or action.token_index is None:
            return None
        if not 0 <= action.token_index < len(state.tokens_to_place):
            return None

        player = _active(state)
        token = state.tokens_to_place[action.token_index]
        check = check_board_placement(
            player.board, player.placed_emojis, action.position, token.type
        )
        if not check.allowed:
            return None

        placed = PlacedToken(
            token=token, position=action.position, stack_level=check.resulting_level
        )
        remaining = (
            state.tokens_to_place[: action.token_index]
            + state.tokens_to_place[action.token_index + 1:]
        )
        return state.model_copy(
            update={
                "players": _update_player(
                    state,
                    board=player.board + (placed,),
                    actions_taken=player.actions_taken + 1,
                ),
                "tokens_to_place": remaining,
                "turn_phase": (
                    TurnPhase.TAKE_CARD if not remaining else TurnPhase.PLACE_TOKENS
                ),
            }
        )

    @staticmethod
    def _apply_take_animal_card(
        state: GameState, action: GameAction
    ) -> Optional[GameState]:
        if state.turn_phase != TurnPhase.TAKE_CARD:
            return None

        player = _active(state)
        if len(player.hand_cards) >= MAX_HAND_SIZE:
            # Hand is full: move on without taking a card.
            return state.model_copy(
                update={
                    "turn_phase": TurnPhase.PLACE_CUBES,
                    "players": _update_player(
                        state, skipped_actions=player.skipped_actions + 1
                    ),
                }
            )

        card = _find_card(state.face_up_animals, action.card_id)
        if card is None:
            return None

        return state.model_copy(
            update={
                "players": _update_player(
                    state,
                    hand_cards=player.hand_cards + (card,),
                    actions_taken=player.actions_taken + 1,
                ),
                "face_up_animals": tuple(
                    c for c in state.face_up_animals if c.id != card.id
                ),
                "turn_phase": TurnPhase.PLACE_CUBES,
            }
        )

    @staticmethod
    def _apply_skip_take_card(
        state: GameState, action: GameAction
    ) -> Optional[GameState]:
        if state.turn_phase != TurnPhase.TAKE_CARD:
            return None
        return state.model_copy(
            update={
                "turn_phase": TurnPhase.PLACE_CUBES,
                "players": _update_player(
                    state, skipped_actions=_active(state).skipped_actions + 1
                ),
            }
        )

    @staticmethod
    def _apply_select_habitat_cell(
        state: GameState, action: GameAction
    ) -> Optional[GameState]:
        if state.turn_phase != TurnPhase.PLACE_CUBES:
            return None
        if action.habitat_index is None:
            return None

        player = _active(state)
        card = _find_card(player.hand_cards, action.card_id)
        if card is None or not 0 <= action.habitat_index < len(card.habitat):
            return None
        if habitat.is_habitat_cell_filled(
            player.placed_emojis, card.id, action.habitat_index
        ):
            return None

        return state.model_copy(
            update={
                "selected_animal_card_id": card.id,
                "selected_habitat_index": action.habitat_index,
            }
        )

    @staticmethod
    def _apply_place_animal_emoji(
        state: GameState, action: GameAction
    ) -> Optional[GameState]:
        if state.turn_phase != TurnPhase.PLACE_CUBES:
            return None
        if state.selected_animal_card_id is None or state.selected_habitat_index is None:
            return None
        if action.position is None or not is_valid_position(action.position):
            return None

        player = _active(state)
        card = _find_card(player.hand_cards, state.selected_animal_card_id)
        if card is None or state.selected_habitat_index >= len(card.habitat):
            return None

        cell = card.habitat[state.selected_habitat_index]
        stack = BoardManager.get_stack(player.board, action.position)
        if not habitat.habitat_cell_satisfied(stack, cell):
            return None
        if habitat.emoji_at(player.placed_emojis, action.position) is not None:
            return None

        emojis = player.placed_emojis + (
            PlacedAnimalEmoji(
                card_id=card.id,
                position=action.position,
                emoji=card.emoji,
                habitat_index=state.selected_habitat_index,
                placed_round=state.round_number,
            ),
        )
        hand_cards = player.hand_cards
        completed_cards = player.completed_cards
        if habitat.is_card_complete(card, emojis):
            logger.info("Player %s completed animal card %s", player.id, card.id)
            hand_cards = tuple(c for c in hand_cards if c.id != card.id)
            completed_cards = completed_cards + (card,)

        return state.model_copy(
            update={
                "players": _update_player(
                    state,
                    placed_emojis=emojis,
                    hand_cards=hand_cards,
                    completed_cards=completed_cards,
                    actions_taken=player.actions_taken + 1,
                ),
                "selected_animal_card_id": None,
                "selected_habitat_index": None,
            }
        )

    @staticmethod
    def _apply_skip_place_cubes(
        state: GameState, action: GameAction
    ) -> Optional[GameState]:
        if state.turn_phase != TurnPhase.PLACE_CUBES:
            return None
        return state.model_copy(
            update={
                "selected_animal_card_id": None,
                "selected_habitat_index": None,
                "players": _update_player(
                    state, skipped_actions=_active(state).skipped_actions + 1
                ),
            }
        )

    @staticmethod
    def _apply_end_turn(state: GameState, action: GameAction) -> Optional[GameState]:
        if state.turn_phase != TurnPhase.PLACE_CUBES:
            return None

        slots, bag = state.central_slots, state.token_bag
        if state.selected_slot_id is not None:
            slots, bag = supply.refill_slot(slots, bag, state.selected_slot_id)

        face_up, deck = supply.top_up_face_up(
            state.face_up_animals, state.animal_deck, face_up_count(state.solo_mode)
        )

        finished_index = state.current_player_index
        players = tuple(
            player.model_copy(
                update={
                    "score": animal_score(player),
                    "environment_score_breakdown": score_environment(player.board),
                    "turns_taken": player.turns_taken
                    + (1 if index == finished_index else 0),
                }
            )
            for index, player in enumerate(state.players)
        )

        finished = players[finished_index]
        condition_met = (
            len(bag) < TOKENS_PER_SLOT
            or BoardManager.empty_cell_count(finished.board) <= END_GAME_EMPTY_CELLS
        )

        next_index = (finished_index + 1) % len(players)
        round_number = state.round_number + 1 if next_index == 0 else state.round_number

        end_triggered = state.end_triggered or condition_met
        if state.finish_round:
            game_over = end_triggered and next_index == 0
        else:
            game_over = condition_met

        if condition_met and not state.end_triggered:
            logger.info(
                "End condition met by %s in round %d (bag=%d)",
                finished.id,
                state.round_number,
                len(bag),
            )

        return state.model_copy(
            update={
                "central_slots": slots,
                "token_bag": bag,
                "face_up_animals": face_up,
                "animal_deck": deck,
                "players": players,
                "current_player_index": next_index,
                "round_number": round_number,
                "turn_phase": TurnPhase.SELECT_SLOT,
                "tokens_to_place": (),
                "selected_slot_id": None,
                "selected_animal_card_id": None,
                "selected_habitat_index": None,
                "end_triggered": end_triggered,
                "phase": GamePhase.ENDED if game_over else GamePhase.PLAYING,
            }
        )


def _active(state: GameState) -> PlayerState:
    return state.players[state.current_player_index]


def _update_player(state: GameState, **changes) -> tuple:
    """Return ``state.players`` with the active player updated."""
    index = state.current_player_index
    return tuple(
        player.model_copy(update=changes) if i == index else player
        for i, player in enumerate(state.players)
    )


def _find_card(
    cards: Sequence[AnimalCard], card_id: Optional[str]
) -> Optional[AnimalCard]:
    if card_id is None:
        return None
    return next((card for card in cards if card.id == card_id), None)


def _reject(state: GameState, action: GameAction) -> Optional[GameState]:
    return None


_HANDLERS: Dict[ActionType, Handler] = {
    ActionType.SELECT_SLOT: GameEngine._apply_select_slot,
    ActionType.PLACE_TOKEN: GameEngine._apply_place_token,
    ActionType.TAKE_ANIMAL_CARD: GameEngine._apply_take_animal_card,
    ActionType.SKIP_TAKE_CARD: GameEngine._apply_skip_take_card,
    ActionType.SELECT_HABITAT_CELL: GameEngine._apply_select_habitat_cell,
    ActionType.PLACE_ANIMAL_EMOJI: GameEngine._apply_place_animal_emoji,
    ActionType.SKIP_PLACE_CUBES: GameEngine._apply_skip_place_cubes,
    ActionType.END_TURN: GameEngine._apply_end_turn,
    # Recognised but never applied: the engine keeps no history to undo into.
    ActionType.UNDO: _reject,
}


def apply_action(state: GameState, action: GameAction) -> GameState:
    """Module-level alias for :meth:`GameEngine.apply_action`."""
    return GameEngine.apply_action(state, action)


__all__ = ["GameEngine", "apply_action"]
