"""Game-over statistics.

Builds the :class:`GameStats` record saved to the persistence service when
a game ends. Everything here is derived from the final :class:`GameState`;
no values are tracked separately.
"""

from __future__ import annotations

import uuid
from collections import Counter
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from .board_manager import BoardManager
from .models import (
    AnimalCard,
    AnimalStats,
    BoardStats,
    CardStat,
    GameState,
    GameStats,
    HexPosition,
    OverallGameStats,
    PlacedToken,
    PlayerGameStats,
    PlayerHistory,
    PlayerState,
    TerrainType,
)
from .rules.core import BOARD_CELL_COUNT
from .rules.geometry import neighbors
from .rules.habitat import emojis_for_card
from .scoring import animal_score, final_score, score_environment

MODE_SOLO = "solo"
MODE_MULTIPLAYER = "local-multiplayer"

# forest, field, water, mountain, building
TOTAL_HABITATS = 5

HABITAT_CATEGORIES: Dict[TerrainType, str] = {
    TerrainType.TRUNK: "forest",
    TerrainType.TREETOP: "forest",
    TerrainType.FIELD: "field",
    TerrainType.WATER: "water",
    TerrainType.MOUNTAIN: "mountain",
    TerrainType.BUILDING: "building",
}


def final_scores(players: Sequence[PlayerState]) -> Dict[str, int]:
    """Map player id to animal points plus environment points."""
    return {player.id: final_score(player) for player in players}


def rank_players(players: Sequence[PlayerState]) -> List[PlayerState]:
    """Players ordered best first.

    Ties on total score go to the player with more animal markers placed;
    remaining ties keep seat order.
    """
    totals = final_scores(players)
    return sorted(
        players,
        key=lambda player: (-totals[player.id], -len(player.placed_emojis)),
    )


def _largest_group(board: Sequence[PlacedToken], terrain: TerrainType) -> int:
    regions = BoardManager.find_regions(
        board, include=lambda top: top.token.type == terrain
    )
    return max((len(region) for region in regions), default=0)


def build_board_stats(boards: Sequence[Sequence[PlacedToken]]) -> BoardStats:
    """Aggregate board statistics over every player's board.

    Each board is its own 37-cell coordinate space; group sizes are the
    largest found on any single board.
    """
    tokens_by_type: Counter = Counter()
    heights: List[int] = []
    tallest: List[HexPosition] = []
    max_height = 0
    largest_field = largest_mountain = largest_river = 0
    isolated = 0
    used_cells = 0
    total_tokens = 0

    for board in boards:
        total_tokens += len(board)
        tokens_by_type.update(placed.token.type.value for placed in board)
        stacks = BoardManager.stacks(board)
        used_cells += len(stacks)

        for position, stack in stacks.items():
            height = len(stack)
            heights.append(height)
            if height > max_height:
                max_height = height
                tallest = [position]
            elif height == max_height and position not in tallest:
                tallest.append(position)
            if not any(neighbor in stacks for neighbor in neighbors(position)):
                isolated += 1

        largest_field = max(largest_field, _largest_group(board, TerrainType.FIELD))
        largest_mountain = max(
            largest_mountain, _largest_group(board, TerrainType.MOUNTAIN)
        )
        largest_river = max(largest_river, _largest_group(board, TerrainType.WATER))

    if total_tokens == 0:
        return BoardStats(unused_tiles=BOARD_CELL_COUNT * len(boards))

    total_cells = BOARD_CELL_COUNT * len(boards)
    ordered = tokens_by_type.most_common()
    return BoardStats(
        total_tokens_placed=total_tokens,
        tokens_by_type=dict(tokens_by_type),
        average_stack_height=sum(heights) / len(heights),
        max_stack_height=max_height,
        tallest_stack_positions=tallest,
        largest_field_group=largest_field,
        largest_mountain_group=largest_mountain,
        largest_river_group=largest_river,
        isolated_tiles=isolated,
        unused_tiles=total_cells - used_cells,
        coverage_percent=round(used_cells / total_cells * 100),
        most_common_terrain=ordered[0][0],
        least_common_terrain=ordered[-1][0],
    )


def habitat_category(card: AnimalCard) -> str:
    """The dominant habitat category of a card (first wins on a tie)."""
    categories = Counter(HABITAT_CATEGORIES[cell.terrain] for cell in card.habitat)
    if not categories:
        return "unknown"
    return categories.most_common(1)[0][0]


def _card_stat(player: PlayerState, card: AnimalCard, completed: bool) -> CardStat:
    markers = emojis_for_card(player.placed_emojis, card.id)
    rounds = [marker.placed_round for marker in markers]
    points = card.points if completed else 0
    return CardStat(
        card_id=card.id,
        name=card.name,
        habitat_type=habitat_category(card),
        cubes_placed=len(markers),
        cubes_required=card.cubes_required,
        completed=completed,
        base_points=points,
        bonus_points=0,
        total_points=points,
        first_cube_placed_turn=min(rounds) if rounds else None,
        completion_turn=max(rounds) if completed and rounds else None,
    )


def build_animal_stats(players: Sequence[PlayerState]) -> AnimalStats:
    """Statistics over every collected card.

    Completed cards score their points; cards still in hand count as
    partial and score nothing.
    """
    card_stats: List[CardStat] = []
    for player in players:
        card_stats.extend(_card_stat(player, c, True) for c in player.completed_cards)
        card_stats.extend(_card_stat(player, c, False) for c in player.hand_cards)

    if not card_stats:
        return AnimalStats()

    completed = sum(1 for stat in card_stats if stat.completed)
    breakdown = Counter(stat.habitat_type for stat in card_stats)
    most_valuable = max(card_stats, key=lambda stat: stat.total_points)

    return AnimalStats(
        total_collected=len(card_stats),
        total_completed=completed,
        total_partial=len(card_stats) - completed,
        total_points=sum(stat.total_points for stat in card_stats),
        diversity_score=len(breakdown) / TOTAL_HABITATS,
        habitat_breakdown=dict(breakdown),
        average_cubes_per_animal=(
            sum(stat.cubes_placed for stat in card_stats) / len(card_stats)
        ),
        card_stats=card_stats,
        most_valuable_animal=most_valuable.name,
    )


def build_player_stats(players: Sequence[PlayerState]) -> List[PlayerGameStats]:
    """Per-player results in rank order."""
    result = []
    for rank, player in enumerate(rank_players(players), start=1):
        environment = score_environment(player.board).total
        animals = animal_score(player)
        result.append(
            PlayerGameStats(
                player_id=player.db_player_id or player.id,
                player_name=player.name,
                final_score=environment + animals,
                environment_points=environment,
                animal_points=animals,
                turns_taken=player.turns_taken,
                tokens_placed=len(player.board),
                animals_completed=len(player.completed_cards),
                rank=rank,
                is_winner=rank == 1,
            )
        )
    return result


def build_overall_stats(
    player_stats: Sequence[PlayerGameStats],
    players: Sequence[PlayerState],
    previous: Optional[Sequence[GameStats]] = None,
) -> OverallGameStats:
    """
    Whole-game totals.

    ``game_was_fastest_so_far`` compares total turns against earlier games
    with the same player count. With ``previous=None`` (history unavailable)
    it is False; with an empty history the game is trivially the fastest.
    """
    total_score = sum(stat.final_score for stat in player_stats)
    turns_taken = sum(stat.turns_taken for stat in player_stats)
    count = len(player_stats)

    fastest = False
    if previous is not None:
        comparable = [
            game.overall.turns_taken
            for game in previous
            if game.overall.player_count == count
        ]
        fastest = all(turns_taken < turns for turns in comparable)

    return OverallGameStats(
        final_score=total_score,
        environment_points=sum(stat.environment_points for stat in player_stats),
        animal_points=sum(stat.animal_points for stat in player_stats),
        turns_taken=turns_taken,
        total_actions=sum(player.actions_taken for player in players),
        skipped_actions=sum(player.skipped_actions for player in players),
        player_count=count,
        average_score_per_player=total_score / count if count else 0.0,
        game_was_fastest_so_far=fastest,
    )


def game_mode(state: GameState) -> str:
    return MODE_SOLO if state.solo_mode or len(state.players) == 1 else MODE_MULTIPLAYER


def build_game_stats(
    state: GameState,
    game_id: Optional[str] = None,
    mode: Optional[str] = None,
    previous: Optional[Sequence[GameStats]] = None,
    now: Optional[datetime] = None,
) -> GameStats:
    """Assemble the full :class:`GameStats` record for a finished game."""
    now = now or datetime.now(timezone.utc)
    players = list(state.players)
    player_stats = build_player_stats(players)
    return GameStats(
        id=str(uuid.uuid4()),
        game_id=game_id or f"game-{uuid.uuid4().hex[:12]}",
        mode=mode or game_mode(state),
        created_at=now,
        updated_at=now,
        board=build_board_stats([player.board for player in players]),
        animals=build_animal_stats(players),
        overall=build_overall_stats(player_stats, players, previous),
        players=player_stats,
    )



def stats_for_player(games: Sequence[GameStats], player_id: str) -> List[GameStats]:
    """Saved games that include ``player_id``, newest first."""
    return sorted(
        (game for game in games if any(p.player_id == player_id for p in game.players)),
        key=lambda game: game.created_at,
        reverse=True,
    )


def build_player_history(games: Sequence[GameStats], player_id: str) -> PlayerHistory:
    """
    Summarize a player's saved games.

    Averages are over the games the player appears in. Habitat totals add
    up the whole-game habitat breakdown of each of those games.
    """
    history = stats_for_player(games, player_id)
    entries = [
        next(p for p in game.players if p.player_id == player_id) for game in history
    ]
    if not entries:
        return PlayerHistory(player_id=player_id)

    habitat_totals: Counter = Counter()
    for game in history:
        habitat_totals.update(game.animals.habitat_breakdown)

    count = len(entries)
    total_score = sum(entry.final_score for entry in entries)
    return PlayerHistory(
        player_id=player_id,
        games_played=count,
        wins=sum(1 for entry in entries if entry.is_winner),
        highest_score=max(entry.final_score for entry in entries),
        total_score=total_score,
        average_score=total_score / count,
        average_turns=sum(entry.turns_taken for entry in entries) / count,
        average_animals_completed=(
            sum(entry.animals_completed for entry in entries) / count
        ),
        habitat_totals=dict(habitat_totals),
    )


__all__ = [
    "MODE_MULTIPLAYER",
    "MODE_SOLO",
    "build_animal_stats",
    "build_board_stats",
    "build_game_stats",
    "build_overall_stats",
    "build_player_history",
    "build_player_stats",
    "final_scores",
    "game_mode",
    "habitat_category",
    "rank_players",
    "stats_for_player",
]
