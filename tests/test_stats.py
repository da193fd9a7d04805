"""Tests for wildscapes/stats.py - game-over statistics."""

from datetime import datetime, timezone

import pytest

from wildscapes.models import (
    AnimalStats,
    BoardStats,
    GamePhase,
    GameState,
    GameStats,
    HexPosition,
    OverallGameStats,
    PlacedAnimalEmoji,
    PlayerGameStats,
    PlayerState,
    TerrainType,
)
from wildscapes.scoring import final_score
from wildscapes.stats import (
    build_animal_stats,
    build_board_stats,
    build_game_stats,
    build_overall_stats,
    build_player_history,
    build_player_stats,
    final_scores,
    habitat_category,
    rank_players,
    stats_for_player,
)

F = TerrainType.FIELD
W = TerrainType.WATER
M = TerrainType.MOUNTAIN
T = TerrainType.TRUNK
L = TerrainType.TREETOP
B = TerrainType.BUILDING


def _marker(card_id, q, r, index, placed_round=1):
    return PlacedAnimalEmoji(
        card_id=card_id,
        position=HexPosition(q=q, r=r),
        emoji="🦦",
        habitat_index=index,
        placed_round=placed_round,
    )


@pytest.fixture
def players(board_factory, card_factory):
    otter = card_factory("otter", habitat=[(W, 0), (W, 0)], points=3)
    fox = card_factory("fox", habitat=[(L, 1), (F, 0)], points=4)
    alice = PlayerState(
        id="player-0",
        db_player_id="db-alice",
        name="Alice",
        color="forest",
        board=board_factory(
            [(0, 0, [W]), (1, 0, [W]), (2, 0, [F]), (-3, 3, [T, L])]
        ),
        placed_emojis=(_marker("otter", 0, 0, 0, 2), _marker("otter", 1, 0, 1, 4)),
        completed_cards=(otter,),
        hand_cards=(fox,),
        turns_taken=5,
        actions_taken=20,
        skipped_actions=3,
    )
    bob = PlayerState(
        id="player-1",
        name="Bob",
        color="river",
        board=board_factory([(0, 0, [M, M]), (1, 0, [M, M])]),
        turns_taken=4,
        actions_taken=15,
        skipped_actions=1,
    )
    return [alice, bob]


class TestRanking:
    def test_final_scores(self, players):
        # Alice: otter 3 + river 2 + tree 3 = 8; Bob: mountains 6.
        assert final_scores(players) == {"player-0": 8, "player-1": 6}

    def test_final_scores_match_per_player_score(self, players):
        totals = final_scores(players)
        assert all(totals[p.id] == final_score(p) for p in players)

    def test_rank_by_total(self, players):
        assert [p.name for p in rank_players(players)] == ["Alice", "Bob"]

    def test_tie_broken_by_markers(self, board_factory):
        quiet = PlayerState(id="a", name="Quiet", color="x", board=board_factory([(0, 0, [L])]))
        busy = PlayerState(
            id="b",
            name="Busy",
            color="y",
            board=board_factory([(0, 0, [L])]),
            placed_emojis=(_marker("fox", 0, 0, 0),),
        )
        assert [p.name for p in rank_players([quiet, busy])] == ["Busy", "Quiet"]

    def test_full_tie_keeps_seat_order(self):
        a = PlayerState(id="a", name="A", color="x")
        b = PlayerState(id="b", name="B", color="y")
        assert rank_players([a, b]) == [a, b]


class TestBoardStats:
    def test_aggregates_boards(self, players):
        stats = build_board_stats([p.board for p in players])
        assert stats.total_tokens_placed == 9
        assert stats.tokens_by_type == {"water": 2, "field": 1, "trunk": 1, "treetop": 1, "mountain": 4}
        assert stats.max_stack_height == 2
        assert HexPosition(q=-3, r=3) in stats.tallest_stack_positions
        assert HexPosition(q=0, r=0) in stats.tallest_stack_positions
        assert stats.largest_river_group == 2
        assert stats.largest_field_group == 1
        assert stats.largest_mountain_group == 2
        assert stats.isolated_tiles == 1
        assert stats.unused_tiles == 74 - 6
        assert stats.coverage_percent == round(6 / 74 * 100)
        assert stats.average_stack_height == pytest.approx(9 / 6)
        assert stats.most_common_terrain == "mountain"

    def test_empty_boards(self):
        stats = build_board_stats([(), ()])
        assert stats.total_tokens_placed == 0
        assert stats.unused_tiles == 74
        assert stats.most_common_terrain == ""


class TestAnimalStats:
    def test_completed_and_partial(self, players):
        stats = build_animal_stats(players)
        assert stats.total_collected == 2
        assert stats.total_completed == 1
        assert stats.total_partial == 1
        assert stats.total_points == 3
        assert stats.habitat_breakdown == {"water": 1, "forest": 1}
        assert stats.diversity_score == pytest.approx(2 / 5)
        assert stats.average_cubes_per_animal == pytest.approx(1.0)
        assert stats.most_valuable_animal == "Otter"

        otter = next(c for c in stats.card_stats if c.card_id == "otter")
        assert otter.completed
        assert otter.cubes_placed == 2
        assert otter.first_cube_placed_turn == 2
        assert otter.completion_turn == 4

        fox = next(c for c in stats.card_stats if c.card_id == "fox")
        assert not fox.completed
        assert fox.total_points == 0
        assert fox.completion_turn is None

    def test_no_cards(self):
        stats = build_animal_stats([PlayerState(id="a", name="A", color="x")])
        assert stats.total_collected == 0
        assert stats.most_valuable_animal is None

    def test_habitat_category(self, card_factory):
        assert habitat_category(card_factory("x", habitat=[(T, 0), (L, 1), (W, 0)])) == "forest"


class TestPlayerAndOverall:
    def test_player_stats(self, players):
        stats = build_player_stats(players)
        alice, bob = stats
        assert alice.player_id == "db-alice"
        assert bob.player_id == "player-1"
        assert (alice.rank, alice.is_winner) == (1, True)
        assert (bob.rank, bob.is_winner) == (2, False)
        assert alice.final_score == 8
        assert alice.animal_points == 3
        assert alice.environment_points == 5
        assert alice.tokens_placed == 5
        assert alice.animals_completed == 1
        assert alice.turns_taken == 5

    def test_overall(self, players):
        overall = build_overall_stats(build_player_stats(players), players)
        assert overall.final_score == 14
        assert overall.turns_taken == 9
        assert overall.total_actions == 35
        assert overall.skipped_actions == 4
        assert overall.player_count == 2
        assert overall.average_score_per_player == pytest.approx(7.0)
        assert overall.game_was_fastest_so_far is False

    def test_fastest_against_history(self, players):
        player_stats = build_player_stats(players)
        now = datetime.now(timezone.utc)

        def previous(turns, count=2):
            stats = build_game_stats(
                GameState(phase=GamePhase.ENDED, players=tuple(players)), now=now
            )
            return stats.model_copy(
                update={
                    "overall": OverallGameStats(turns_taken=turns, player_count=count)
                }
            )

        assert build_overall_stats(player_stats, players, []).game_was_fastest_so_far
        assert build_overall_stats(
            player_stats, players, [previous(12), previous(5, count=1)]
        ).game_was_fastest_so_far
        assert not build_overall_stats(
            player_stats, players, [previous(9)]
        ).game_was_fastest_so_far


class TestGameStats:
    def test_build_game_stats(self, players):
        state = GameState(phase=GamePhase.ENDED, players=tuple(players))
        stats = build_game_stats(state, game_id="game-1")
        assert isinstance(stats, GameStats)
        assert stats.game_id == "game-1"
        assert stats.mode == "local-multiplayer"
        assert [p.player_name for p in stats.players] == ["Alice", "Bob"]

    def test_solo_mode(self, players):
        state = GameState(phase=GamePhase.ENDED, players=(players[0],), solo_mode=True)
        stats = build_game_stats(state)
        assert stats.mode == "solo"
        assert stats.game_id.startswith("game-")

    def test_json_shape(self, players):
        state = GameState(phase=GamePhase.ENDED, players=tuple(players))
        data = build_game_stats(state).model_dump(mode="json", by_alias=True)
        assert set(data) == {
            "id", "gameId", "mode", "createdAt", "updatedAt",
            "board", "animals", "overall", "players",
        }
        assert "largestRiverGroup" in data["board"]
        assert "gameWasFastestSoFar" in data["overall"]
        assert data["players"][0]["isWinner"] is True


def _saved_game(game_id, day, results, habitats=None):
    """A saved record; ``results`` is ``[(player_id, score, turns, animals), ...]``."""
    created = datetime(2026, 3, day, tzinfo=timezone.utc)
    return GameStats(
        id=f"stats-{game_id}",
        game_id=game_id,
        mode="local-multiplayer",
        created_at=created,
        updated_at=created,
        board=BoardStats(),
        animals=AnimalStats(habitat_breakdown=habitats or {}),
        overall=OverallGameStats(player_count=len(results)),
        players=[
            PlayerGameStats(
                player_id=player_id,
                player_name=player_id.title(),
                final_score=score,
                environment_points=score,
                animal_points=0,
                turns_taken=turns,
                tokens_placed=0,
                animals_completed=animals,
                rank=rank,
                is_winner=rank == 1,
            )
            for rank, (player_id, score, turns, animals) in enumerate(results, start=1)
        ],
    )


@pytest.fixture
def history():
    return [
        _saved_game("g-1", 1, [("ada", 30, 10, 1), ("bo", 20, 10, 0)], {"forest": 2}),
        _saved_game("g-2", 5, [("bo", 40, 12, 3)], {"water": 1}),
        _saved_game("g-3", 3, [("bo", 25, 9, 2), ("ada", 45, 9, 2)], {"forest": 1, "field": 2}),
    ]


class TestPlayerHistory:
    def test_no_games(self):
        assert stats_for_player([], "ada") == []
        summary = build_player_history([], "ada")
        assert summary.player_id == "ada"
        assert summary.games_played == 0
        assert summary.average_score == 0.0
        assert summary.habitat_totals == {}

    def test_filters_and_orders_newest_first(self, history):
        assert [g.game_id for g in stats_for_player(history, "ada")] == ["g-3", "g-1"]
        assert [g.game_id for g in stats_for_player(history, "bo")] == ["g-2", "g-3", "g-1"]
        assert stats_for_player(history, "cy") == []

    def test_summary_skips_games_without_player(self, history):
        summary = build_player_history(history, "ada")
        assert summary.games_played == 2
        assert summary.wins == 1
        assert summary.highest_score == 45
        assert summary.total_score == 75
        assert summary.average_score == 37.5
        assert summary.average_turns == 9.5
        assert summary.average_animals_completed == 1.5
        assert summary.habitat_totals == {"forest": 3, "field": 2}

    def test_summary_over_every_game(self, history):
        summary = build_player_history(history, "bo")
        assert summary.games_played == 3
        assert summary.wins == 2
        assert summary.highest_score == 40
        assert summary.average_animals_completed == pytest.approx(5 / 3)
        assert summary.habitat_totals == {"forest": 3, "field": 2, "water": 1}

    def test_json_shape(self, history):
        data = build_player_history(history, "ada").model_dump(by_alias=True)
        assert data["gamesPlayed"] == 2
        assert "averageAnimalsCompleted" in data
        assert "habitatTotals" in data
