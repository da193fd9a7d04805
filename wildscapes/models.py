"""
Pydantic Models for Wildscapes Game State

Attribute names are snake_case; camelCase aliases keep the JSON shape used
by the web client and the persistence service.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class TerrainType(str, Enum):
    """Terrain token type enumeration"""
    FIELD = "field"
    WATER = "water"
    MOUNTAIN = "mountain"
    TRUNK = "trunk"
    TREETOP = "treetop"
    BUILDING = "building"


class GamePhase(str, Enum):
    """Global game phase enumeration"""
    SETUP = "setup"
    PLAYING = "playing"
    ENDED = "ended"


class TurnPhase(str, Enum):
    """Per-turn phase enumeration, in forward order"""
    SELECT_SLOT = "selectSlot"
    PLACE_TOKENS = "placeTokens"
    TAKE_CARD = "takeCard"
    PLACE_CUBES = "placeCubes"


class ActionType(str, Enum):
    """Action type enumeration"""
    START_GAME = "START_GAME"
    SELECT_SLOT = "SELECT_SLOT"
    PLACE_TOKEN = "PLACE_TOKEN"
    TAKE_ANIMAL_CARD = "TAKE_ANIMAL_CARD"
    SKIP_TAKE_CARD = "SKIP_TAKE_CARD"
    SELECT_HABITAT_CELL = "SELECT_HABITAT_CELL"
    PLACE_ANIMAL_EMOJI = "PLACE_ANIMAL_EMOJI"
    SKIP_PLACE_CUBES = "SKIP_PLACE_CUBES"
    END_TURN = "END_TURN"
    UNDO = "UNDO"


class HexPosition(BaseModel):
    """Axial hex coordinate; ``s`` is derived"""
    q: int
    r: int

    model_config = ConfigDict(frozen=True)

    @property
    def s(self) -> int:
        return -self.q - self.r

    def to_key(self) -> str:
        """Convert position to string key"""
        return f"{self.q},{self.r}"


class TerrainToken(BaseModel):
    """A single terrain token drawn from the bag"""
    id: str
    type: TerrainType

    model_config = ConfigDict(frozen=True)


class PlacedToken(BaseModel):
    """Token placed on a player board"""
    token: TerrainToken
    position: HexPosition
    stack_level: int = Field(alias="stackLevel", ge=0)

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class HabitatCell(BaseModel):
    """One required (terrain, minimum stack level) cell of an animal card.

    ``relative_pos`` is the cell's place in the card's own layout, not an
    absolute board coordinate.
    """
    terrain: TerrainType
    stack_level: int = Field(0, alias="stackLevel", ge=0, le=2)
    relative_pos: HexPosition = Field(
        default_factory=lambda: HexPosition(q=0, r=0), alias="relativePos"
    )

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class AnimalCard(BaseModel):
    """Animal objective card (immutable reference data)"""
    id: str
    name: str
    species: str
    habitat: Tuple[HabitatCell, ...]
    points: int
    emoji: str
    can_rotate: bool = Field(False, alias="canRotate")
    description: str = ""
    image_url: str = Field("", alias="imageUrl")
    frame_colors: Optional[Dict[str, str]] = Field(None, alias="frameColors")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @property
    def cubes_required(self) -> int:
        return len(self.habitat)


class PlacedAnimalEmoji(BaseModel):
    """Marks habitat cell ``habitat_index`` of ``card_id`` as satisfied"""
    card_id: str = Field(alias="cardId")
    position: HexPosition
    emoji: str
    habitat_index: int = Field(alias="habitatIndex")
    placed_round: int = Field(1, alias="placedRound")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class TokenSlot(BaseModel):
    """Central supply slot"""
    id: int
    tokens: Tuple[TerrainToken, ...] = ()

    model_config = ConfigDict(frozen=True)


class EnvironmentScore(BaseModel):
    """Per-category environment score; always fully populated"""
    trees: int = 0
    mountains: int = 0
    fields: int = 0
    buildings: int = 0
    rivers: int = 0
    total: int = 0

    model_config = ConfigDict(frozen=True)


class PlayerSeat(BaseModel):
    """Player entry supplied with START_GAME"""
    name: str
    color: str
    db_player_id: Optional[str] = Field(None, alias="dbPlayerId")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class PlayerState(BaseModel):
    """Player state"""
    id: str
    db_player_id: Optional[str] = Field(None, alias="dbPlayerId")
    name: str
    color: str
    board: Tuple[PlacedToken, ...] = ()
    placed_emojis: Tuple[PlacedAnimalEmoji, ...] = Field((), alias="placedEmojis")
    hand_cards: Tuple[AnimalCard, ...] = Field((), alias="handCards")
    completed_cards: Tuple[AnimalCard, ...] = Field((), alias="completedCards")
    # Completed-card points only; environment points are added at game end.
    score: int = 0
    environment_score_breakdown: EnvironmentScore = Field(
        default_factory=EnvironmentScore, alias="environmentScoreBreakdown"
    )
    turns_taken: int = Field(0, alias="turnsTaken")
    actions_taken: int = Field(0, alias="actionsTaken")
    skipped_actions: int = Field(0, alias="skippedActions")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class GameAction(BaseModel):
    """Action representation.

    A single flat model carries every action variant; only the fields
    relevant to ``type`` are read by the engine. Use the classmethod
    constructors rather than filling fields by hand.
    """
    type: ActionType
    players: Tuple[PlayerSeat, ...] = ()
    solo_mode: Optional[bool] = Field(None, alias="soloMode")
    seed: Optional[int] = None
    finish_round: bool = Field(False, alias="finishRound")
    slot_id: Optional[int] = Field(None, alias="slotId")
    position: Optional[HexPosition] = None
    token_index: Optional[int] = Field(None, alias="tokenIndex")
    card_id: Optional[str] = Field(None, alias="cardId")
    habitat_index: Optional[int] = Field(None, alias="habitatIndex")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @classmethod
    def start_game(
        cls,
        players: List[PlayerSeat],
        solo_mode: Optional[bool] = None,
        seed: Optional[int] = None,
        finish_round: bool = False,
    ) -> "GameAction":
        return cls(
            type=ActionType.START_GAME,
            players=tuple(players),
            solo_mode=solo_mode,
            seed=seed,
            finish_round=finish_round,
        )

    @classmethod
    def select_slot(cls, slot_id: int) -> "GameAction":
        return cls(type=ActionType.SELECT_SLOT, slot_id=slot_id)

    @classmethod
    def place_token(cls, position: HexPosition, token_index: int) -> "GameAction":
        return cls(
            type=ActionType.PLACE_TOKEN, position=position, token_index=token_index
        )

    @classmethod
    def take_animal_card(cls, card_id: str) -> "GameAction":
        return cls(type=ActionType.TAKE_ANIMAL_CARD, card_id=card_id)

    @classmethod
    def skip_take_card(cls) -> "GameAction":
        return cls(type=ActionType.SKIP_TAKE_CARD)

    @classmethod
    def select_habitat_cell(cls, card_id: str, habitat_index: int) -> "GameAction":
        return cls(
            type=ActionType.SELECT_HABITAT_CELL,
            card_id=card_id,
            habitat_index=habitat_index,
        )

    @classmethod
    def place_animal_emoji(cls, position: HexPosition) -> "GameAction":
        return cls(type=ActionType.PLACE_ANIMAL_EMOJI, position=position)

    @classmethod
    def skip_place_cubes(cls) -> "GameAction":
        return cls(type=ActionType.SKIP_PLACE_CUBES)

    @classmethod
    def end_turn(cls) -> "GameAction":
        return cls(type=ActionType.END_TURN)

    @classmethod
    def undo(cls) -> "GameAction":
        return cls(type=ActionType.UNDO)


class GameState(BaseModel):
    """Complete game state; never mutated in place"""
    phase: GamePhase = GamePhase.SETUP
    current_player_index: int = Field(0, alias="currentPlayerIndex")
    players: Tuple[PlayerState, ...] = ()
    central_slots: Tuple[TokenSlot, ...] = Field((), alias="centralSlots")
    token_bag: Tuple[TerrainToken, ...] = Field((), alias="tokenBag")
    animal_deck: Tuple[AnimalCard, ...] = Field((), alias="animalDeck")
    face_up_animals: Tuple[AnimalCard, ...] = Field((), alias="faceUpAnimals")
    turn_phase: TurnPhase = Field(TurnPhase.SELECT_SLOT, alias="turnPhase")
    tokens_to_place: Tuple[TerrainToken, ...] = Field((), alias="tokensToPlace")
    selected_slot_id: Optional[int] = Field(None, alias="selectedSlotId")
    round_number: int = Field(1, alias="roundNumber")
    solo_mode: bool = Field(False, alias="soloMode")
    selected_animal_card_id: Optional[str] = Field(
        None, alias="selectedAnimalCardId"
    )
    selected_habitat_index: Optional[int] = Field(
        None, alias="selectedHabitatIndex"
    )
    finish_round: bool = Field(False, alias="finishRound")
    end_triggered: bool = Field(False, alias="endTriggered")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @property
    def current_player(self) -> Optional[PlayerState]:
        if not self.players:
            return None
        return self.players[self.current_player_index]


# =============================================================================
# Persistence records
# =============================================================================


class User(BaseModel):
    """User account record"""
    id: str
    display_name: str = Field(alias="displayName")
    avatar_emoji: str = Field("", alias="avatarEmoji")
    handle: str = ""
    player_ids: List[str] = Field(default_factory=list, alias="playerIds")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True)


class Player(BaseModel):
    """Persistent player profile record"""
    id: str
    user_id: str = Field(alias="userId")
    display_name: str = Field(alias="displayName")
    avatar_emoji: str = Field("", alias="avatarEmoji")
    color_theme: str = Field("forest", alias="colorTheme")
    total_games_played: int = Field(0, alias="totalGamesPlayed")
    total_points_earned: int = Field(0, alias="totalPointsEarned")
    highest_score: int = Field(0, alias="highestScore")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True)


class BoardStats(BaseModel):
    """Aggregate board statistics for a finished game"""
    total_tokens_placed: int = Field(0, alias="totalTokensPlaced")
    tokens_by_type: Dict[str, int] = Field(default_factory=dict, alias="tokensByType")
    average_stack_height: float = Field(0.0, alias="averageStackHeight")
    max_stack_height: int = Field(0, alias="maxStackHeight")
    tallest_stack_positions: List[HexPosition] = Field(
        default_factory=list, alias="tallestStackPositions"
    )
    largest_field_group: int = Field(0, alias="largestFieldGroup")
    largest_mountain_group: int = Field(0, alias="largestMountainGroup")
    largest_river_group: int = Field(0, alias="largestRiverGroup")
    isolated_tiles: int = Field(0, alias="isolatedTiles")
    unused_tiles: int = Field(0, alias="unusedTiles")
    coverage_percent: int = Field(0, alias="coveragePercent")
    most_common_terrain: str = Field("", alias="mostCommonTerrain")
    least_common_terrain: str = Field("", alias="leastCommonTerrain")

    model_config = ConfigDict(populate_by_name=True)


class CardStat(BaseModel):
    """Per-card statistics"""
    card_id: str = Field(alias="cardId")
    name: str
    habitat_type: str = Field(alias="habitatType")
    cubes_placed: int = Field(alias="cubesPlaced")
    cubes_required: int = Field(alias="cubesRequired")
    completed: bool
    base_points: int = Field(alias="basePoints")
    bonus_points: int = Field(0, alias="bonusPoints")
    total_points: int = Field(alias="totalPoints")
    first_cube_placed_turn: Optional[int] = Field(None, alias="firstCubePlacedTurn")
    completion_turn: Optional[int] = Field(None, alias="completionTurn")

    model_config = ConfigDict(populate_by_name=True)


class AnimalStats(BaseModel):
    """Aggregate animal card statistics"""
    total_collected: int = Field(0, alias="totalCollected")
    total_completed: int = Field(0, alias="totalCompleted")
    total_partial: int = Field(0, alias="totalPartial")
    total_points: int = Field(0, alias="totalPoints")
    diversity_score: float = Field(0.0, alias="diversityScore")
    habitat_breakdown: Dict[str, int] = Field(
        default_factory=dict, alias="habitatBreakdown"
    )
    average_cubes_per_animal: float = Field(0.0, alias="averageCubesPerAnimal")
    card_stats: List[CardStat] = Field(default_factory=list, alias="cardStats")
    most_valuable_animal: Optional[str] = Field(None, alias="mostValuableAnimal")

    model_config = ConfigDict(populate_by_name=True)


class OverallGameStats(BaseModel):
    """Whole-game totals"""
    final_score: int = Field(0, alias="finalScore")
    environment_points: int = Field(0, alias="environmentPoints")
    animal_points: int = Field(0, alias="animalPoints")
    turns_taken: int = Field(0, alias="turnsTaken")
    total_actions: int = Field(0, alias="totalActions")
    skipped_actions: int = Field(0, alias="skippedActions")
    player_count: int = Field(0, alias="playerCount")
    average_score_per_player: float = Field(0.0, alias="averageScorePerPlayer")
    game_was_fastest_so_far: bool = Field(False, alias="gameWasFastestSoFar")

    model_config = ConfigDict(populate_by_name=True)


class PlayerGameStats(BaseModel):
    """Per-player result of a finished game"""
    player_id: str = Field(alias="playerId")
    player_name: str = Field(alias="playerName")
    final_score: int = Field(alias="finalScore")
    environment_points: int = Field(alias="environmentPoints")
    animal_points: int = Field(alias="animalPoints")
    turns_taken: int = Field(alias="turnsTaken")
    tokens_placed: int = Field(alias="tokensPlaced")
    animals_completed: int = Field(alias="animalsCompleted")
    rank: int
    is_winner: bool = Field(alias="isWinner")

    model_config = ConfigDict(populate_by_name=True)


class GameStats(BaseModel):
    """Persisted game result record"""
    id: str
    game_id: str = Field(alias="gameId")
    mode: str
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
    board: BoardStats
    animals: AnimalStats
    overall: OverallGameStats
    players: List[PlayerGameStats]

    model_config = ConfigDict(populate_by_name=True)


class PlayerHistory(BaseModel):
    """Summary of one player's saved games"""
    player_id: str = Field(alias="playerId")
    games_played: int = Field(0, alias="gamesPlayed")
    wins: int = 0
    highest_score: int = Field(0, alias="highestScore")
    total_score: int = Field(0, alias="totalScore")
    average_score: float = Field(0.0, alias="averageScore")
    average_turns: float = Field(0.0, alias="averageTurns")
    average_animals_completed: float = Field(0.0, alias="averageAnimalsCompleted")
    habitat_totals: Dict[str, int] = Field(
        default_factory=dict, alias="habitatTotals"
    )

    model_config = ConfigDict(populate_by_name=True)
