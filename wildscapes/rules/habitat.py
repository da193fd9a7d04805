"""Habitat matching and animal card completion."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from ..models import (
    AnimalCard,
    HabitatCell,
    HexPosition,
    PlacedAnimalEmoji,
    PlacedToken,
)


def habitat_cell_satisfied(stack: Sequence[PlacedToken], cell: HabitatCell) -> bool:
    """Return True if a board stack meets a habitat cell requirement.

    The top token must have the required terrain. A ``stack_level`` of 0
    means ground floor only (height exactly 1); a higher level means at
    least that many tokens beneath the top one.
    """
    if not stack:
        return False
    top = max(stack, key=lambda placed: placed.stack_level)
    if top.token.type != cell.terrain:
        return False
    height = len(stack)
    if cell.stack_level == 0:
        return height == 1
    return height >= cell.stack_level + 1


def emoji_at(
    emojis: Iterable[PlacedAnimalEmoji], position: HexPosition
) -> Optional[PlacedAnimalEmoji]:
    """Return the animal marker on ``position``, if any."""
    for emoji in emojis:
        if emoji.position == position:
            return emoji
    return None


def is_habitat_cell_filled(
    emojis: Iterable[PlacedAnimalEmoji], card_id: str, habitat_index: int
) -> bool:
    return any(
        emoji.card_id == card_id and emoji.habitat_index == habitat_index
        for emoji in emojis
    )


def emojis_for_card(
    emojis: Iterable[PlacedAnimalEmoji], card_id: str
) -> List[PlacedAnimalEmoji]:
    return [emoji for emoji in emojis if emoji.card_id == card_id]


def is_card_complete(card: AnimalCard, emojis: Iterable[PlacedAnimalEmoji]) -> bool:
    """A card is complete once every habitat cell carries a marker."""
    return len(emojis_for_card(emojis, card.id)) == len(card.habitat)


def matching_positions(
    board: Sequence[PlacedToken],
    emojis: Sequence[PlacedAnimalEmoji],
    cell: HabitatCell,
) -> List[HexPosition]:
    """Board positions where a marker for ``cell`` could be placed now.

    Used to highlight targets before the player commits to a placement.
    """
    stacks: dict[HexPosition, List[PlacedToken]] = {}
    for placed in board:
        stacks.setdefault(placed.position, []).append(placed)

    locked = {emoji.position for emoji in emojis}
    return [
        position
        for position, stack in stacks.items()
        if position not in locked and habitat_cell_satisfied(stack, cell)
    ]


__all__ = [
    "emoji_at",
    "emojis_for_card",
    "habitat_cell_satisfied",
    "is_card_complete",
    "is_habitat_cell_filled",
    "matching_positions",
]
