"""Token bag, central supply slots and the animal card deck.

All helpers are pure: they take tuples and return new tuples. Randomness
comes only from the ``random.Random`` passed in, so a seeded generator
reproduces the same game.
"""

from __future__ import annotations

import random
from typing import Sequence, Tuple

from ..models import AnimalCard, TerrainToken, TokenSlot
from .core import TOKEN_COUNTS, TOKENS_PER_SLOT


def generate_bag(rng: random.Random) -> Tuple[TerrainToken, ...]:
    """Build the full token pool and shuffle it.

    ``random.Random.shuffle`` is a Fisher-Yates shuffle, so every
    permutation is equally likely.
    """
    tokens = []
    token_id = 0
    for terrain, count in TOKEN_COUNTS.items():
        for _ in range(count):
            tokens.append(TerrainToken(id=f"token-{token_id}", type=terrain))
            token_id += 1
    rng.shuffle(tokens)
    return tuple(tokens)


def draw(
    bag: Sequence[TerrainToken], count: int
) -> Tuple[Tuple[TerrainToken, ...], Tuple[TerrainToken, ...]]:
    """Take the first ``count`` tokens; returns ``(drawn, remaining)``.

    A short bag yields a short draw.
    """
    return tuple(bag[:count]), tuple(bag[count:])


def deal_initial_slots(
    bag: Sequence[TerrainToken], slot_count: int
) -> Tuple[Tuple[TokenSlot, ...], Tuple[TerrainToken, ...]]:
    slots = []
    remaining = tuple(bag)
    for slot_id in range(slot_count):
        drawn, remaining = draw(remaining, TOKENS_PER_SLOT)
        slots.append(TokenSlot(id=slot_id, tokens=drawn))
    return tuple(slots), remaining


def refill_slot(
    slots: Sequence[TokenSlot], bag: Sequence[TerrainToken], slot_id: int
) -> Tuple[Tuple[TokenSlot, ...], Tuple[TerrainToken, ...]]:
    """Replace the contents of ``slot_id`` with a fresh draw from ``bag``."""
    new_slots = []
    remaining = tuple(bag)
    for slot in slots:
        if slot.id == slot_id:
            drawn, remaining = draw(remaining, TOKENS_PER_SLOT)
            slot = slot.model_copy(update={"tokens": drawn})
        new_slots.append(slot)
    return tuple(new_slots), remaining


def drain_slot(slots: Sequence[TokenSlot], slot_id: int) -> Tuple[TokenSlot, ...]:
    return tuple(
        slot.model_copy(update={"tokens": ()}) if slot.id == slot_id else slot
        for slot in slots
    )


def deal_animals(
    catalog: Sequence[AnimalCard], rng: random.Random, face_up_count: int
) -> Tuple[Tuple[AnimalCard, ...], Tuple[AnimalCard, ...]]:
    """Shuffle the catalog; returns ``(face_up, deck)``."""
    cards = list(catalog)
    rng.shuffle(cards)
    return tuple(cards[:face_up_count]), tuple(cards[face_up_count:])


def top_up_face_up(
    face_up: Sequence[AnimalCard], deck: Sequence[AnimalCard], target: int
) -> Tuple[Tuple[AnimalCard, ...], Tuple[AnimalCard, ...]]:
    """Draw from ``deck`` until ``target`` cards are face-up or the deck is empty."""
    needed = max(target - len(face_up), 0)
    return tuple(face_up) + tuple(deck[:needed]), tuple(deck[needed:])


__all__ = [
    "deal_animals",
    "deal_initial_slots",
    "draw",
    "drain_slot",
    "generate_bag",
    "refill_slot",
    "top_up_face_up",
]
