"""Game domain services: dealing and scoring.

This package contains pure domain logic used by the Room, keeping
transport concerns separated from core game mechanics.
"""

from .deck import FRUITS, COPIES_PER_FRUIT, DECK_SIZE, build_deck
from .scoring import SHOW_SCORES, score_reveal_order

__all__ = [
    'FRUITS',
    'COPIES_PER_FRUIT',
    'DECK_SIZE',
    'build_deck',
    'SHOW_SCORES',
    'score_reveal_order',
]
