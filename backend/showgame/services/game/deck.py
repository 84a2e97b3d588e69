import random
import uuid
from typing import List, Optional

from showgame.models import Card


FRUITS = ('apple', 'banana', 'grapes', 'watermelon')
COPIES_PER_FRUIT = 4
DECK_SIZE = len(FRUITS) * COPIES_PER_FRUIT


def build_deck(rng: Optional[random.Random] = None) -> List[Card]:
    """Mint a fresh 16-card deck in uniformly shuffled order.

    Every call creates new card ids. Pass a seeded `random.Random` as
    `rng` for repeatable deals.
    """
    rng = rng or random.Random()
    cards = [
        Card(id=str(uuid.uuid4()), fruit=fruit)
        for fruit in FRUITS
        for _ in range(COPIES_PER_FRUIT)
    ]
    rng.shuffle(cards)
    return cards
