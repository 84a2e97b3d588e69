from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(eq=False)
class Card:
    id: str
    fruit: str
    is_selected: bool = False

    def reveal(self) -> None:
        if self.is_selected:
            raise ValueError(f'card {self.id} already revealed')
        self.is_selected = True

    def to_dict(self, show_fruit: bool = True) -> Dict[str, Any]:
        return {
            'id': self.id,
            'fruit': self.fruit if show_fruit else None,
            'isSelected': self.is_selected,
        }


@dataclass(eq=False)
class PlayerSlot:
    """A seated player. `channel` is the connection's Socket.IO sid."""
    player_id: str
    channel: Optional[str]
    cards: List[Card] = field(default_factory=list)
    score: int = 0

    def holds(self, card_id: str) -> bool:
        return any(c.id == card_id for c in self.cards)

    def fruit_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for card in self.cards:
            counts[card.fruit] = counts.get(card.fruit, 0) + 1
        return counts
