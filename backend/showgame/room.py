import random
import threading
from typing import Any, Dict, List, Optional, Tuple

from showgame.models import Card, PlayerSlot
from showgame.services.game import COPIES_PER_FRUIT, SHOW_SCORES, build_deck, score_reveal_order


MAX_PLAYERS = 4


class Room:
    """One game's full state: seats, the dealt deck, turn and reveal order.

    Mutators only change state and report whether anything changed; they
    never notify connections. Callers hold `lock` around every mutation
    and push snapshots afterwards.
    """

    def __init__(self, room_id: str, rng: Optional[random.Random] = None):
        self.room_id = room_id
        self.rng = rng or random.Random()
        self.lock = threading.RLock()
        self.players: Dict[str, PlayerSlot] = {}  # player_id -> slot, seat order
        self.cards: List[Card] = []  # the whole deal, shuffle order
        self.started = False
        self.current_player: Optional[str] = None
        self.reveal_order: List[str] = []

    @property
    def phase(self) -> str:
        if not self.players:
            return 'empty'
        if self.started:
            return 'in_progress'
        if len(self.players) < MAX_PLAYERS:
            return 'forming'
        return 'ready'

    @property
    def is_full(self) -> bool:
        return len(self.players) >= MAX_PLAYERS

    @property
    def is_empty(self) -> bool:
        return not self.players

    @property
    def shared_deck(self) -> List[Card]:
        return [c for c in self.cards if not c.is_selected]

    def add_player(self, player_id: str, channel: Optional[str]) -> bool:
        if self.is_full or player_id in self.players:
            return False
        self.players[player_id] = PlayerSlot(player_id=player_id, channel=channel)
        return True

    def remove_player(self, player_id: str) -> bool:
        if self.players.pop(player_id, None) is None:
            return False
        if self.started:
            # A deal needs all four seats; halt it until someone re-deals
            self._end_deal()
        return True

    def start_game(self) -> bool:
        if len(self.players) != MAX_PLAYERS:
            return False
        if self.started and self.shared_deck:
            return False
        self.cards = build_deck(self.rng)
        for slot in self.players.values():
            slot.cards = []
        self.reveal_order = []
        self.started = True
        self.current_player = self.rng.choice(list(self.players))
        return True

    def select_card(self, player_id: str, card_id: str) -> bool:
        if not self.started or player_id != self.current_player:
            return False
        card = next((c for c in self.cards if c.id == card_id), None)
        if card is None or card.is_selected:
            return False
        card.reveal()
        self.players[player_id].cards.append(card)
        self._advance_turn()
        return True

    def has_set(self, player_id: str) -> bool:
        slot = self.players.get(player_id)
        if slot is None:
            return False
        return any(n >= COPIES_PER_FRUIT for n in slot.fruit_counts().values())

    def check_win_condition(self) -> Tuple[List[str], Dict[str, int]]:
        """Record every seated player showing a 4-of-a-kind.

        Returns the ids newly added to the reveal order, and the points
        awarded if the order filled up and scoring ran.
        """
        revealed: List[str] = []
        awarded: Dict[str, int] = {}
        if not self.started:
            return revealed, awarded
        for player_id in self.players:
            if player_id in self.reveal_order or not self.has_set(player_id):
                continue
            self.reveal_order.append(player_id)
            revealed.append(player_id)
            if len(self.reveal_order) == len(SHOW_SCORES):
                awarded = self._calculate_scores()
                break
        return revealed, awarded

    def _calculate_scores(self) -> Dict[str, int]:
        awarded = score_reveal_order(self.players, self.reveal_order)
        self._end_deal()
        return awarded

    def _advance_turn(self) -> None:
        seats = list(self.players)
        idx = seats.index(self.current_player)
        self.current_player = seats[(idx + 1) % len(seats)]

    def _end_deal(self) -> None:
        self.started = False
        self.current_player = None
        self.reveal_order = []

    def snapshot_for(self, player_id: str) -> Dict[str, Any]:
        """Build the state one player is allowed to see.

        Fruit is only ever shown for cards the recipient holds.
        """
        slot = self.players.get(player_id)
        own = slot.cards if slot else []
        own_ids = {c.id for c in own}
        return {
            'cards': [c.to_dict(show_fruit=c.id in own_ids) for c in self.cards],
            'currentPlayer': self.current_player,
            'started': self.started,
            'playerCards': [c.to_dict() for c in own],
            'playerId': player_id,
            'scores': {pid: s.score for pid, s in self.players.items()},
            'revealOrder': list(self.reveal_order),
        }
