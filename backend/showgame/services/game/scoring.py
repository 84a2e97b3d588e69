from typing import Dict, List

from showgame.models import PlayerSlot


# Points for the 1st, 2nd, 3rd and 4th player to show a set
SHOW_SCORES = (400, 300, 200, 100)


def score_reveal_order(players: Dict[str, PlayerSlot], reveal_order: List[str]) -> Dict[str, int]:
    """Apply scoring for a completed reveal order.

    Each entrant gets the points for their position added to their
    cumulative score. Returns the points awarded per player id.
    """
    awarded: Dict[str, int] = {}
    for position, player_id in enumerate(reveal_order[:len(SHOW_SCORES)]):
        players[player_id].score += SHOW_SCORES[position]
        awarded[player_id] = SHOW_SCORES[position]
    return awarded
