import logging
import random
import threading
import uuid
from typing import Dict, Optional

from showgame.room import Room

logger = logging.getLogger(__name__)


class RoomRegistry:
    """Table of live rooms, keyed by room id, in creation order.

    The registry never sweeps on its own: whoever empties a room must
    call `delete` for it.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rooms: Dict[str, Room] = {}
        self._lock = threading.Lock()
        self._rng = rng

    def _room_rng(self) -> random.Random:
        # Seeded registries hand each room a child generator so deals stay repeatable
        if self._rng is None:
            return random.Random()
        return random.Random(self._rng.random())

    def create(self) -> Room:
        with self._lock:
            room_id = str(uuid.uuid4())
            while room_id in self._rooms:
                room_id = str(uuid.uuid4())
            room = Room(room_id, rng=self._room_rng())
            self._rooms[room_id] = room
        logger.info(f"[registry-create] room={room_id} active={len(self._rooms)}")
        return room

    def get(self, room_id) -> Optional[Room]:
        if not isinstance(room_id, str):
            return None
        return self._rooms.get(room_id)

    def find_open(self) -> Optional[Room]:
        with self._lock:
            for room in self._rooms.values():
                if not room.is_full:
                    return room
        return None

    def delete(self, room_id: str) -> bool:
        with self._lock:
            removed = self._rooms.pop(room_id, None)
        if removed is not None:
            logger.info(f"[registry-delete] room={room_id} active={len(self._rooms)}")
        return removed is not None

    def __contains__(self, room_id) -> bool:
        return isinstance(room_id, str) and room_id in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)
