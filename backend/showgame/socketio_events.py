import logging
import uuid
from typing import Any, Callable, Dict, Optional

from flask import current_app, request
from flask_socketio import join_room

from showgame import socketio
from showgame.registry import RoomRegistry
from showgame.room import Room

# Outbound events
ROOM_CREATED = 'roomCreated'
JOINED_ROOM = 'joinedRoom'
JOIN_ERROR = 'joinError'
GAME_STATE = 'gameState'
GAME_STARTED = 'gameStarted'
SHOW_BUTTON = 'showButton'
ERROR = 'error'

ROOM_UNAVAILABLE = 'Room is full or does not exist'
NO_OPEN_ROOMS = 'No available rooms'
ALREADY_SEATED = 'Already in a room'

Emitter = Callable[[str, Any, str], None]
RoomJoiner = Callable[[str, str], None]


class SessionRouter:
    """Maps inbound connection events onto the registry and its rooms.

    Every connection gets one opaque player id for its lifetime and sits in
    at most one room. All room mutations happen under the room's lock, and
    each successful mutation is followed by a per-player snapshot push.
    """

    def __init__(self, registry: RoomRegistry, emitter: Optional[Emitter] = None,
                 namespace: str = '/', logger: Optional[logging.Logger] = None,
                 room_joiner: Optional[RoomJoiner] = None):
        self.registry = registry
        self.namespace = namespace
        self.logger = logger or logging.getLogger(__name__)
        self._emit = emitter or self._socketio_emit
        self._enter_room = room_joiner or self._socketio_join
        self._sid_to_ctx: Dict[str, Dict[str, Any]] = {}

    def _socketio_emit(self, event: str, payload: Any, to: str) -> None:
        socketio.emit(event, payload, to=to, namespace=self.namespace)

    def _socketio_join(self, sid: str, room_id: str) -> None:
        join_room(room_id, sid=sid, namespace=self.namespace)

    def _send(self, event: str, payload: Any, to: Optional[str]) -> None:
        # One bad recipient must not stop delivery to the rest
        if to is None:
            return
        try:
            self._emit(event, payload, to)
        except Exception as exc:
            self.logger.warning(f"[emit-failed] event={event} to={to}: {exc}")

    def _ctx(self, sid: str) -> Dict[str, Any]:
        ctx = self._sid_to_ctx.get(sid)
        if ctx is None:
            ctx = {'player_id': str(uuid.uuid4()), 'room_id': None}
            self._sid_to_ctx[sid] = ctx
        return ctx

    def _current_room(self, ctx: Dict[str, Any]) -> Optional[Room]:
        if not ctx['room_id']:
            return None
        return self.registry.get(ctx['room_id'])

    def player_id(self, sid: str) -> Optional[str]:
        ctx = self._sid_to_ctx.get(sid)
        return ctx['player_id'] if ctx else None

    def broadcast(self, room: Room) -> None:
        for player_id, slot in list(room.players.items()):
            self._send(GAME_STATE, room.snapshot_for(player_id), slot.channel)

    def _seat(self, sid: str, ctx: Dict[str, Any], room: Room) -> bool:
        with room.lock:
            # A room deleted while we waited for its lock is gone for good
            if room.room_id not in self.registry:
                return False
            if not room.add_player(ctx['player_id'], sid):
                return False
            self._enter_room(sid, room.room_id)
            ctx['room_id'] = room.room_id
            self.logger.info(f"[join] room={room.room_id} player={ctx['player_id']} seated={len(room.players)}")
            self._send(JOINED_ROOM, room.room_id, sid)
            self.broadcast(room)
        return True

    def connect(self, sid: str) -> None:
        ctx = self._ctx(sid)
        self.logger.info(f"[connect] sid={sid} player={ctx['player_id']}")

    def create_room(self, sid: str) -> None:
        ctx = self._ctx(sid)
        if ctx['room_id']:
            self._send(JOIN_ERROR, ALREADY_SEATED, sid)
            return
        room = None
        try:
            room = self.registry.create()
            with room.lock:
                room.add_player(ctx['player_id'], sid)
                self._enter_room(sid, room.room_id)
                ctx['room_id'] = room.room_id
                self._send(ROOM_CREATED, room.room_id, sid)
                self.broadcast(room)
            self.logger.info(f"[room-created] room={room.room_id} player={ctx['player_id']}")
        except Exception as exc:
            self.logger.error(f"[room-create-failed] player={ctx['player_id']}: {exc}")
            if room is not None:
                with room.lock:
                    room.remove_player(ctx['player_id'])
                    if room.is_empty:
                        self.registry.delete(room.room_id)
            ctx['room_id'] = None
            self._send(ERROR, 'Failed to create room', sid)

    def join_room(self, sid: str, room_id: Any) -> None:
        ctx = self._ctx(sid)
        if ctx['room_id']:
            self._send(JOIN_ERROR, ALREADY_SEATED, sid)
            return
        room = self.registry.get(room_id)
        if room is None or not self._seat(sid, ctx, room):
            self.logger.info(f"[join-refused] room={room_id} player={ctx['player_id']}")
            self._send(JOIN_ERROR, ROOM_UNAVAILABLE, sid)

    def join_random(self, sid: str) -> None:
        ctx = self._ctx(sid)
        if ctx['room_id']:
            self._send(JOIN_ERROR, ALREADY_SEATED, sid)
            return
        room = self.registry.find_open()
        if room is None or not self._seat(sid, ctx, room):
            self._send(JOIN_ERROR, NO_OPEN_ROOMS, sid)

    def start_game(self, sid: str) -> None:
        room = self._current_room(self._ctx(sid))
        if room is None:
            return
        with room.lock:
            if not room.start_game():
                self.logger.debug(f"[start-refused] room={room.room_id} phase={room.phase}")
                return
            self.logger.info(f"[start] room={room.room_id} first_turn={room.current_player}")
            self._send(GAME_STARTED, room.room_id, room.room_id)
            self.broadcast(room)

    def select_card(self, sid: str, card_id: Any) -> None:
        ctx = self._ctx(sid)
        room = self._current_room(ctx)
        if room is None or not isinstance(card_id, str):
            return
        player_id = ctx['player_id']
        with room.lock:
            if not room.select_card(player_id, card_id):
                return
            self.broadcast(room)
            if room.has_set(player_id) and player_id not in room.reveal_order:
                self._send(SHOW_BUTTON, None, sid)

    def show_cards(self, sid: str) -> None:
        room = self._current_room(self._ctx(sid))
        if room is None:
            return
        with room.lock:
            revealed, awarded = room.check_win_condition()
            if not (revealed or awarded):
                return
            if awarded:
                self.logger.info(f"[scores] room={room.room_id} awarded={awarded}")
            self.broadcast(room)

    def disconnect(self, sid: str) -> None:
        ctx = self._sid_to_ctx.pop(sid, None)
        if not ctx:
            return
        room = self._current_room(ctx)
        if room is None:
            return
        with room.lock:
            room.remove_player(ctx['player_id'])
            if room.is_empty:
                self.registry.delete(room.room_id)
                self.logger.info(f"[room-deleted] room={room.room_id}")
            else:
                self.broadcast(room)


def _router() -> SessionRouter:
    return current_app.extensions['showgame']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect(auth=None):
    _router().connect(_get_sid())


def handle_disconnect(reason=None):
    _router().disconnect(_get_sid())


def handle_create_room(*args):
    _router().create_room(_get_sid())


def handle_join_room(room_id=None):
    _router().join_room(_get_sid(), room_id)


def handle_join_random(*args):
    _router().join_random(_get_sid())


def handle_start_game(*args):
    _router().start_game(_get_sid())


def handle_select_card(card_id=None):
    _router().select_card(_get_sid(), card_id)


def handle_show_cards(*args):
    _router().show_cards(_get_sid())


def handle_error(exc):
    # Log and keep serving; one failing handler must not take the server down
    event = getattr(request, 'event', None) or {}
    current_app.logger.error(f"[handler-error] sid={_get_sid()} event={event.get('message')}: {exc}", exc_info=exc)


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register the game's Socket.IO event handlers on `namespace`."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('createRoom', handle_create_room, namespace=namespace)
    socketio.on_event('joinRoom', handle_join_room, namespace=namespace)
    socketio.on_event('joinRandom', handle_join_random, namespace=namespace)
    socketio.on_event('startGame', handle_start_game, namespace=namespace)
    socketio.on_event('selectCard', handle_select_card, namespace=namespace)
    socketio.on_event('showCards', handle_show_cards, namespace=namespace)
    socketio.on_error_default(handle_error)
