from flask import current_app, request
from flask_socketio import emit, join_room, leave_room
from rekognize import socketio
from rekognize.models import Outbound
from rekognize.services.rooms import InvalidJoin, RoomError, RoomRegistry
from rekognize.services.rooms import lifecycle
from typing import Any, Iterable, List, Optional, Tuple


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _channel(code: str) -> str:
    return f"room:{code}"


def _round_token(data: Any) -> Tuple[bool, Optional[int]]:
    """Return (ok, token). A missing token is fine; a malformed one is not."""
    if not isinstance(data, dict) or data.get('round') is None:
        return True, None
    token = data.get('round')
    if isinstance(token, bool) or not isinstance(token, int):
        return False, None
    return True, token


class RoomSession:
    """Translates inbound socket events into room operations.

    Holds no game state of its own; everything lives in the injected registry.
    """

    def __init__(self, registry: RoomRegistry):
        self.registry = registry

    # ---- delivery ----

    def _deliver(self, code: str, messages: Iterable[Outbound]) -> None:
        namespace = request.namespace
        for msg in messages:
            target = _channel(code) if msg.is_broadcast else msg.to
            if msg.payload is None:
                socketio.emit(msg.event, to=target, namespace=namespace)
            else:
                socketio.emit(msg.event, msg.payload, to=target, namespace=namespace)
            if msg.event == 'game_over':
                current_app.logger.info(
                    f"[game_over] room={code} first={msg.payload.get('firstToFinish')} scores={msg.payload.get('scores')}"
                )

    def _run(self, operation, *args) -> List[Outbound]:
        sid = _get_sid()
        code = self.registry.code_for(sid)
        if code is None:
            return []
        with self.registry.locked(code):
            room = self.registry.get(code)
            # binding may have moved while we waited for the lock
            if room is None or self.registry.code_for(sid) != code:
                return []
            out = operation(room, sid, *args)
            if out:
                current_app.logger.info(
                    f"[{operation.__name__}] room={code} sid={sid} events={[m.event for m in out]}"
                )
            self._deliver(code, out)
        return out

    # ---- inbound events ----

    def handle_connect(self, auth=None):
        emit('connected', {'message': 'Connected to /ws'})

    def handle_disconnect(self, reason=None):
        sid = _get_sid()
        code = self.registry.code_for(sid)
        if code is None:
            return
        with self.registry.locked(code):
            room = self.registry.get(code)
            self.registry.unbind(sid)
            if room is None:
                return
            out = lifecycle.leave(room, sid)
            destroyed = self.registry.destroy_if_empty(code)
            current_app.logger.info(
                f"[leave] room={code} sid={sid} seats={len(room.seats)} destroyed={destroyed}"
            )
            self._deliver(code, out)

    def _parse_join(self, data) -> Tuple[str, str]:
        data = data if isinstance(data, dict) else {}
        code = data.get('roomCode')
        name = data.get('playerName')
        if not isinstance(code, str) or not isinstance(name, str):
            raise InvalidJoin()
        code = self.registry.normalize(code)
        name = name.strip()
        if not code or not name:
            raise InvalidJoin()
        cfg = current_app.config
        if len(code) > int(cfg.get('MAX_ROOM_CODE_LENGTH', 12)):
            raise InvalidJoin('Room code is too long')
        return code, name[:int(cfg.get('MAX_NAME_LENGTH', 24))]

    def handle_join_room(self, data=None):
        sid = _get_sid()
        try:
            code, name = self._parse_join(data)
            with self.registry.locked(code):
                self.registry.bind(sid, code)
                room = self.registry.create_or_get(code)
                try:
                    out = lifecycle.join(room, sid, name)
                except RoomError:
                    self.registry.unbind(sid)
                    self.registry.destroy_if_empty(code)
                    raise
                join_room(_channel(code))
                current_app.logger.info(f"[join] room={code} sid={sid} name={name} seats={len(room.seats)}")
                self._deliver(code, out)
        except RoomError as exc:
            current_app.logger.info(f"[join_error] sid={sid} reason={exc}")
            emit('join_error', str(exc))

    def handle_start_game(self, data=None):
        self._run(lifecycle.start)

    def handle_round_complete(self, data=None):
        ok, token = _round_token(data)
        if ok:
            self._run(lifecycle.complete_round, token)

    def handle_score_update(self, data=None):
        if isinstance(data, bool):
            correct, token = data, None
        elif isinstance(data, dict) and isinstance(data.get('correct'), bool):
            ok, token = _round_token(data)
            if not ok:
                return
            correct = data['correct']
        else:
            return
        self._run(lifecycle.report_score, correct, token)

    def handle_request_rematch(self, data=None):
        self._run(lifecycle.request_rematch)

    def handle_leave_room(self, data=None):
        """Explicit leave; same effect as a disconnect but the socket stays open."""
        code = self.registry.code_for(_get_sid())
        if code:
            leave_room(_channel(code))
            emit('left', {'room': code})
        self.handle_disconnect()

    def handle_ping(self, data=None):
        emit('pong', data or {})


_EVENTS = (
    'connect',
    'disconnect',
    'join_room',
    'start_game',
    'round_complete',
    'score_update',
    'request_rematch',
    'leave_room',
    'ping',
)


def register_socketio_handlers(registry: RoomRegistry, testing: bool = False) -> RoomSession:
    """Register Socket.IO event handlers bound to ``registry``.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    session = RoomSession(registry)
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        for event in _EVENTS:
            socketio.on_event(event, getattr(session, f'handle_{event}'), namespace=namespace)
    return session
