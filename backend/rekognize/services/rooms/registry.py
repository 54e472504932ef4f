import logging
import threading
from contextlib import contextmanager
from typing import Dict, Optional

from rekognize.models import Room
from .errors import AlreadySeated

logger = logging.getLogger(__name__)


class RoomRegistry:
    """Process-wide map of room code -> Room, plus identity -> room code bindings.

    Construct one per app and hand it to the socket handlers. Every operation
    on a single room must run inside ``locked(code)``; different codes never
    block each other.
    """

    def __init__(self, total_rounds: int = 10, storage: Optional[Dict[str, Room]] = None):
        self.total_rounds = total_rounds
        self._rooms: Dict[str, Room] = storage if storage is not None else {}
        self._bindings: Dict[str, str] = {}
        self._guard = threading.Lock()
        self._code_locks: Dict[str, threading.Lock] = {}
        self._code_waiters: Dict[str, int] = {}

    @staticmethod
    def normalize(code: str) -> str:
        return code.strip().upper()

    @contextmanager
    def locked(self, code: str):
        code = self.normalize(code)
        with self._guard:
            lock = self._code_locks.setdefault(code, threading.Lock())
            self._code_waiters[code] = self._code_waiters.get(code, 0) + 1
        lock.acquire()
        try:
            yield code
        finally:
            lock.release()
            with self._guard:
                self._code_waiters[code] -= 1
                if self._code_waiters[code] == 0:
                    del self._code_waiters[code]
                    del self._code_locks[code]

    def create_or_get(self, code: str) -> Room:
        code = self.normalize(code)
        with self._guard:
            room = self._rooms.get(code)
            if room is None:
                room = Room(code=code, total_rounds=self.total_rounds)
                self._rooms[code] = room
                logger.debug("created room %s", code)
            return room

    def get(self, code: str) -> Optional[Room]:
        with self._guard:
            return self._rooms.get(self.normalize(code))

    def bind(self, identity: str, code: str) -> None:
        with self._guard:
            if identity in self._bindings:
                raise AlreadySeated()
            self._bindings[identity] = self.normalize(code)

    def unbind(self, identity: str) -> None:
        with self._guard:
            self._bindings.pop(identity, None)

    def code_for(self, identity: str) -> Optional[str]:
        with self._guard:
            return self._bindings.get(identity)

    def destroy_if_empty(self, code: str) -> bool:
        code = self.normalize(code)
        with self._guard:
            room = self._rooms.get(code)
            if room is not None and room.is_empty:
                del self._rooms[code]
                logger.debug("destroyed room %s", code)
                return True
            return False

    def __len__(self):
        with self._guard:
            return len(self._rooms)

    def __contains__(self, code):
        return self.get(code) is not None
