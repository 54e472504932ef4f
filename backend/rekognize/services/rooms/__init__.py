"""Room domain services: registry, seat lifecycle and per-player rounds.

This package holds the coordinator logic used by the socket handlers,
keeping transport concerns separated from the room state machine.
"""

from .errors import (
    AlreadySeated,
    DuplicateSeat,
    GameInProgress,
    InvalidJoin,
    RoomError,
    RoomFull,
)
from .registry import RoomRegistry

__all__ = [
    'AlreadySeated',
    'DuplicateSeat',
    'GameInProgress',
    'InvalidJoin',
    'RoomError',
    'RoomFull',
    'RoomRegistry',
]
