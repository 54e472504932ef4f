class RoomError(Exception):
    """Base for player-facing room errors. ``str(exc)`` is shown to the player."""
    message = 'Unable to join room'

    def __init__(self, message=None):
        super().__init__(message or self.message)


class InvalidJoin(RoomError):
    message = 'Room code and player name are required'


class RoomFull(RoomError):
    message = 'Room is full'


class DuplicateSeat(RoomError):
    message = 'You are already seated in this room'


class AlreadySeated(RoomError):
    message = 'You are already in a room'


class GameInProgress(RoomError):
    message = 'Game already in progress'
