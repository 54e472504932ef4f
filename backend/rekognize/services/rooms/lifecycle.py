"""Room state machine.

Every operation mutates a Room in place and returns the outbound messages
the transport should deliver, in order. Callers must hold the room's lock
(see ``RoomRegistry.locked``). Requests that are not allowed in the current
state return an empty list instead of raising.
"""

import logging
from typing import List, Optional

from rekognize.models import MAX_SEATS, Outbound, Room, Seat
from .errors import DuplicateSeat, GameInProgress, RoomFull
from .rounds import advance, finish_if_complete

logger = logging.getLogger(__name__)


def can_start(room: Room, identity: str) -> bool:
    seat = room.seat_of(identity)
    return seat is not None and seat.is_host and len(room.seats) == MAX_SEATS


def _player_list(room: Room, event: str) -> Outbound:
    return Outbound(event, {
        'players': room.players_payload(),
        'scores': room.scores_payload(),
    })


def join(room: Room, identity: str, name: str) -> List[Outbound]:
    if room.seat_of(identity) is not None:
        raise DuplicateSeat()
    if room.is_full:
        raise RoomFull()
    if room.started:
        raise GameInProgress()

    room.seats.append(Seat(identity=identity, name=name, is_host=room.host is None))
    room.scores[identity] = 0
    room.round_of[identity] = 0

    out = [_player_list(room, 'player_joined')]
    if room.is_full:
        out.append(Outbound('can_start_game', to=room.host.identity))
    return out


def _restart(room: Room) -> List[Outbound]:
    room.started = True
    room.first_to_finish = None
    room.rematch_votes.clear()
    room.games_played += 1
    for identity in room.identities:
        room.scores[identity] = 0
        room.round_of[identity] = 0

    out = [Outbound('game_started')]
    for identity in room.identities:
        out.extend(advance(room, identity))
    return out


def start(room: Room, identity: str) -> List[Outbound]:
    if room.started or not can_start(room, identity):
        return []
    return _restart(room)


def _accepts_round(room: Room, identity: str, round_token: Optional[int]) -> bool:
    """A seat may act on its round only while playing and not yet finished."""
    if not room.started or room.seat_of(identity) is None or room.is_finished(identity):
        return False
    if round_token is None:
        return True
    return room.round_of.get(identity) == round_token


def complete_round(room: Room, identity: str, round_token: Optional[int] = None) -> List[Outbound]:
    if not _accepts_round(room, identity, round_token):
        logger.debug("room=%s ignored round_complete from %s (token=%s)", room.code, identity, round_token)
        return []
    return advance(room, identity)


def report_score(room: Room, identity: str, correct: bool, round_token: Optional[int] = None) -> List[Outbound]:
    """Record a client-verified answer.

    A correct answer scores a point and advances the seat immediately. A wrong
    one leaves the seat on its round; the client retries or sends
    ``round_complete`` to skip.
    """
    if not _accepts_round(room, identity, round_token):
        return []
    if correct:
        room.scores[identity] += 1
    out = [Outbound('scores_updated', room.scores_payload())]
    if correct:
        out.extend(advance(room, identity))
    return out


def request_rematch(room: Room, identity: str) -> List[Outbound]:
    seat = room.seat_of(identity)
    if seat is None or room.started or not room.games_played:
        return []
    room.rematch_votes.add(identity)
    if room.rematch_votes == set(room.identities):
        logger.debug("room=%s rematch agreed", room.code)
        return _restart(room)
    return [Outbound('rematch_requested', {
        'playerId': identity,
        'playerName': seat.name,
        'totalRequests': len(room.rematch_votes),
        'totalPlayers': len(room.seats),
    })]


def leave(room: Room, identity: str) -> List[Outbound]:
    seat = room.seat_of(identity)
    if seat is None:
        return []
    room.seats.remove(seat)
    room.scores.pop(identity, None)
    room.round_of.pop(identity, None)
    # votes were cast for the old seat set
    room.rematch_votes.clear()

    if room.is_empty:
        room.started = False
        return []
    if seat.is_host:
        room.seats[0].is_host = True

    out = [_player_list(room, 'player_left')]
    out.extend(finish_if_complete(room))
    return out
