from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set


class RoomPhase:
    LOBBY = 'lobby'
    READY = 'ready'
    IN_PROGRESS = 'in_progress'
    AWAITING_FINISH = 'awaiting_finish'
    OVER = 'over'


MAX_SEATS = 2


@dataclass
class Seat:
    identity: str
    name: str
    is_host: bool = False

    def to_dict(self):
        return {
            'id': self.identity,
            'name': self.name,
        }


@dataclass
class Outbound:
    """A single message for the transport.

    ``to`` is either a seat identity (unicast) or ``None`` for a broadcast
    to the whole room.
    """
    event: str
    payload: Any = None
    to: Optional[str] = None

    @property
    def is_broadcast(self) -> bool:
        return self.to is None


@dataclass
class Room:
    code: str
    total_rounds: int = 10
    seats: List[Seat] = field(default_factory=list)
    scores: Dict[str, int] = field(default_factory=dict)
    round_of: Dict[str, int] = field(default_factory=dict)
    started: bool = False
    first_to_finish: Optional[str] = None
    rematch_votes: Set[str] = field(default_factory=set)
    games_played: int = 0

    @property
    def identities(self) -> List[str]:
        return [s.identity for s in self.seats]

    @property
    def is_full(self) -> bool:
        return len(self.seats) >= MAX_SEATS

    @property
    def is_empty(self) -> bool:
        return not self.seats

    @property
    def host(self) -> Optional[Seat]:
        for seat in self.seats:
            if seat.is_host:
                return seat
        return None

    def seat_of(self, identity: str) -> Optional[Seat]:
        for seat in self.seats:
            if seat.identity == identity:
                return seat
        return None

    def opponent_of(self, identity: str) -> Optional[Seat]:
        for seat in self.seats:
            if seat.identity != identity:
                return seat
        return None

    def is_finished(self, identity: str) -> bool:
        return self.round_of.get(identity, 0) > self.total_rounds

    def all_finished(self) -> bool:
        return bool(self.seats) and all(self.is_finished(i) for i in self.identities)

    @property
    def phase(self) -> str:
        if self.started:
            if any(self.is_finished(i) for i in self.identities):
                return RoomPhase.AWAITING_FINISH
            return RoomPhase.IN_PROGRESS
        if self.games_played:
            return RoomPhase.OVER
        return RoomPhase.READY if self.is_full else RoomPhase.LOBBY

    def players_payload(self) -> List[Dict[str, Any]]:
        return [s.to_dict() for s in self.seats]

    def scores_payload(self) -> Dict[str, int]:
        return dict(self.scores)

    def to_dict(self):
        players = []
        for s in self.seats:
            pd = s.to_dict()
            pd['isHost'] = s.is_host
            pd['round'] = self.round_of.get(s.identity, 0)
            pd['finished'] = self.is_finished(s.identity)
            players.append(pd)
        return {
            'code': self.code,
            'phase': self.phase,
            'started': self.started,
            'players': players,
            'scores': self.scores_payload(),
            'firstToFinish': self.first_to_finish,
            'rematchVotes': sorted(self.rematch_votes),
            'gamesPlayed': self.games_played,
            'totalRounds': self.total_rounds,
        }
