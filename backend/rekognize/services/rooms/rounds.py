import logging
from typing import List

from rekognize.models import Outbound, Room

logger = logging.getLogger(__name__)


def advance(room: Room, identity: str) -> List[Outbound]:
    """Move one seat to its next round.

    Each seat has its own counter. Once a seat passes ``total_rounds`` it gets
    a ``player_finished`` notice instead of a ``new_round``; when every seated
    player has passed it the room gets a single ``game_over``.
    """
    if identity not in room.round_of:
        return []
    room.round_of[identity] += 1
    current = room.round_of[identity]

    if current <= room.total_rounds:
        return [Outbound('new_round', {
            'roundNumber': current,
            'totalRounds': room.total_rounds,
        }, to=identity)]

    if room.first_to_finish is None:
        room.first_to_finish = identity
        logger.debug("room=%s first to finish=%s", room.code, identity)

    opponent = room.opponent_of(identity)
    out = [Outbound('player_finished', {
        'opponentFinished': opponent is not None and room.is_finished(opponent.identity),
        'opponentName': opponent.name if opponent else None,
        'scores': room.scores_payload(),
    }, to=identity)]
    out.extend(finish_if_complete(room))
    return out


def finish_if_complete(room: Room) -> List[Outbound]:
    """Emit ``game_over`` once every seated player is finished."""
    if not room.started or not room.all_finished():
        return []
    room.started = False
    logger.debug("room=%s game over", room.code)
    return [Outbound('game_over', {
        'scores': room.scores_payload(),
        'players': room.players_payload(),
        'firstToFinish': room.first_to_finish,
    })]
