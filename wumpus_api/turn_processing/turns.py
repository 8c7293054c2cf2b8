from __future__ import annotations

import logging

from wumpus_api.session_registry import Session


logger = logging.getLogger(__name__)


def current_player_id(session: Session) -> str:
    return session.player_order[session.turn_index]


def is_player_alive(session: Session, player_id: str) -> bool:
    # A player the engine does not know counts as eliminated.
    state = session.engine.player_state(player_id)
    return state is not None and state.is_alive


def advance_turn(session: Session) -> str:
    """Pass the turn to the next living player in join order.

    Steps once, then skips eliminated players, giving up after one full
    rotation. When everyone is dead the pointer is left wherever the rotation
    stopped; ending the match is the engine's business, not ours.

    Caller must hold the session's write lock. Returns the new current player id.
    """

    n = len(session.player_order)
    session.turn_index = (session.turn_index + 1) % n

    attempts = 0
    while not is_player_alive(session, session.player_order[session.turn_index]) and attempts < n:
        session.turn_index = (session.turn_index + 1) % n
        attempts += 1

    current = current_player_id(session)
    if not is_player_alive(session, current):
        logger.warning("Game %s: no living players left in rotation", session.id)
    else:
        logger.debug("Game %s: turn passes to %s (skipped %d)", session.id, current, attempts)
    return current
