from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

from wumpus_api.engine.base import GameEngine
from wumpus_api.errors import NotFoundError
from wumpus_api.lock import ReadWriteLock


logger = logging.getLogger(__name__)

EngineFactory = Callable[[], GameEngine]
IdSource = Callable[[], str]


def new_id() -> str:
    return str(uuid4())


def _now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(slots=True, eq=False)
class Session:
    """One match: its engine, its roster in join order, and whose turn it is.

    `player_order` is append-only and `turn_index` always indexes into it.
    """

    id: str
    engine: GameEngine
    player_order: list[str] = field(default_factory=list)
    turn_index: int = 0
    created_at: datetime = field(default_factory=_now)
    lock: ReadWriteLock = field(default_factory=ReadWriteLock, repr=False)


@dataclass(frozen=True, slots=True)
class Enrollment:
    """A player's entry into a session, as returned by create/join."""

    session_id: str
    player_id: str
    start_location: int
    num_players: int
    num_caves: int


class SessionRegistry:
    """Owns every live session and the player -> session mapping.

    The two mappings are guarded by one registry lock held only for dict
    access. Anything that touches a session's roster or engine also holds
    that session's write lock, always taken before the registry lock.
    """

    def __init__(self, *, engine_factory: EngineFactory, id_source: IdSource = new_id) -> None:
        self._engine_factory = engine_factory
        self._new_id = id_source
        self._lock = threading.Lock()
        self._sessions: dict[str, Session] = {}
        self._player_sessions: dict[str, str] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def create_session(self) -> Enrollment:
        engine = self._engine_factory()
        session = Session(id=self._new_id(), engine=engine)
        player_id = self._new_id()
        start_location = engine.initialize_player(player_id)
        session.player_order.append(player_id)

        # Nobody can reach the session before it is registered.
        with self._lock:
            self._sessions[session.id] = session
            self._player_sessions[player_id] = session.id

        logger.info("Created game %s with player %s", session.id, player_id)
        return Enrollment(
            session_id=session.id,
            player_id=player_id,
            start_location=start_location,
            num_players=1,
            num_caves=engine.num_caves,
        )

    def join_session(self, session_id: str) -> Enrollment:
        session = self.get_session(session_id)
        if session is None:
            raise NotFoundError("Game not found.")

        with session.lock.write():
            if not self._is_registered(session):
                raise NotFoundError("Game not found.")

            player_id = self._new_id()
            start_location = session.engine.initialize_player(player_id)
            session.player_order.append(player_id)
            num_players = len(session.player_order)

            with self._lock:
                self._player_sessions[player_id] = session.id

        logger.info("Player %s joined game %s (%d players)", player_id, session_id, num_players)
        return Enrollment(
            session_id=session_id,
            player_id=player_id,
            start_location=start_location,
            num_players=num_players,
            num_caves=session.engine.num_caves,
        )

    def get_session(self, session_id: str) -> Session | None:
        with self._lock:
            return self._sessions.get(session_id)

    def lookup(self, player_id: str) -> Session | None:
        with self._lock:
            session_id = self._player_sessions.get(player_id)
            if session_id is None:
                return None
            return self._sessions.get(session_id)

    def resolve(self, player_id: str) -> Session:
        session = self.lookup(player_id)
        if session is None:
            raise NotFoundError("Player or game not found.")
        return session

    def discard_session(self, session_id: str) -> bool:
        """Forget a session and all of its players.

        Nothing calls this on a schedule; it is the hook an expiry policy plugs into.
        """

        session = self.get_session(session_id)
        if session is None:
            return False

        with session.lock.write():
            with self._lock:
                if self._sessions.get(session_id) is not session:
                    return False
                del self._sessions[session_id]
                for player_id in session.player_order:
                    self._player_sessions.pop(player_id, None)

        logger.info("Discarded game %s", session_id)
        return True

    def _is_registered(self, session: Session) -> bool:
        with self._lock:
            return self._sessions.get(session.id) is session
