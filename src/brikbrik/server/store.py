from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import Iterator, List, Optional

from ..errors import SessionNotFoundError
from ..game.core import GameSession


logger = logging.getLogger(__name__)


class SessionStore:
    """Volatile keyed collection of game sessions.

    With ``max_sessions`` set, adding a session past the cap evicts the least
    recently used one. Lookups of evicted or unknown ids raise
    ``SessionNotFoundError``.
    """

    def __init__(self, max_sessions: Optional[int] = None) -> None:
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, GameSession]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._sessions

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            return iter(list(self._sessions))

    def add(self, session: GameSession) -> None:
        evicted: List[str] = []
        with self._lock:
            self._sessions[session.session_id] = session
            self._sessions.move_to_end(session.session_id)
            if self.max_sessions is not None:
                while len(self._sessions) > self.max_sessions:
                    old_id, _ = self._sessions.popitem(last=False)
                    evicted.append(old_id)
        for old_id in evicted:
            logger.info("Evicted session %s", old_id)

    def get(self, session_id: str) -> GameSession:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                raise SessionNotFoundError(session_id)
            self._sessions.move_to_end(session_id)
            return session

    def contains(self, session: GameSession) -> bool:
        """True while this exact record is still the one stored under its id."""
        with self._lock:
            return self._sessions.get(session.session_id) is session

    def remove(self, session_id: str) -> None:
        with self._lock:
            if self._sessions.pop(session_id, None) is None:
                raise SessionNotFoundError(session_id)
