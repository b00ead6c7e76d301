"""In-memory session store shared by every connection worker."""

import threading
import time
import uuid
from types import MappingProxyType
from typing import Any, Mapping, Optional

from session_server.domain.correlation_id import get_logger

SESSION_LOGGER = get_logger("domain.sessions")


class Session:
    """Server-side record for one client, keyed by an opaque identifier.

    Attribute access goes through the owning ``SessionStore`` so every read
    and write happens under the store lock.
    """

    __slots__ = ("_id", "_attributes", "_created_at")

    def __init__(self, session_id: str) -> None:
        self._id = session_id
        self._attributes: dict[str, Any] = {}
        self._created_at = time.time()

    @property
    def id(self) -> str:
        return self._id

    @property
    def created_at(self) -> float:
        return self._created_at

    def __repr__(self) -> str:
        return f"Session(id={self._id!r}, attributes={sorted(self._attributes)!r})"


class SessionStore:
    """Thread-safe mapping from session identifier to ``Session``.

    At most one session exists per identifier and an identifier is never
    handed out twice, even after the session has been removed. Sessions are
    not expired; they live until removed or until the process exits.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._sessions: dict[str, Session] = {}
        self._issued: set[str] = set()

    def _new_identifier(self) -> str:
        while True:
            candidate = str(uuid.uuid4())
            if candidate not in self._issued:
                return candidate

    def create(self) -> Session:
        """Insert and return a new session with no attributes."""
        with self._lock:
            session = Session(self._new_identifier())
            self._issued.add(session.id)
            self._sessions[session.id] = session
            count = len(self._sessions)
        SESSION_LOGGER.info(
            "Session created",
            extra={"event": "session_created", "active_sessions": count},
        )
        return session

    def find(self, session_id: Optional[str]) -> Optional[Session]:
        """Return the live session for ``session_id`` or None."""
        if not session_id:
            return None
        with self._lock:
            return self._sessions.get(session_id)

    def remove(self, session_id: str) -> bool:
        """Invalidate a session; return True when one was removed."""
        with self._lock:
            removed = self._sessions.pop(session_id, None) is not None
        if removed:
            SESSION_LOGGER.info("Session removed", extra={"event": "session_removed"})
        return removed

    def set_attribute(self, session: Session, key: str, value: Any) -> None:
        with self._lock:
            # pylint: disable=protected-access
            session._attributes[key] = value

    def get_attribute(self, session: Session, key: str, default: Any = None) -> Any:
        with self._lock:
            # pylint: disable=protected-access
            return session._attributes.get(key, default)

    def remove_attribute(self, session: Session, key: str) -> None:
        with self._lock:
            # pylint: disable=protected-access
            session._attributes.pop(key, None)

    def attributes(self, session: Session) -> Mapping[str, Any]:
        """Return a read-only snapshot of a session's attributes."""
        with self._lock:
            # pylint: disable=protected-access
            return MappingProxyType(dict(session._attributes))

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions
