"""In-memory registry of live browser sessions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..browser.base import BrowserConnection


@dataclass
class Session:
    """A provisioned browser connection bound to a single page."""

    id: str
    connection: BrowserConnection
    created_at: float

    @property
    def page(self) -> Any:
        return self.connection.page

    def age(self, now: float) -> float:
        return now - self.created_at


class SessionStore:
    """Mapping from session identifiers to session records."""

    def __init__(self) -> None:
        self._sessions: Dict[str, Session] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def add(self, session: Session) -> None:
        if session.id in self._sessions:
            raise KeyError(f"Session {session.id} already registered")
        self._sessions[session.id] = session

    def get(self, session_id: str) -> Optional[Session]:
        return self._sessions.get(session_id)

    def remove(self, session_id: str) -> Optional[Session]:
        return self._sessions.pop(session_id, None)

    def snapshot(self) -> List[Session]:
        return list(self._sessions.values())

    def older_than(self, max_age: float, now: float) -> List[Session]:
        return [session for session in self.snapshot() if session.age(now) > max_age]
