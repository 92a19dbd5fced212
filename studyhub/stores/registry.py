"""In-memory map of live socket connections to their sessions."""
from __future__ import annotations

from typing import Optional

from ..models import Session


class ConnectionRegistry:
    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}

    def register(self, sid: str, username: str, room_id: str, *, is_admin: bool = False) -> Session:
        """Create or replace the session for ``sid``."""
        session = Session(sid=sid, username=username, room_id=room_id, is_admin=is_admin)
        self._sessions[sid] = session
        return session

    def lookup(self, sid: str) -> Optional[Session]:
        return self._sessions.get(sid)

    def remove(self, sid: str) -> Optional[Session]:
        """Drop the session; the caller handles room cleanup using the returned session."""
        return self._sessions.pop(sid, None)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, sid: object) -> bool:
        return sid in self._sessions
