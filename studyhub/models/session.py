# Enable postponed annotations to avoid runtime import issues and allow future-style typing
from __future__ import annotations

from dataclasses import dataclass


# A session binds one live socket connection to a display name and its current room
@dataclass
class Session:
    # Socket.IO session id of the connection
    sid: str
    # Display name chosen at join; not unique across connections
    username: str
    # Catalog id of the room the connection is currently in
    room_id: str
    # Derived once from the admin allow-list when the session is created
    is_admin: bool = False
