# Enable postponed annotations to avoid runtime import issues and allow future-style typing
from __future__ import annotations

from .session import Session
from .room import ROOM_CATALOG, Room, RoomSpec
from .message import AI_ASSISTANT, FileRef, Message

__all__ = [
    "Session",
    "Room",
    "RoomSpec",
    "ROOM_CATALOG",
    "Message",
    "FileRef",
    "AI_ASSISTANT",
]
