# Enable postponed annotations to avoid runtime import issues and allow future-style typing
from __future__ import annotations

from dataclasses import dataclass, field


# Static description of a study room as it appears in the catalog
@dataclass(frozen=True)
class RoomSpec:
    id: str
    name: str
    description: str


# Rooms available to every client; fixed for the lifetime of the process
ROOM_CATALOG: tuple[RoomSpec, ...] = (
    RoomSpec("Math", "📐 Math", "Mathematics and problem solving"),
    RoomSpec("Science", "🔬 Science", "Physics, Chemistry, Biology"),
    RoomSpec("English", "📚 English", "Literature and language"),
    RoomSpec("History", "🏛️ History", "World history and events"),
    RoomSpec("Programming", "💻 Programming", "Coding and software development"),
)


# Live state of a catalog room
@dataclass
class Room:
    # Catalog entry this room was created from
    spec: RoomSpec
    # Member connection ids; a dict keeps insertion order so member lists are stable
    members: dict[str, None] = field(default_factory=dict)
    # Cumulative number of messages posted, AI messages included; never decremented
    message_count: int = 0

    @property
    def id(self) -> str:
        return self.spec.id

    @property
    def name(self) -> str:
        return self.spec.name

    def to_dict(self) -> dict:
        return {
            "id": self.spec.id,
            "name": self.spec.name,
            "description": self.spec.description,
            "activeUsers": len(self.members),
            "messageCount": self.message_count,
        }
