"""Room directory: catalog rooms, their member sets and message counters."""
from __future__ import annotations

from typing import Iterable, Iterator

from ..exceptions import UnknownRoom
from ..models import ROOM_CATALOG, Room, RoomSpec
from .registry import ConnectionRegistry


class RoomDirectory:
    def __init__(
        self,
        registry: ConnectionRegistry,
        catalog: Iterable[RoomSpec] = ROOM_CATALOG,
    ) -> None:
        self._registry = registry
        self._rooms: dict[str, Room] = {spec.id: Room(spec=spec) for spec in catalog}

    def __contains__(self, room_id: object) -> bool:
        return room_id in self._rooms

    def __iter__(self) -> Iterator[Room]:
        return iter(self._rooms.values())

    def __len__(self) -> int:
        return len(self._rooms)

    def get(self, room_id: str) -> Room:
        room = self._rooms.get(room_id)
        if room is None:
            raise UnknownRoom(room_id)
        return room

    def join(self, room_id: str, sid: str) -> None:
        self.get(room_id).members[sid] = None

    def leave(self, room_id: str, sid: str) -> None:
        room = self._rooms.get(room_id)
        if room is not None:
            room.members.pop(sid, None)

    def members(self, room_id: str) -> list[str]:
        room = self._rooms.get(room_id)
        return list(room.members) if room is not None else []

    def member_usernames(self, room_id: str) -> list[str]:
        """Usernames of current members in join order.

        Members whose session has already been dropped are skipped.
        """
        usernames = []
        for sid in self.members(room_id):
            session = self._registry.lookup(sid)
            if session is not None:
                usernames.append(session.username)
        return usernames

    def increment_message_count(self, room_id: str, delta: int = 1) -> int:
        room = self.get(room_id)
        room.message_count += delta
        return room.message_count
