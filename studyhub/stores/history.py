"""Append-only per-room message logs."""
from __future__ import annotations

from typing import Iterable

from ..exceptions import UnknownRoom
from ..models import Message


class HistoryStore:
    def __init__(self, room_ids: Iterable[str]) -> None:
        self._room_ids = frozenset(room_ids)
        self._logs: dict[str, list[Message]] = {}

    def append(self, room_id: str, message: Message) -> None:
        if room_id not in self._room_ids:
            raise UnknownRoom(room_id)
        self._logs.setdefault(room_id, []).append(message)

    def snapshot(self, room_id: str) -> tuple[Message, ...]:
        # Tuples of frozen messages: later appends never show up in an earlier snapshot
        return tuple(self._logs.get(room_id, ()))

    def __len__(self) -> int:
        return sum(len(log) for log in self._logs.values())
