from __future__ import annotations

from .registry import ConnectionRegistry
from .directory import RoomDirectory
from .history import HistoryStore

__all__ = ["ConnectionRegistry", "RoomDirectory", "HistoryStore"]
