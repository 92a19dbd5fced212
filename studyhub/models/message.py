# Enable postponed annotations to avoid runtime import issues and allow future-style typing
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..lib.utils import iso_now

# Author name used for every message produced by the assistant
AI_ASSISTANT = "AI Assistant"


# Reference to an attachment that was stored by the upload endpoint
@dataclass(frozen=True)
class FileRef:
    url: str
    name: str


# A chat message; immutable once appended to a room's history
@dataclass(frozen=True)
class Message:
    id: int
    username: str
    text: str
    timestamp: str
    is_ai: bool = False
    file: Optional[FileRef] = None

    @classmethod
    def create(
        cls,
        message_id: int,
        username: str,
        text: str,
        *,
        is_ai: bool = False,
        file: Optional[FileRef] = None,
    ) -> "Message":
        return cls(
            id=message_id,
            username=username,
            text=text,
            timestamp=iso_now(),
            is_ai=is_ai,
            file=file,
        )

    def to_dict(self) -> dict:
        payload = {
            "id": self.id,
            "username": self.username,
            "text": self.text,
            "timestamp": self.timestamp,
            "isAI": self.is_ai,
        }
        if self.file is not None:
            payload["fileUrl"] = self.file.url
            payload["fileName"] = self.file.name
        return payload
