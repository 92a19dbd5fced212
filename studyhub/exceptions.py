from __future__ import annotations


class StudyHubError(Exception):
    """Base class for errors raised by the chat core."""


class InvalidJoin(StudyHubError):
    """A join request that cannot be honored: missing fields or a changed username."""


class UnknownRoom(InvalidJoin):
    """A room id that is not part of the catalog."""

    def __init__(self, room_id: str):
        super().__init__(f"Unknown room: {room_id}")
        self.room_id = room_id


class ProviderError(StudyHubError):
    """A completion backend failed to produce text."""

    def __init__(self, message: str, *, not_found: bool = False):
        super().__init__(message)
        self.not_found = not_found


class GatewayTimeout(StudyHubError):
    """The completion provider did not answer in time."""
