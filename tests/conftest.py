from __future__ import annotations

import os
import socket
from typing import Any, Callable, Optional

import pytest

from studyhub.dispatcher import Dispatcher
from studyhub.lib.rate_limit import AIRequestBudget, RateLimiter
from studyhub.lib.utils import MonotonicIds
from studyhub.models import ROOM_CATALOG
from studyhub.stores import ConnectionRegistry, HistoryStore, RoomDirectory


class NetworkBlockedError(RuntimeError):
    pass


def _blocked(*_args: Any, **_kwargs: Any) -> Any:
    raise NetworkBlockedError(
        "Network access is disabled during tests. "
        "Mark the test with @pytest.mark.network or set ALLOW_NETWORK=1."
    )


@pytest.fixture(autouse=True)
def _disable_network(monkeypatch: pytest.MonkeyPatch, request: pytest.FixtureRequest) -> None:
    """Prevent accidental outbound network calls in unit tests."""

    if os.getenv("ALLOW_NETWORK") == "1":
        return

    if request.node.get_closest_marker("network"):
        return

    monkeypatch.setattr(socket, "create_connection", _blocked)
    monkeypatch.setattr(socket, "getaddrinfo", _blocked)


class RecordingEmitter:
    """Emitter that keeps its own room membership and records what each connection receives."""

    def __init__(self) -> None:
        self.rooms: dict[str, list[str]] = {}
        self.deliveries: list[tuple[str, str, Any]] = []

    def to_connection(self, sid: str, event: str, payload: Any) -> None:
        self.deliveries.append((sid, event, payload))

    def to_room(self, room_id: str, event: str, payload: Any, skip: Optional[str] = None) -> None:
        for sid in list(self.rooms.get(room_id, [])):
            if sid != skip:
                self.deliveries.append((sid, event, payload))

    def enter_room(self, sid: str, room_id: str) -> None:
        members = self.rooms.setdefault(room_id, [])
        if sid not in members:
            members.append(sid)

    def exit_room(self, sid: str, room_id: str) -> None:
        if sid in self.rooms.get(room_id, []):
            self.rooms[room_id].remove(sid)

    def received(self, sid: str, event: Optional[str] = None) -> list[Any]:
        return [
            payload
            for to, name, payload in self.deliveries
            if to == sid and (event is None or name == event)
        ]

    def events(self, sid: str) -> list[str]:
        return [name for to, name, _ in self.deliveries if to == sid]

    def clear(self) -> None:
        self.deliveries.clear()


class ManualClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class StubGateway:
    def __init__(self, answer: str = "🤖 AI Assistant: 42", error: Optional[Exception] = None) -> None:
        self.answer = answer
        self.error = error
        self.calls: list[tuple[str, str]] = []

    def complete(self, question: str, subject: str) -> str:
        self.calls.append((question, subject))
        if self.error is not None:
            raise self.error
        return self.answer


class DeferredSpawner:
    """Collects spawned tasks so tests decide when an AI answer arrives."""

    def __init__(self) -> None:
        self.tasks: list[tuple[Callable[..., None], tuple]] = []

    def __call__(self, function: Callable[..., None], *args: Any) -> None:
        self.tasks.append((function, args))

    def run_all(self) -> None:
        while self.tasks:
            function, args = self.tasks.pop(0)
            function(*args)


@pytest.fixture
def emitter() -> RecordingEmitter:
    return RecordingEmitter()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def gateway() -> StubGateway:
    return StubGateway()


@pytest.fixture
def make_dispatcher(emitter: RecordingEmitter, gateway: StubGateway, clock: ManualClock):
    def _make(
        *,
        user_budget: int = 5,
        global_budget: int = 30,
        window_seconds: float = 60.0,
        admin_usernames=("admin",),
        spawn=None,
        gateway_override=None,
    ) -> Dispatcher:
        registry = ConnectionRegistry()
        budget = AIRequestBudget(
            RateLimiter(user_budget, window_seconds, clock),
            RateLimiter(global_budget, window_seconds, clock),
        )
        kwargs = {}
        if spawn is not None:
            kwargs["spawn"] = spawn
        return Dispatcher(
            registry,
            RoomDirectory(registry, ROOM_CATALOG),
            HistoryStore(spec.id for spec in ROOM_CATALOG),
            budget,
            gateway_override or gateway,
            emitter,
            admin_usernames=admin_usernames,
            ids=MonotonicIds(clock=lambda: 1_700_000_000_000),
            **kwargs,
        )

    return _make


@pytest.fixture
def dispatcher(make_dispatcher) -> Dispatcher:
    return make_dispatcher()
