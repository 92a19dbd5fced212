from __future__ import annotations

import pytest

from studyhub.app import create_app
from studyhub.extensions import socketio
from studyhub.helpers.ws import DISPATCHER_KEY


@pytest.fixture
def app(tmp_path):
    return create_app(
        {
            "TESTING": True,
            "SOCKETIO_ASYNC_MODE": "threading",
            "ADMIN_USERNAMES": ["admin"],
            "GOOGLE_AI_API_KEY": "",
            "UPLOAD_DIR": str(tmp_path / "uploads"),
        }
    )


@pytest.fixture
def connect(app):
    clients = []

    def _connect():
        client = socketio.test_client(app)
        clients.append(client)
        return client

    yield _connect
    for client in clients:
        if client.is_connected():
            client.disconnect()


def events(client) -> dict[str, list]:
    out: dict[str, list] = {}
    for packet in client.get_received():
        out.setdefault(packet["name"], []).append(packet["args"][0] if packet["args"] else None)
    return out


def test_join_and_chat_over_socketio(connect):
    alice = connect()
    alice.emit("join", {"username": "alice", "room": "Math"})
    received = events(alice)
    assert received["room-history"] == [[]]
    assert received["users-update"] == [["alice"]]

    bob = connect()
    bob.emit("join", {"username": "bob", "room": "Math"})
    assert events(bob)["users-update"] == [["alice", "bob"]]
    received = events(alice)
    assert received["user-joined"][0]["username"] == "bob"
    assert received["users-update"] == [["alice", "bob"]]

    alice.emit("message", {"text": "hello"})
    for client in (alice, bob):
        (message,) = events(client)["message"]
        assert message["text"] == "hello"
        assert message["username"] == "alice"


def test_typing_reaches_only_other_members(connect):
    alice, bob = connect(), connect()
    alice.emit("join", {"username": "alice", "room": "Math"})
    bob.emit("join", {"username": "bob", "room": "Math"})
    alice.get_received()
    bob.get_received()

    alice.emit("typing", {"isTyping": True})

    assert events(bob)["typing"] == [{"username": "alice", "isTyping": True}]
    assert "typing" not in events(alice)


def test_invalid_join_gets_error_event(connect):
    client = connect()
    client.emit("join", {"username": "alice"})
    assert events(client) == {"error": ["Username and room are required"]}


def test_events_before_join_are_ignored(connect, app):
    client = connect()
    client.emit("message", {"text": "hi"})
    client.emit("typing", {"isTyping": True})
    client.emit("admin-stats")
    assert client.get_received() == []
    assert len(app.extensions[DISPATCHER_KEY].history) == 0


def test_admin_stats_only_for_admins(connect):
    admin, bob = connect(), connect()
    admin.emit("join", {"username": "admin", "room": "History"})
    bob.emit("join", {"username": "bob", "room": "Math"})
    admin.get_received()
    bob.get_received()

    bob.emit("admin-stats")
    assert bob.get_received() == []

    admin.emit("admin-stats")
    (stats,) = events(admin)["admin-stats"]
    assert stats["totalUsers"] == 2
    assert stats["totalRooms"] == 5


def test_disconnect_updates_presence(connect, app):
    alice, bob = connect(), connect()
    alice.emit("join", {"username": "alice", "room": "Math"})
    bob.emit("join", {"username": "bob", "room": "Math"})
    alice.get_received()

    bob.disconnect()

    received = events(alice)
    assert received["user-left"][0]["username"] == "bob"
    assert received["users-update"] == [["alice"]]
    dispatcher = app.extensions[DISPATCHER_KEY]
    assert len(dispatcher.registry) == 1
    assert dispatcher.directory.member_usernames("Math") == ["alice"]
