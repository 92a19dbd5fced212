from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Protocol

from flask import Flask, current_app
from flask_socketio import join_room, leave_room

from ..extensions import socketio

# Key under app.extensions where create_app() stores the dispatcher
DISPATCHER_KEY = "studyhub.dispatcher"


def room_socket_name(room_id: str) -> str:
    return f"room:{room_id}"


class Emitter(Protocol):
    """Outbound side of the chat core, implemented by the transport."""

    def to_connection(self, sid: str, event: str, payload: Any) -> None: ...

    def to_room(self, room_id: str, event: str, payload: Any, skip: Optional[str] = None) -> None: ...

    def enter_room(self, sid: str, room_id: str) -> None: ...

    def exit_room(self, sid: str, room_id: str) -> None: ...


class SocketIOEmitter:
    """Emitter backed by Socket.IO rooms named ``room:<id>``."""

    def to_connection(self, sid: str, event: str, payload: Any) -> None:
        socketio.emit(event, payload, to=sid)

    def to_room(self, room_id: str, event: str, payload: Any, skip: Optional[str] = None) -> None:
        socketio.emit(event, payload, to=room_socket_name(room_id), skip_sid=skip)

    def enter_room(self, sid: str, room_id: str) -> None:
        join_room(room_socket_name(room_id), sid=sid, namespace="/")

    def exit_room(self, sid: str, room_id: str) -> None:
        leave_room(room_socket_name(room_id), sid=sid, namespace="/")


def make_background_spawner(app: Flask) -> Callable[..., None]:
    """Return a spawn(fn, *args) that runs fn as a Socket.IO background task inside an app context."""

    def spawn(function: Callable[..., None], *args: Any) -> None:
        def background_task(context: Flask) -> None:
            try:
                with context.app_context():
                    function(*args)
            except Exception:
                logging.exception("background task %s failed", getattr(function, "__name__", function))

        socketio.start_background_task(background_task, app)

    return spawn


def get_dispatcher():
    return current_app.extensions[DISPATCHER_KEY]
