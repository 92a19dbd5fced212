from __future__ import annotations

from .rooms import register_socket_handlers as register_room_handlers
from .chat import register_socket_handlers as register_chat_handlers
from .admin import register_socket_handlers as register_admin_handlers

# Handlers live on the shared socketio object and are re-applied by every init_app()
_handlers_registered: bool = False


def register_socket_handlers() -> None:
    global _handlers_registered
    if _handlers_registered:
        return
    register_room_handlers()
    register_chat_handlers()
    register_admin_handlers()
    _handlers_registered = True
