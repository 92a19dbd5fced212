from __future__ import annotations

from .join import register as register_room_join
from .disconnect import register as register_disconnect

__all__ = ["register_socket_handlers"]


def register_socket_handlers() -> None:
    register_room_join()
    register_disconnect()
