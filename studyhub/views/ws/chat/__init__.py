from __future__ import annotations

from .message import register as register_message
from .typing import register as register_typing

__all__ = ["register_socket_handlers"]


def register_socket_handlers() -> None:
    register_message()
    register_typing()
