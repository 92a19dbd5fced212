from __future__ import annotations

from .stats import register as register_admin_stats

__all__ = ["register_socket_handlers"]


def register_socket_handlers() -> None:
    register_admin_stats()
