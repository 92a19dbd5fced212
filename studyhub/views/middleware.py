from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Callable, Optional

from flask import request

from ..helpers.ws import get_dispatcher


def require_session(handler: Callable) -> Callable:
    """
    Decorator for socket handlers that need a joined connection.

    Resolves the dispatcher and the sender's session and passes
    (dispatcher, session, data) to the handler. Events from connections that
    have not joined yet (or already left) are dropped quietly; clients send
    them routinely around reconnects.

    Usage:
        @socketio.on("typing")
        @require_session
        def _on_typing(dispatcher, session, data):
            ...
    """

    @wraps(handler)
    def wrapper(data: Optional[Any] = None, *_args) -> None:
        dispatcher = get_dispatcher()
        session = dispatcher.registry.lookup(request.sid)
        if session is None:
            logging.debug(
                "require_session: no session (handler=%s, sid=%s)",
                handler.__name__,
                request.sid,
            )
            return None
        return handler(dispatcher, session, data)

    return wrapper
