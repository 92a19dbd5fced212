from __future__ import annotations

import logging

from flask import request

from ....extensions import socketio
from ....helpers.ws import get_dispatcher


def register() -> None:
    @socketio.on("join")
    def _on_join(data: dict = None):
        try:
            get_dispatcher().on_join(request.sid, data)
        except Exception:
            logging.exception("join handler error")
            socketio.emit("error", "Failed to join room", to=request.sid)
