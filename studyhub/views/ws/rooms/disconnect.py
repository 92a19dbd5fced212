from __future__ import annotations

import logging

from flask import request

from ....extensions import socketio
from ....helpers.ws import get_dispatcher


def register() -> None:
    @socketio.on("connect")
    def _on_connect(*_args):
        logging.info("SOCK connect sid=%s ua=%s", request.sid, request.headers.get("User-Agent"))

    @socketio.on("disconnect")
    def _on_disconnect(*_args):
        try:
            get_dispatcher().on_disconnect(request.sid)
        except Exception:
            logging.exception("disconnect handler error")
