from __future__ import annotations

import logging

from ....extensions import socketio
from ....models import Session
from ...middleware import require_session


def register() -> None:
    @socketio.on("message")
    @require_session
    def _on_message(dispatcher, session: Session, data: dict):
        try:
            dispatcher.on_message(session.sid, data)
        except Exception:
            logging.exception("message handler error (room=%s)", session.room_id)
