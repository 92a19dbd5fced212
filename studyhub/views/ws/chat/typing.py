from __future__ import annotations

import logging

from ....extensions import socketio
from ....models import Session
from ...middleware import require_session


def register() -> None:
    @socketio.on("typing")
    @require_session
    def _on_typing(dispatcher, session: Session, data: dict):
        try:
            dispatcher.on_typing(session.sid, data)
        except Exception:
            logging.exception("typing handler error")
