from __future__ import annotations

import logging

from ....extensions import socketio
from ....models import Session
from ...middleware import require_session


def register() -> None:
    # Non-admins get no reply at all, not an error
    @socketio.on("admin-stats")
    @require_session
    def _on_admin_stats(dispatcher, session: Session, _data):
        try:
            dispatcher.on_admin_stats(session.sid)
        except Exception:
            logging.exception("admin-stats handler error")
