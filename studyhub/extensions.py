from __future__ import annotations

from flask_socketio import SocketIO

# Shared Socket.IO instance; bound to the app in create_app()
socketio = SocketIO()
