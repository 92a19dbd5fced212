# Process entry point: gunicorn loads ``studyhub.wsgi:app``
if __name__ == "__main__":
    # gunicorn's gevent worker patches on its own; the dev server has to do it before anything else imports
    from gevent import monkey

    monkey.patch_all()

import os

from studyhub.app import create_app
from studyhub.extensions import socketio

# Instantiate the application at import time for WSGI servers
app = create_app()


if __name__ == "__main__":
    socketio.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "3000")))
