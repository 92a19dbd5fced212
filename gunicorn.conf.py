import os

bind = os.getenv("BIND", "0.0.0.0:3000")
# Room state lives in process memory, so all connections must share one worker
workers = 1
worker_class = "gevent"
wsgi_app = "studyhub.wsgi:app"
timeout = 60
loglevel = os.getenv("LOG_LEVEL", "info").lower()
accesslog = "-"
errorlog = "-"
capture_output = True
