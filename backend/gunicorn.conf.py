import os

# App
wsgi_app = "auth_service:create_app()"

# Bind & workers
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:3001")
workers = int(os.getenv("GUNICORN_WORKERS", "2"))
threads = int(os.getenv("GUNICORN_THREADS", "1"))
# Registration waits on the user-profile service (USER_SERVICE_TIMEOUT)
timeout = 60
graceful_timeout = 30
keepalive = 5

# Logs to stdout/stderr (collected by Docker)
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

# Only the gateway talks to this service
forwarded_allow_ips = os.getenv("FORWARDED_ALLOW_IPS", "*")
proxy_protocol = False
