"""Gunicorn configuration for the position service."""

# Server socket
bind = '0.0.0.0:8000'

# One writer process: grid moves and swaps serialize on the SQLite file.
workers = 1
threads = 4
worker_class = 'gthread'

# Map clients give up on a commit after MAP_COMMIT_TIMEOUT_S (10s)
timeout = 15
graceful_timeout = 10
keepalive = 5

# Logging
accesslog = 'logs/gunicorn-access.log'
errorlog = 'logs/gunicorn-error.log'
loglevel = 'info'
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s %(D)s'

# Process naming
proc_name = 'zonemap'

preload_app = True

max_requests = 1000
max_requests_jitter = 50
