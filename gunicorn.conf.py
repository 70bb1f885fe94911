# gunicorn.conf.py
# Run with: gunicorn -c gunicorn.conf.py travelflow.app:app
import multiprocessing as mp
import os

# Bind to address and port
bind = os.getenv("BIND", "0.0.0.0:8076")

# Uvicorn worker for the ASGI app
worker_class = "uvicorn.workers.UvicornWorker"

workers = int(os.getenv("WEB_CONCURRENCY", mp.cpu_count() * 2 + 1))

# Upstream streams can take minutes; keep the worker timeout above COZE_REQUEST_TIMEOUT
timeout = int(os.getenv("TIMEOUT", "180"))
graceful_timeout = int(os.getenv("GRACEFUL_TIMEOUT", "30"))
keepalive = int(os.getenv("KEEPALIVE", "5"))

preload_app = True

# Limit maximum requests per worker to mitigate memory leaks
max_requests = int(os.getenv("MAX_REQUESTS", "1000"))
max_requests_jitter = int(os.getenv("MAX_REQUESTS_JITTER", "100"))

forwarded_allow_ips = os.getenv("FORWARDED_ALLOW_IPS", "127.0.0.1")

# Logs
accesslog = "-" if os.getenv("ACCESS_LOG", "1") == "1" else None
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info")
capture_output = True
