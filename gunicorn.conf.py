"""
Production Server Configuration

    gunicorn -c gunicorn.conf.py storefront_analytics.main:app

Each worker runs the app lifespan and so owns its database engine and its
rate-limit windows.
"""

import os

bind = f"{os.getenv('API_HOST', '0.0.0.0')}:{os.getenv('API_PORT', '8000')}"
backlog = 2048

workers = int(os.getenv("API_WORKERS", "4"))
worker_class = "uvicorn.workers.UvicornWorker"
# The async engine must not be created before fork
preload_app = False
max_requests = 10000
max_requests_jitter = 1000
# The advanced report fans out several aggregate queries per request
timeout = 60
graceful_timeout = 30
keepalive = 5

proc_name = "storefront-analytics-api"

# RequestLoggingMiddleware already logs every request
accesslog = os.getenv("GUNICORN_ACCESS_LOG") or None
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()


def post_worker_init(worker):
    worker.log.info("Worker %s ready", worker.pid)


def worker_abort(worker):
    worker.log.warning("Worker %s aborted after timeout", worker.pid)
