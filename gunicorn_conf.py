import multiprocessing
import os
import logging

logger = logging.getLogger("gunicorn.conf")

# worker count
web_concurrency = int(os.getenv("WEB_CONCURRENCY", 0))
max_workers = int(os.getenv("GUNICORN_MAX_WORKERS", 4))
min_workers = int(os.getenv("GUNICORN_MIN_WORKERS", 1))

preload_app = os.getenv("PRELOAD_APP", "true").lower() == "true"
preload = preload_app

bind = os.getenv("BIND", f"0.0.0.0:{os.getenv('PORT', '3001')}")
worker_class = os.getenv("WORKER_CLASS", "uvicorn.workers.UvicornWorker")
workers = web_concurrency or max(min_workers, min(multiprocessing.cpu_count() * 2 + 1, max_workers))
threads = int(os.getenv("THREADS", 2))
worker_connections = int(os.getenv("GUNICORN_WORKER_CONNECTIONS", 1000))
max_requests = int(os.getenv("MAX_REQUESTS", 1000))
max_requests_jitter = int(os.getenv("MAX_REQUESTS_JITTER", 50))
graceful_timeout = int(os.getenv("GRACEFUL_TIMEOUT", 30))
timeout = int(os.getenv("TIMEOUT", 60))
keepalive = int(os.getenv("KEEP_ALIVE", 5))
accesslog = os.getenv("ACCESS_LOG", "-")
errorlog = os.getenv("ERROR_LOG", "-")
loglevel = os.getenv("LOG_LEVEL", "info").lower()


def on_starting(server):
    logger.info(f"Starting Campus Events with {workers} workers (min={min_workers}, max={max_workers})")


def post_fork(server, worker):
    # each worker builds its own pool; connections inherited from a preloaded app are dropped
    from campus_events.db.session import engine
    engine.dispose(close=False)
    server.log.info(f"Worker spawned: {worker.pid}")


def when_ready(server):
    logger.info(f"Server is ready with {len(server.WORKERS)} workers")


def worker_int(worker):
    worker.log.info(f"Worker received INT: {worker.pid}")


def worker_abort(worker):
    worker.log.info(f"Worker was aborted: {worker.pid}")


def worker_exit(server, worker):
    worker.log.info(f"Worker exited: {worker.pid}")
