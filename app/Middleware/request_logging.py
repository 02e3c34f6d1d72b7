import time
from fastapi import Request
import logging

logger = logging.getLogger("app.requests")

# Paths that are polled often enough to drown the log
QUIET_PATHS = {"/api/health", "/docs", "/openapi.json", "/redoc"}


async def request_logging_middleware(request: Request, call_next):
    """Log method, path, status and duration of each API call."""
    start_time = time.perf_counter()
    method = request.method
    path = request.url.path

    try:
        response = await call_next(request)
    except Exception as exc:
        duration_ms = int((time.perf_counter() - start_time) * 1000)
        logger.error(f"{method} {path} failed after {duration_ms}ms: {exc}")
        raise

    duration_ms = int((time.perf_counter() - start_time) * 1000)
    status_code = response.status_code
    if status_code == 404:
        logger.warning(f"{method} {path} -> 404 ({duration_ms}ms)")
    elif status_code >= 500:
        logger.error(f"{method} {path} -> {status_code} ({duration_ms}ms)")
    elif path not in QUIET_PATHS:
        logger.info(f"{method} {path} -> {status_code} ({duration_ms}ms)")
    return response
