"""Access log for calendar requests, enabled with ``LOGGING_ENABLED=true``."""

import json
import logging
import os
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware


logger = logging.getLogger("panchang_api.access")


def _enabled() -> bool:
    return os.getenv("LOGGING_ENABLED", "false").lower() == "true"


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        if not _enabled():
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        entry = {
            "ip": request.client.host if request.client else None,
            "method": request.method,
            "endpoint": request.url.path,
            "params": dict(request.query_params),
            "status": response.status_code,
            "latency_ms": round((time.perf_counter() - started) * 1000, 2),
        }
        # One JSON object per line so the access log stays grep-able.
        logger.info(json.dumps(entry, sort_keys=True))
        return response
