"""Request logging middleware."""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request

logger = logging.getLogger("app.middleware")


def install_request_logging(app: FastAPI) -> None:
    @app.middleware("http")
    async def _log_requests(request: Request, call_next):
        start = time.perf_counter()
        method = request.method
        path = request.url.path
        try:
            response = await call_next(request)
        except Exception:
            duration = (time.perf_counter() - start) * 1000.0
            logger.exception("Unhandled error during %s %s (%.2f ms)", method, path, duration)
            raise
        duration = (time.perf_counter() - start) * 1000.0
        logger.info("%s %s -> %s (%.2f ms)", method, path, response.status_code, duration)
        return response
