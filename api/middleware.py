"""
Request middleware: access logging, latency and request ids.

Every response carries ``X-Process-Time`` (seconds) and ``X-Request-ID``.
A caller-supplied request id is echoed back so log lines can be joined
with client-side traces.  Auth headers are never logged.
"""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
PROCESS_TIME_HEADER = "X-Process-Time"
_MAX_REQUEST_ID = 64


def _request_id(request: Request) -> str:
    supplied = request.headers.get(REQUEST_ID_HEADER, "").strip()
    if supplied and len(supplied) <= _MAX_REQUEST_ID and supplied.isprintable():
        return supplied
    return uuid.uuid4().hex


def _log_level(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code in (401, 403):
        return logging.WARNING
    if status_code >= 400:
        return logging.INFO
    return logging.DEBUG


def register_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def access_log(request: Request, call_next):
        request_id = _request_id(request)
        request.state.request_id = request_id
        start = time.perf_counter()

        response = await call_next(request)

        elapsed = time.perf_counter() - start
        response.headers[PROCESS_TIME_HEADER] = f"{elapsed:.4f}"
        response.headers[REQUEST_ID_HEADER] = request_id
        logger.log(
            _log_level(response.status_code),
            "[%s] %s %s -> %d in %.3fs",
            request_id,
            request.method,
            request.url.path,
            response.status_code,
            elapsed,
        )
        return response
