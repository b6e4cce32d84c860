"""
Exception handlers — map service failures to HTTP responses.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from utils.errors import DevconnectError, NotFound, StoreError, ValidationError

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach handlers for the service error hierarchy."""

    @app.exception_handler(RequestValidationError)
    async def request_validation_failed(request: Request, exc: RequestValidationError):
        error = ValidationError.from_details(list(exc.errors()))
        return JSONResponse(status_code=error.status_code, content={"errors": error.errors})

    @app.exception_handler(DevconnectError)
    async def service_error(request: Request, exc: DevconnectError):
        if isinstance(exc, StoreError):
            return JSONResponse(status_code=500, content={"msg": "Server Error"})
        if isinstance(exc, NotFound):
            return JSONResponse(status_code=exc.status_code, content={"msg": exc.message})
        if isinstance(exc, ValidationError):
            return JSONResponse(status_code=exc.status_code, content={"errors": exc.errors})
        return JSONResponse(
            status_code=exc.status_code,
            content={"errors": [{"msg": exc.message}]},
        )

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"msg": "Server Error"})
