"""Map domain errors onto JSON HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.errors import (
    FormStateError,
    NotFoundError,
    SpecValidationError,
    UpstreamError,
    ValidationError,
)

logger = logging.getLogger("app.errors")


def add_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_error_handler(_: Request, exc: ValidationError):
        logger.debug("Validation error on %s: %s", exc.field, exc.message)
        return JSONResponse(
            status_code=400,
            content={"success": False, "detail": exc.message, "field": exc.field},
        )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(_: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content={"success": False, "detail": str(exc), "resource": exc.resource},
        )

    @app.exception_handler(SpecValidationError)
    async def spec_validation_handler(_: Request, exc: SpecValidationError):
        return JSONResponse(
            status_code=422,
            content={"success": False, "detail": str(exc), "errors": exc.to_list()},
        )

    @app.exception_handler(FormStateError)
    async def form_state_handler(_: Request, exc: FormStateError):
        return JSONResponse(status_code=409, content={"success": False, "detail": str(exc)})

    @app.exception_handler(UpstreamError)
    async def upstream_error_handler(_: Request, exc: UpstreamError):
        logger.error("Upstream failure (status=%s): %s", exc.status_code, exc.message)
        return JSONResponse(
            status_code=502,
            content={"success": False, "detail": exc.message, "upstream_status": exc.status_code},
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(_: Request, exc: Exception):
        logger.exception("Unhandled exception: %s", exc)
        return JSONResponse(
            status_code=500, content={"success": False, "detail": "Internal Server Error"}
        )
