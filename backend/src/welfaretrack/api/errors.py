"""Conversion of exceptions to JSON error responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from welfaretrack.errors import (
    MalformedRequestError,
    RecordInvalidError,
    RequestError,
)
from welfaretrack.settings import Settings

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal Server Error"


def _describe_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts) or "Malformed request"


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """Register the error taxonomy's handlers on the application.

    - RecordInvalidError -> 422 {"errors": [...]}
    - MalformedRequestError / RequestValidationError -> 400 {"error", "message"}
    - other RequestErrors -> their status with {"error": message}
    - anything else -> 500 {"error", "message"}
    """

    @app.exception_handler(RecordInvalidError)
    async def record_invalid_handler(request: Request, exc: RecordInvalidError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"errors": exc.messages})

    @app.exception_handler(MalformedRequestError)
    async def malformed_request_handler(request: Request, exc: MalformedRequestError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": "Bad Request", "message": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"error": "Bad Request", "message": _describe_validation_error(exc)},
        )

    @app.exception_handler(RequestError)
    async def request_error_handler(request: Request, exc: RequestError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        message = INTERNAL_ERROR if settings.is_production else str(exc)
        return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR, "message": message})
