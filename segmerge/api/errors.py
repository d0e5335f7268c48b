"""Error responses and exception handlers for the HTTP API.

Every error leaves the service as
``{"success": false, "error": CODE, "message": ..., "details": ...}``.
"""

import logging
from enum import Enum
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from segmerge.errors import InvalidStructureError, SegmergeError, UnresolvedSegmentsError

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Error codes returned to API clients."""

    INVALID_STRUCTURE = "INVALID_STRUCTURE"
    INVALID_JSON = "INVALID_JSON"
    MISSING_SEGMENTS = "MISSING_SEGMENTS"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
    PROCESS_TIMEOUT = "PROCESS_TIMEOUT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorBody(BaseModel):
    success: bool = False
    error: ErrorCode
    message: str
    details: Any = None


class ApiError(HTTPException):
    """HTTP exception carrying an API error code."""

    def __init__(
        self, status_code: int, code: ErrorCode, message: str, details: Any = None
    ) -> None:
        super().__init__(status_code=status_code, detail=message)
        self.code = code
        self.details = details


def error_response(
    status_code: int, code: ErrorCode, message: str, details: Any = None
) -> JSONResponse:
    """Build the JSON error envelope for ``code``."""
    body = ErrorBody(error=code, message=message, details=details)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
    )


def unauthorized(message: str) -> ApiError:
    """403 error raised by the bearer-token check."""
    return ApiError(403, ErrorCode.UNAUTHORIZED, message)


# Status and code per engine error; the most specific class is listed first
_ENGINE_ERRORS: list[tuple[type[SegmergeError], int, ErrorCode]] = [
    (UnresolvedSegmentsError, 422, ErrorCode.MISSING_SEGMENTS),
    (InvalidStructureError, 400, ErrorCode.INVALID_STRUCTURE),
]


async def engine_error_handler(request: Request, exc: SegmergeError) -> JSONResponse:
    logger.error("%s: %s", exc.code, exc.message)
    for error_type, status_code, code in _ENGINE_ERRORS:
        if isinstance(exc, error_type):
            return error_response(status_code, code, exc.message, exc.details)
    return error_response(400, ErrorCode.INVALID_STRUCTURE, exc.message, exc.details)


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return error_response(exc.status_code, exc.code, str(exc.detail), exc.details)


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if exc.status_code == 404:
        return error_response(
            404,
            ErrorCode.NOT_FOUND,
            f"Route {request.method} {request.url.path} not found",
        )
    code = ErrorCode.INTERNAL_ERROR if exc.status_code >= 500 else ErrorCode.VALIDATION_ERROR
    return error_response(exc.status_code, code, str(exc.detail))


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    if any(err.get("type") == "json_invalid" for err in errors):
        return error_response(400, ErrorCode.INVALID_JSON, "Invalid JSON in request body")

    details = [
        {
            "path": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", ""),
        }
        for err in errors
    ]
    return error_response(
        422, ErrorCode.VALIDATION_ERROR, "Request validation failed", details
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    config = getattr(request.app.state, "config", None)
    message = "An internal server error occurred"
    if config is not None and not config.is_production:
        message = str(exc) or message
    return error_response(500, ErrorCode.INTERNAL_ERROR, message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SegmergeError, engine_error_handler)
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
