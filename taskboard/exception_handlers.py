"""
This module contains the exception handlers for the Taskboard API.

Every error leaves the API as a JSON body of the form
`{"code": <status>, "error": <label>, "message": <text>}`.
"""

import logging
from http import HTTPStatus

from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse

from taskboard.errors import ApiError, InternalError


logger = logging.getLogger(__name__)


def error_response(status_code: int, error: str, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        {"code": status_code, "error": error, "message": message},
        status_code=status_code,
        headers=headers,
    )


async def api_error(request: Request, exc: ApiError):
    """
    Render an error raised by the authorization gate or a task handler.
    """
    return error_response(exc.status_code, exc.error, exc.message)


async def http_exception(request: Request, exc: HTTPException):
    """
    Handle HTTP exceptions raised by the framework, such as unknown routes
    or unsupported methods.
    """
    try:
        error = HTTPStatus(exc.status_code).phrase
    except ValueError:
        error = "Error"
    return error_response(exc.status_code, error, str(exc.detail), headers=getattr(exc, "headers", None))


async def validation_exception(request: Request, exc: RequestValidationError):
    """
    Handle request bodies and parameters that cannot be parsed.

    These are reported as 400 Bad Request, like the validation errors of the
    task handlers.
    """
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return error_response(400, "Bad Request", "; ".join(messages) or "Invalid request")


async def unhandled_exception(request: Request, exc: Exception):
    """
    Last-resort handler for exceptions nobody else handled.
    """
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    fallback = InternalError("An unexpected error occurred")
    return error_response(fallback.status_code, fallback.error, fallback.message)
