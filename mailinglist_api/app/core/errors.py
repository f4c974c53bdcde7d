"""
Error types and their HTTP mapping.

Storage failures of any sort surface as ``StoreError``; the store does
not distinguish constraint violations from connectivity problems other
than through the message text.  ``register_exception_handlers`` turns
these exceptions into the ``{"Err": "<message>"}`` JSON body returned
to clients.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError, ResponseValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """Raised when a statement against the subscriber table fails."""


class InvalidArgument(ValueError):
    """Raised when pagination arguments are out of range."""


def error_response(message: str, status_code: int = status.HTTP_400_BAD_REQUEST) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"Err": message})


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "invalid request body"


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return error_response(str(exc))


async def invalid_argument_handler(request: Request, exc: InvalidArgument) -> JSONResponse:
    return error_response(str(exc))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = _validation_message(exc)
    logger.info("Rejected %s %s: %s", request.method, request.url.path, message)
    return error_response(message)


async def response_validation_handler(request: Request, exc: ResponseValidationError) -> Response:
    logger.error("Could not serialize response for %s %s: %s", request.method, request.url.path, exc)
    return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> Response:
    # Wrong method for a path: reject without a body.
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return Response(status_code=exc.status_code, headers=getattr(exc, "headers", None))
    return error_response(str(exc.detail), exc.status_code)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(InvalidArgument, invalid_argument_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ResponseValidationError, response_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
