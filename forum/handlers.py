"""
Exception handlers: the only place errors become HTTP responses.

``ServiceError`` subclasses are mapped through ``STATUS_BY_KIND``; since
``ErrorKind`` is closed, adding a kind without a status is caught by the
module-level check below.  Internal errors are logged with their cause and
reported with a generic message so storage details never reach clients.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from forum.errors import ErrorKind, ServiceError

logger = logging.getLogger(__name__)

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.ALREADY_IN_USE: 409,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.UNAUTHORIZED: 403,
    ErrorKind.INTERNAL: 500,
}

if set(STATUS_BY_KIND) != set(ErrorKind):
    raise RuntimeError("every ErrorKind needs a status code")

GENERIC_MESSAGE = "internal server error"


def error_response(exc: ServiceError) -> JSONResponse:
    status_code = STATUS_BY_KIND[exc.kind]
    if exc.kind is ErrorKind.INTERNAL:
        content = {"error": exc.kind.value, "message": GENERIC_MESSAGE}
    else:
        content = {"error": exc.kind.value, "message": exc.message, "details": exc.context}
    headers = {"WWW-Authenticate": "Bearer"} if exc.kind is ErrorKind.UNAUTHENTICATED else None
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ServiceError)
    async def handle_service_error(request: Request, exc: ServiceError):
        if exc.kind is ErrorKind.INTERNAL:
            logger.error(
                "%s %s failed: %s %s",
                request.method, request.url.path, exc.message, exc.context,
                exc_info=exc.__cause__ or exc,
            )
        else:
            logger.info(
                "%s %s rejected (%s): %s",
                request.method, request.url.path, exc.kind.value, exc.message,
            )
        return error_response(exc)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": ErrorKind.INTERNAL.value, "message": GENERIC_MESSAGE},
        )
