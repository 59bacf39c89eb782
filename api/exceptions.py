"""Exception handlers for the file server FastAPI application.

Handlers convert Python exceptions into consistent JSON bodies of the form
``{"error": message, "type": kind, "details": ...}`` so clients can branch
on the status code or the ``type`` field.
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from models.exceptions import FileSystemError

logger = logging.getLogger(__name__)


async def file_system_error_handler(request: Request, exc: FileSystemError):
    """Handle FileSystemError and its subclasses.

    The status code comes from the exception class (404 for NotFound, 403
    for AccessDenied and so on).

    Args:
        request: The incoming request that triggered the error.
        exc: The FileSystemError exception.

    Returns:
        JSONResponse with the mapped status and the error body.
    """
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({exc.kind}): {exc}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Handle malformed requests (missing path, wrong body shape).

    Reported as 400 like any other bad request, with the field errors in
    ``details``.
    """
    errors = [{"loc": list(err.get("loc", [])), "msg": err.get("msg")} for err in exc.errors()]
    fields = ", ".join(str(err["loc"][-1]) for err in errors if err["loc"])
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": f"Invalid request: {fields}" if fields else "Invalid request",
            "type": "bad_request",
            "details": {"errors": errors},
        },
    )


async def generic_exception_handler(request: Request, exc: Exception):
    """Handle any unhandled exceptions.

    Logs the traceback and returns a 500 without leaking internals.
    """
    logger.exception(f"Unhandled exception in {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal Server Error",
            "type": "server_error",
            "details": type(exc).__name__,
        },
    )
