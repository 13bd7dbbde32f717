"""
Domain error hierarchy for the Jobly API.

CRUD modules raise these directly; the route layer never catches them.
A single set of exception handlers (registered in main.py) turns them
into JSON error responses.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class JoblyError(Exception):
    """Base class for errors that map onto an HTTP status."""
    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message


class InvalidInputError(JoblyError):
    """Bad shape, disallowed key, empty update, bad enum value, bad range."""
    status_code = 400


class NotFoundError(JoblyError):
    """Entity absent, or a referenced row is missing on insert."""
    status_code = 404


class DuplicateError(JoblyError):
    """Natural key or composite key already in use."""
    status_code = 400


class UnauthorizedError(JoblyError):
    """Authentication failed."""
    status_code = 401


async def jobly_error_handler(request: Request, exc: JoblyError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the domain error translation to the application."""
    app.add_exception_handler(JoblyError, jobly_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
