"""
Error taxonomy shared by every service, and the FastAPI handlers that render
it. Every error response body has the shape {"error": "<message>"}.
"""
import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger(__name__)


class ServiceError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """Malformed, missing or referentially invalid input. Always client-fixable."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT


class StorageError(ServiceError):
    """Persistence failed after validation passed."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class DependencyUnavailable(ServiceError):
    """
    A remote lookup failed. Never reaches a client: RemoteLookupClient turns it
    into an absent result, which call sites read as a validation failure or a
    null enrichment field.
    """

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


def _error(status_code: int, message) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_failed", path=request.url.path, error=exc.message)
    return _error(exc.status_code, exc.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(exc.status_code, exc.detail)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{field}: {first.get('msg')}" if field else str(first.get("msg", "Invalid request"))
    return _error(status.HTTP_400_BAD_REQUEST, message)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
