"""API error taxonomy and the exception handlers that render it."""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """
    Base for errors that map to a JSON failure envelope.

    Rendered as {"success": false, "message": ..., "errors": [...]}.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        errors: list[str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors or []
        self.headers = headers

    def to_dict(self) -> dict[str, Any]:
        return {"success": False, "message": self.message, "errors": self.errors}


class ValidationError(ApiError):
    """Request content failed validation; errors lists every violation."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, errors: list[str], message: str = "Validation failed") -> None:
        super().__init__(message, errors)


class AuthenticationError(ApiError):
    """Missing token or bad credentials. Messages stay generic."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message, errors, headers={"WWW-Authenticate": "Bearer"})


class InvalidTokenError(ApiError):
    """Token present but invalid, expired or of the wrong type."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Invalid or expired token") -> None:
        super().__init__(message)


class ConflictError(ApiError):
    status_code = status.HTTP_409_CONFLICT


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND


class UpstreamUnavailableError(ApiError):
    """Store or cache unreachable. Never carries internal detail."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message, ["Internal server error"])


def _format_validation_error(err: dict[str, Any]) -> str:
    loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query")]
    field = ".".join(loc)
    msg = err.get("msg", "Invalid value")
    return f"{field}: {msg}" if field else msg


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed JSON, wrong types and bad query params become a 400 with itemized messages."""
    errors = [_format_validation_error(e) for e in exc.errors()]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ValidationError(errors).to_dict(),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Unmatched routes point at the API index; other HTTP errors keep their status."""
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        body = NotFoundError(
            "Endpoint not found",
            ["Check /api/v1 for available endpoints"],
        ).to_dict()
        body["path"] = request.url.path
        return JSONResponse(status_code=exc.status_code, content=body)
    body = ApiError(str(exc.detail)).to_dict()
    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log full detail internally; only dev environments see the exception text."""
    logger.exception(
        "Unhandled error",
        extra={"method": request.method, "path": request.url.path},
    )
    settings = request.app.state.settings
    detail = str(exc) if settings.APP_ENV == "dev" else "Something went wrong"
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": "Internal server error", "errors": [detail]},
    )
