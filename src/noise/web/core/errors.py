"""API error type and exception handlers producing uniform JSON error bodies.

Every error response has the shape ``{"error": ..., "message": ..., "details"?: ...}``.
"""

import logging
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from noise.board.exceptions import ItemNotFoundError, ItemOwnershipError, ItemValidationError
from noise.storage.base import StorageError
from noise.web.models.board import ErrorResponse

logger = logging.getLogger(__name__)

# OpenAPI declarations of the uniform error body
ITEM_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    code: {"model": ErrorResponse} for code in (400, 401, 403, 404, 429)
}


class ApiError(Exception):
    """An error that maps directly onto an HTTP response."""

    def __init__(
        self,
        status_code: int,
        message: str,
        details: Any | None = None,  # noqa: ANN401
        error: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details
        self.error = error or HTTPStatus(status_code).phrase

    @classmethod
    def bad_request(
        cls, message: str, details: Any | None = None, error: str | None = None  # noqa: ANN401
    ) -> "ApiError":
        return cls(400, message, details, error)

    @classmethod
    def unauthorized(cls, message: str = "Unauthorized") -> "ApiError":
        return cls(401, message)

    @classmethod
    def forbidden(cls, message: str = "Forbidden") -> "ApiError":
        return cls(403, message)

    @classmethod
    def not_found(cls, message: str = "Resource not found") -> "ApiError":
        return cls(404, message)

    @classmethod
    def internal(cls, message: str = "Internal server error") -> "ApiError":
        return cls(500, message)


def error_body(error: str, message: str, details: Any | None = None) -> dict[str, Any]:  # noqa: ANN401
    """Build the uniform error body."""
    body: dict[str, Any] = {"error": error, "message": message}
    if details:
        body["details"] = details
    return body


def _format_validation_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    return [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())),
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]


def unexpected_error_response(
    request: Request, exc: Exception, is_production: bool = False
) -> JSONResponse:
    """Log an unhandled exception and turn it into a 500 error body."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    message = "An unexpected error occurred" if is_production else str(exc)
    return JSONResponse(status_code=500, content=error_body("Internal Server Error", message))


def register_exception_handlers(app: FastAPI, is_production: bool = False) -> None:
    """Install handlers mapping domain and framework errors onto JSON responses.

    Args:
        app: Application to install the handlers on
        is_production: Hide unexpected error messages from clients when True
    """

    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("API error on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.error, exc.message, exc.details),
        )

    @app.exception_handler(ItemNotFoundError)
    async def handle_not_found(request: Request, exc: ItemNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content=error_body("Not Found", str(exc)))

    @app.exception_handler(ItemOwnershipError)
    async def handle_forbidden(request: Request, exc: ItemOwnershipError) -> JSONResponse:
        logger.info("Ownership check failed on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=403, content=error_body("Forbidden", str(exc)))

    @app.exception_handler(ItemValidationError)
    async def handle_item_validation(request: Request, exc: ItemValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content=error_body("Validation Error", str(exc)))

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError) -> JSONResponse:
        logger.error("Storage error on %s %s: %s", request.method, request.url.path, exc)
        message = "An unexpected error occurred" if is_production else str(exc)
        return JSONResponse(status_code=500, content=error_body("Storage Error", message))

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content=error_body(
                "Validation Error", "Invalid request data", _format_validation_errors(exc)
            ),
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        if exc.status_code == 404 and exc.detail == HTTPStatus.NOT_FOUND.phrase:
            message = f"Route {request.method} {request.url.path} not found"
        else:
            message = str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(HTTPStatus(exc.status_code).phrase, message),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        return unexpected_error_response(request, exc, is_production)
