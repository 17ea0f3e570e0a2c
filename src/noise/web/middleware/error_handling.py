"""Turn unhandled exceptions into JSON 500 responses inside the middleware stack."""

from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from noise.web.core.errors import unexpected_error_response


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """Answer unexpected exceptions with the uniform error body.

    Installed innermost, so CORS, security headers and request logging still
    wrap the 500 response.
    """

    def __init__(self, app: Callable, is_production: bool = False) -> None:
        super().__init__(app)
        self.is_production = is_production

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            return unexpected_error_response(request, e, self.is_production)
