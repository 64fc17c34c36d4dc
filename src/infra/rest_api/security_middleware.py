"""
Security middleware for FastAPI application.
"""
from typing import Callable, Dict
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

# Responses may carry bearer tokens, so nothing is cacheable.
DEFAULT_SECURITY_HEADERS: Dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cache-Control": "no-store",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    def __init__(self, app, headers: Dict[str, str] = None):
        super().__init__(app)
        self.headers = headers if headers is not None else DEFAULT_SECURITY_HEADERS

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        for header, value in self.headers.items():
            response.headers.setdefault(header, value)

        return response
