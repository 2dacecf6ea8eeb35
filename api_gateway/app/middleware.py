"""
Cross-origin header middleware.

Adds fixed Access-Control-* headers to every response. Preflight requests
are not negotiated here.
"""

from typing import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

ALLOWED_HEADERS = "Origin, X-Requested-With, Content-Type, Accept,Authorization"
ALLOWED_METHODS = "OPTIONS,GET,PUT,POST,DELETE"


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """
    Static CORS header injector.

    Attributes:
        allowed_origin: Value of Access-Control-Allow-Origin (default "*")
    """

    def __init__(self, app: ASGIApp, allowed_origin: str = "*") -> None:
        super().__init__(app)
        self.allowed_origin = allowed_origin or "*"

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        response = await call_next(request)
        response.headers["Access-Control-Allow-Origin"] = self.allowed_origin
        response.headers["Access-Control-Allow-Headers"] = ALLOWED_HEADERS
        response.headers["Access-Control-Allow-Methods"] = ALLOWED_METHODS
        return response
