"""
Error Resolver
==============

Single place where failures become user-facing responses.

Two fixed profiles exist, selected by the resolved Environment:

- DEVELOPMENT: logs the failure and includes its reason in the response
- PRODUCTION: logs the failure, response carries the generic message only
"""

import logging
from typing import Awaitable, Callable, Dict, Optional

import httpx
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from ..config import Environment
from ..errors import (
    ApiError,
    UnclassifiedFailure,
    UpstreamServiceError,
    classify_failure,
)
from ..models import ResolveErrorOptions

logger = logging.getLogger(__name__)


ExceptionHandler = Callable[[Request, Exception], Awaitable[Response]]


DEVELOPMENT_PROFILE = ResolveErrorOptions(log=True, display_error_reason=True)
PRODUCTION_PROFILE = ResolveErrorOptions(log=True)

PROFILES: Dict[Environment, ResolveErrorOptions] = {
    Environment.DEVELOPMENT: DEVELOPMENT_PROFILE,
    Environment.PRODUCTION: PRODUCTION_PROFILE,
}


def resolve_error(
    exc: Exception,
    request: Optional[Request] = None,
    options: Optional[ResolveErrorOptions] = None,
) -> JSONResponse:
    """
    Resolve a failure into the response sent to the caller.

    Domain errors and upstream-reported errors are relayed with their own
    status code and payload. Anything else becomes HTTP 500 with the
    configured generic message, optionally annotated with the reason.

    Args:
        exc: The failure
        request: Inbound request, used for log context
        options: Resolution options (defaults apply when omitted)

    Returns:
        JSONResponse for the caller
    """
    opts = options or ResolveErrorOptions()
    failure = classify_failure(exc)

    if isinstance(failure, UnclassifiedFailure):
        detailed_message = f"{opts.unknown_error_message}. Reason: {failure.reason}"

        if opts.log:
            logger.error(
                detailed_message,
                extra={
                    "method": request.method if request else None,
                    "path": request.url.path if request else None,
                    "exception_type": type(exc).__name__,
                },
                exc_info=exc,
            )

        message = detailed_message if opts.display_error_reason else opts.unknown_error_message
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": message},
        )

    # DomainFailure and UpstreamFailure carry a trusted status and payload
    return JSONResponse(status_code=failure.status_code, content=failure.payload)


def default_error_handler(environment: Environment) -> ExceptionHandler:
    """
    Create the exception handler for an environment's profile.

    Args:
        environment: Environment resolved at startup

    Returns:
        Async exception handler for FastAPI
    """
    options = PROFILES[environment]

    async def error_handler(request: Request, exc: Exception) -> JSONResponse:
        return resolve_error(exc, request, options)

    error_handler.__name__ = f"{environment.value}_error_handler"
    return error_handler


class ErrorResolverMiddleware(BaseHTTPMiddleware):
    """
    Resolves failures that no exception handler claimed.

    Sits inside the CORS header middleware, so 500 responses for unexpected
    failures are answered within the stack and carry the CORS headers.
    """

    def __init__(self, app: ASGIApp, environment: Environment) -> None:
        super().__init__(app)
        self.options = PROFILES[environment]

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return resolve_error(exc, request, self.options)


def install_error_handlers(app: FastAPI, environment: Environment) -> None:
    """
    Register the resolver for every failure the gateway can surface.

    Known failure types go through exception handlers; anything else is
    caught by ErrorResolverMiddleware. Call this before adding the CORS
    header middleware so the CORS middleware wraps the resolver.

    Args:
        app: FastAPI application
        environment: Environment resolved at startup
    """
    handler = default_error_handler(environment)
    for exc_class in (ApiError, UpstreamServiceError, httpx.HTTPError):
        app.add_exception_handler(exc_class, handler)
    app.add_middleware(ErrorResolverMiddleware, environment=environment)
