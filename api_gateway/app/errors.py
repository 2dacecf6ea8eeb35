"""
Error Types
===========

Domain errors raised by the gateway, and the classification of any failure
into one of three shapes:

- DomainFailure: an ApiError raised on purpose, relayed verbatim
- UpstreamFailure: a status code reported by the data service, with a
  JSON payload that could be confirmed
- UnclassifiedFailure: everything else (network errors, bugs, bodies that
  are not JSON), always answered with HTTP 500
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import httpx
from fastapi import status


# =============================================================================
# Exceptions
# =============================================================================

class ApiError(Exception):
    """
    Application-defined error with a fixed HTTP status and response body.

    Attributes:
        status_code: HTTP status code sent to the caller
        message: Human-readable message
        details: Optional extra payload included in the body
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details

    def to_json(self) -> Dict[str, Any]:
        """Body sent to the caller for this error."""
        body: Dict[str, Any] = {"message": self.message}
        if self.details:
            body["details"] = self.details
        return body

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.status_code}, {self.message!r})"


class UnauthorizedError(ApiError):
    """Raised when a request carries no valid session token."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(ApiError):
    """Raised when an authenticated user lacks the required role."""

    status_code = status.HTTP_403_FORBIDDEN


class UpstreamServiceError(Exception):
    """
    Raised when the data service answers with an error status.

    Attributes:
        status_code: HTTP status code from the data service
        error: Decoded error payload from the data service
    """

    def __init__(self, status_code: int, error: Any) -> None:
        super().__init__(f"Data service responded with {status_code}")
        self.status_code = status_code
        self.error = error


# =============================================================================
# Failure Classification
# =============================================================================

@dataclass(frozen=True)
class DomainFailure:
    status_code: int
    payload: Any


@dataclass(frozen=True)
class UpstreamFailure:
    status_code: int
    payload: Any


@dataclass(frozen=True)
class UnclassifiedFailure:
    reason: str


Failure = Union[DomainFailure, UpstreamFailure, UnclassifiedFailure]


def _failure_reason(exc: BaseException) -> str:
    return str(exc) or exc.__class__.__name__


def classify_failure(exc: BaseException) -> Failure:
    """
    Classify a failure raised while handling a request.

    A status code is only trusted together with a payload whose shape is
    known; otherwise the failure is unclassified.

    Args:
        exc: Exception raised by a guard, the forwarder or a route

    Returns:
        One of DomainFailure, UpstreamFailure or UnclassifiedFailure
    """
    if isinstance(exc, ApiError):
        return DomainFailure(exc.status_code, exc.to_json())

    if isinstance(exc, UpstreamServiceError):
        if exc.error is None:
            return UnclassifiedFailure(_failure_reason(exc))
        return UpstreamFailure(exc.status_code, exc.error)

    if isinstance(exc, httpx.HTTPStatusError):
        try:
            payload = exc.response.json()
        except (json.JSONDecodeError, UnicodeDecodeError, httpx.ResponseNotRead):
            return UnclassifiedFailure(_failure_reason(exc))
        return UpstreamFailure(exc.response.status_code, payload)

    return UnclassifiedFailure(_failure_reason(exc))
