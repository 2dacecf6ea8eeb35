"""
Security Guards
===============

FastAPI dependencies run before the proxy handler. A rejected request never
reaches the data service.

- authenticated: valid session JWT required
- admin: valid session JWT with the "admin" role required

On success the verified claims are bound to request.state.user and the
passed headers for the data service to request.state.passed_headers.
"""

import logging
from typing import Any, Dict

from fastapi import Depends, Request

from ..config import Settings
from ..errors import ForbiddenError, UnauthorizedError
from ..proxy.headers import build_passed_headers
from .session import extract_token_from_header, verify_session_jwt

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


def get_app_settings(request: Request) -> Settings:
    """Dependency returning the settings the app was created with."""
    return request.app.state.settings


async def authenticated(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """
    Require a valid session JWT.

    Returns:
        Verified user claims

    Raises:
        UnauthorizedError: If the token is missing or invalid
    """
    try:
        token = extract_token_from_header(request.headers.get("Authorization"))
        claims = verify_session_jwt(token, settings)
    except UnauthorizedError:
        logger.warning(
            "Unauthorized access attempt",
            extra={
                "path": request.url.path,
                "client_ip": request.client.host if request.client else None,
            }
        )
        raise

    request.state.user = claims
    request.state.passed_headers = build_passed_headers(
        request.headers,
        claims,
        settings.DATA_SERVICE_SECRET,
    )
    return claims


def has_role(claims: Dict[str, Any], role: str) -> bool:
    roles = claims.get("roles") or []
    if isinstance(roles, str):
        roles = [roles]
    return role in roles


async def admin(
    request: Request,
    claims: Dict[str, Any] = Depends(authenticated),
) -> Dict[str, Any]:
    """
    Require a valid session JWT carrying the admin role.

    Raises:
        UnauthorizedError: If the token is missing or invalid
        ForbiddenError: If the user is not an admin
    """
    if not has_role(claims, ADMIN_ROLE):
        logger.warning(
            "Admin privileges required",
            extra={"user_id": claims.get("sub"), "path": request.url.path}
        )
        raise ForbiddenError("Admin privileges required")
    return claims
