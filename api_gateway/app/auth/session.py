"""
JWT Session Management Module
==============================

Handles creation and verification of the session JWTs presented to the
gateway as bearer tokens. HMAC algorithms only (HS256/HS384/HS512).

Verification failures raise UnauthorizedError, a domain error relayed to the
caller verbatim by the error resolver.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from ..config import Settings
from ..errors import UnauthorizedError

logger = logging.getLogger(__name__)


# =============================================================================
# Token Creation
# =============================================================================

def create_session_jwt(
    claims: Dict[str, Any],
    settings: Settings,
    expires_in_minutes: Optional[int] = None,
) -> str:
    """
    Create a session JWT with the provided claims.

    Args:
        claims: Claims to include. 'sub' is required; 'email' and 'roles'
                are read by the guards.
        settings: Application settings (secret, algorithm, issuer)
        expires_in_minutes: Optional custom expiry (overrides settings)

    Returns:
        Encoded JWT string

    Raises:
        ValueError: If the 'sub' claim is missing

    Example:
        >>> token = create_session_jwt({"sub": "user-1", "roles": ["admin"]}, settings)
    """
    if "sub" not in claims:
        raise ValueError("Missing required claim: 'sub' (subject/user ID)")

    payload = claims.copy()
    now = datetime.now(timezone.utc)
    expiry = expires_in_minutes or settings.SESSION_JWT_EXPIRY_MINUTES
    payload.update({
        "iat": now,
        "exp": now + timedelta(minutes=expiry),
        "iss": settings.JWT_ISSUER,
    })

    return jwt.encode(
        payload,
        settings.SESSION_JWT_SECRET,
        algorithm=settings.SESSION_JWT_ALGORITHM,
    )


# =============================================================================
# Token Verification
# =============================================================================

def verify_session_jwt(token: str, settings: Settings) -> Dict[str, Any]:
    """
    Verify and decode a session JWT.

    Args:
        token: JWT string to verify
        settings: Application settings

    Returns:
        Dictionary containing the decoded claims

    Raises:
        UnauthorizedError: If the token is empty, expired or invalid
    """
    if not token:
        raise UnauthorizedError("No authentication token provided")

    try:
        decoded = jwt.decode(
            token,
            settings.SESSION_JWT_SECRET,
            algorithms=[settings.SESSION_JWT_ALGORITHM],
            issuer=settings.JWT_ISSUER,
            options={"require": ["exp", "iat", "sub", "iss"]},
        )
    except ExpiredSignatureError:
        logger.warning("JWT token expired")
        raise UnauthorizedError("Token has expired")
    except InvalidTokenError as e:
        logger.warning(f"Invalid JWT token: {e}")
        raise UnauthorizedError("Invalid token")

    logger.debug("JWT verified", extra={"user_id": decoded.get("sub")})
    return decoded


def extract_token_from_header(authorization: Optional[str]) -> str:
    """
    Extract Bearer token from Authorization header.

    Raises:
        UnauthorizedError: If header is missing or not 'Bearer <token>'
    """
    if not authorization:
        raise UnauthorizedError("Missing Authorization header")

    parts = authorization.split()

    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise UnauthorizedError(
            "Invalid Authorization header format. Expected: 'Bearer <token>'"
        )

    return parts[1]


__all__ = [
    "create_session_jwt",
    "verify_session_jwt",
    "extract_token_from_header",
]
