"""
Authentication Package
======================

Session JWT verification and the guards applied to proxied routes.
"""

from .guards import admin, authenticated
from .session import create_session_jwt, extract_token_from_header, verify_session_jwt

__all__ = [
    "admin",
    "authenticated",
    "create_session_jwt",
    "extract_token_from_header",
    "verify_session_jwt",
]
