"""
Passed Headers
==============

Builds the header set forwarded to the data service.

The Authorization header is never forwarded: the gateway authenticates the
caller itself and identifies the user to the data service through
X-User-* headers (and X-Internal-Secret when configured).
"""

from typing import Any, Dict, Mapping, Optional

# Headers owned by the inbound connection, never forwarded
HOP_BY_HOP_HEADERS = frozenset({
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailer",
    "transfer-encoding",
    "upgrade",
})

DROPPED_HEADERS = HOP_BY_HOP_HEADERS | {"authorization", "host", "content-length"}


def build_passed_headers(
    inbound_headers: Mapping[str, str],
    claims: Optional[Dict[str, Any]] = None,
    internal_secret: Optional[str] = None,
) -> Dict[str, str]:
    """
    Build headers for the data service request.

    Args:
        inbound_headers: Headers of the inbound request
        claims: Verified session claims, if a guard ran
        internal_secret: Shared secret for the data service, if configured

    Returns:
        Headers dict for the outbound request
    """
    passed = {
        name: value
        for name, value in inbound_headers.items()
        if name.lower() not in DROPPED_HEADERS
    }

    if claims:
        if claims.get("sub"):
            passed["X-User-Id"] = str(claims["sub"])
        if claims.get("email"):
            passed["X-User-Email"] = str(claims["email"])

    if internal_secret:
        passed["X-Internal-Secret"] = internal_secret

    return passed
