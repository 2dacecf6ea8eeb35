"""
Proxy Forwarder
===============

Generic proxy handler reused by every route: build an outbound request from
the inbound one, forward it to the data service once, and relay the status
code and body unchanged.

Failures are not handled here. They propagate to the exception handlers
installed by proxy.resolver, so error formatting lives in one place.
"""

import json
from typing import Any, Awaitable, Callable, Optional

from fastapi import Depends, Request, Response
from fastapi.responses import JSONResponse

from .client import DataServiceClient, get_data_service_client
from .headers import build_passed_headers
from ..models import ProxiedRequest, ProxiedResponse


ProxyEndpoint = Callable[..., Awaitable[Response]]


def original_url(request: Request) -> str:
    """Path and query string exactly as received."""
    path = request.scope.get("raw_path") or request.url.path.encode()
    if isinstance(path, bytes):
        path = path.decode("latin-1")
    path = path.split("?", 1)[0]
    query = request.scope.get("query_string", b"").decode("latin-1")
    return f"{path}?{query}" if query else path


def _parse_body(raw: bytes) -> Any:
    # Bodies that are not JSON are forwarded as raw bytes
    if not raw:
        return None
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return raw


async def default_target_options(
    request: Request,
    uri: Optional[str] = None,
) -> ProxiedRequest:
    """
    Build the outbound request descriptor for an inbound request.

    Uses the inbound method, the override URI (or the original path and
    query string), the passed headers, the body and the query parameters.
    Nothing is validated.

    Args:
        request: Inbound request
        uri: Optional URI replacing the original one

    Returns:
        ProxiedRequest descriptor
    """
    headers = getattr(request.state, "passed_headers", None)
    if headers is None:
        headers = build_passed_headers(request.headers)

    return ProxiedRequest(
        method=request.method,
        uri=uri or original_url(request),
        headers=headers,
        body=_parse_body(await request.body()),
        params=request.query_params.multi_items(),
    )


def relay_response(proxied: ProxiedResponse) -> Response:
    """Write the data service status code and body to the caller."""
    if proxied.body is None:
        return Response(status_code=proxied.status_code)
    return JSONResponse(status_code=proxied.status_code, content=proxied.body)


def default_proxy_handler(uri: Optional[str] = None) -> ProxyEndpoint:
    """
    Create a route endpoint that proxies the request to the data service.

    Args:
        uri: Override for the target URI. If not given, the original URI
            of the inbound request is used.

    Returns:
        Async endpoint suitable for APIRouter.add_api_route
    """
    async def proxy_request(
        request: Request,
        client: DataServiceClient = Depends(get_data_service_client),
    ) -> Response:
        options = await default_target_options(request, uri)
        proxied = await client.send(options)
        return relay_response(proxied)

    return proxy_request
