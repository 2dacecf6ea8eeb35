"""
Proxy Package
=============

Generic request forwarding to the data service.

Main Components:
----------------
- forwarder.py: default_proxy_handler / default_target_options
- resolver.py: resolve_error and the environment error profiles
- client.py: DataServiceClient over a shared httpx.AsyncClient
- headers.py: passed headers sent to the data service

Usage:
------
    from api_gateway.app.proxy import default_proxy_handler
    router.add_api_route("/", default_proxy_handler(), methods=["GET"])
"""

from .client import DataServiceClient, get_data_service_client
from .forwarder import default_proxy_handler, default_target_options, relay_response
from .resolver import (
    ErrorResolverMiddleware,
    default_error_handler,
    install_error_handlers,
    resolve_error,
)

__all__ = [
    "DataServiceClient",
    "get_data_service_client",
    "default_proxy_handler",
    "default_target_options",
    "relay_response",
    "ErrorResolverMiddleware",
    "default_error_handler",
    "install_error_handlers",
    "resolve_error",
]
