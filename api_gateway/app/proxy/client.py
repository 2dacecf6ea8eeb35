"""
Data Service Client
===================

Thin wrapper around a shared httpx.AsyncClient bound to the data service
base URL. Responses are expected to carry JSON bodies.
"""

import logging
import time
from typing import Any, Dict

import httpx
from fastapi import Request

from ..errors import UpstreamServiceError
from ..models import ProxiedRequest, ProxiedResponse

logger = logging.getLogger(__name__)


def create_http_client(base_url: str, timeout: float) -> httpx.AsyncClient:
    """
    Create the pooled HTTP client used for all data service calls.

    Args:
        base_url: Data service base URL
        timeout: Request timeout in seconds

    Returns:
        Configured httpx.AsyncClient (caller owns closing it)
    """
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=httpx.Timeout(timeout, connect=10.0),
        headers={"Accept": "application/json"},
    )


def decode_body(response: httpx.Response) -> Any:
    """Decode a JSON response body; an empty body decodes to None."""
    if not response.content:
        return None
    return response.json()


class DataServiceClient:
    """
    Sends proxied requests to the data service.

    Attributes:
        http_client: Shared httpx.AsyncClient with the data service base URL
    """

    def __init__(self, http_client: httpx.AsyncClient):
        self.http_client = http_client

    def _request_kwargs(self, proxied: ProxiedRequest) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"headers": proxied.headers}
        if proxied.params:
            kwargs["params"] = proxied.params
        if isinstance(proxied.body, (bytes, str)):
            kwargs["content"] = proxied.body
        elif proxied.body is not None:
            kwargs["json"] = proxied.body
        return kwargs

    async def send(
        self,
        proxied: ProxiedRequest,
        raise_for_status: bool = False,
    ) -> ProxiedResponse:
        """
        Issue the proxied request and decode the response.

        Args:
            proxied: Outbound request descriptor
            raise_for_status: Raise UpstreamServiceError on 4xx/5xx instead
                of returning the response

        Returns:
            ProxiedResponse with the data service status code and body

        Raises:
            httpx.HTTPError: On transport failures
            json.JSONDecodeError: If the data service body is not JSON
            UpstreamServiceError: On error status when raise_for_status is set
        """
        start_time = time.monotonic()

        response = await self.http_client.request(
            proxied.method,
            proxied.uri,
            **self._request_kwargs(proxied),
        )

        logger.debug(
            "Data service responded",
            extra={
                "method": proxied.method,
                "uri": proxied.uri,
                "status_code": response.status_code,
                "duration": f"{time.monotonic() - start_time:.4f}s",
            }
        )

        body = decode_body(response)

        if raise_for_status and response.is_error:
            raise UpstreamServiceError(response.status_code, body)

        return ProxiedResponse(status_code=response.status_code, body=body)


def get_data_service_client(request: Request) -> DataServiceClient:
    """
    Dependency to get the data service client from app state.

    Raises:
        RuntimeError: If the client was not created by the app lifespan
    """
    client = getattr(request.app.state, "data_service_client", None)
    if client is None:
        raise RuntimeError("Data service client not initialized")
    return client
