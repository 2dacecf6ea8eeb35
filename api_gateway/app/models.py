"""
Data Models Module

This module defines Pydantic models shared by the gateway:

- Proxy models (the outbound request descriptor and the relayed response)
- Error resolution options
- Response bodies (health check, unclassified error)
"""

from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Proxy Models
# ============================================================================

class ProxiedRequest(BaseModel):
    """Outbound request built from an inbound request."""

    model_config = ConfigDict(frozen=True)

    method: str = Field(..., description="HTTP method of the inbound request")
    uri: str = Field(..., description="Target URI relative to the data service base URL")
    headers: Dict[str, str] = Field(default_factory=dict, description="Passed headers")
    body: Any = Field(None, description="Decoded JSON body, raw bytes, or None when empty")
    params: List[Tuple[str, str]] = Field(
        default_factory=list,
        description="Query parameters as ordered name/value pairs",
    )


class ProxiedResponse(BaseModel):
    """Data service response relayed to the caller unchanged."""

    model_config = ConfigDict(frozen=True)

    status_code: int = Field(..., description="Status code from the data service")
    body: Any = Field(None, description="Decoded JSON body, None when the body was empty")


# ============================================================================
# Error Resolution
# ============================================================================

class ResolveErrorOptions(BaseModel):
    """Options controlling how unclassified failures are reported."""

    model_config = ConfigDict(frozen=True)

    unknown_error_message: str = Field(
        default="Internal Server Error",
        description="Message sent to the caller for internal errors",
    )
    log: bool = Field(default=False, description="Log the failure before responding")
    display_error_reason: bool = Field(
        default=False,
        description="Append the failure reason to the response message",
    )


# ============================================================================
# Response Models
# ============================================================================

class ErrorResponse(BaseModel):
    """Body of an unclassified (HTTP 500) error."""
    message: str = Field(..., description="Human-readable error message")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service health status")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
    environment: Optional[str] = Field(None, description="Resolved environment")
