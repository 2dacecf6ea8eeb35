"""
Tags Routes
===========

Proxies the /tags resource to the data service.

Endpoints:
----------
- GET /tags: any authenticated user
- POST /tags: admin only
"""

from fastapi import APIRouter, Depends

from ..auth.guards import admin, authenticated
from ..models import ErrorResponse
from ..proxy.forwarder import default_proxy_handler

tags_router = APIRouter()

GUARDED_ERROR_RESPONSES = {
    401: {"model": ErrorResponse, "description": "Missing or invalid session token"},
    403: {"model": ErrorResponse, "description": "Admin privileges required"},
    500: {"model": ErrorResponse, "description": "Unclassified failure"},
}

tags_router.add_api_route(
    "",
    default_proxy_handler(),
    methods=["GET"],
    dependencies=[Depends(authenticated)],
    name="list_tags",
    responses=GUARDED_ERROR_RESPONSES,
)

tags_router.add_api_route(
    "",
    default_proxy_handler(),
    methods=["POST"],
    dependencies=[Depends(admin)],
    name="create_tag",
    responses=GUARDED_ERROR_RESPONSES,
)
