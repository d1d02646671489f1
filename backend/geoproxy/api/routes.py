"""API routes for GeoProxy.

A single lookup endpoint. Client identity is the TCP peer address, never a
header, so callers behind a shared NAT or proxy share one quota.
"""

from fastapi import APIRouter, Request

from geoproxy.models import GeoRequest, LocationResponse
from geoproxy.services import GeoProxyService

router = APIRouter()


def get_proxy_service(request: Request) -> GeoProxyService:
    return request.app.state.proxy_service


def client_key(request: Request) -> str:
    """Derive the cache / rate-limit key from the connection's peer address."""
    if request.client is None:
        return "unknown"
    return request.client.host


@router.post(
    "/geo",
    response_model=LocationResponse,
    responses={
        429: {"description": "Daily quota exhausted"},
        500: {"description": "Provider unreachable or returned an unreadable body"},
        502: {"description": "Provider returned an error status"},
    },
)
async def geolocate(body: GeoRequest, request: Request) -> LocationResponse:
    """Resolve a WiFi access point scan to a location.

    Errors are raised as GeoProxyError subclasses and rendered as plain text
    by the handlers registered in ``geoproxy.main``.
    """
    service = get_proxy_service(request)
    location = await service.resolve(client_key(request), body)
    return location.to_response()
