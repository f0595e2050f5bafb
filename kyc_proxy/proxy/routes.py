"""
Proxy Routes - KYC Table Forwarding
===================================

This module implements the pass-through endpoint that forwards KYC data
requests to the Airtable table with the server-side credential attached.

Security Model:
---------------
1. Callers never hold the Airtable token
2. The proxy injects Authorization: Bearer <AIRTABLE_API_TOKEN>
3. No inbound header is forwarded, a caller Authorization included
4. Only the configured base/table can be reached

Endpoints:
----------
- GET /kyc: Forward to the KYC table, relay the response verbatim
"""

import logging

import httpx
from fastapi import APIRouter, Depends, Request, Response

from ..config import Settings
from .upstream import (
    build_upstream_headers,
    fetch_table,
    get_app_settings,
    get_upstream_client,
    relay_response,
)

logger = logging.getLogger(__name__)

proxy_router = APIRouter()


@proxy_router.get("/kyc")
async def proxy_kyc_table(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    upstream_client: httpx.AsyncClient = Depends(get_upstream_client)
) -> Response:
    """
    Proxy a list-records request to the KYC table.

    Flow:
    1. Build upstream headers from the configured token only
    2. Forward inbound query parameters unchanged
    3. Relay upstream status, body and content type verbatim

    Raises:
        HTTPException: 504 on upstream timeout, 502 on transport failure
    """
    params = list(request.query_params.multi_items())
    upstream_headers = build_upstream_headers(settings)

    logger.info(
        "Proxying KYC table request",
        extra={"query_param_count": len(params)}
    )

    upstream = await fetch_table(upstream_client, settings, params, upstream_headers)
    return relay_response(upstream)
