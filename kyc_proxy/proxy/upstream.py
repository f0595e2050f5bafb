"""
Upstream Airtable Access
========================

Everything that touches the Airtable API goes through this module:

1. The shared httpx.AsyncClient is read from app state
2. Outbound headers are built from settings, never from the caller
3. Transport failures are mapped to gateway error statuses
4. Upstream responses are relayed without interpretation
"""

import logging
from typing import Dict, Sequence, Tuple

import httpx
from fastapi import HTTPException, Request, Response, status

from ..config import Settings

logger = logging.getLogger(__name__)

QueryParams = Sequence[Tuple[str, str]]


# ============================================================================
# Dependencies
# ============================================================================

def get_app_settings(request: Request) -> Settings:
    """Dependency returning the settings the application was created with."""
    return request.app.state.app_state.settings


def get_upstream_client(request: Request) -> httpx.AsyncClient:
    """
    Dependency to get the upstream HTTP client from app state.

    Args:
        request: FastAPI request object

    Returns:
        Pooled httpx.AsyncClient created during application startup

    Raises:
        HTTPException: 503 if the client has not been initialized
    """
    app_state = getattr(request.app.state, "app_state", None)
    client = getattr(app_state, "upstream_client", None) if app_state else None
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Upstream client not available"
        )

    return client


# ============================================================================
# Header Construction
# ============================================================================

def build_upstream_headers(settings: Settings) -> Dict[str, str]:
    """
    Build headers for the Airtable request.

    Inbound headers are never forwarded. The Authorization header is always
    the configured Airtable token, so a caller-supplied one can never reach
    upstream and the outbound request carries exactly one.

    Args:
        settings: Application settings

    Returns:
        Headers dict for the upstream request
    """
    return {
        "accept": "application/json",
        "authorization": f"Bearer {settings.AIRTABLE_API_TOKEN}",
    }


# ============================================================================
# Forwarding
# ============================================================================

async def fetch_table(
    client: httpx.AsyncClient,
    settings: Settings,
    params: QueryParams,
    headers: Dict[str, str],
) -> httpx.Response:
    """
    Issue the list-records GET against the configured table.

    Timeouts come from the shared client. No retries: one attempt, and any
    transport failure goes straight back to the caller.

    Raises:
        HTTPException: 504 on timeout, 502 when upstream cannot be reached
    """
    url = settings.airtable_table_url

    try:
        response = await client.get(
            url,
            params=list(params),
            headers=headers
        )

    except httpx.TimeoutException:
        logger.error("Upstream request timeout", extra={"upstream_url": url})
        raise HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail="Upstream service timeout"
        )

    except httpx.TransportError as e:
        logger.error(
            f"Upstream transport error: {type(e).__name__}",
            extra={"upstream_url": url}
        )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Cannot reach upstream service"
        )

    if response.is_error:
        logger.warning(
            f"Upstream returned error status: {response.status_code}",
            extra={"upstream_url": url}
        )

    return response


def relay_response(upstream: httpx.Response) -> Response:
    """
    Turn an upstream response into the proxy's response, unmodified.

    Status code, body bytes and content type are copied; transfer-level
    headers are left to the ASGI server.
    """
    return Response(
        content=upstream.content,
        status_code=upstream.status_code,
        media_type=upstream.headers.get("content-type"),
    )
