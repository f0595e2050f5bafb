"""
KYC Status Routes
=================

Looks up the KYC status of a single NEAR account in the Airtable table and
returns it in a stable, caller-facing shape.

Endpoints:
----------
- GET /kyc/{account_id}: Resolve the KYC status of one account
"""

import logging
from typing import Union

import httpx
from fastapi import APIRouter, Depends, HTTPException, Path, Response, status
from pydantic import ValidationError

from ..config import Settings
from ..models import AirtableResponse, KycStatusResponse
from ..proxy.upstream import (
    build_upstream_headers,
    fetch_table,
    get_app_settings,
    get_upstream_client,
    relay_response,
)
from .status import build_status_query, is_valid_account_id, resolve_kyc_status

logger = logging.getLogger(__name__)

kyc_router = APIRouter()


def validate_account_id(
    account_id: str = Path(..., description="NEAR account ID, e.g. alice.near")
) -> str:
    """Dependency rejecting account IDs that are not valid NEAR names."""
    if not is_valid_account_id(account_id):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid NEAR account ID: '{account_id}'"
        )
    return account_id


@kyc_router.get(
    "/kyc/{account_id}",
    response_model=KycStatusResponse,
    responses={502: {"description": "Upstream unreachable or returned an unexpected payload"}},
)
async def get_account_kyc_status(
    account_id: str = Depends(validate_account_id),
    settings: Settings = Depends(get_app_settings),
    upstream_client: httpx.AsyncClient = Depends(get_upstream_client)
) -> Union[KycStatusResponse, Response]:
    """
    Resolve the KYC status of a NEAR account.

    Upstream error statuses are relayed unchanged, like GET /kyc.

    Raises:
        HTTPException: 422 for an invalid account ID, 502/504 for upstream
                       failures or an unparseable upstream body
    """
    params = build_status_query(account_id, settings)
    upstream_headers = build_upstream_headers(settings)

    upstream = await fetch_table(upstream_client, settings, params, upstream_headers)
    if upstream.is_error:
        return relay_response(upstream)

    try:
        payload = AirtableResponse.model_validate_json(upstream.content)
    except ValidationError as e:
        logger.error(
            "Upstream payload did not match the Airtable schema",
            extra={"account_id": account_id, "error_count": e.error_count()}
        )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Upstream returned an unexpected payload"
        )

    kyc_status = resolve_kyc_status(payload.records)
    logger.info(
        "Resolved KYC status",
        extra={
            "account_id": account_id,
            "record_count": len(payload.records),
            "kyc_status": kyc_status.value,
        }
    )

    return KycStatusResponse(account_id=account_id, kyc_status=kyc_status)
