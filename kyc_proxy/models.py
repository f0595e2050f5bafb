"""
Data Models Module

This module defines Pydantic models for the Airtable payloads the proxy
reads and the responses it returns.

Models are organized by functional area:
- Airtable models (list-records response, records, fields)
- KYC models (approval standing, caller-facing status, lookup response)
- Service models (health check, error envelope)
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# KYC Models
# ============================================================================

class KycApprovalStanding(str, Enum):
    """Values of the "Owner Verification Status" column in Airtable."""

    VERIFIED = "Verified"
    REJECTED = "Rejected"
    PENDING = "Pending"
    EXPIRED = "Expired"
    NOT_SUBMITTED = "Not Submitted"


class KycStatus(str, Enum):
    """KYC status reported to callers."""

    NOT_SUBMITTED = "NOT_SUBMITTED"
    PENDING = "PENDING"
    REJECTED = "REJECTED"
    APPROVED = "APPROVED"
    EXPIRED = "EXPIRED"


class KycStatusResponse(BaseModel):
    """Response model for an account KYC lookup."""
    account_id: str = Field(..., description="NEAR account ID that was looked up")
    kyc_status: KycStatus = Field(..., description="Resolved KYC status")


# ============================================================================
# Airtable Models
# ============================================================================

class AirtableFields(BaseModel):
    """Subset of record fields the status lookup depends on."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    approval_standing: KycApprovalStanding = Field(
        ...,
        alias="Owner Verification Status",
        description="Verification standing of the wallet owner",
    )


class AirtableRecord(BaseModel):
    """Single row of an Airtable list-records response."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = Field(None, description="Airtable record ID")
    created_time: Optional[str] = Field(None, alias="createdTime", description="Record creation time")
    fields: AirtableFields


class AirtableResponse(BaseModel):
    """Airtable list-records response body."""
    model_config = ConfigDict(extra="ignore")

    records: List[AirtableRecord] = Field(default_factory=list)
    offset: Optional[str] = Field(None, description="Pagination cursor for the next page")


# ============================================================================
# Service Models
# ============================================================================

class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service health status")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")


class ErrorResponse(BaseModel):
    """Standardized error response model for unhandled failures."""
    error: str = Field(..., description="Error type or code")
    message: str = Field(..., description="Human-readable error message")
    detail: Optional[Any] = Field(None, description="Additional error details")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Error timestamp",
    )
