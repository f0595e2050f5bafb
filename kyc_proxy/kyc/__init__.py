"""
KYC Package

Account-level KYC status lookups on top of the Airtable table.

Modules:
- routes: GET /kyc/{account_id}
- status: Account ID validation, lookup formula and status resolution
"""

from .routes import kyc_router

__all__ = [
    "kyc_router",
]
