"""
Proxy Package
=============

This package forwards KYC data requests to the Airtable API with the
Airtable credential injected server-side.

Main Components:
----------------
- routes.py: FastAPI router with the pass-through endpoint (/kyc)
- upstream.py: Header construction, upstream call and response relay

Usage:
------
    from kyc_proxy.proxy import proxy_router
    app.include_router(proxy_router)
"""

from .routes import proxy_router

__all__ = ["proxy_router"]
