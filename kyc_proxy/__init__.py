"""
KYC Proxy

Forwards Know-Your-Customer data requests to the Airtable API, injecting
the Airtable bearer credential server-side so callers never hold it.
"""

__version__ = "1.0.0"
