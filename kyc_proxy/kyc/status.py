"""
KYC status resolution.

Turns the rows Airtable returns for a wallet into a single caller-facing
KycStatus, and builds the list-records query that finds those rows.
"""

import re
from typing import Dict, List, Sequence, Tuple

from ..config import Settings
from ..models import AirtableRecord, KycApprovalStanding, KycStatus

# NEAR account ID: lowercase alphanumeric parts joined by single separators.
ACCOUNT_ID_PATTERN = re.compile(r"(?:[a-z\d]+[-_.])*[a-z\d]+")
ACCOUNT_ID_MIN_LENGTH = 2
ACCOUNT_ID_MAX_LENGTH = 64

STANDING_TO_STATUS: Dict[KycApprovalStanding, KycStatus] = {
    KycApprovalStanding.VERIFIED: KycStatus.APPROVED,
    KycApprovalStanding.REJECTED: KycStatus.REJECTED,
    KycApprovalStanding.PENDING: KycStatus.PENDING,
    KycApprovalStanding.EXPIRED: KycStatus.EXPIRED,
    KycApprovalStanding.NOT_SUBMITTED: KycStatus.NOT_SUBMITTED,
}


def is_valid_account_id(account_id: str) -> bool:
    """
    Check an account ID against NEAR naming rules.

    Example:
        >>> is_valid_account_id("alice.near")
        True
        >>> is_valid_account_id("Alice..near")
        False
    """
    if not ACCOUNT_ID_MIN_LENGTH <= len(account_id) <= ACCOUNT_ID_MAX_LENGTH:
        return False
    return ACCOUNT_ID_PATTERN.fullmatch(account_id) is not None


def build_wallet_formula(account_id: str) -> str:
    """
    Airtable formula matching the account in the comma-separated
    Wallet Address column.

    account_id must already be validated; the NEAR alphabet has no quotes,
    so it cannot break out of the string literal. Dots become a character
    class so they only match a literal dot.
    """
    pattern = account_id.replace(".", "[.]")
    return f"REGEX_MATCH({{Wallet Address}}, '(^|,){pattern}(,|$)')"


def build_status_query(account_id: str, settings: Settings) -> List[Tuple[str, str]]:
    """List-records query parameters for an account lookup."""
    return [
        ("maxRecords", str(settings.KYC_MAX_RECORDS)),
        ("view", settings.KYC_VIEW),
        ("filterByFormula", build_wallet_formula(account_id)),
    ]


def resolve_kyc_status(records: Sequence[AirtableRecord]) -> KycStatus:
    """
    Pick the status for an account from its matching records.

    A Verified record anywhere wins; otherwise the first record decides;
    no records at all means nothing was submitted.
    """
    for record in records:
        if record.fields.approval_standing is KycApprovalStanding.VERIFIED:
            return KycStatus.APPROVED

    if records:
        return STANDING_TO_STATUS[records[0].fields.approval_standing]

    return KycStatus.NOT_SUBMITTED
