"""
Claim extraction contract.

Document parsing happens outside credproof. The extractor hands over an
ExtractedData; this module picks the claim type, pulls the matching value
and builds the ClaimRecord that gets encoded and stored.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from credproof.core.models import ClaimMetadata, ClaimRecord, ClaimType

logger = logging.getLogger(__name__)

Number = Union[int, float]


@dataclass(frozen=True)
class ExtractedData:
    """Structured output of a document extractor"""
    credit_score:    Optional[Number] = None
    account_balance: Optional[Number] = None
    income:          Optional[Number] = None
    has_defaults:    Optional[bool]   = None
    document_type:   Optional[str]    = None
    issuer:          Optional[str]    = None
    issue_date:      Optional[str]    = None

    _WIRE = (
        ("credit_score",    "creditScore"),
        ("account_balance", "accountBalance"),
        ("income",          "income"),
        ("has_defaults",    "hasDefaults"),
        ("document_type",   "documentType"),
        ("issuer",          "issuer"),
        ("issue_date",      "issueDate"),
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            wire: getattr(self, attr)
            for attr, wire in self._WIRE
            if getattr(self, attr) is not None
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExtractedData":
        return cls(**{attr: data.get(wire) for attr, wire in cls._WIRE})


_VALUE_FIELDS = {
    ClaimType.CREDIT_SCORE:        "credit_score",
    ClaimType.ACCOUNT_BALANCE:     "account_balance",
    ClaimType.INCOME_VERIFICATION: "income",
}

_DOCUMENT_CLAIM_TYPES = {
    "credit_report":    ClaimType.CREDIT_SCORE,
    "bank_statement":   ClaimType.ACCOUNT_BALANCE,
    "income_statement": ClaimType.INCOME_VERIFICATION,
}


def determine_claim_type(extracted: ExtractedData) -> str:
    """
    Pick the claim type an extraction supports.

    Order: a present numeric value wins, then the document type, then
    a known defaults flag. Anything else falls back to account_balance.
    """
    for claim_type, attr in _VALUE_FIELDS.items():
        if getattr(extracted, attr) is not None:
            logger.debug("Claim type %s (has %s value)", claim_type, attr)
            return claim_type

    by_document = _DOCUMENT_CLAIM_TYPES.get(extracted.document_type)
    if by_document is not None:
        logger.debug("Claim type %s (from document type)", by_document)
        return by_document

    if extracted.has_defaults is not None:
        return ClaimType.CREDIT_HISTORY

    return ClaimType.ACCOUNT_BALANCE


def claim_value_for(extracted: ExtractedData, claim_type: str) -> Optional[Number]:
    """Numeric value backing claim_type, or None (always None for credit_history)."""
    attr = _VALUE_FIELDS.get(claim_type)
    if attr is None:
        return None
    return getattr(extracted, attr)


def build_claim_record(
    extracted:      ExtractedData,
    wallet_address: str,
    file_name:      str,
    claim_type:     Optional[str] = None,
    timestamp:      Optional[str] = None,
) -> ClaimRecord:
    """
    Build the ClaimRecord the creation flow mints a proof for.

    The whole extraction rides along as metadata.extractedData. An
    extraction that says nothing about defaults is recorded as
    hasDefaults=False.
    """
    if not claim_type:
        claim_type = determine_claim_type(extracted)

    return ClaimRecord.create(
        claim_type=     claim_type,
        claim_value=    claim_value_for(extracted, claim_type),
        metadata=       ClaimMetadata(
            has_defaults=   bool(extracted.has_defaults),
            document_type=  extracted.document_type,
            issuer=         extracted.issuer,
            extracted_data= extracted.to_dict(),
        ),
        wallet_address= wallet_address,
        timestamp=      timestamp,
        file_name=      file_name,
    )
