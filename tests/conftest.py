"""
Shared fixtures for the credproof test suite.
"""

import pytest

from credproof.core.models import ClaimMetadata, ClaimRecord, ClaimType
from credproof.store.store import ProofStore

FIXED_TIMESTAMP = "2025-01-15T10:30:00.000Z"
WALLET          = "0x71C7656EC7ab88b098defB751B7401B5f6d8976F"


def _make_record(
    claim_type:     str = ClaimType.CREDIT_SCORE,
    claim_value=    720,
    has_defaults=   None,
    document_type=  "credit_report",
    issuer=         "Experian",
    extracted_data= None,
    wallet_address: str = WALLET,
    file_name:      str = "credit_report_march.pdf",
    timestamp:      str = FIXED_TIMESTAMP,
) -> ClaimRecord:
    return ClaimRecord.create(
        claim_type=     claim_type,
        claim_value=    claim_value,
        metadata=       ClaimMetadata(
            has_defaults=   has_defaults,
            document_type=  document_type,
            issuer=         issuer,
            extracted_data= extracted_data,
        ),
        wallet_address= wallet_address,
        timestamp=      timestamp,
        file_name=      file_name,
    )


@pytest.fixture
def make_record():
    """Factory for ClaimRecords with a fixed timestamp."""
    return _make_record


@pytest.fixture
def store():
    """A fresh, empty ProofStore for each test."""
    return ProofStore()
