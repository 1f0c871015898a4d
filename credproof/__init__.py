"""
credproof/__init__.py

credproof: Portable, Privacy-Preserving Financial Claim Proofs

A claim derived from a financial document ("credit score >= 700") is
minted into a self-contained proof reference. A verifier can later
resolve that reference and check it against a configurable policy
without seeing the document.

    reference = encode_proof(record)
    record    = decode_proof(reference)        # None when malformed
    result    = validate_claim(record, policy) # ValidationResult
"""

__version__ = "0.1.0"

from credproof.core.models import (
    ClaimMetadata,
    ClaimRecord,
    ClaimType,
    HistoryStatus,
    ValidationResult,
)
from credproof.core.codec import decode_proof, encode_proof, parse_reference
from credproof.core.exceptions import (
    ConsentRequiredError,
    CredProofError,
    MalformedReferenceError,
    PolicyError,
    ProofNotFoundError,
)
from credproof.policy import DEFAULT_POLICY, HistoryRule, MinimumRule, Policy, validate_claim
from credproof.store import ProofStore
from credproof.service import ProofService, VerificationReport

__all__ = [
    # Data model
    "ClaimMetadata",
    "ClaimRecord",
    "ClaimType",
    "HistoryStatus",
    "ValidationResult",
    # Codec
    "encode_proof",
    "decode_proof",
    "parse_reference",
    # Store
    "ProofStore",
    # Policy
    "DEFAULT_POLICY",
    "Policy",
    "MinimumRule",
    "HistoryRule",
    "validate_claim",
    # Orchestration
    "ProofService",
    "VerificationReport",
    # Errors
    "CredProofError",
    "MalformedReferenceError",
    "PolicyError",
    "ProofNotFoundError",
    "ConsentRequiredError",
]
