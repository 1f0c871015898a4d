"""
Proof service for credproof.

Orchestrates the proof lifecycle for an outer (HTTP) layer:

    issue   : record -> encode_proof -> store.put -> reference
    resolve : store.get, falling back to decode_proof on a miss
    verify  : consent -> resolve -> validate_claim -> report

Order inside verify() matters: consent is checked before anything is
looked up, so a verifier without consent learns nothing about the proof.

The outer layer maps ConsentRequiredError to 403 and ProofNotFoundError
to 404. A claim that fails policy is a normal report with isValid=false.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from credproof.claims import ExtractedData, build_claim_record
from credproof.core.codec import decode_proof, encode_proof
from credproof.core.exceptions import ConsentRequiredError, ProofNotFoundError
from credproof.core.models import ClaimRecord, ValidationResult
from credproof.core.time import claim_timestamp
from credproof.policy.policy import DEFAULT_POLICY, Policy
from credproof.policy.validator import validate_claim
from credproof.store.store import ProofStore

logger = logging.getLogger(__name__)

DEFAULT_VERIFIER_ENTITY = "DeFi-DX Verification Service"


@dataclass(frozen=True)
class IssuedProof:
    """A freshly minted proof: the portable reference and its record"""
    reference: str
    record:    ClaimRecord

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cid":           self.reference,
            "timestamp":     self.record.timestamp,
            "fileName":      self.record.file_name,
            "walletAddress": self.record.wallet_address,
            "claimType":     self.record.claim_type,
            "claimValue":    self.record.claim_value,
            "extractedData": self.record.metadata.extracted_data,
        }


@dataclass(frozen=True)
class VerificationReport:
    """Validation outcome plus the context a verifier is shown"""
    reference:       str
    record:          ClaimRecord
    result:          ValidationResult
    verified_at:     str
    verifier_entity: str

    @property
    def is_valid(self) -> bool:
        return self.result.is_valid

    def to_dict(self) -> Dict[str, Any]:
        d = self.result.to_dict()
        d.update({
            "claimValue":     self.record.claim_value,
            "extractedData":  self.record.metadata.extracted_data,
            "documentType":   self.record.metadata.document_type,
            "verifiedAt":     self.verified_at,
            "verifierEntity": self.verifier_entity,
            "cid":            self.reference,
        })
        return d


class ProofService:
    """
    Proof lifecycle orchestrator.

    The store and policy are injected; nothing here is process-global.
    """

    def __init__(
        self,
        store: ProofStore,
        policy: Optional[Policy] = None,
        verifier_entity: str = DEFAULT_VERIFIER_ENTITY,
    ):
        self.store = store
        self.policy = policy or DEFAULT_POLICY
        self.verifier_entity = verifier_entity
        self._outcome_count = {"valid": 0, "invalid": 0}

    def issue(self, record: ClaimRecord) -> IssuedProof:
        """Mint a reference for record and cache the record under it."""
        reference = encode_proof(record)
        self.store.put(reference, record)
        logger.info(
            "Issued %s proof for %s", record.claim_type, record.wallet_address
        )
        return IssuedProof(reference=reference, record=record)

    def issue_from_extraction(
        self,
        extracted: ExtractedData,
        wallet_address: str,
        file_name: str,
        claim_type: Optional[str] = None,
    ) -> IssuedProof:
        record = build_claim_record(
            extracted,
            wallet_address=wallet_address,
            file_name=file_name,
            claim_type=claim_type,
        )
        return self.issue(record)

    def resolve(self, reference: str) -> Optional[ClaimRecord]:
        """
        Find the record behind a reference.

        A store miss (e.g. after a restart) falls back to decoding the
        reference itself. The decoded record is not written back.
        """
        record = self.store.get(reference)
        if record is not None:
            return record

        logger.info("Proof not in store, decoding from reference")
        record = decode_proof(reference)
        if record is None:
            logger.info("Proof reference could not be resolved")
        return record

    def verify(
        self,
        reference: str,
        consent: bool,
        policy: Optional[Policy] = None,
    ) -> VerificationReport:
        """
        Resolve and validate a proof on behalf of a verifier.

        Raises:
            ConsentRequiredError: consent was not given.
            ProofNotFoundError: reference is neither stored nor decodable.
        """
        if not consent:
            raise ConsentRequiredError("User consent required")

        record = self.resolve(reference)
        if record is None:
            raise ProofNotFoundError(
                "The specified proof does not exist or could not be decoded",
                {"cid": reference},
            )

        result = validate_claim(record, policy or self.policy)
        self._outcome_count["valid" if result.is_valid else "invalid"] += 1
        logger.info("Validation result for %s claim: %r", record.claim_type, result)

        return VerificationReport(
            reference=reference,
            record=record,
            result=result,
            verified_at=claim_timestamp(),
            verifier_entity=self.verifier_entity,
        )

    def get_stats(self) -> dict:
        """Get verification statistics."""
        return {
            "policy_id": self.policy.policy_id,
            "policy_version": self.policy.version,
            "policy_hash": self.policy.policy_hash,
            "verifications": sum(self._outcome_count.values()),
            "outcomes": self._outcome_count.copy(),
            "store": self.store.get_stats(),
        }
