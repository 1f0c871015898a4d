"""
credproof/core/models.py

Claim Data Model

═══════════════════════════════════════════════════════════════════
CONTRACTS
═══════════════════════════════════════════════════════════════════

CONTRACT 1 — Immutability
    ClaimRecord and ClaimMetadata are frozen after creation.
    ClaimMetadata keeps its own copies of extracted_data and extra, checked
    to be plain JSON data with finite numbers, so encoding cannot fail later.
    to_dict() returns deep copies; mutating them never touches the record.

CONTRACT 2 — Wire form
    to_dict() / from_dict() are the ONLY serialization paths.
    Wire keys are camelCase (claimType, claimValue, walletAddress, ...).
    Absent optional values are omitted, never written as null.

CONTRACT 3 — Round-trip
    ClaimRecord.from_dict(record.to_dict()) == record
    Unrecognized metadata keys survive in ClaimMetadata.extra.

CONTRACT 4 — Vocabulary
    claim_type is a plain string. ClaimType lists the types the validator
    understands; any other string is representable and rejected at
    validation time, not at construction time.

CONTRACT 5 — Credit history is three-valued
    hasDefaults False → NO_DEFAULTS, True → HAS_DEFAULTS, absent → UNKNOWN.
    Absence of information is never read as "no defaults".
═══════════════════════════════════════════════════════════════════
"""

import copy
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Set, Tuple, Union

from credproof.core.time import claim_timestamp


ClaimValue = Union[int, float, bool, None]


# ─────────────────────────────────────────────────────────────
# Claim Type Vocabulary
# ─────────────────────────────────────────────────────────────

class ClaimType:
    """
    claim_type string constants understood by the validator.
    """
    CREDIT_SCORE        = "credit_score"
    ACCOUNT_BALANCE     = "account_balance"
    INCOME_VERIFICATION = "income_verification"
    CREDIT_HISTORY      = "credit_history"


KNOWN_CLAIM_TYPES: Set[str] = {
    ClaimType.CREDIT_SCORE,
    ClaimType.ACCOUNT_BALANCE,
    ClaimType.INCOME_VERIFICATION,
    ClaimType.CREDIT_HISTORY,
}


class HistoryStatus(Enum):
    """Tagged credit-history state derived from metadata.hasDefaults."""
    NO_DEFAULTS  = "no_defaults"
    HAS_DEFAULTS = "has_defaults"
    UNKNOWN      = "unknown"

    @classmethod
    def from_flag(cls, has_defaults: Optional[bool]) -> "HistoryStatus":
        # Identity checks: 0, "", [] are not False here.
        if has_defaults is False:
            return cls.NO_DEFAULTS
        if has_defaults is True:
            return cls.HAS_DEFAULTS
        return cls.UNKNOWN


# ─────────────────────────────────────────────────────────────
# Field checks shared by create() and from_dict()
# ─────────────────────────────────────────────────────────────

def _require_str(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be str, got {type(value).__name__}")
    return value


def _optional_str(name: str, value: Any) -> Optional[str]:
    if value is None:
        return None
    return _require_str(name, value)


def _check_claim_value(value: Any) -> ClaimValue:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            raise ValueError(f"claimValue must be finite, got {value!r}")
        return value
    raise TypeError(
        f"claimValue must be a number, bool or absent, got {type(value).__name__}"
    )


def _json_value(name: str, value: Any) -> Any:
    """
    Detached copy of an opaque JSON value.

    Raises TypeError for anything JSON cannot carry and ValueError for
    NaN or infinities, which canonical JSON has no spelling for.
    """
    if value is None or isinstance(value, (str, bool, int)):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"{name} must not contain {value!r}")
        return value
    if isinstance(value, dict):
        copied = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"{name} keys must be str, got {type(key).__name__}")
            copied[key] = _json_value(name, item)
        return copied
    if isinstance(value, (list, tuple)):
        return [_json_value(name, item) for item in value]
    raise TypeError(f"{name} must be JSON data, got {type(value).__name__}")


# ─────────────────────────────────────────────────────────────
# ClaimMetadata
# ─────────────────────────────────────────────────────────────

_METADATA_KEYS = ("hasDefaults", "documentType", "issuer", "extractedData")


@dataclass(frozen=True)
class ClaimMetadata:
    """
    Metadata carried alongside a claim.

    extracted_data is an opaque passthrough of whatever the extractor
    produced. extra keeps unrecognized keys so decoding is lossless.
    """
    has_defaults:   Optional[bool] = None
    document_type:  Optional[str]  = None
    issuer:         Optional[str]  = None
    extracted_data: Any            = None
    extra:          Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.has_defaults is not None and not isinstance(self.has_defaults, bool):
            raise TypeError(
                f"hasDefaults must be bool, got {type(self.has_defaults).__name__}"
            )
        _optional_str("documentType", self.document_type)
        _optional_str("issuer", self.issuer)
        if not isinstance(self.extra, dict):
            raise TypeError(f"extra must be a dict, got {type(self.extra).__name__}")

        # Own copies: later changes to the caller's dicts never reach the record.
        object.__setattr__(
            self, "extracted_data", _json_value("extractedData", self.extracted_data)
        )
        object.__setattr__(self, "extra", _json_value("metadata", self.extra))

    @property
    def history_status(self) -> HistoryStatus:
        return HistoryStatus.from_flag(self.has_defaults)

    def to_dict(self) -> Dict[str, Any]:
        d = copy.deepcopy(self.extra)
        if self.has_defaults is not None:
            d["hasDefaults"] = self.has_defaults
        if self.document_type is not None:
            d["documentType"] = self.document_type
        if self.issuer is not None:
            d["issuer"] = self.issuer
        if self.extracted_data is not None:
            d["extractedData"] = copy.deepcopy(self.extracted_data)
        return d

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ClaimMetadata":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise TypeError(
                f"metadata must be an object, got {type(data).__name__}"
            )

        return cls(
            has_defaults=   data.get("hasDefaults"),
            document_type=  data.get("documentType"),
            issuer=         data.get("issuer"),
            extracted_data= data.get("extractedData"),
            extra=          {
                k: v for k, v in data.items() if k not in _METADATA_KEYS
            },
        )


# ─────────────────────────────────────────────────────────────
# ClaimRecord
# ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ClaimRecord:
    """
    A single verifiable financial assertion.

    Created once by the claim-creation flow, stored under its proof
    reference, and reconstructible from that reference alone.
    """

    claim_type:     str
    claim_value:    ClaimValue
    metadata:       ClaimMetadata
    wallet_address: str
    timestamp:      str
    file_name:      str

    @classmethod
    def create(
        cls,
        claim_type:     str,
        wallet_address: str,
        file_name:      str,
        claim_value:    ClaimValue = None,
        metadata:       Optional[ClaimMetadata] = None,
        timestamp:      Optional[str] = None,
    ) -> "ClaimRecord":
        """
        Create a record, stamping the creation time unless one is given.

        Raises TypeError / ValueError for ill-typed fields.
        """
        return cls(
            claim_type=     _require_str("claimType", claim_type),
            claim_value=    _check_claim_value(claim_value),
            metadata=       metadata if metadata is not None else ClaimMetadata(),
            wallet_address= _require_str("walletAddress", wallet_address),
            timestamp=      _require_str("timestamp", timestamp or claim_timestamp()),
            file_name=      _require_str("fileName", file_name),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClaimRecord":
        """
        Deserialize from the wire form.

        Raises KeyError for missing fields, TypeError / ValueError for
        ill-typed ones. The codec turns all three into a malformed result.
        """
        if not isinstance(data, dict):
            raise TypeError(
                f"claim record must be an object, got {type(data).__name__}"
            )
        return cls(
            claim_type=     _require_str("claimType", data["claimType"]),
            claim_value=    _check_claim_value(data.get("claimValue")),
            metadata=       ClaimMetadata.from_dict(data.get("metadata")),
            wallet_address= _require_str("walletAddress", data["walletAddress"]),
            timestamp=      _require_str("timestamp", data["timestamp"]),
            file_name=      _require_str("fileName", data["fileName"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"claimType": self.claim_type}
        if self.claim_value is not None:
            d["claimValue"] = self.claim_value
        d["metadata"]      = self.metadata.to_dict()
        d["walletAddress"] = self.wallet_address
        d["timestamp"]     = self.timestamp
        d["fileName"]      = self.file_name
        return d

    @property
    def history_status(self) -> HistoryStatus:
        return self.metadata.history_status

    @property
    def is_known_type(self) -> bool:
        return self.claim_type in KNOWN_CLAIM_TYPES


# ─────────────────────────────────────────────────────────────
# ValidationResult
# ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of validate_claim().

    Returned — not raised — so callers decide how to surface a failure.
    bool(result) is True iff valid.
    """
    is_valid:      bool
    reason:        str
    passed_checks: Tuple[str, ...]
    failed_checks: Tuple[str, ...]
    claim_type:    str

    def __bool__(self) -> bool:
        return self.is_valid

    def __repr__(self) -> str:
        if self.is_valid:
            return f"ValidationResult(VALID, claim_type={self.claim_type!r})"
        return (
            f"ValidationResult(INVALID, claim_type={self.claim_type!r}, "
            f"failed={list(self.failed_checks)})"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isValid":      self.is_valid,
            "reason":       self.reason,
            "passedChecks": list(self.passed_checks),
            "failedChecks": list(self.failed_checks),
            "claimType":    self.claim_type,
        }
