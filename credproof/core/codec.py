"""
credproof/core/codec.py

Proof Codec — ClaimRecord <-> proof reference ("CID").

Reference layout:

    Qm<short-hash>.<payload>

    payload    = base64url(JCS(record.to_dict())), '=' padding stripped
    short-hash = payload[:20]

The short hash only makes references look like content identifiers.
It is NOT an integrity check: nothing here detects a tampered payload,
and a client-supplied reference must not be trusted on that basis.

Contracts:
    encode_proof()    — deterministic, never fails for a well-typed record
    parse_reference() — strict, raises MalformedReferenceError
    decode_proof()    — best-effort, returns None, never raises
    decode_proof(encode_proof(r)) == r
"""

import base64
import json
import logging
import re
from typing import Any, Optional

from credproof.core.canonical import canonicalize
from credproof.core.exceptions import MalformedReferenceError
from credproof.core.models import ClaimRecord

logger = logging.getLogger(__name__)


REFERENCE_PREFIX  = "Qm"
SEPARATOR         = "."
SHORT_HASH_LENGTH = 20

# base64url alphabet; never contains SEPARATOR.
_PAYLOAD_RE = re.compile(r"[A-Za-z0-9_-]+")


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64url_decode(text: str) -> bytes:
    padded = text + "=" * (-len(text) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


def encode_proof(record: ClaimRecord) -> str:
    """
    Encode a ClaimRecord into a self-contained proof reference.

    The reference carries the whole record, so it can be decoded after
    the in-memory store has forgotten it.
    """
    payload = _b64url_encode(canonicalize(record.to_dict()))
    return f"{REFERENCE_PREFIX}{payload[:SHORT_HASH_LENGTH]}{SEPARATOR}{payload}"


def parse_reference(reference: Any) -> ClaimRecord:
    """
    Decode a proof reference, raising on any malformation.

    Splits on the FIRST separator only. A second separator can never be
    produced by encode_proof(), so its presence marks the input as malformed.

    Raises:
        MalformedReferenceError with a `reason` detail.
    """
    if not isinstance(reference, str):
        raise MalformedReferenceError(
            "Proof reference must be a string",
            {"reason": "type", "type": type(reference).__name__},
        )

    _prefix, sep, payload = reference.partition(SEPARATOR)
    if not sep:
        raise MalformedReferenceError(
            "Proof reference has no separator", {"reason": "separator"}
        )
    if SEPARATOR in payload:
        raise MalformedReferenceError(
            "Proof reference has more than one separator", {"reason": "separator"}
        )
    if not _PAYLOAD_RE.fullmatch(payload):
        raise MalformedReferenceError(
            "Proof payload is empty or not base64url", {"reason": "alphabet"}
        )

    try:
        raw = _b64url_decode(payload)
        data = json.loads(raw.decode("utf-8"))
    except (ValueError, RecursionError) as exc:
        # binascii.Error, UnicodeDecodeError and JSONDecodeError are ValueErrors
        raise MalformedReferenceError(
            "Proof payload could not be decoded",
            {"reason": "payload", "error": type(exc).__name__},
        ) from exc

    try:
        return ClaimRecord.from_dict(data)
    except (KeyError, TypeError, ValueError, RecursionError) as exc:
        raise MalformedReferenceError(
            "Proof payload is not a claim record",
            {"reason": "schema", "error": str(exc)},
        ) from exc


def decode_proof(reference: Any) -> Optional[ClaimRecord]:
    """
    Best-effort decode of a proof reference.

    References may come from untrusted or stale input, so failure is
    reported as None rather than raised.
    """
    try:
        return parse_reference(reference)
    except MalformedReferenceError as exc:
        logger.debug("Could not decode proof reference: %s", exc)
        return None
