"""
tests/test_codec.py

Proof Codec laws.

  ROUND-TRIP
    decode_proof(encode_proof(r)) == r for every claim type,
    absent values, floats, nested extractedData, unknown metadata keys.

  DETERMINISM
    Same record, same reference. Key order never matters.

  FORMAT
    Qm + 20-char slice + "." + payload, URL-safe characters only.

  MALFORMED INPUT
    decode_proof never raises; it returns None.
    parse_reference raises MalformedReferenceError with a reason.

  METADATA
    Opaque metadata is copied and checked at construction, so a record
    that exists can always be encoded.
"""

import base64
import random
import re

import pytest

from credproof.core.codec import (
    REFERENCE_PREFIX,
    SEPARATOR,
    SHORT_HASH_LENGTH,
    decode_proof,
    encode_proof,
    parse_reference,
)
from credproof.core.exceptions import MalformedReferenceError
from credproof.core.models import ClaimMetadata, ClaimRecord, ClaimType


_URL_SAFE_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


def _b64(text: str) -> str:
    return base64.urlsafe_b64encode(text.encode("utf-8")).rstrip(b"=").decode("ascii")


# ─────────────────────────────────────────────────────────────
# Round-trip
# ─────────────────────────────────────────────────────────────

class TestRoundTrip:

    @pytest.mark.parametrize("claim_type,claim_value", [
        (ClaimType.CREDIT_SCORE, 742),
        (ClaimType.ACCOUNT_BALANCE, 125000.75),
        (ClaimType.INCOME_VERIFICATION, 85000),
        (ClaimType.CREDIT_HISTORY, None),
        ("foo", True),
    ])
    def test_decode_inverts_encode(self, make_record, claim_type, claim_value):
        record = make_record(claim_type=claim_type, claim_value=claim_value)
        assert decode_proof(encode_proof(record)) == record

    def test_absent_value_stays_absent(self, make_record):
        record  = make_record(claim_type=ClaimType.CREDIT_HISTORY, claim_value=None, has_defaults=False)
        decoded = decode_proof(encode_proof(record))
        assert decoded.claim_value is None
        assert "claimValue" not in decoded.to_dict()

    def test_nested_extracted_data_survives(self, make_record):
        extracted = {
            "creditScore": 742,
            "issuer": "Experian",
            "accounts": [{"type": "mortgage", "late": 0}, {"type": "auto", "late": 1}],
        }
        record  = make_record(extracted_data=extracted, has_defaults=False)
        decoded = decode_proof(encode_proof(record))
        assert decoded.metadata.extracted_data == extracted
        assert decoded.to_dict() == record.to_dict()

    def test_unknown_metadata_keys_survive(self):
        data = {
            "claimType": "credit_score",
            "claimValue": 701,
            "metadata": {"hasDefaults": False, "bureauRef": "X-99"},
            "walletAddress": "0xabc",
            "timestamp": "2025-01-15T10:30:00.000Z",
            "fileName": "report.pdf",
        }
        record = ClaimRecord.from_dict(data)
        assert record.metadata.extra == {"bureauRef": "X-99"}
        assert decode_proof(encode_proof(record)).to_dict() == data

    def test_non_ascii_fields_survive(self, make_record):
        record = make_record(issuer="Crédit Agricole", file_name="relevé_été.pdf")
        assert decode_proof(encode_proof(record)) == record


# ─────────────────────────────────────────────────────────────
# Determinism and format
# ─────────────────────────────────────────────────────────────

class TestEncodeFormat:

    def test_encode_is_deterministic(self, make_record):
        record = make_record()
        assert encode_proof(record) == encode_proof(record)

    def test_equal_records_share_reference(self, make_record):
        a = make_record(claim_value=750)
        b = ClaimRecord.from_dict(dict(reversed(list(a.to_dict().items()))))
        assert a == b
        assert encode_proof(a) == encode_proof(b)

    def test_distinct_records_get_distinct_references(self, make_record):
        assert encode_proof(make_record(claim_value=700)) != encode_proof(make_record(claim_value=701))

    def test_reference_layout(self, make_record):
        ref = encode_proof(make_record())
        head, payload = ref.split(SEPARATOR)

        assert head.startswith(REFERENCE_PREFIX)
        assert head[len(REFERENCE_PREFIX):] == payload[:SHORT_HASH_LENGTH]
        assert ref.count(SEPARATOR) == 1

    def test_reference_is_url_safe(self, make_record):
        ref = encode_proof(make_record(issuer="A/B+C=D", extracted_data={"note": "?&=/+"}))
        assert _URL_SAFE_RE.match(ref)
        assert "=" not in ref
        assert not any(c.isspace() for c in ref)

    def test_short_hash_is_not_an_integrity_check(self, make_record):
        record = make_record()
        _, payload = encode_proof(record).split(SEPARATOR)
        forged = f"{REFERENCE_PREFIX}{'X' * SHORT_HASH_LENGTH}{SEPARATOR}{payload}"
        assert decode_proof(forged) == record


# ─────────────────────────────────────────────────────────────
# Malformed input
# ─────────────────────────────────────────────────────────────

class TestMalformedInput:

    @pytest.mark.parametrize("reference", [
        "",
        "Qm",
        "QmNoSeparatorAtAll",
        "Qm.",
        "Qm..",
        "a.b.c",
        "Qmabc.!!!!",
        "Qmabc.has space",
        "Qmabc.e30=",
        "Qmabc.A",
        "Qmabc.AAAA",
        "Qmabc." + _b64("{}"),
        "Qmabc." + _b64("[]"),
        "Qmabc." + _b64("not json"),
        "Qmabc." + _b64('{"claimType": 5, "walletAddress": "w", "timestamp": "t", "fileName": "f"}'),
        "Qmabc." + _b64('{"claimType": "credit_score", "claimValue": "720", '
                        '"walletAddress": "w", "timestamp": "t", "fileName": "f"}'),
        "Qmabc." + _b64('{"claimType": "credit_score", "claimValue": NaN, '
                        '"walletAddress": "w", "timestamp": "t", "fileName": "f"}'),
        "Qmabc." + _b64('{"claimType": "credit_history", "metadata": {"hasDefaults": "no"}, '
                        '"walletAddress": "w", "timestamp": "t", "fileName": "f"}'),
        "Qmabc." + _b64('{"claimType": "income_verification", "metadata": {"extractedData": {"income": Infinity}}, '
                        '"walletAddress": "w", "timestamp": "t", "fileName": "f"}'),
        "Qmabc." + _b64("[" * 100000 + "]" * 100000),
    ])
    def test_decode_returns_none(self, reference):
        assert decode_proof(reference) is None

    @pytest.mark.parametrize("reference", [None, 12345, b"Qm.e30", ["Qm", "e30"], {"cid": "x"}])
    def test_non_string_input_returns_none(self, reference):
        assert decode_proof(reference) is None

    def test_second_separator_is_rejected(self, make_record):
        ref = encode_proof(make_record())
        assert decode_proof(ref + SEPARATOR + "extra") is None

    @pytest.mark.parametrize("suffix", ["\n", "\r\n", " ", "\t"])
    def test_trailing_whitespace_is_rejected(self, make_record, suffix):
        ref = encode_proof(make_record())
        assert decode_proof(ref + suffix) is None
        with pytest.raises(MalformedReferenceError) as exc_info:
            parse_reference(ref + suffix)
        assert exc_info.value.details["reason"] == "alphabet"

    def test_random_garbage_never_raises(self):
        rng = random.Random(1337)
        for _ in range(500):
            length = rng.randint(0, 120)
            garbage = "".join(chr(rng.randint(0, 0x2FF)) for _ in range(length))
            result = decode_proof(garbage)
            assert result is None or isinstance(result, ClaimRecord)

    def test_random_payloads_never_raise(self):
        rng = random.Random(42)
        for _ in range(500):
            raw = bytes(rng.randint(0, 255) for _ in range(rng.randint(0, 64)))
            ref = "Qm." + base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")
            assert decode_proof(ref) is None

    @pytest.mark.parametrize("reference,reason", [
        (42, "type"),
        ("QmNoSeparator", "separator"),
        ("a.b.c", "separator"),
        ("Qm.", "alphabet"),
        ("Qm.A", "payload"),
        ("Qm." + _b64("{}"), "schema"),
    ])
    def test_parse_reference_reports_reason(self, reference, reason):
        with pytest.raises(MalformedReferenceError) as exc_info:
            parse_reference(reference)
        assert exc_info.value.details["reason"] == reason


class TestMetadataModel:

    def test_metadata_dict_is_a_copy(self, make_record):
        record = make_record(extracted_data={"creditScore": 742})
        d = record.to_dict()
        d["metadata"]["extractedData"]["creditScore"] = 300
        assert record.metadata.extracted_data == {"creditScore": 742}

    def test_record_is_frozen(self, make_record):
        record = make_record()
        with pytest.raises(AttributeError):
            record.claim_value = 800

    def test_empty_metadata_round_trips(self):
        record = ClaimRecord.create(
            claim_type="credit_score",
            claim_value=720,
            metadata=ClaimMetadata(),
            wallet_address="0xabc",
            file_name="a.pdf",
            timestamp="2025-01-15T10:30:00.000Z",
        )
        assert record.to_dict()["metadata"] == {}
        assert decode_proof(encode_proof(record)) == record

    def test_caller_dicts_are_detached(self, make_record):
        extracted = {"creditScore": 742, "history": [{"late": 0}]}
        extra = {"source": "upload"}
        record = ClaimRecord.create(
            claim_type="credit_score",
            claim_value=742,
            metadata=ClaimMetadata(extracted_data=extracted, extra=extra),
            wallet_address="0xabc",
            file_name="a.pdf",
            timestamp="2025-01-15T10:30:00.000Z",
        )
        ref = encode_proof(record)

        extracted["creditScore"] = 300
        extracted["history"][0]["late"] = 9
        extra["source"] = "forged"

        assert record.metadata.extracted_data == {"creditScore": 742, "history": [{"late": 0}]}
        assert record.metadata.extra == {"source": "upload"}
        assert decode_proof(ref) == record

    def test_tuples_are_stored_as_lists(self):
        metadata = ClaimMetadata(extracted_data={"scores": (700, 720)})
        assert metadata.extracted_data == {"scores": [700, 720]}

    @pytest.mark.parametrize("extracted_data", [
        {"income": float("inf")},
        {"income": float("-inf")},
        {"income": float("nan")},
        {"history": [1.0, float("nan")]},
    ])
    def test_non_finite_metadata_rejected_at_construction(self, extracted_data):
        with pytest.raises(ValueError):
            ClaimMetadata(extracted_data=extracted_data)

    @pytest.mark.parametrize("kwargs", [
        {"extracted_data": {"when": object()}},
        {"extracted_data": {1: "numeric key"}},
        {"extracted_data": {"tags": {"a", "b"}}},
        {"extra": {"raw": b"bytes"}},
        {"extra": ["not", "a", "dict"]},
        {"has_defaults": "no"},
        {"issuer": 42},
    ])
    def test_non_json_metadata_rejected_at_construction(self, kwargs):
        with pytest.raises(TypeError):
            ClaimMetadata(**kwargs)

    def test_every_constructible_record_encodes(self, make_record):
        record = make_record(extracted_data={"income": 1e308, "nested": {"ok": [None, True, "x"]}})
        assert decode_proof(encode_proof(record)) == record
