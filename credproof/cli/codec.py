"""
credproof/cli/codec.py

credproof encode / issue / decode — mint and inspect proof references.

Usage:
    credproof encode claim.json                 Record JSON -> reference
    credproof encode -                          Read record JSON from stdin
    credproof issue extraction.json --wallet 0xabc --file-name report.pdf
    credproof decode <reference>                Reference -> record
    credproof decode <reference> --format json

Exit codes:
    0  Success
    2  Error  (unreadable input, malformed record or reference)
"""

import json
import sys
from typing import Optional

import click

from credproof.claims import ExtractedData, build_claim_record
from credproof.core.codec import encode_proof, parse_reference
from credproof.core.exceptions import MalformedReferenceError
from credproof.core.models import ClaimMetadata, ClaimRecord
from credproof.cli._output import InputError, _Color, _emit_error, _header, _row_info


def _load_json(source) -> dict:
    try:
        data = json.load(source)
    except ValueError as e:
        # JSONDecodeError and UnicodeDecodeError
        raise InputError(f"Input is not valid JSON: {e}")
    if not isinstance(data, dict):
        raise InputError("Input must be a JSON object")
    return data


# ── encode ────────────────────────────────────────────────────────────────────

@click.command(name="encode")
@click.argument("claim_file", type=click.File("r", encoding="utf-8"))
def encode_command(claim_file) -> None:
    """
    Encode a claim record into a proof reference.

    CLAIM_FILE holds the record in wire form (claimType, claimValue,
    metadata, walletAddress, fileName). A missing timestamp is stamped
    with the current time. Use - to read from stdin.
    """
    data = _load_json(claim_file)
    try:
        record = ClaimRecord.create(
            claim_type=     data.get("claimType"),
            claim_value=    data.get("claimValue"),
            metadata=       ClaimMetadata.from_dict(data.get("metadata")),
            wallet_address= data.get("walletAddress"),
            timestamp=      data.get("timestamp"),
            file_name=      data.get("fileName"),
        )
    except (TypeError, ValueError) as e:
        raise InputError(f"Invalid claim record: {e}")

    click.echo(encode_proof(record))


# ── issue ─────────────────────────────────────────────────────────────────────

@click.command(name="issue")
@click.argument("extraction_file", type=click.File("r", encoding="utf-8"))
@click.option("--wallet", "wallet_address", required=True, help="Subject wallet address.")
@click.option("--file-name", required=True, help="Name of the source document.")
@click.option(
    "--claim-type",
    default=None,
    help="Claim type to assert. Derived from the extraction when omitted.",
)
def issue_command(
    extraction_file,
    wallet_address: str,
    file_name:      str,
    claim_type:     Optional[str],
) -> None:
    """
    Build a claim from extractor output and encode it.

    EXTRACTION_FILE holds extractor output (creditScore, accountBalance,
    income, hasDefaults, documentType, issuer, issueDate).
    """
    extracted = ExtractedData.from_dict(_load_json(extraction_file))
    try:
        record = build_claim_record(
            extracted,
            wallet_address=wallet_address,
            file_name=file_name,
            claim_type=claim_type,
        )
    except (TypeError, ValueError) as e:
        raise InputError(f"Invalid extraction: {e}")

    click.echo(encode_proof(record))


# ── decode ────────────────────────────────────────────────────────────────────

@click.command(name="decode")
@click.argument("reference")
@click.option(
    "--format", "fmt",
    type=click.Choice(["human", "json"], case_sensitive=False),
    default="human",
    show_default=True,
    help="Output format.",
)
def decode_command(reference: str, fmt: str) -> None:
    """
    Decode a proof reference back into its claim record.

    REFERENCE is the string produced by `credproof encode`.
    """
    _Color.configure(True)

    try:
        record = parse_reference(reference)
    except MalformedReferenceError as e:
        _emit_error(str(e), fmt, quiet=False, command="decode")
        sys.exit(2)

    if fmt == "json":
        click.echo(json.dumps(record.to_dict(), indent=2))
        return

    _header("Proof Reference")
    click.echo(_row_info("Claim type", record.claim_type))
    click.echo(_row_info(
        "Claim value",
        "absent" if record.claim_value is None else str(record.claim_value),
    ))
    click.echo(_row_info("History", record.history_status.value))
    click.echo(_row_info("Document", record.metadata.document_type or "—"))
    click.echo(_row_info("Issuer", record.metadata.issuer or "—"))
    click.echo(_row_info("Wallet", record.wallet_address))
    click.echo(_row_info("File", record.file_name))
    click.echo(_row_info("Created", record.timestamp))
    click.echo()
    click.echo(_row_info("", _Color.dim("short hash is cosmetic; not an integrity check")))
    click.echo()
