"""
credproof/cli/verify.py

credproof verify — validate a proof reference against a policy
==============================================================

The reference is self-contained, so verification needs no running
service: the claim is decoded from the reference and checked against
the default policy or a YAML policy file.

Usage:
    credproof verify <reference> --consent
    credproof verify <reference> --consent --policy strict.yaml
    credproof verify <reference> --consent --format json
    credproof verify <reference> --consent --quiet

Exit codes (shell-scriptable):
    0  Claim satisfies the policy
    1  Claim fails the policy
    2  Error  (no consent, malformed reference, unreadable policy)

CREDPROOF_POLICY may name the policy file instead of --policy.
"""

import json
import sys
from typing import Optional

import click

from credproof.core.exceptions import (
    ConsentRequiredError,
    PolicyError,
    ProofNotFoundError,
)
from credproof.policy.policy import Policy
from credproof.service import ProofService, VerificationReport
from credproof.store.store import ProofStore
from credproof.cli._output import (
    BAR_LIGHT,
    _Color,
    _emit_error,
    _header,
    _row_fail,
    _row_info,
    _row_ok,
)


def load_policy(policy_path: Optional[str]) -> Optional[Policy]:
    """Load the policy file if one was given; None means DEFAULT_POLICY."""
    if not policy_path:
        return None
    return Policy.from_yaml(policy_path)


@click.command(name="verify")
@click.argument("reference")
@click.option(
    "--policy", "policy_path",
    type=click.Path(dir_okay=False),
    envvar="CREDPROOF_POLICY",
    default=None,
    metavar="PATH",
    help="YAML policy file. Defaults to the built-in policy.",
)
@click.option(
    "--consent",
    is_flag=True,
    default=False,
    help="Confirm the proof subject consented to this verification.",
)
@click.option(
    "--format", "fmt",
    type=click.Choice(["human", "json"], case_sensitive=False),
    default="human",
    show_default=True,
    help="Output format: human (default), json (CI/automation).",
)
@click.option(
    "--quiet",
    is_flag=True,
    default=False,
    help="Suppress all output. Use exit code only (0=valid, 1=invalid, 2=error).",
)
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable ANSI color output.",
)
def verify_command(
    reference:   str,
    policy_path: Optional[str],
    consent:     bool,
    fmt:         str,
    quiet:       bool,
    no_color:    bool,
) -> None:
    """
    Verify a proof reference against a validation policy.

    REFERENCE is the string produced by `credproof encode`.

    \b
    Examples:
      credproof verify Qm... --consent
      credproof verify Qm... --consent --policy strict.yaml --format json
      credproof verify Qm... --consent --quiet && echo "approved"
    """
    _Color.configure(not no_color)

    try:
        policy = load_policy(policy_path)
    except PolicyError as e:
        _emit_error(str(e), fmt, quiet, command="verify")
        sys.exit(2)

    service = ProofService(ProofStore(), policy=policy)

    try:
        report = service.verify(reference, consent=consent)
    except (ConsentRequiredError, ProofNotFoundError) as e:
        _emit_error(str(e), fmt, quiet, command="verify")
        sys.exit(2)

    if quiet:
        sys.exit(0 if report.is_valid else 1)

    if fmt == "json":
        click.echo(json.dumps({"credproof_verify": report.to_dict()}, indent=2))
    else:
        _output_human(report, service.policy)

    sys.exit(0 if report.is_valid else 1)


# ── Human output ──────────────────────────────────────────────────────────────

def _output_human(report: VerificationReport, policy: Policy) -> None:
    record = report.record
    result = report.result

    _header("Claim Verification")

    click.echo(_row_info("Claim type", record.claim_type))
    click.echo(_row_info(
        "Claim value",
        "absent" if record.claim_value is None else str(record.claim_value),
    ))
    click.echo(_row_info("Wallet", record.wallet_address))
    click.echo(_row_info("Created", record.timestamp))
    click.echo(_row_info("Policy", f"{policy.policy_id} v{policy.version}"))
    click.echo(_row_info("Policy hash", _Color.cyan(policy.policy_hash[:16] + "...")))
    click.echo()

    for message in result.passed_checks:
        click.echo(_row_ok("Check", message))
    for message in result.failed_checks:
        click.echo(_row_fail("Check", message))
    if not result.passed_checks and not result.failed_checks:
        click.echo(_row_fail("Check", result.reason))

    click.echo()
    click.echo(_row_info("Verified at", report.verified_at))
    click.echo(_row_info("Verifier", report.verifier_entity))
    click.echo()

    # ── Final verdict ─────────────────────────────────────────
    click.echo(f"  {BAR_LIGHT}")
    if result.is_valid:
        click.echo(_Color.green(_Color.bold(f"  ✅  VALID  ·  {result.reason}")))
    else:
        n = len(result.failed_checks)
        click.echo(_Color.red(_Color.bold(
            f"  ❌  INVALID  ·  {n} failed check(s)"
        )))
    click.echo(f"  {BAR_LIGHT}")
    click.echo()
