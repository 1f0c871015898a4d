"""
credproof policy — show the effective validation policy and its hash.
"""

import json
import sys
from typing import Optional

import click

from credproof.core.exceptions import PolicyError
from credproof.policy.policy import DEFAULT_POLICY
from credproof.policy.rules import MinimumRule
from credproof.cli._output import _Color, _emit_error, _header, _row_info
from credproof.cli.verify import load_policy


@click.command(name="policy")
@click.option(
    "--policy", "policy_path",
    type=click.Path(dir_okay=False),
    envvar="CREDPROOF_POLICY",
    default=None,
    metavar="PATH",
    help="YAML policy file. Defaults to the built-in policy.",
)
@click.option(
    "--format", "fmt",
    type=click.Choice(["human", "json"], case_sensitive=False),
    default="human",
    show_default=True,
)
def policy_command(policy_path: Optional[str], fmt: str) -> None:
    """Show the rules a verification would apply."""
    _Color.configure(True)

    try:
        policy = load_policy(policy_path) or DEFAULT_POLICY
    except PolicyError as e:
        _emit_error(str(e), fmt, quiet=False, command="policy")
        sys.exit(2)

    if fmt == "json":
        out = policy.to_dict()
        out["policy_hash"] = policy.policy_hash
        click.echo(json.dumps(out, indent=2))
        return

    _header(f"Policy {policy.policy_id} v{policy.version}")
    for claim_type, rule in sorted(policy.rules.items()):
        if not rule.applies:
            detail = "not required"
        elif isinstance(rule, MinimumRule):
            detail = f">= {rule.minimum}"
        else:
            detail = "no defaults"
        click.echo(_row_info(claim_type, detail))
    click.echo()
    click.echo(_row_info("Policy hash", policy.policy_hash))
    click.echo()
