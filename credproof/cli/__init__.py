"""
credproof/cli/__init__.py

credproof CLI — root Click command group.

This file is the sole entry point for the `credproof` terminal command.
It is registered in pyproject.toml as:

    [project.scripts]
    credproof = "credproof.cli:cli"

Adding a new command:
    1. Create credproof/cli/your_command.py with a @click.command()
    2. Import it here
    3. cli.add_command(your_command)
"""

import logging

import click

from credproof.cli.codec import decode_command, encode_command, issue_command
from credproof.cli.policy import policy_command
from credproof.cli.verify import verify_command


@click.group()
@click.version_option(package_name="credproof")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log diagnostics to stderr.")
def cli(verbose: bool) -> None:
    """
    credproof — portable financial claim proofs.

    \b
    Commands:
      encode    Encode a claim record into a proof reference.
      issue     Build a claim from extractor output and encode it.
      decode    Decode a proof reference.
      verify    Validate a proof reference against a policy.
      policy    Show the effective validation policy.

    \b
    Quick start:
      credproof issue extraction.json --wallet 0xabc --file-name report.pdf
      credproof verify Qm... --consent
      credproof verify Qm... --consent --policy strict.yaml --format json
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


cli.add_command(encode_command)
cli.add_command(issue_command)
cli.add_command(decode_command)
cli.add_command(verify_command)
cli.add_command(policy_command)
