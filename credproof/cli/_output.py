"""
Shared terminal output helpers for the credproof CLI.
"""

import json
import sys

import click


class _Color:
    """
    Minimal ANSI color wrapper — no external dependencies.
    Auto-disables when not a TTY or --no-color is passed.
    """
    _on: bool = True

    @classmethod
    def configure(cls, enabled: bool) -> None:
        cls._on = enabled and sys.stdout.isatty()

    @classmethod
    def green(cls, s: str) -> str:
        return f"\033[32m{s}\033[0m" if cls._on else s

    @classmethod
    def red(cls, s: str) -> str:
        return f"\033[31m{s}\033[0m" if cls._on else s

    @classmethod
    def cyan(cls, s: str) -> str:
        return f"\033[36m{s}\033[0m" if cls._on else s

    @classmethod
    def bold(cls, s: str) -> str:
        return f"\033[1m{s}\033[0m" if cls._on else s

    @classmethod
    def dim(cls, s: str) -> str:
        return f"\033[2m{s}\033[0m" if cls._on else s


BAR_HEAVY = "═" * 68
BAR_LIGHT = "─" * 68


def _row_ok(label: str, value: str) -> str:
    label_col = _Color.dim(f"{label:<16}")
    return f"  {label_col}  {_Color.green('✅')}  {value}"

def _row_fail(label: str, value: str) -> str:
    label_col = _Color.dim(f"{label:<16}")
    return f"  {label_col}  {_Color.red('❌')}  {value}"

def _row_info(label: str, value: str) -> str:
    label_col = _Color.dim(f"{label:<16}")
    return f"  {label_col}     {_Color.dim(value)}"


def _header(title: str) -> None:
    click.echo()
    click.echo(_Color.bold(f"  {BAR_HEAVY}"))
    click.echo(_Color.bold(f"  credproof  ·  {title}"))
    click.echo(_Color.bold(f"  {BAR_HEAVY}"))
    click.echo()


def _emit_error(msg: str, fmt: str, quiet: bool, command: str) -> None:
    """Emit error in the correct format. Never raises."""
    if quiet:
        return
    if fmt == "json":
        click.echo(json.dumps({
            f"credproof_{command}": {
                "error": msg,
                "isValid": False,
            }
        }))
    else:
        click.echo(
            _Color.red(f"\n  ❌  ERROR: {msg}\n"),
            err=True,
        )


class InputError(click.ClickException):
    """Unreadable or ill-typed CLI input. Exits with code 2."""
    exit_code = 2
