"""
Policy rule definitions and per-claim-type check functions.

Each claim type maps to one pure check function:

    check(record, rule) -> Check

Adding a claim type means adding a rule class (or reusing one) and one
entry in CHECKS and RULE_TYPES. The validator never branches on claim
type itself.
"""

import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, Type, Union

from credproof.core.exceptions import PolicyError
from credproof.core.models import ClaimRecord, ClaimType, HistoryStatus


@dataclass(frozen=True)
class MinimumRule:
    """Numeric claim value must be present and at least `minimum`"""
    minimum: Union[int, float]
    required: bool = True

    def __post_init__(self):
        if isinstance(self.minimum, float) and not math.isfinite(self.minimum):
            raise PolicyError(
                "Rule minimum must be finite", {"minimum": repr(self.minimum)}
            )

    @property
    def applies(self) -> bool:
        return self.required

    def to_dict(self) -> dict:
        return {"minimum": self.minimum, "required": self.required}

    @staticmethod
    def from_dict(data: dict) -> "MinimumRule":
        """Create rule from dictionary"""
        _reject_unknown_keys(data, {"minimum", "required"})
        minimum = data.get("minimum")
        if isinstance(minimum, bool) or not isinstance(minimum, (int, float)):
            raise PolicyError(
                "Rule minimum must be a number", {"minimum": repr(minimum)}
            )
        return MinimumRule(
            minimum=minimum,
            required=_flag(data, "required", True),
        )


@dataclass(frozen=True)
class HistoryRule:
    """Credit history must positively show no defaults"""
    no_defaults: bool = True
    required: bool = True

    @property
    def applies(self) -> bool:
        return self.required and self.no_defaults

    def to_dict(self) -> dict:
        return {"no_defaults": self.no_defaults, "required": self.required}

    @staticmethod
    def from_dict(data: dict) -> "HistoryRule":
        """Create rule from dictionary"""
        _reject_unknown_keys(data, {"no_defaults", "required"})
        return HistoryRule(
            no_defaults=_flag(data, "no_defaults", True),
            required=_flag(data, "required", True),
        )


Rule = Union[MinimumRule, HistoryRule]


def _reject_unknown_keys(data: Any, allowed: set) -> None:
    if not isinstance(data, dict):
        raise PolicyError(
            "Rule definition must be a mapping", {"type": type(data).__name__}
        )
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise PolicyError(
            "Unknown rule keys", {"keys": unknown, "allowed": sorted(allowed)}
        )


def _flag(data: dict, key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise PolicyError(f"Rule field '{key}' must be true or false", {key: repr(value)})
    return value


# ─────────────────────────────────────────────────────────────
# Checks
# ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Check:
    """Outcome of one check: passed or failed, with an explanation"""
    passed: bool
    message: str


CheckFn = Callable[[ClaimRecord, Any], Check]


def _fmt_number(value: Union[int, float]) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def minimum_check(label: str, unit: str = "") -> CheckFn:
    """
    Build a check comparing claim_value against rule.minimum.

    A missing value and a below-minimum value produce different messages
    so audit trails can tell an unparsed document from a weak one.
    """
    def check(record: ClaimRecord, rule: MinimumRule) -> Check:
        value = record.claim_value

        if value is None:
            return Check(
                False,
                f"{label} value is missing from proof; document could not be parsed",
            )
        if isinstance(value, bool):
            return Check(False, f"{label} value {value} is not numeric")

        observed = f"{unit}{_fmt_number(value)}"
        required = f"{unit}{_fmt_number(rule.minimum)}"

        if value >= rule.minimum:
            return Check(True, f"{label} {observed} meets minimum requirement of {required}")
        return Check(False, f"{label} {observed} is below minimum of {required}")

    return check


def check_credit_history(record: ClaimRecord, rule: HistoryRule) -> Check:
    """Three-way check: unknown history fails, it never passes."""
    status = record.history_status

    if status is HistoryStatus.NO_DEFAULTS:
        return Check(True, "Credit history shows no defaults")
    if status is HistoryStatus.HAS_DEFAULTS:
        return Check(False, "Credit history contains defaults or late payments")
    return Check(False, "Credit history status is unverified")


CHECKS: Dict[str, CheckFn] = {
    ClaimType.CREDIT_SCORE:        minimum_check("Credit score"),
    ClaimType.ACCOUNT_BALANCE:     minimum_check("Account balance", unit="$"),
    ClaimType.INCOME_VERIFICATION: minimum_check("Income", unit="$"),
    ClaimType.CREDIT_HISTORY:      check_credit_history,
}

RULE_TYPES: Dict[str, Type] = {
    ClaimType.CREDIT_SCORE:        MinimumRule,
    ClaimType.ACCOUNT_BALANCE:     MinimumRule,
    ClaimType.INCOME_VERIFICATION: MinimumRule,
    ClaimType.CREDIT_HISTORY:      HistoryRule,
}
