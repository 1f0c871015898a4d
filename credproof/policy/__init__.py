"""
credproof Policy Engine

Decides whether a claim satisfies the configured thresholds.

Components:
- Policy: per-claim-type rules, loadable from YAML
- Rules: MinimumRule, HistoryRule and the check table
- validate_claim: pure (record, policy) -> ValidationResult
"""

from credproof.policy.policy import DEFAULT_POLICY, Policy
from credproof.policy.rules import Check, HistoryRule, MinimumRule
from credproof.policy.validator import validate_claim

__all__ = [
    "DEFAULT_POLICY",
    "Policy",
    "Check",
    "HistoryRule",
    "MinimumRule",
    "validate_claim",
]
