"""
Policy validator for credproof.

validate_claim() is a pure function of (record, policy). It never raises
for a well-formed ClaimRecord; every outcome, including an unknown claim
type or a missing value, is reported through the ValidationResult.

A result is valid iff no check failed AND at least one check passed, so
a claim type with no applicable rule is never valid.
"""

from typing import List, Optional

from credproof.core.models import ClaimRecord, ValidationResult
from credproof.policy.policy import DEFAULT_POLICY, Policy
from credproof.policy.rules import CHECKS

SUCCESS_REASON = "All validation requirements passed"


def validate_claim(
    record: ClaimRecord,
    policy: Optional[Policy] = None,
) -> ValidationResult:
    """
    Evaluate a claim record against a policy.

    Args:
        record: Decoded claim.
        policy: Thresholds to apply. Defaults to DEFAULT_POLICY.

    Returns:
        ValidationResult with ordered passed/failed check messages.
    """
    if policy is None:
        policy = DEFAULT_POLICY

    passed: List[str] = []
    failed: List[str] = []

    check = CHECKS.get(record.claim_type)
    if check is None:
        failed.append(f"Unknown claim type: {record.claim_type}")
    else:
        rule = policy.rule_for(record.claim_type)
        if rule is not None and rule.applies:
            outcome = check(record, rule)
            (passed if outcome.passed else failed).append(outcome.message)

    is_valid = not failed and bool(passed)

    if is_valid:
        reason = SUCCESS_REASON
    elif failed:
        reason = "; ".join(failed)
    else:
        reason = f"No validation requirements apply to claim type: {record.claim_type}"

    return ValidationResult(
        is_valid=is_valid,
        reason=reason,
        passed_checks=tuple(passed),
        failed_checks=tuple(failed),
        claim_type=record.claim_type,
    )
