"""
Validation policy for credproof.

A policy maps each claim type to the rule a claim of that type must
satisfy. Deployments tune underwriting strictness by loading a policy
file instead of changing code.

Policy file (YAML):

    name: strict-lending
    version: "2"
    rules:
      credit_score:
        minimum: 740
      credit_history:
        no_defaults: true

Claim types not listed keep their DEFAULT_POLICY rule unless
`inherit_defaults: false` is set, in which case they have no rule and
claims of that type can never validate.
"""

from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from credproof.core.canonical import canonical_hash
from credproof.core.exceptions import PolicyError
from credproof.core.models import ClaimType
from credproof.policy.rules import HistoryRule, MinimumRule, Rule, RULE_TYPES


class Policy:
    """
    A policy is a set of per-claim-type rules.
    """

    def __init__(
        self,
        rules: Mapping[str, Rule],
        policy_id: str = "default",
        version: str = "1.0",
    ):
        for claim_type, rule in rules.items():
            expected = RULE_TYPES.get(claim_type)
            if expected is None:
                raise PolicyError(
                    "Policy names an unknown claim type",
                    {"claim_type": claim_type, "known": sorted(RULE_TYPES)},
                )
            if not isinstance(rule, expected):
                raise PolicyError(
                    "Rule type does not fit claim type",
                    {
                        "claim_type": claim_type,
                        "expected": expected.__name__,
                        "got": type(rule).__name__,
                    },
                )

        self.policy_id = policy_id
        self.version = version
        self.rules: Dict[str, Rule] = dict(rules)

    def rule_for(self, claim_type: str) -> Optional[Rule]:
        return self.rules.get(claim_type)

    def with_rules(self, rules: Mapping[str, Rule], **kwargs) -> "Policy":
        """Return a copy with some rules replaced."""
        merged = dict(self.rules)
        merged.update(rules)
        return Policy(
            rules=merged,
            policy_id=kwargs.get("policy_id", self.policy_id),
            version=kwargs.get("version", self.version),
        )

    @property
    def policy_hash(self) -> str:
        """Deterministic hash of policy for audit trails."""
        return canonical_hash(self.to_dict())

    def to_dict(self) -> dict:
        return {
            "name": self.policy_id,
            "version": self.version,
            "rules": {
                claim_type: rule.to_dict()
                for claim_type, rule in sorted(self.rules.items())
            },
        }

    @staticmethod
    def from_dict(data: Any) -> "Policy":
        """Load policy from dictionary."""
        if not isinstance(data, dict):
            raise PolicyError(
                "Policy definition must be a mapping", {"type": type(data).__name__}
            )

        rules_data = data.get("rules")
        if rules_data is None:
            rules_data = {}
        if not isinstance(rules_data, dict):
            raise PolicyError("Policy 'rules' must be a mapping")

        inherit = data.get("inherit_defaults", True)
        if not isinstance(inherit, bool):
            raise PolicyError(
                "Policy field 'inherit_defaults' must be true or false",
                {"inherit_defaults": repr(inherit)},
            )
        rules: Dict[str, Rule] = dict(DEFAULT_POLICY.rules) if inherit else {}

        for claim_type, rule_data in rules_data.items():
            rule_cls = RULE_TYPES.get(claim_type)
            if rule_cls is None:
                raise PolicyError(
                    "Policy names an unknown claim type",
                    {"claim_type": claim_type, "known": sorted(RULE_TYPES)},
                )
            rules[claim_type] = rule_cls.from_dict(rule_data or {})

        return Policy(
            rules=rules,
            policy_id=str(data.get("name", DEFAULT_POLICY.policy_id)),
            version=str(data.get("version", DEFAULT_POLICY.version)),
        )

    @classmethod
    def from_yaml(cls, policy_file: Path) -> "Policy":
        """Load policy from YAML file."""
        policy_file = Path(policy_file)
        try:
            with open(policy_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise PolicyError(f"Failed to read policy file: {e}", {"path": str(policy_file)})
        except yaml.YAMLError as e:
            raise PolicyError(f"Invalid policy YAML: {e}", {"path": str(policy_file)})

        return cls.from_dict(data if data is not None else {})

    def __repr__(self) -> str:
        return (
            f"Policy(policy_id={self.policy_id!r}, version={self.version!r}, "
            f"rules={sorted(self.rules)})"
        )


DEFAULT_POLICY = Policy(
    rules={
        ClaimType.CREDIT_SCORE:        MinimumRule(minimum=700),
        ClaimType.ACCOUNT_BALANCE:     MinimumRule(minimum=50000),
        ClaimType.INCOME_VERIFICATION: MinimumRule(minimum=50000),
        ClaimType.CREDIT_HISTORY:      HistoryRule(no_defaults=True),
    },
    policy_id="default",
    version="1.0",
)
