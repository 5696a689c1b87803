"""Claim validation for claimflow.

Checks submitted claims against the fixed claim policy.
"""

from .engine import ValidationEngine, ValidationOutcome, RuleResult
from .rules import Rule, RuleType, RuleSeverity, CLAIM_RULES

__all__ = [
    "ValidationEngine",
    "ValidationOutcome",
    "RuleResult",
    "Rule",
    "RuleType",
    "RuleSeverity",
    "CLAIM_RULES",
]
