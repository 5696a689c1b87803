"""Claim validation engine.

Evaluates a claim against the fixed claim policy and reports errors and
warnings. Also decides whether a claim is small and safe enough to skip
human review.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .rules import (
    AUTO_APPROVAL_MAX_AMOUNT,
    AUTO_APPROVAL_MAX_HOURS,
    AUTO_APPROVAL_MAX_RATE,
    CLAIM_RULES,
    CURRENCY_SYMBOL,
    Rule,
    RuleSeverity,
    evaluate_rule,
    to_decimal,
)


@dataclass
class RuleResult:
    """Result of evaluating a single rule."""
    rule: Rule
    passed: bool
    reason: Optional[str] = None


@dataclass
class ValidationOutcome:
    """
    Result of validating a claim.

    Errors make the claim invalid; warnings and recommendations are
    informational only.
    """
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    rule_results: List[RuleResult] = field(default_factory=list, repr=False)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    @property
    def notes(self) -> str:
        """Errors followed by warnings, as stored on the claim."""
        return "; ".join(self.errors + self.warnings)

    def to_dict(self) -> Dict[str, Any]:
        """Convert outcome to dictionary for storage."""
        return {
            "is_valid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "recommendations": list(self.recommendations),
        }


class ValidationEngine:
    """
    Validates claims against the claim policy.

    Every rule is evaluated; failures accumulate in rule order so the
    reviewer sees all problems at once.
    """

    def __init__(
        self,
        rules: Optional[List[Rule]] = None,
        currency_symbol: str = CURRENCY_SYMBOL,
    ):
        """
        Initialize the engine.

        Args:
            rules: Rules to check, in order; the claim policy if omitted
            currency_symbol: Prefix for amounts in failure messages
        """
        self.rules = list(rules) if rules is not None else list(CLAIM_RULES)
        self.currency_symbol = currency_symbol

    def validate(self, claim) -> ValidationOutcome:
        """
        Validate a claim.

        Args:
            claim: Claim to validate

        Returns:
            ValidationOutcome with errors, warnings and per-rule results
        """
        outcome = ValidationOutcome()

        for rule in self.rules:
            passed, reason = evaluate_rule(rule, claim, self.currency_symbol)
            outcome.rule_results.append(RuleResult(rule=rule, passed=passed, reason=reason))
            if passed:
                continue
            if rule.severity == RuleSeverity.ERROR:
                outcome.errors.append(reason)
            else:
                outcome.warnings.append(reason)

        return outcome

    def is_eligible_for_auto_approval(self, claim) -> bool:
        """Small, documented claims at modest rates skip human review."""
        return (
            claim.total_amount <= AUTO_APPROVAL_MAX_AMOUNT
            and to_decimal(claim.hourly_rate) <= AUTO_APPROVAL_MAX_RATE
            and claim.hours_worked <= AUTO_APPROVAL_MAX_HOURS
            and claim.has_supporting_document
        )
