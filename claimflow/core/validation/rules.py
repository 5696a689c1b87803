"""Claim policy rule definitions.

Rules define the fixed conditions a claim is checked against at submission.
Each rule is either an error (the claim is invalid) or a warning (the claim
is flagged for the reviewer but stays valid).
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional


# Predefined validation criteria
MAX_HOURLY_RATE = Decimal("500.00")
MAX_HOURS_PER_WEEK = 50
MAX_HOURS_PER_CLAIM = 200
MAX_TOTAL_AMOUNT = Decimal("16000.00")
HIGH_VALUE_THRESHOLD = Decimal("5000.00")
CLAIM_PERIOD_WEEKS = 5

# Auto-approval criteria
AUTO_APPROVAL_MAX_AMOUNT = Decimal("3000.00")
AUTO_APPROVAL_MAX_RATE = Decimal("150.00")
AUTO_APPROVAL_MAX_HOURS = 20

# Prefix for amounts in rule messages
CURRENCY_SYMBOL = "R"


class RuleType(str, Enum):
    """Types of claim rules."""

    HOURLY_RATE_MAX = "hourly_rate_max"             # Rate cap per hour
    HOURS_PER_CLAIM_MAX = "hours_per_claim_max"     # Hard cap on hours in one claim
    HOURS_PER_PERIOD_MAX = "hours_per_period_max"   # Typical ceiling over the claim period
    TOTAL_AMOUNT_MAX = "total_amount_max"           # Cap on the payable amount
    DOCUMENT_REQUIRED = "document_required"         # High-value claims need a document


class RuleSeverity(str, Enum):
    """What a failed rule means for the claim."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Rule:
    """
    A single claim rule.

    ``value`` is the threshold the rule compares against.
    """
    rule_type: RuleType
    severity: RuleSeverity
    value: Any
    message: Optional[str] = None  # Custom failure message

    def to_dict(self) -> Dict[str, Any]:
        """Convert rule to dictionary for serialization."""
        return {
            "rule_type": self.rule_type.value,
            "severity": self.severity.value,
            "value": str(self.value),
            "message": self.message,
        }


CLAIM_RULES: List[Rule] = [
    Rule(RuleType.HOURLY_RATE_MAX, RuleSeverity.ERROR, MAX_HOURLY_RATE),
    Rule(RuleType.HOURS_PER_CLAIM_MAX, RuleSeverity.ERROR, MAX_HOURS_PER_CLAIM),
    # Never fires while HOURS_PER_CLAIM_MAX is below it; kept as a separate policy.
    Rule(RuleType.HOURS_PER_PERIOD_MAX, RuleSeverity.WARNING, MAX_HOURS_PER_WEEK * CLAIM_PERIOD_WEEKS),
    Rule(RuleType.TOTAL_AMOUNT_MAX, RuleSeverity.ERROR, MAX_TOTAL_AMOUNT),
    Rule(RuleType.DOCUMENT_REQUIRED, RuleSeverity.WARNING, HIGH_VALUE_THRESHOLD),
]


def to_decimal(value: Any) -> Decimal:
    """Convert a numeric value to ``Decimal`` without binary float artefacts."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def evaluate_rule(
    rule: Rule,
    claim,
    currency_symbol: str = CURRENCY_SYMBOL,
) -> tuple[bool, Optional[str]]:
    """
    Evaluate a single rule against a claim.

    Args:
        rule: The rule to evaluate
        claim: Claim exposing hours, rate, total and document presence
        currency_symbol: Prefix for amounts in the failure message

    Returns:
        Tuple of (passed, reason)
    """
    def money(amount: Decimal) -> str:
        return f"{currency_symbol}{amount}"

    if rule.rule_type == RuleType.HOURLY_RATE_MAX:
        rate = to_decimal(claim.hourly_rate)
        if rate > rule.value:
            return False, rule.message or (
                f"Hourly rate ({money(rate)}) exceeds maximum allowed rate ({money(rule.value)})."
            )
        return True, None

    elif rule.rule_type == RuleType.HOURS_PER_CLAIM_MAX:
        hours = claim.hours_worked
        if hours > rule.value:
            return False, rule.message or (
                f"Hours worked ({hours}) exceeds maximum allowed per claim ({rule.value})."
            )
        return True, None

    elif rule.rule_type == RuleType.HOURS_PER_PERIOD_MAX:
        hours = claim.hours_worked
        if hours > rule.value:
            return False, rule.message or (
                f"Hours worked ({hours}) exceeds typical {CLAIM_PERIOD_WEEKS}-week maximum ({rule.value} hours)."
            )
        return True, None

    elif rule.rule_type == RuleType.TOTAL_AMOUNT_MAX:
        total = claim.total_amount
        if total > rule.value:
            return False, rule.message or (
                f"Total amount ({money(total)}) exceeds maximum allowed ({money(rule.value)})."
            )
        return True, None

    elif rule.rule_type == RuleType.DOCUMENT_REQUIRED:
        if claim.total_amount > rule.value and not claim.has_supporting_document:
            return False, rule.message or (
                f"High-value claim (over {money(rule.value)}) submitted without supporting document."
            )
        return True, None

    raise ValueError(f"Unknown rule type: {rule.rule_type}")
