"""Approval routing for newly submitted claims.

Turns a validation outcome into the claim's initial workflow decision:
reject it, approve it outright, or hand it to a manager or coordinator.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from claimflow.core.validation.engine import ValidationEngine, ValidationOutcome

# Claims up to and including this amount go to a manager first
MANAGER_ROUTING_LIMIT = Decimal("5000.00")


class WorkflowAction(str, Enum):
    """Decision outcome from routing."""

    AUTO_APPROVE = "auto_approve"                   # Meets every auto-approval criterion
    ROUTE_TO_MANAGER = "route_to_manager"           # Manager reviews first
    ROUTE_TO_COORDINATOR = "route_to_coordinator"   # High-value, coordinator reviews first
    REJECT = "reject"                               # Failed validation
    REQUIRE_MANUAL_REVIEW = "require_manual_review"


@dataclass
class WorkflowDecision:
    """
    Routing decision for a claim, with the validation findings it carries.
    """
    action: WorkflowAction
    message: str
    reasons: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert decision to dictionary for storage."""
        return {
            "action": self.action.value,
            "message": self.message,
            "reasons": list(self.reasons),
            "warnings": list(self.warnings),
            "recommendations": list(self.recommendations),
        }


class ApprovalRouter:
    """
    Decides the next workflow action for a submitted claim.

    Checks run in priority order and the first match wins:
    - REJECT: validation failed
    - AUTO_APPROVE: claim meets every auto-approval criterion
    - ROUTE_TO_MANAGER: total at or below the manager routing limit
    - ROUTE_TO_COORDINATOR: everything else
    """

    def __init__(self, validation_engine: Optional[ValidationEngine] = None):
        self.validation_engine = validation_engine or ValidationEngine()

    def decide(self, claim, outcome: ValidationOutcome) -> WorkflowDecision:
        """
        Decide how a claim enters the approval workflow.

        Args:
            claim: The submitted claim
            outcome: Result of validating that claim

        Returns:
            WorkflowDecision with action and message
        """
        if not outcome.is_valid:
            return WorkflowDecision(
                action=WorkflowAction.REJECT,
                message="Claim failed automated validation checks.",
                reasons=list(outcome.errors),
            )

        if self.validation_engine.is_eligible_for_auto_approval(claim):
            return WorkflowDecision(
                action=WorkflowAction.AUTO_APPROVE,
                message="Claim eligible for auto-approval based on predefined criteria.",
            )

        if claim.total_amount <= MANAGER_ROUTING_LIMIT:
            decision = WorkflowDecision(
                action=WorkflowAction.ROUTE_TO_MANAGER,
                message="Claim requires manager approval.",
            )
        else:
            decision = WorkflowDecision(
                action=WorkflowAction.ROUTE_TO_COORDINATOR,
                message="High-value claim requires coordinator approval.",
            )

        decision.warnings.extend(outcome.warnings)
        decision.recommendations.extend(outcome.recommendations)
        return decision
