"""Approval workflow module for claimflow.

Implements claim routing, the two-stage approval state machine and the
dashboard work-queue predicates.
"""

from .states import ClaimState, ClaimStatus, ClaimTransition, VALID_TRANSITIONS
from .router import ApprovalRouter, WorkflowAction, WorkflowDecision
from .machine import (
    ApprovalStateMachine,
    InvariantViolation,
    TransitionError,
    next_approval_step,
)
from .attention import needs_coordinator_attention, needs_manager_attention
from .service import ClaimWorkflowService, SubmissionResult

__all__ = [
    "ClaimState",
    "ClaimStatus",
    "ClaimTransition",
    "VALID_TRANSITIONS",
    "ApprovalRouter",
    "WorkflowAction",
    "WorkflowDecision",
    "ApprovalStateMachine",
    "InvariantViolation",
    "TransitionError",
    "next_approval_step",
    "needs_coordinator_attention",
    "needs_manager_attention",
    "ClaimWorkflowService",
    "SubmissionResult",
]
