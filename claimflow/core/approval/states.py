"""Claim approval states and transitions.

State Machine Diagram:

    ┌──────────┐
    │   NEW    │ ← Created at submission, before routing
    └────┬─────┘
         │
         ├──────────────┬──────────────────┬───────────────────┐
         │              │                  │                   │
    ┌────▼─────┐  ┌─────▼──────┐   ┌───────▼────────┐   ┌──────▼───────────┐
    │ APPROVED │  │  REJECTED  │   │AWAITING_MANAGER│◄─►│AWAITING_COORDNTR │
    └──────────┘  └────────────┘   └───────┬────────┘   └──────┬───────────┘
    (auto-approve) (auto-reject)           │                   │
                                           ├───────────────────┤
                                      ┌────▼─────┐       ┌─────▼────┐
                                      │ APPROVED │       │ REJECTED │
                                      └──────────┘       └──────────┘

A claim needs both a manager and a coordinator approval. The amount only
decides who is asked first; an approval from either role moves the claim to
the other role's stage until both approvals are present.
"""

from enum import Enum
from typing import Dict, NamedTuple, Optional, Set


class ClaimState(str, Enum):
    """Canonical workflow state of a claim."""

    NEW = "new"                                     # Submitted, not yet routed
    AWAITING_MANAGER = "awaiting_manager"           # Manager approval outstanding
    AWAITING_COORDINATOR = "awaiting_coordinator"   # Coordinator approval outstanding

    # Terminal states
    APPROVED = "approved"
    REJECTED = "rejected"


class ClaimStatus(str, Enum):
    """Externally visible lifecycle status, projected from ``ClaimState``."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class ApprovalRole(str, Enum):
    """The two human approval roles."""

    MANAGER = "manager"
    COORDINATOR = "coordinator"


class ClaimTransition(str, Enum):
    """Actions that trigger state transitions."""

    # Routing (applied once, from NEW)
    AUTO_APPROVE = "auto_approve"                   # NEW → APPROVED
    AUTO_REJECT = "auto_reject"                     # NEW → REJECTED
    ROUTE_TO_MANAGER = "route_to_manager"           # NEW → AWAITING_MANAGER
    ROUTE_TO_COORDINATOR = "route_to_coordinator"   # NEW → AWAITING_COORDINATOR

    # Human actions
    MANAGER_APPROVE = "manager_approve"
    COORDINATOR_APPROVE = "coordinator_approve"
    MANAGER_REJECT = "manager_reject"
    COORDINATOR_REJECT = "coordinator_reject"


class TransitionRule(NamedTuple):
    """Defines a valid state transition.

    ``to_state`` is the state reached while the other role's approval is
    still outstanding; the machine promotes to APPROVED once both approvals
    are present.
    """
    from_state: ClaimState
    to_state: ClaimState
    transition: ClaimTransition
    grants: Optional[ApprovalRole] = None
    clears_approvals: bool = False


_AWAITING = (ClaimState.AWAITING_MANAGER, ClaimState.AWAITING_COORDINATOR)

TRANSITION_RULES: list[TransitionRule] = [
    # Routing
    TransitionRule(ClaimState.NEW, ClaimState.APPROVED, ClaimTransition.AUTO_APPROVE),
    TransitionRule(ClaimState.NEW, ClaimState.REJECTED, ClaimTransition.AUTO_REJECT),
    TransitionRule(ClaimState.NEW, ClaimState.AWAITING_MANAGER, ClaimTransition.ROUTE_TO_MANAGER),
    TransitionRule(ClaimState.NEW, ClaimState.AWAITING_COORDINATOR, ClaimTransition.ROUTE_TO_COORDINATOR),

    # Approvals hand the claim to the other role
    TransitionRule(ClaimState.AWAITING_MANAGER, ClaimState.AWAITING_COORDINATOR,
                   ClaimTransition.MANAGER_APPROVE, grants=ApprovalRole.MANAGER),
    TransitionRule(ClaimState.AWAITING_COORDINATOR, ClaimState.AWAITING_COORDINATOR,
                   ClaimTransition.MANAGER_APPROVE, grants=ApprovalRole.MANAGER),
    TransitionRule(ClaimState.AWAITING_COORDINATOR, ClaimState.AWAITING_MANAGER,
                   ClaimTransition.COORDINATOR_APPROVE, grants=ApprovalRole.COORDINATOR),
    TransitionRule(ClaimState.AWAITING_MANAGER, ClaimState.AWAITING_MANAGER,
                   ClaimTransition.COORDINATOR_APPROVE, grants=ApprovalRole.COORDINATOR),
]

# Rejection overrides any partial approval
for _state in _AWAITING:
    TRANSITION_RULES.append(
        TransitionRule(_state, ClaimState.REJECTED, ClaimTransition.MANAGER_REJECT, clears_approvals=True)
    )
    TRANSITION_RULES.append(
        TransitionRule(_state, ClaimState.REJECTED, ClaimTransition.COORDINATOR_REJECT, clears_approvals=True)
    )

# Build lookup tables for efficient access
VALID_TRANSITIONS: Dict[ClaimState, Set[ClaimTransition]] = {}
TRANSITION_TARGETS: Dict[tuple[ClaimState, ClaimTransition], TransitionRule] = {}

for rule in TRANSITION_RULES:
    VALID_TRANSITIONS.setdefault(rule.from_state, set()).add(rule.transition)
    TRANSITION_TARGETS[(rule.from_state, rule.transition)] = rule


# Terminal states (no outgoing transitions)
TERMINAL_STATES: Set[ClaimState] = {
    ClaimState.APPROVED,
    ClaimState.REJECTED,
}

_STATUS_BY_STATE: Dict[ClaimState, ClaimStatus] = {
    ClaimState.NEW: ClaimStatus.PENDING,
    ClaimState.AWAITING_MANAGER: ClaimStatus.PENDING,
    ClaimState.AWAITING_COORDINATOR: ClaimStatus.PENDING,
    ClaimState.APPROVED: ClaimStatus.APPROVED,
    ClaimState.REJECTED: ClaimStatus.REJECTED,
}

_REVIEW_LABELS: Dict[ClaimState, str] = {
    ClaimState.AWAITING_MANAGER: "Awaiting Manager Review",
    ClaimState.AWAITING_COORDINATOR: "Awaiting Coordinator Review",
}


def can_transition(from_state: ClaimState, transition: ClaimTransition) -> bool:
    """Check if a transition is valid from the given state."""
    valid = VALID_TRANSITIONS.get(from_state, set())
    return transition in valid


def get_transition_rule(from_state: ClaimState, transition: ClaimTransition) -> Optional[TransitionRule]:
    """Get the transition rule for a state/action combination."""
    return TRANSITION_TARGETS.get((from_state, transition))


def status_for(state: ClaimState) -> ClaimStatus:
    """Project a workflow state onto the Pending/Approved/Rejected status."""
    return _STATUS_BY_STATE[ClaimState(state)]


def workflow_status_for(
    state: ClaimState,
    manager_approved: bool,
    coordinator_approved: bool,
    auto_approved: bool = False,
) -> str:
    """Descriptive label for the current workflow step."""
    state = ClaimState(state)
    if state == ClaimState.NEW:
        return "New"
    if state == ClaimState.REJECTED:
        return "Rejected"
    if state == ClaimState.APPROVED:
        return "Auto-Approved" if auto_approved else "Fully Approved"
    if manager_approved and not coordinator_approved:
        return "Awaiting Coordinator Approval"
    if coordinator_approved and not manager_approved:
        return "Awaiting Manager Approval"
    return _REVIEW_LABELS[state]
