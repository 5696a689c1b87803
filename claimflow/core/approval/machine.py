"""Claim approval state machine implementation.

Handles routing and the manager/coordinator approve and reject actions on a
single claim, with transition validation, history and invariant checks.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from .router import MANAGER_ROUTING_LIMIT, WorkflowAction, WorkflowDecision
from .states import (
    ApprovalRole,
    ClaimState,
    ClaimStatus,
    ClaimTransition,
    TERMINAL_STATES,
    can_transition,
    get_transition_rule,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

_ROUTING_TRANSITIONS: Dict[WorkflowAction, ClaimTransition] = {
    WorkflowAction.AUTO_APPROVE: ClaimTransition.AUTO_APPROVE,
    WorkflowAction.REJECT: ClaimTransition.AUTO_REJECT,
    WorkflowAction.ROUTE_TO_MANAGER: ClaimTransition.ROUTE_TO_MANAGER,
    WorkflowAction.ROUTE_TO_COORDINATOR: ClaimTransition.ROUTE_TO_COORDINATOR,
}


class TransitionError(Exception):
    """Raised when a state transition is invalid."""

    def __init__(self, message: str, from_state: ClaimState, transition: ClaimTransition):
        super().__init__(message)
        self.from_state = from_state
        self.transition = transition


class InvariantViolation(Exception):
    """Raised when a claim's state disagrees with its approval flags."""

    def __init__(self, message: str, claim_id: Any, state: str):
        super().__init__(message)
        self.claim_id = claim_id
        self.state = state


def next_approval_step(claim) -> str:
    """
    Describe the step a claim is waiting on.

    Used to label a claim after a partial approval and to answer
    "what happens next" for claims that have not been acted on yet.
    """
    if claim.status == ClaimStatus.REJECTED.value:
        return "Rejected"
    if claim.manager_approved and claim.coordinator_approved:
        return "Approved"
    if claim.manager_approved:
        return "Awaiting Coordinator Approval"
    if claim.coordinator_approved:
        return "Awaiting Manager Approval"

    # Determine initial routing
    if claim.total_amount <= MANAGER_ROUTING_LIMIT:
        return "Awaiting Manager Approval"
    return "Awaiting Coordinator Approval"


def check_invariants(claim) -> None:
    """
    Verify that the claim's state and approval flags agree.

    Raises:
        InvariantViolation: If the claim is approved without both approvals,
            or holds both approvals without being approved
    """
    _check_consistent(
        claim.id,
        ClaimState(claim.state),
        bool(claim.manager_approved),
        bool(claim.coordinator_approved),
    )


def _check_consistent(claim_id: Any, state: ClaimState, manager_approved: bool, coordinator_approved: bool) -> None:
    both_approved = manager_approved and coordinator_approved
    approved = state == ClaimState.APPROVED

    if approved and not both_approved:
        raise InvariantViolation(
            f"Claim {claim_id} is approved but is missing an approval",
            claim_id,
            state.value,
        )
    if both_approved and not approved:
        raise InvariantViolation(
            f"Claim {claim_id} holds both approvals but is in state {state.value}",
            claim_id,
            state.value,
        )


class ApprovalStateMachine:
    """
    State machine for the claim approval workflow.

    Wraps a single claim and manages:
    - Validation of transitions against the rule table
    - The manager and coordinator approval flags
    - History of every state change, stamped by the injected clock
    - Callback hooks for side effects
    """

    def __init__(self, claim, *, clock: Optional[Clock] = None):
        """
        Initialize the state machine.

        Args:
            claim: The claim whose state is managed
            clock: Returns "now" for transition timestamps
        """
        self.claim = claim
        self.clock = clock or datetime.utcnow
        self._transition_history: list[Dict[str, Any]] = []
        self._callbacks: Dict[ClaimTransition, list[Callable]] = {}

    @property
    def state(self) -> ClaimState:
        """Current state of the claim."""
        return ClaimState(self.claim.state)

    @property
    def is_terminal(self) -> bool:
        """Check if current state is terminal (no further transitions)."""
        return self.state in TERMINAL_STATES

    def can_perform(self, transition: ClaimTransition) -> bool:
        """Check if a transition can be performed from current state."""
        return can_transition(self.state, transition)

    def get_available_transitions(self) -> list[ClaimTransition]:
        """Get list of transitions available from current state."""
        return [t for t in ClaimTransition if self.can_perform(t)]

    def next_step(self) -> str:
        return next_approval_step(self.claim)

    def transition(
        self,
        transition: ClaimTransition,
        *,
        comment: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> ClaimState:
        """
        Perform a state transition.

        Args:
            transition: The transition to perform
            comment: Optional comment, e.g. a rejection reason
            metadata: Additional metadata to record

        Returns:
            The new state after transition

        Raises:
            TransitionError: If the transition is invalid from the current state
            InvariantViolation: If the resulting state is inconsistent
        """
        from_state = self.state
        if not can_transition(from_state, transition):
            raise TransitionError(
                f"Cannot perform {transition.value} from state {from_state.value}",
                from_state,
                transition,
            )

        rule = get_transition_rule(from_state, transition)
        claim = self.claim

        manager_approved = bool(claim.manager_approved)
        coordinator_approved = bool(claim.coordinator_approved)
        if rule.clears_approvals:
            manager_approved = coordinator_approved = False
        elif rule.grants == ApprovalRole.MANAGER:
            manager_approved = True
        elif rule.grants == ApprovalRole.COORDINATOR:
            coordinator_approved = True
        elif transition == ClaimTransition.AUTO_APPROVE:
            manager_approved = coordinator_approved = True

        to_state = rule.to_state
        if rule.grants and manager_approved and coordinator_approved:
            to_state = ClaimState.APPROVED

        # Nothing is written if the result would be inconsistent
        _check_consistent(claim.id, to_state, manager_approved, coordinator_approved)

        now = self.clock()
        claim.manager_approved = manager_approved
        claim.coordinator_approved = coordinator_approved
        claim.state = to_state.value
        claim.last_updated_date = now

        transition_record = {
            "claim_id": claim.id,
            "from_state": from_state.value,
            "to_state": to_state.value,
            "transition": transition.value,
            "comment": comment,
            "metadata": metadata or {},
            "timestamp": now,
        }
        self._transition_history.append(transition_record)

        self._execute_callbacks(transition, transition_record)

        return to_state

    def routing_transition(self, decision: WorkflowDecision) -> ClaimTransition:
        """
        Map a routing decision to the transition that applies it.

        A manual-review decision is routed by amount, like a claim with no
        approvals yet.
        """
        transition = _ROUTING_TRANSITIONS.get(decision.action)
        if transition is not None:
            return transition
        if self.claim.total_amount <= MANAGER_ROUTING_LIMIT:
            return ClaimTransition.ROUTE_TO_MANAGER
        return ClaimTransition.ROUTE_TO_COORDINATOR

    def apply_decision(self, decision: WorkflowDecision) -> ClaimState:
        """Apply the routing decision made at submission."""
        new_state = self.transition(
            self.routing_transition(decision),
            comment=decision.message,
            metadata={"action": decision.action.value},
        )
        self.claim.workflow_action = decision.action.value
        return new_state

    def manager_approve(self, *, comment: Optional[str] = None) -> ClaimState:
        return self.transition(ClaimTransition.MANAGER_APPROVE, comment=comment)

    def coordinator_approve(self, *, comment: Optional[str] = None) -> ClaimState:
        return self.transition(ClaimTransition.COORDINATOR_APPROVE, comment=comment)

    def manager_reject(self, *, comment: Optional[str] = None) -> ClaimState:
        return self.transition(ClaimTransition.MANAGER_REJECT, comment=comment)

    def coordinator_reject(self, *, comment: Optional[str] = None) -> ClaimState:
        return self.transition(ClaimTransition.COORDINATOR_REJECT, comment=comment)

    def register_callback(
        self,
        transition: ClaimTransition,
        callback: Callable[[Dict[str, Any]], None],
    ) -> None:
        """
        Register a callback to be executed after a transition.

        Args:
            transition: The transition to hook
            callback: Function to call with transition record
        """
        self._callbacks.setdefault(transition, []).append(callback)

    def get_history(self) -> list[Dict[str, Any]]:
        """Get the transitions performed through this machine."""
        return self._transition_history.copy()

    def _execute_callbacks(self, transition: ClaimTransition, record: Dict[str, Any]) -> None:
        """Execute registered callbacks for a transition."""
        for callback in self._callbacks.get(transition, []):
            try:
                callback(record)
            except Exception:
                # Log but don't fail the transition
                logger.exception(f"Callback error for {transition.value} on claim {record['claim_id']}")
