"""Claim workflow service.

Provides the high-level API used by dashboards: submitting a claim through
validation and routing, performing manager/coordinator actions by claim id,
and building the per-role work queues.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from claimflow.core.validation.engine import ValidationEngine, ValidationOutcome

from .attention import coordinator_queue, manager_queue
from .machine import ApprovalStateMachine, Clock, TransitionError
from .router import ApprovalRouter, WorkflowDecision
from .states import ClaimTransition

if TYPE_CHECKING:
    from claimflow.repos.base import ClaimRepository

logger = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    """What happened to a claim at submission."""
    claim: Any
    outcome: ValidationOutcome
    decision: WorkflowDecision


class ClaimWorkflowService:
    """
    High-level service for the claim approval workflow.

    Handles:
    - Validating and routing new claims exactly once
    - Manager and coordinator approve/reject actions, one writer per claim
    - Next-step and work-queue queries
    """

    def __init__(
        self,
        repository: "ClaimRepository",
        *,
        validation_engine: Optional[ValidationEngine] = None,
        router: Optional[ApprovalRouter] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize the workflow service.

        Args:
            repository: Claim storage
            validation_engine: Claim policy checks
            router: Initial routing; built on ``validation_engine`` if omitted
            clock: Returns "now" for submission and transition timestamps
        """
        self.repository = repository
        self.validation_engine = validation_engine or ValidationEngine()
        self.router = router or ApprovalRouter(self.validation_engine)
        self.clock = clock or datetime.utcnow

    def submit(self, claim) -> SubmissionResult:
        """
        Validate, route and store a new claim.

        Returns:
            SubmissionResult with the stored claim, validation outcome and
            routing decision

        Raises:
            TransitionError: If the claim has already been routed
        """
        outcome = self.validation_engine.validate(claim)
        decision = self.router.decide(claim, outcome)

        # Nothing on the claim or in the repository changes unless it can be routed
        machine = ApprovalStateMachine(claim, clock=self.clock)
        transition = machine.routing_transition(decision)
        if not machine.can_perform(transition):
            raise TransitionError(
                f"Claim {claim.id} was already submitted and is {machine.state.value}",
                machine.state,
                transition,
            )

        if claim.submitted_date is None:
            claim.submitted_date = self.clock()
        claim.auto_validated = True
        claim.validation_notes = outcome.notes

        self.repository.add(claim)

        machine.apply_decision(decision)
        self._persist(machine)

        logger.info(
            f"Claim {claim.id} submitted: {decision.action.value} "
            f"(total {claim.total_amount}, {len(outcome.errors)} errors, {len(outcome.warnings)} warnings)"
        )
        return SubmissionResult(claim=claim, outcome=outcome, decision=decision)

    def submit_form(self, submission) -> SubmissionResult:
        """Submit a validated ``ClaimSubmission``."""
        return self.submit(submission.to_claim())

    def get_claim(self, claim_id: int):
        return self.repository.get(claim_id)

    def manager_approve(self, claim_id: int, *, comment: Optional[str] = None):
        """Record the manager's approval. Returns None if the claim does not exist."""
        return self._perform(claim_id, ClaimTransition.MANAGER_APPROVE, comment)

    def coordinator_approve(self, claim_id: int, *, comment: Optional[str] = None):
        """Record the coordinator's approval. Returns None if the claim does not exist."""
        return self._perform(claim_id, ClaimTransition.COORDINATOR_APPROVE, comment)

    def manager_reject(self, claim_id: int, *, comment: Optional[str] = None):
        """Reject as manager. Returns None if the claim does not exist."""
        return self._perform(claim_id, ClaimTransition.MANAGER_REJECT, comment)

    def coordinator_reject(self, claim_id: int, *, comment: Optional[str] = None):
        """Reject as coordinator. Returns None if the claim does not exist."""
        return self._perform(claim_id, ClaimTransition.COORDINATOR_REJECT, comment)

    def next_step(self, claim_id: int) -> Optional[str]:
        claim = self.repository.get(claim_id)
        if claim is None:
            return None
        return ApprovalStateMachine(claim, clock=self.clock).next_step()

    def manager_queue(self) -> List:
        return manager_queue(self.repository.list_all())

    def coordinator_queue(self) -> List:
        return coordinator_queue(self.repository.list_all())

    def get_history(self, claim_id: int) -> List[Dict[str, Any]]:
        return self.repository.get_history(claim_id)

    def _perform(self, claim_id: int, transition: ClaimTransition, comment: Optional[str]):
        """Apply one human action under the claim's lock."""
        with self.repository.lock(claim_id) as claim:
            if claim is None:
                logger.warning(f"Cannot {transition.value}: claim {claim_id} not found")
                return None

            machine = ApprovalStateMachine(claim, clock=self.clock)
            new_state = machine.transition(transition, comment=comment)
            self._persist(machine)

        logger.info(f"Claim {claim_id} {transition.value} -> {new_state.value}")
        return claim

    def _persist(self, machine: ApprovalStateMachine) -> None:
        for record in machine.get_history():
            self.repository.record_history(machine.claim, record)
        self.repository.save(machine.claim)
