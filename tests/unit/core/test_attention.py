"""Tests for the manager and coordinator work-queue predicates."""

from claimflow.core.approval.attention import (
    coordinator_queue,
    manager_queue,
    needs_coordinator_attention,
    needs_manager_attention,
)
from claimflow.core.approval.states import ClaimState

from tests.factories import make_claim


class TestManagerAttention:

    def test_low_value_unapproved_claim(self):
        claim = make_claim(hours_worked=40, hourly_rate="100", state=ClaimState.AWAITING_MANAGER.value)
        assert needs_manager_attention(claim)

    def test_limit_is_inclusive(self):
        assert needs_manager_attention(make_claim(hours_worked=50, hourly_rate="100"))
        assert not needs_manager_attention(make_claim(hours_worked=50, hourly_rate="101"))

    def test_any_approval_removes_claim(self):
        assert not needs_manager_attention(make_claim(manager_approved=True))
        assert not needs_manager_attention(make_claim(coordinator_approved=True))

    def test_rejected_claim_excluded(self):
        assert not needs_manager_attention(make_claim(state=ClaimState.REJECTED.value))


class TestCoordinatorAttention:

    def test_manager_approved_claim_escalates(self):
        claim = make_claim(
            hours_worked=40, hourly_rate="100",
            state=ClaimState.AWAITING_COORDINATOR.value, manager_approved=True,
        )
        assert needs_coordinator_attention(claim)
        assert not needs_manager_attention(claim)

    def test_high_value_unapproved_claim(self):
        claim = make_claim(hours_worked=40, hourly_rate="200", state=ClaimState.AWAITING_COORDINATOR.value)
        assert needs_coordinator_attention(claim)
        assert not needs_manager_attention(claim)

    def test_coordinator_approved_claim_excluded(self):
        claim = make_claim(
            hours_worked=40, hourly_rate="200",
            state=ClaimState.AWAITING_MANAGER.value, coordinator_approved=True,
        )
        assert not needs_coordinator_attention(claim)

    def test_low_value_unapproved_claim_excluded(self):
        assert not needs_coordinator_attention(make_claim(hours_worked=40, hourly_rate="100"))

    def test_rejected_high_value_claim_still_matches(self):
        """Rejection clears both approvals and the predicate does not look at status."""
        claim = make_claim(hours_worked=40, hourly_rate="200", state=ClaimState.REJECTED.value)
        assert claim.status == "Rejected"
        assert needs_coordinator_attention(claim)


class TestQueues:

    def test_queues_preserve_order_and_may_overlap(self):
        low_new = make_claim(hours_worked=40, hourly_rate="100", state=ClaimState.AWAITING_MANAGER.value)
        high_new = make_claim(hours_worked=40, hourly_rate="200", state=ClaimState.AWAITING_COORDINATOR.value)
        escalated = make_claim(
            hours_worked=30, hourly_rate="100",
            state=ClaimState.AWAITING_COORDINATOR.value, manager_approved=True,
        )
        done = make_claim(
            state=ClaimState.APPROVED.value, manager_approved=True, coordinator_approved=True,
        )
        claims = [low_new, high_new, escalated, done]

        assert manager_queue(claims) == [low_new]
        assert coordinator_queue(claims) == [high_new, escalated]

    def test_empty_input(self):
        assert manager_queue([]) == []
        assert coordinator_queue(iter([])) == []
