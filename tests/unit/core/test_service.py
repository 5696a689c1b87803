"""Tests for the claim workflow service over the in-memory repository."""

import logging
import threading
from datetime import datetime
from decimal import Decimal

import pytest

from claimflow.core.approval.machine import TransitionError
from claimflow.core.approval.router import WorkflowAction
from claimflow.core.approval.states import ClaimState
from claimflow.schemas.claims import ClaimSubmission

from tests.factories import make_claim


class TestSubmit:
    """Submission validates, routes and stores a claim exactly once."""

    def test_invalid_claim_is_rejected(self, service, clock):
        result = service.submit(make_claim(hours_worked=20, hourly_rate="670"))
        claim = result.claim

        assert result.decision.action == WorkflowAction.REJECT
        assert claim.id is not None
        assert claim.status == "Rejected"
        assert claim.auto_validated is True
        assert claim.validation_notes == "Hourly rate (R670) exceeds maximum allowed rate (R500.00)."
        assert claim.submitted_date == clock()

    def test_small_claim_is_auto_approved(self, service):
        claim = service.submit(make_claim(hours_worked=10, hourly_rate="100")).claim

        assert claim.status == "Approved"
        assert claim.manager_approved and claim.coordinator_approved
        assert claim.workflow_status == "Auto-Approved"
        assert claim.validation_notes == ""

    def test_warnings_stored_in_notes(self, service):
        result = service.submit(make_claim(hours_worked=40, hourly_rate="200", with_document=False))

        assert result.outcome.is_valid
        assert result.claim.state == ClaimState.AWAITING_COORDINATOR.value
        assert "without supporting document" in result.claim.validation_notes

    def test_existing_submitted_date_kept(self, service):
        submitted = datetime(2024, 2, 1, 12, 0)
        claim = service.submit(make_claim(submitted_date=submitted)).claim
        assert claim.submitted_date == submitted

    def test_submit_form(self, service):
        form = ClaimSubmission(
            lecturer_name="  Jane Smith ",
            contract_name="PROG6212",
            hours_worked=40,
            hourly_rate=Decimal("100.00"),
        )
        result = service.submit_form(form)

        assert result.claim.lecturer_name == "Jane Smith"
        assert result.decision.action == WorkflowAction.ROUTE_TO_MANAGER
        assert service.get_claim(result.claim.id) is result.claim

    def test_submission_logged(self, service, caplog):
        with caplog.at_level(logging.INFO, logger="claimflow"):
            claim = service.submit(make_claim()).claim
        assert f"Claim {claim.id} submitted: auto_approve" in caplog.text


class TestResubmission:
    """A claim is validated and routed once; later submissions change nothing."""

    def test_routed_claim_is_refused(self, service, memory_repo):
        claim = service.submit(make_claim(hours_worked=40, hourly_rate="100")).claim
        notes = claim.validation_notes
        submitted = claim.submitted_date
        claim_lock = memory_repo._locks[claim.id]

        claim.hours_worked = 201
        with pytest.raises(TransitionError) as exc_info:
            service.submit(claim)

        assert exc_info.value.from_state == ClaimState.AWAITING_MANAGER
        assert claim.state == ClaimState.AWAITING_MANAGER.value
        assert claim.validation_notes == notes
        assert claim.submitted_date == submitted
        assert claim.workflow_action == WorkflowAction.ROUTE_TO_MANAGER.value
        assert memory_repo._locks[claim.id] is claim_lock
        assert memory_repo.list_all() == [claim]
        assert len(service.get_history(claim.id)) == 1

    def test_approver_still_serialized_after_refused_resubmission(self, service, memory_repo):
        claim = service.submit(make_claim(hours_worked=40, hourly_rate="100")).claim

        with memory_repo.lock(claim.id):
            with pytest.raises(TransitionError):
                service.submit(claim)
            assert memory_repo._locks[claim.id].locked()

        service.manager_approve(claim.id)
        assert claim.manager_approved is True


class TestTwoStageWorkflow:

    def test_manager_then_coordinator_approval(self, service, clock):
        claim = service.submit(make_claim(hours_worked=40, hourly_rate="100")).claim
        assert claim.state == ClaimState.AWAITING_MANAGER.value
        assert service.next_step(claim.id) == "Awaiting Manager Approval"

        clock.advance(days=1)
        service.manager_approve(claim.id, comment="Hours match the timetable")
        assert claim.status == "Pending"
        assert claim.workflow_status == "Awaiting Coordinator Approval"
        assert service.next_step(claim.id) == "Awaiting Coordinator Approval"

        clock.advance(days=1)
        returned = service.coordinator_approve(claim.id)
        assert returned is claim
        assert claim.status == "Approved"
        assert claim.last_updated_date == clock()
        assert service.next_step(claim.id) == "Approved"

    def test_history_across_actions(self, service):
        claim = service.submit(make_claim(hours_worked=40, hourly_rate="200")).claim
        service.coordinator_approve(claim.id)
        service.manager_reject(claim.id, comment="Duplicate claim")

        history = service.get_history(claim.id)
        assert [h["transition"] for h in history] == [
            "route_to_coordinator",
            "coordinator_approve",
            "manager_reject",
        ]
        assert history[-1]["comment"] == "Duplicate claim"
        assert claim.coordinator_approved is False

    def test_action_on_terminal_claim_raises(self, service):
        claim = service.submit(make_claim(hours_worked=20, hourly_rate="670")).claim
        with pytest.raises(TransitionError):
            service.manager_approve(claim.id)
        assert claim.status == "Rejected"


class TestMissingClaims:

    @pytest.mark.parametrize("action", [
        "manager_approve",
        "coordinator_approve",
        "manager_reject",
        "coordinator_reject",
    ])
    def test_unknown_claim_returns_none(self, service, caplog, action):
        with caplog.at_level(logging.WARNING):
            assert getattr(service, action)(999) is None
        assert "claim 999 not found" in caplog.text

    def test_next_step_for_unknown_claim(self, service):
        assert service.next_step(999) is None
        assert service.get_claim(999) is None
        assert service.get_history(999) == []


class TestQueues:

    def test_dashboard_queues(self, service):
        low = service.submit(make_claim(hours_worked=40, hourly_rate="100")).claim
        high = service.submit(make_claim(hours_worked=40, hourly_rate="200")).claim
        service.submit(make_claim(hours_worked=10, hourly_rate="100"))
        service.submit(make_claim(hours_worked=201, hourly_rate="15"))

        assert service.manager_queue() == [low]
        assert service.coordinator_queue() == [high]

        service.manager_approve(low.id)
        assert service.manager_queue() == []
        assert service.coordinator_queue() == [low, high]


class TestConcurrentApprovals:

    def test_simultaneous_approvals_both_land(self, service):
        """Approvals from both roles at once end fully approved."""
        claims = [
            service.submit(make_claim(hours_worked=40, hourly_rate="100")).claim
            for _ in range(20)
        ]
        barrier = threading.Barrier(2)
        errors = []

        def run(action):
            barrier.wait()
            try:
                for claim in claims:
                    action(claim.id)
            except Exception as e:
                errors.append(e)

        threads = [
            threading.Thread(target=run, args=(service.manager_approve,)),
            threading.Thread(target=run, args=(service.coordinator_approve,)),
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        for claim in claims:
            assert claim.state == ClaimState.APPROVED.value
            assert claim.manager_approved and claim.coordinator_approved
            assert len(service.get_history(claim.id)) == 3
