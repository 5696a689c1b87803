"""Claim database models.

Stores lecturer claims and the history of their workflow transitions.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from claimflow.core.approval.router import WorkflowAction
from claimflow.core.approval.states import (
    ClaimState,
    status_for,
    workflow_status_for,
)
from claimflow.core.validation.rules import to_decimal
from claimflow.db.base import Base


class Claim(Base):
    """
    A lecturer's request for payment for hours worked.

    ``state`` is the canonical workflow position. ``status`` and
    ``workflow_status`` are projections of it and are never stored.
    """
    __tablename__ = "claims"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Who and what
    lecturer_name = Column(String(255), nullable=True)
    lecturer_id = Column(Integer, nullable=True, index=True)
    contract_name = Column(String(255), nullable=True)

    # Work claimed
    hours_worked = Column(Integer, nullable=False, default=0)
    hourly_rate = Column(Numeric(10, 2), nullable=False, default=Decimal("0"))

    # Supporting document (resolved by the document store before validation)
    supporting_document_name = Column(String(255), nullable=True)
    supporting_document_path = Column(String(1024), nullable=True)

    # Workflow state
    state = Column(String(50), nullable=False, default=ClaimState.NEW.value, index=True)
    manager_approved = Column(Boolean, nullable=False, default=False)
    coordinator_approved = Column(Boolean, nullable=False, default=False)
    workflow_action = Column(String(50), nullable=True)  # routing decision taken at submission

    # Automated validation
    auto_validated = Column(Boolean, nullable=False, default=False)
    validation_notes = Column(Text, nullable=True)

    # Timestamps
    submitted_date = Column(DateTime, default=datetime.utcnow, index=True)
    last_updated_date = Column(DateTime, nullable=True)

    # Relationships
    history = relationship(
        "ClaimHistory",
        back_populates="claim",
        order_by="ClaimHistory.id",
        cascade="all, delete-orphan",
    )

    def __init__(self, **kwargs):
        # Column defaults only apply on INSERT; claims are also used unsaved.
        kwargs.setdefault("hours_worked", 0)
        kwargs.setdefault("hourly_rate", Decimal("0"))
        kwargs.setdefault("state", ClaimState.NEW.value)
        kwargs.setdefault("manager_approved", False)
        kwargs.setdefault("coordinator_approved", False)
        kwargs.setdefault("auto_validated", False)
        super().__init__(**kwargs)

    @property
    def total_amount(self) -> Decimal:
        """Hours worked multiplied by the hourly rate, computed on every access."""
        return Decimal(self.hours_worked or 0) * to_decimal(self.hourly_rate)

    @property
    def has_supporting_document(self) -> bool:
        return bool(self.supporting_document_path)

    @property
    def status(self) -> str:
        return status_for(self.state).value

    @property
    def workflow_status(self) -> str:
        return workflow_status_for(
            self.state,
            self.manager_approved,
            self.coordinator_approved,
            auto_approved=self.workflow_action == WorkflowAction.AUTO_APPROVE.value,
        )

    def days_since_submission(self, now: Optional[datetime] = None) -> int:
        """Whole days elapsed since submission."""
        if self.submitted_date is None:
            return 0
        now = now or datetime.utcnow()
        return (now - self.submitted_date).days

    def __repr__(self) -> str:
        return f"<Claim {self.id} {self.lecturer_name} {self.total_amount} [{self.state}]>"


class ClaimHistory(Base):
    """
    Records all state transitions for claims.

    Provides an audit trail of the approval workflow.
    """
    __tablename__ = "claim_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    claim_id = Column(Integer, ForeignKey("claims.id", ondelete="CASCADE"), nullable=False, index=True)

    # Transition details
    from_state = Column(String(50), nullable=False)
    to_state = Column(String(50), nullable=False)
    transition = Column(String(50), nullable=False)

    comment = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    claim = relationship("Claim", back_populates="history")

    def __repr__(self) -> str:
        return f"<ClaimHistory {self.from_state} -> {self.to_state}>"
