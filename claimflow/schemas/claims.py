"""Pydantic schemas for claim intake and read-back."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from claimflow.db.models import Claim

MIN_HOURLY_RATE = Decimal("15.00")
MAX_HOURLY_RATE = Decimal("500.00")


class ClaimSubmission(BaseModel):
    """A claim as entered by a lecturer, before it enters the workflow."""
    lecturer_name: str = Field(..., min_length=1, max_length=255)
    contract_name: str = Field(..., min_length=1, max_length=255)
    hours_worked: int = Field(..., ge=1, le=200, description="Hours worked, 1 to 200")
    hourly_rate: Decimal = Field(..., ge=MIN_HOURLY_RATE, le=MAX_HOURLY_RATE, decimal_places=2)
    lecturer_id: Optional[int] = None
    supporting_document_name: Optional[str] = Field(None, max_length=255)
    supporting_document_path: Optional[str] = Field(None, max_length=1024)

    @field_validator("lecturer_name", "contract_name")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Lecturer name and contract name are required.")
        return v.strip()

    def to_claim(self) -> Claim:
        """Build a new, unrouted claim from this submission."""
        return Claim(
            lecturer_name=self.lecturer_name,
            lecturer_id=self.lecturer_id,
            contract_name=self.contract_name,
            hours_worked=self.hours_worked,
            hourly_rate=self.hourly_rate,
            supporting_document_name=self.supporting_document_name,
            supporting_document_path=self.supporting_document_path,
        )


class ClaimRead(BaseModel):
    """A claim as shown to dashboards and reports."""
    id: int
    lecturer_name: Optional[str]
    lecturer_id: Optional[int]
    contract_name: Optional[str]
    hours_worked: int
    hourly_rate: Decimal
    total_amount: Decimal
    has_supporting_document: bool
    status: str
    workflow_status: str
    manager_approved: bool
    coordinator_approved: bool
    auto_validated: bool
    validation_notes: Optional[str]
    submitted_date: Optional[datetime]
    last_updated_date: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)
