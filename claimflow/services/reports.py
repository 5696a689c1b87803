"""Payment and claims summary reports.

Aggregates claims into report data. Rendering (CSV, HTML, currency and date
formatting) belongs to the presentation layer and is not done here.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Optional

from claimflow.core.approval.states import ClaimStatus

logger = logging.getLogger(__name__)


@dataclass
class ReportRow:
    """One approved claim in a payment report."""
    claim_id: Optional[int]
    lecturer_name: Optional[str]
    contract_name: Optional[str]
    hours_worked: int
    hourly_rate: Decimal
    total_amount: Decimal
    submitted_date: Optional[datetime]
    approved_date: Optional[datetime]


@dataclass
class SummaryRow:
    """Claims grouped under one status."""
    category: str
    count: int
    total_amount: Decimal


@dataclass
class ReportSummary:
    total_claims: int = 0
    total_amount: Decimal = Decimal("0")
    total_hours: int = 0


@dataclass
class ReportResult:
    """
    Report data ready for a renderer.
    """
    title: str
    generated_date: datetime
    rows: List[ReportRow] = field(default_factory=list)
    summary_rows: List[SummaryRow] = field(default_factory=list)
    summary: ReportSummary = field(default_factory=ReportSummary)

    def to_dict(self) -> Dict[str, Any]:
        """Convert report to dictionary for storage or rendering."""
        return {
            "title": self.title,
            "generated_date": self.generated_date.isoformat(),
            "rows": [
                {
                    "claim_id": r.claim_id,
                    "lecturer_name": r.lecturer_name,
                    "contract_name": r.contract_name,
                    "hours_worked": r.hours_worked,
                    "hourly_rate": str(r.hourly_rate),
                    "total_amount": str(r.total_amount),
                    "submitted_date": r.submitted_date.isoformat() if r.submitted_date else None,
                    "approved_date": r.approved_date.isoformat() if r.approved_date else None,
                }
                for r in self.rows
            ],
            "summary_rows": [
                {"category": s.category, "count": s.count, "total_amount": str(s.total_amount)}
                for s in self.summary_rows
            ],
            "summary": {
                "total_claims": self.summary.total_claims,
                "total_amount": str(self.summary.total_amount),
                "total_hours": self.summary.total_hours,
            },
        }


def _approved_in_period(claims: Iterable, start: datetime, end: datetime) -> List:
    return [
        c for c in claims
        if c.status == ClaimStatus.APPROVED.value
        and c.submitted_date is not None
        and start <= c.submitted_date <= end
    ]


def get_approved_claims_for_payment(claims: Iterable) -> List:
    """All approved claims, whatever their submission date."""
    return [c for c in claims if c.status == ClaimStatus.APPROVED.value]


def calculate_total_payments_for_period(start: datetime, end: datetime, claims: Iterable) -> Decimal:
    """Sum of approved claim totals submitted within [start, end]."""
    return sum((c.total_amount for c in _approved_in_period(claims, start, end)), Decimal("0"))


def generate_payment_report(
    start: datetime,
    end: datetime,
    claims: Iterable,
    clock: Optional[Callable[[], datetime]] = None,
) -> ReportResult:
    """
    Build the payment report for approved claims submitted in a period.

    Args:
        start: First submission time included
        end: Last submission time included
        claims: Claims to report on
        clock: Returns the generation time

    Returns:
        ReportResult with one row per approved claim and period totals
    """
    clock = clock or datetime.utcnow
    approved = _approved_in_period(claims, start, end)

    result = ReportResult(
        title=f"Payment Report - {start:%Y-%m-%d} to {end:%Y-%m-%d}",
        generated_date=clock(),
    )

    for claim in approved:
        result.rows.append(ReportRow(
            claim_id=claim.id,
            lecturer_name=claim.lecturer_name,
            contract_name=claim.contract_name,
            hours_worked=claim.hours_worked,
            hourly_rate=claim.hourly_rate,
            total_amount=claim.total_amount,
            submitted_date=claim.submitted_date,
            approved_date=claim.last_updated_date or claim.submitted_date,
        ))

    result.summary.total_claims = len(approved)
    result.summary.total_amount = sum((c.total_amount for c in approved), Decimal("0"))
    result.summary.total_hours = sum(c.hours_worked for c in approved)

    logger.info(f"Generated payment report with {len(approved)} claims")
    return result


def generate_claims_summary_report(
    status: Optional[str],
    claims: Iterable,
    clock: Optional[Callable[[], datetime]] = None,
) -> ReportResult:
    """
    Group claims by status with counts and totals.

    Args:
        status: Only include claims with this status; all claims if empty
        claims: Claims to report on
        clock: Returns the generation time
    """
    clock = clock or datetime.utcnow
    claims = list(claims)
    filtered = [c for c in claims if c.status == status] if status else claims

    result = ReportResult(
        title=f"Claims Summary Report - {status or 'All Statuses'}",
        generated_date=clock(),
    )

    groups: Dict[str, List] = {}
    for claim in filtered:
        groups.setdefault(claim.status, []).append(claim)

    for category, members in groups.items():
        result.summary_rows.append(SummaryRow(
            category=category,
            count=len(members),
            total_amount=sum((c.total_amount for c in members), Decimal("0")),
        ))

    result.summary.total_claims = len(filtered)
    result.summary.total_amount = sum((c.total_amount for c in filtered), Decimal("0"))
    result.summary.total_hours = sum(c.hours_worked for c in filtered)

    return result
