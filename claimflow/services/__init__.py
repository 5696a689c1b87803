"""Reporting services for claimflow."""

from .reports import (
    ReportResult,
    calculate_total_payments_for_period,
    generate_claims_summary_report,
    generate_payment_report,
    get_approved_claims_for_payment,
)

__all__ = [
    "ReportResult",
    "calculate_total_payments_for_period",
    "generate_claims_summary_report",
    "generate_payment_report",
    "get_approved_claims_for_payment",
]
