"""Database models for claimflow."""

from claimflow.db.models.claim import Claim, ClaimHistory

__all__ = [
    "Claim",
    "ClaimHistory",
]
