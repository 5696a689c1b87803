"""Claim repositories for claimflow."""

from .base import ClaimRepository
from .memory import InMemoryClaimRepository
from .sql import SqlAlchemyClaimRepository

__all__ = [
    "ClaimRepository",
    "InMemoryClaimRepository",
    "SqlAlchemyClaimRepository",
]
