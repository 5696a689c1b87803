"""Database layer for claimflow."""

from claimflow.db.base import Base

__all__ = ["Base"]
