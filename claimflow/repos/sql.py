"""SQLAlchemy-backed claim repository.

Writers lock the claim row with SELECT ... FOR UPDATE inside the session's
transaction. Committing is left to the caller that owns the session.
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy.orm import Session

from claimflow.db.models import Claim, ClaimHistory

from .base import ClaimRepository


class SqlAlchemyClaimRepository(ClaimRepository):
    """Claim repository backed by a database session."""

    def __init__(self, db: Session):
        """
        Initialize the repository.

        Args:
            db: Database session
        """
        self.db = db

    def add(self, claim: Claim) -> Claim:
        if claim.id is not None and self.db.get(Claim, claim.id) is not None:
            raise ValueError(f"Claim {claim.id} is already stored")
        self.db.add(claim)
        self.db.flush()
        return claim

    def get(self, claim_id: int) -> Optional[Claim]:
        return self.db.query(Claim).filter(Claim.id == claim_id).first()

    def list_all(self) -> List[Claim]:
        return self.db.query(Claim).order_by(Claim.id.asc()).all()

    @contextmanager
    def lock(self, claim_id: int) -> Iterator[Optional[Claim]]:
        # Stale copies in the identity map are overwritten from the locked row
        claim = self.db.query(Claim).filter(
            Claim.id == claim_id
        ).with_for_update().populate_existing().first()

        yield claim

        if claim is not None:
            self.db.flush()

    def save(self, claim: Claim) -> None:
        self.db.flush()

    def record_history(self, claim: Claim, record: Dict[str, Any]) -> None:
        history = ClaimHistory(
            claim_id=claim.id,
            from_state=record["from_state"],
            to_state=record["to_state"],
            transition=record["transition"],
            comment=record.get("comment"),
            created_at=record.get("timestamp"),
        )
        self.db.add(history)

    def get_history(self, claim_id: int) -> List[Dict[str, Any]]:
        rows = self.db.query(ClaimHistory).filter(
            ClaimHistory.claim_id == claim_id
        ).order_by(ClaimHistory.id.asc()).all()

        return [self._history_to_dict(row) for row in rows]

    def _history_to_dict(self, row: ClaimHistory) -> Dict[str, Any]:
        """Convert a ClaimHistory row to the state machine's record format."""
        return {
            "claim_id": row.claim_id,
            "from_state": row.from_state,
            "to_state": row.to_state,
            "transition": row.transition,
            "comment": row.comment,
            "timestamp": row.created_at,
        }
