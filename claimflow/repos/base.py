"""Base class for claim repositories.

The workflow core never touches storage directly; it is handed a
repository implementing this interface.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ContextManager, Dict, List, Optional

if TYPE_CHECKING:
    from claimflow.db.models import Claim


class ClaimRepository(ABC):
    """Abstract base class for claim storage.

    Each repository must implement methods for:
    - Adding and looking up claims
    - Locking a single claim for a read-modify-write
    - Recording transition history
    """

    @abstractmethod
    def add(self, claim: "Claim") -> "Claim":
        """Store a new claim and assign its id.

        Args:
            claim: Claim to store

        Returns:
            The stored claim

        Raises:
            ValueError: If a claim with the same id is already stored
        """
        pass

    @abstractmethod
    def get(self, claim_id: int) -> Optional["Claim"]:
        """Get a claim by id.

        Args:
            claim_id: Claim identifier

        Returns:
            The claim or None if not found
        """
        pass

    @abstractmethod
    def list_all(self) -> List["Claim"]:
        """List all claims in submission order."""
        pass

    @abstractmethod
    def lock(self, claim_id: int) -> ContextManager[Optional["Claim"]]:
        """Hold an exclusive lock on one claim for the duration of a block.

        Mutations made inside the block are not interleaved with other
        writers of the same claim.

        Args:
            claim_id: Claim identifier

        Returns:
            Context manager yielding the claim, or None if not found
        """
        pass

    @abstractmethod
    def save(self, claim: "Claim") -> None:
        """Persist changes made to a claim."""
        pass

    @abstractmethod
    def record_history(self, claim: "Claim", record: Dict[str, Any]) -> None:
        """Store one transition record for a claim.

        Args:
            claim: The claim that transitioned
            record: Transition record produced by the state machine
        """
        pass

    @abstractmethod
    def get_history(self, claim_id: int) -> List[Dict[str, Any]]:
        """Get recorded transitions for a claim, oldest first."""
        pass
