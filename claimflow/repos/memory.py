"""In-process claim repository.

Keeps claims in a dictionary and serializes writers per claim with one
lock per claim id.
"""

import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from claimflow.db.models import Claim

from .base import ClaimRepository


class InMemoryClaimRepository(ClaimRepository):
    """Claim repository backed by process memory."""

    def __init__(self):
        self._claims: Dict[int, Claim] = {}
        self._locks: Dict[int, threading.Lock] = {}
        self._history: Dict[int, List[Dict[str, Any]]] = {}
        self._guard = threading.Lock()
        self._next_id = 1

    def add(self, claim: Claim) -> Claim:
        with self._guard:
            if claim.id in self._claims:
                raise ValueError(f"Claim {claim.id} is already stored")
            if claim.id is None:
                claim.id = self._next_id
            self._next_id = max(self._next_id, claim.id) + 1
            self._claims[claim.id] = claim
            self._locks[claim.id] = threading.Lock()
            self._history.setdefault(claim.id, [])
        return claim

    def get(self, claim_id: int) -> Optional[Claim]:
        return self._claims.get(claim_id)

    def list_all(self) -> List[Claim]:
        return list(self._claims.values())

    @contextmanager
    def lock(self, claim_id: int) -> Iterator[Optional[Claim]]:
        claim_lock = self._locks.get(claim_id)
        if claim_lock is None:
            yield None
            return
        with claim_lock:
            yield self._claims[claim_id]

    def save(self, claim: Claim) -> None:
        # Claims are held by reference
        pass

    def record_history(self, claim: Claim, record: Dict[str, Any]) -> None:
        with self._guard:
            self._history.setdefault(claim.id, []).append(dict(record))

    def get_history(self, claim_id: int) -> List[Dict[str, Any]]:
        return [dict(r) for r in self._history.get(claim_id, [])]
