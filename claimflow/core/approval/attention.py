"""Work-queue predicates for the manager and coordinator dashboards.

The two predicates are independent. Manager attention covers low-value
claims nobody has approved yet. Coordinator attention covers high-value
claims nobody has approved yet, plus any claim a manager has approved and a
coordinator has not.
"""

from typing import Iterable, List

from .router import MANAGER_ROUTING_LIMIT
from .states import ClaimStatus


def needs_manager_attention(claim) -> bool:
    """True for an unapproved, unrejected claim within the manager routing limit."""
    return (
        not claim.manager_approved
        and not claim.coordinator_approved
        and claim.status != ClaimStatus.REJECTED.value
        and claim.total_amount <= MANAGER_ROUTING_LIMIT
    )


def needs_coordinator_attention(claim) -> bool:
    """Manager-approved without a coordinator approval, or above the routing limit with no approvals.

    Status is not consulted, so a rejected high-value claim also matches.
    """
    escalated = not claim.coordinator_approved and claim.manager_approved
    high_value = (
        claim.total_amount > MANAGER_ROUTING_LIMIT
        and not claim.manager_approved
        and not claim.coordinator_approved
    )
    return escalated or high_value


def manager_queue(claims: Iterable) -> List:
    """Claims waiting on a manager, in their original order."""
    return [claim for claim in claims if needs_manager_attention(claim)]


def coordinator_queue(claims: Iterable) -> List:
    """Claims waiting on a coordinator, in their original order."""
    return [claim for claim in claims if needs_coordinator_attention(claim)]
