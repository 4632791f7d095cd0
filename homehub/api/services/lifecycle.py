"""
Listing Lifecycle
Allowed status transitions for listing owners and reviewers.
"""

import logging
from typing import Dict, List, Set

from ...models.listing import ListingStatus, sold_status_for
from ..errors import InvalidTransitionError

logger = logging.getLogger(__name__)

S = ListingStatus

TERMINAL_STATUSES: Set[str] = {S.SOLD.value, S.RENTED.value}
PUBLIC_STATUSES: Set[str] = {S.ACTIVE.value, S.UNDER_CONTRACT.value}

# "closed" stands in for sold or rented, resolved by listing type
_CLOSED = "closed"

OWNER_TRANSITIONS: Dict[str, List[str]] = {
    S.DRAFT.value: [S.PENDING.value],
    S.REJECTED.value: [S.PENDING.value],
    S.ACTIVE.value: [S.UNDER_CONTRACT.value, _CLOSED, S.OFF_MARKET.value],
    S.UNDER_CONTRACT.value: [S.ACTIVE.value, _CLOSED, S.OFF_MARKET.value],
    S.OFF_MARKET.value: [S.ACTIVE.value, _CLOSED],
}

REVIEWER_TRANSITIONS: Dict[str, List[str]] = {
    S.PENDING.value: [S.ACTIVE.value, S.REJECTED.value],
}


def _resolve(targets: List[str], listing_type: str) -> List[str]:
    return [sold_status_for(listing_type) if t == _CLOSED else t for t in targets]


def allowed_owner_transitions(current: str, listing_type: str) -> List[str]:
    return _resolve(OWNER_TRANSITIONS.get(current, []), listing_type)


def allowed_reviewer_transitions(current: str) -> List[str]:
    allowed = list(REVIEWER_TRANSITIONS.get(current, []))
    # Reviewers can take down anything still open
    if current not in TERMINAL_STATUSES and current != S.OFF_MARKET.value:
        allowed.append(S.OFF_MARKET.value)
    return allowed


def check_owner_transition(current: str, requested: str, listing_type: str) -> None:
    """Raise InvalidTransitionError unless the listing owner may make this change."""
    allowed = allowed_owner_transitions(current, listing_type)
    if requested not in allowed:
        logger.info(f"Rejected owner transition {current} -> {requested}")
        raise InvalidTransitionError(current, requested, allowed)


def check_reviewer_transition(current: str, requested: str) -> None:
    """Raise InvalidTransitionError unless a reviewer may make this change."""
    allowed = allowed_reviewer_transitions(current)
    if requested not in allowed:
        logger.info(f"Rejected reviewer transition {current} -> {requested}")
        raise InvalidTransitionError(current, requested, allowed)


def is_publicly_visible(status: str) -> bool:
    return status in PUBLIC_STATUSES
