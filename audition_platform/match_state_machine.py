"""Platform-owned match state machine helpers.

A comper moves through two independent state tracks:

* resolution: ``pending`` -> ``matched`` (at a ranked index) or ``no_match``,
  derived purely from the status vector by :func:`evaluate`;
* announcement: ``not_scheduled`` -> ``scheduled`` -> ``announced``, derived
  from the persisted ``match_scheduled`` / ``matched`` flags.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from audition_platform.runtime.config import NO_MATCH_GROUP


UNDECIDED = "undecided"
REJECTED = "rejected"
ACCEPTED = "accepted"

DECISION_STATES = (UNDECIDED, REJECTED, ACCEPTED)

RESOLUTION_PENDING = "pending"
RESOLUTION_MATCHED = "matched"
RESOLUTION_NO_MATCH = "no_match"

ANNOUNCEMENT_NOT_SCHEDULED = "not_scheduled"
ANNOUNCEMENT_SCHEDULED = "scheduled"
ANNOUNCEMENT_ANNOUNCED = "announced"


@dataclass(frozen=True)
class Resolution:
    """Outcome of evaluating one comper's status vector."""

    state: str
    index: Optional[int] = None

    @property
    def is_resolved(self) -> bool:
        return self.state != RESOLUTION_PENDING

    def group_for(self, ranked_groups: Sequence[str]) -> Optional[str]:
        """Return the matched group, the no-match marker, or None while pending."""
        if self.state == RESOLUTION_MATCHED:
            return ranked_groups[self.index]
        if self.state == RESOLUTION_NO_MATCH:
            return NO_MATCH_GROUP
        return None


PENDING = Resolution(RESOLUTION_PENDING)
NO_MATCH = Resolution(RESOLUTION_NO_MATCH)


def evaluate(statuses: Sequence[str]) -> Resolution:
    """Resolve a status vector scanned in preference order.

    Rejections are skipped. The first acceptance wins, but only if every
    more-preferred group has already rejected: an undecided slot ahead of it
    keeps the comper pending. A vector of only rejections (or an empty one)
    resolves to no match.
    """
    for i, status in enumerate(statuses):
        if status == REJECTED:
            continue
        if status == ACCEPTED:
            return Resolution(RESOLUTION_MATCHED, i)
        return PENDING
    return NO_MATCH


def decision_state(accept: bool) -> str:
    """Map a representative's boolean decision onto a slot state."""
    return ACCEPTED if accept else REJECTED


def initial_statuses(ranked_groups: Sequence[str]) -> list[str]:
    """Return an all-undecided vector aligned with ``ranked_groups``."""
    return [UNDECIDED for _ in ranked_groups]


def apply_decision(statuses: Sequence[str], index: int, accept: bool) -> list[str]:
    """Return a copy of ``statuses`` with slot ``index`` decided.

    Raises ``ValueError`` if the slot is already decided; callers check this
    first and raise the domain error.
    """
    if statuses[index] != UNDECIDED:
        raise ValueError(f"slot {index} already decided: {statuses[index]}")
    updated = list(statuses)
    updated[index] = decision_state(accept)
    return updated


def announcement_state(match_scheduled: bool, matched: bool) -> str:
    """Return the announcement-track state from the persisted flags."""
    if matched:
        return ANNOUNCEMENT_ANNOUNCED
    if match_scheduled:
        return ANNOUNCEMENT_SCHEDULED
    return ANNOUNCEMENT_NOT_SCHEDULED


def needs_announcement(resolution: Resolution, *, match_scheduled: bool, matched: bool) -> bool:
    """Return True when a resolved comper has not yet had an announcement scheduled."""
    return (
        resolution.is_resolved
        and announcement_state(match_scheduled, matched) == ANNOUNCEMENT_NOT_SCHEDULED
    )
