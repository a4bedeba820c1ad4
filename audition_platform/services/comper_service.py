"""Platform-owned comper workflow service."""

import logging
import sqlite3
from pathlib import Path
from typing import Optional, Sequence

from audition_platform.errors import (
    DuplicateSubmission,
    EmptyRanking,
    InvalidRanking,
    InvalidReference,
)
from audition_platform.models import Comper
from audition_platform.persistence import ComperStore, connect, transaction
from audition_platform.runtime.config import get_groups

logger = logging.getLogger(__name__)


def _validate_ranking(ranked_groups: Sequence[str], unranked_groups: Sequence[str]) -> None:
    if not ranked_groups:
        raise EmptyRanking("At least one group must be ranked")

    known = set(get_groups())
    unknown = [g for g in (*ranked_groups, *unranked_groups) if g not in known]
    if unknown:
        raise InvalidReference(f"Unknown group(s): {', '.join(unknown)}")

    if len(set(ranked_groups)) != len(ranked_groups):
        raise InvalidRanking("Each group may be ranked only once")

    overlap = set(ranked_groups) & set(unranked_groups)
    if overlap:
        raise InvalidRanking(
            f"Group(s) both ranked and unranked: {', '.join(sorted(overlap))}"
        )


def submit_preferences(
    db_path: Path,
    email: str,
    preferred_name: str,
    ranked_groups: Sequence[str],
    unranked_groups: Sequence[str] = (),
) -> Comper:
    """Create the comper record for ``email`` with every slot undecided."""
    _validate_ranking(ranked_groups, unranked_groups)

    with connect(db_path) as conn:
        try:
            with transaction(conn):
                if ComperStore.get_by_email(conn, email) is not None:
                    raise DuplicateSubmission(f"Preferences already submitted for {email}")
                comper_id = ComperStore.create(
                    conn, email, preferred_name,
                    list(ranked_groups), list(unranked_groups),
                )
        except sqlite3.IntegrityError as e:
            # Lost a race against a concurrent submission for the same email
            raise DuplicateSubmission(f"Preferences already submitted for {email}") from e
        comper = ComperStore.get(conn, comper_id)

    logger.info("Comper #%d (%s) ranked %s", comper_id, email, ", ".join(ranked_groups))
    return Comper.from_dict(comper)


def get_comper(db_path: Path, comper_id: int) -> Comper:
    """Load one comper, raising ``InvalidReference`` if absent."""
    with connect(db_path) as conn:
        comper = ComperStore.get(conn, comper_id)
    if comper is None:
        raise InvalidReference(f"No comper with id {comper_id}")
    return Comper.from_dict(comper)


def get_submission(db_path: Path, email: str) -> Optional[dict]:
    """Return the caller's submitted preferences, or None if not yet submitted."""
    with connect(db_path) as conn:
        comper = ComperStore.get_by_email(conn, email)
    if comper is None:
        return None
    return {
        "preferred_name": comper["preferred_name"],
        "ranking": comper["ranked_groups"],
        "unranked": comper["unranked_groups"],
    }


def list_compers_for_group(db_path: Path, group: str) -> dict:
    """Return the compers relevant to ``group``.

    ``ranked`` holds compers who ranked the group, each with that group's
    current decision; ``unranked`` holds compers who declined it.
    """
    with connect(db_path) as conn:
        compers = [Comper.from_dict(c) for c in ComperStore.list_all(conn)]

    ranked = []
    for comper in compers:
        if group in comper.ranked_groups:
            payload = comper.to_dict()
            payload["decision"] = comper.decision_for(group)
            ranked.append(payload)
    unranked = [
        c.to_dict(include_state=False)
        for c in compers
        if group in c.unranked_groups
    ]
    return {"ranked": ranked, "unranked": unranked}
