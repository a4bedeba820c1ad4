"""Platform-owned resolution announcement service.

An announcement sets ``matched``/``matched_group`` on the comper and appends
the matching update-feed entry in one transaction, so neither is ever visible
without the other. Announcing is idempotent: once a comper is matched, later
deliveries of the same announcement are logged and ignored.
"""

import logging
import sqlite3
from pathlib import Path

from audition_platform.match_state_machine import evaluate
from audition_platform.persistence import ComperStore, UpdateStore, connect, transaction
from audition_platform.scheduler import SchedulerPort

logger = logging.getLogger(__name__)


def apply_announcement(conn: sqlite3.Connection, comper_id: int, name: str,
                       email: str, relevant_groups: list[str], group: str) -> bool:
    """Mark the comper matched and append its feed entry.

    Must run inside a ``transaction()`` held by the caller. Returns False
    without writing anything when the comper is gone, already matched, or no
    longer resolves to ``group``.
    """
    comper = ComperStore.get(conn, comper_id)
    if comper is None:
        logger.warning("Skipping announcement for missing comper #%d", comper_id)
        return False
    if comper["matched"]:
        logger.info("Comper #%d already announced as %s; ignoring redelivery",
                    comper_id, comper["matched_group"])
        return False
    current = evaluate(comper["statuses"]).group_for(comper["ranked_groups"])
    if not comper["match_scheduled"] or current != group:
        # Decisions were cleared after this announcement was scheduled
        logger.warning("Dropping stale announcement for comper #%d (%s)", comper_id, group)
        return False

    ComperStore.mark_matched(conn, comper_id, group)
    UpdateStore.append(conn, comper_id, name, email, relevant_groups, group)
    logger.info("Announced comper #%d (%s) -> %s", comper_id, email, group)
    return True


def announce_match(db_path: Path, comper_id: int, name: str, email: str,
                   relevant_groups: list[str], group: str) -> bool:
    """Scheduled announcement callback. Safe to deliver more than once."""
    with connect(db_path) as conn, transaction(conn):
        return apply_announcement(conn, comper_id, name, email, relevant_groups, group)


def reschedule_pending_announcements(db_path: Path, scheduler: SchedulerPort) -> int:
    """Re-deliver announcements that were scheduled but never applied.

    Covers timers lost when the process stopped. Announcements are
    idempotent, so re-delivering one whose original timer is still alive is
    harmless. Returns the number of announcements handed to the scheduler.
    """
    with connect(db_path) as conn:
        stranded = [
            c for c in ComperStore.list_all(conn)
            if c["match_scheduled"] and not c["matched"]
        ]

    count = 0
    for comper in stranded:
        group = evaluate(comper["statuses"]).group_for(comper["ranked_groups"])
        if group is None:
            continue
        schedule_announcement(scheduler, 0, db_path, comper, group)
        count += 1
    if count:
        logger.info("Re-delivering %d pending announcement(s)", count)
    return count


def schedule_announcement(scheduler: SchedulerPort, delay_ms: int, db_path: Path,
                          comper: dict, group: str) -> None:
    """Hand the announcement for ``comper`` to the scheduler."""
    scheduler.run_after(
        delay_ms,
        announce_match,
        db_path=db_path,
        comper_id=comper["id"],
        name=comper["preferred_name"],
        email=comper["email"],
        relevant_groups=list(comper["ranked_groups"]),
        group=group,
    )
