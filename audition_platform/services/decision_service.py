"""Platform-owned decision recording workflow.

A decision is applied as one ``BEGIN IMMEDIATE`` transaction covering the
whole read / evaluate / check-and-set sequence. Two representatives deciding
on the same comper at once are serialised by the write lock, so only the
first transaction to observe a resolved vector sets ``match_scheduled`` and
hands off to the announcer.
"""

import logging
import random
from pathlib import Path
from typing import Optional

from audition_platform.errors import (
    AlreadyDecided,
    InvalidReference,
    NotAuthorized,
)
from audition_platform.match_state_machine import (
    UNDECIDED,
    Resolution,
    apply_decision,
    evaluate,
    needs_announcement,
)
from audition_platform.persistence import ComperStore, connect, transaction
from audition_platform.runtime.config import (
    POLICY_IMMEDIATE,
    get_announce_policy,
    get_groups,
)
from audition_platform.scheduler import SchedulerPort, ThreadingScheduler
from audition_platform.services.announcement_service import (
    apply_announcement,
    schedule_announcement,
)
from audition_platform.services.delay_service import random_delay_ms

logger = logging.getLogger(__name__)

_SCHEDULER: SchedulerPort = ThreadingScheduler()


def get_default_scheduler() -> SchedulerPort:
    return _SCHEDULER


def record_group_decision(
    db_path: Path,
    comper_id: int,
    group: str,
    accept: bool,
    *,
    scheduler: SchedulerPort | None = None,
    policy: str | None = None,
    rng: Optional[random.Random] = None,
) -> Resolution:
    """Record ``group``'s accept/reject decision on one comper.

    Returns the resolution of the updated status vector. Raises
    ``InvalidReference`` for an unknown comper or group, ``NotAuthorized``
    when the comper did not rank ``group``, ``AlreadyDecided`` when the slot
    is no longer undecided, and ``DelayNotConfigured`` when a delayed
    announcement is due but no delay exists. On any error nothing is written.
    """
    if group not in get_groups():
        raise InvalidReference(f"Unknown group: {group}")

    policy = policy or get_announce_policy()
    scheduler = scheduler or _SCHEDULER
    pending_announcement = None

    with connect(db_path) as conn:
        with transaction(conn):
            comper = ComperStore.get(conn, comper_id)
            if comper is None:
                raise InvalidReference(f"No comper with id {comper_id}")

            ranked = comper["ranked_groups"]
            if group not in ranked:
                raise NotAuthorized(f"Comper #{comper_id} did not rank {group}")

            index = ranked.index(group)
            if comper["statuses"][index] != UNDECIDED:
                raise AlreadyDecided(f"{group} already decided on comper #{comper_id}")

            statuses = apply_decision(comper["statuses"], index, accept)
            resolution = evaluate(statuses)

            if not needs_announcement(
                resolution,
                match_scheduled=comper["match_scheduled"],
                matched=comper["matched"],
            ):
                ComperStore.update_statuses(conn, comper_id, statuses)
            else:
                outcome = resolution.group_for(ranked)
                ComperStore.update_statuses(conn, comper_id, statuses, match_scheduled=True)
                if policy == POLICY_IMMEDIATE:
                    apply_announcement(conn, comper_id, comper["preferred_name"],
                                       comper["email"], ranked, outcome)
                else:
                    delay_ms = random_delay_ms(conn, rng)
                    pending_announcement = (delay_ms, comper, outcome)

    logger.info("%s %s comper #%d -> %s", group,
                "accepted" if accept else "rejected", comper_id, resolution.state)

    # Scheduled only once the flag is committed, so a rolled-back decision
    # never leaves an announcement behind.
    if pending_announcement is not None:
        delay_ms, comper, outcome = pending_announcement
        schedule_announcement(scheduler, delay_ms, db_path, comper, outcome)

    return resolution
