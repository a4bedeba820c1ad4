"""Platform-owned admin operations: affiliations and the bulk reset."""

import logging
from pathlib import Path
from typing import Optional

from audition_platform.errors import InvalidReference, NotAuthorized
from audition_platform.models import GroupAffiliation
from audition_platform.persistence import (
    AffiliationStore,
    ComperStore,
    UpdateStore,
    connect,
    transaction,
)
from audition_platform.runtime.config import get_groups

logger = logging.getLogger(__name__)


def get_affiliation(db_path: Path, email: str) -> Optional[GroupAffiliation]:
    """Return the group affiliation for ``email``, or None."""
    with connect(db_path) as conn:
        row = AffiliationStore.get(conn, email)
    if row is None:
        return None
    return GroupAffiliation(email=row["email"], group=row["group"], is_admin=row["is_admin"])


def require_affiliation(db_path: Path, email: str) -> GroupAffiliation:
    """Return the caller's affiliation, raising ``NotAuthorized`` if they have none."""
    affiliation = get_affiliation(db_path, email)
    if affiliation is None:
        raise NotAuthorized(f"{email} is not affiliated with any group")
    return affiliation


def require_admin(db_path: Path, email: str) -> GroupAffiliation:
    affiliation = require_affiliation(db_path, email)
    if not affiliation.is_admin:
        raise NotAuthorized(f"{email} is not an admin")
    return affiliation


def add_affiliation(db_path: Path, email: str, group: str,
                    is_admin: bool = False) -> GroupAffiliation:
    """Affiliate a representative with a group."""
    if group not in get_groups():
        raise InvalidReference(f"Unknown group: {group}")
    with connect(db_path) as conn, transaction(conn):
        AffiliationStore.upsert(conn, email, group, is_admin)
    logger.info("Affiliated %s with %s%s", email, group, " (admin)" if is_admin else "")
    return GroupAffiliation(email=email, group=group, is_admin=is_admin)


def list_affiliations(db_path: Path) -> list[GroupAffiliation]:
    with connect(db_path) as conn:
        rows = AffiliationStore.list_all(conn)
    return [GroupAffiliation(email=r["email"], group=r["group"], is_admin=r["is_admin"])
            for r in rows]


def clear_decisions(db_path: Path) -> dict:
    """Reset every comper to undecided and purge the update feed.

    Announcements scheduled before the reset become no-ops when they fire.
    """
    with connect(db_path) as conn, transaction(conn):
        compers_reset = ComperStore.reset_all(conn)
        updates_deleted = UpdateStore.purge(conn)
    logger.info("Reset %d comper(s), deleted %d update(s)", compers_reset, updates_deleted)
    return {"compers_reset": compers_reset, "updates_deleted": updates_deleted}
