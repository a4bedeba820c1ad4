"""Platform-owned update feed service."""

from pathlib import Path
from typing import Optional

from audition_platform.models import UpdateEntry
from audition_platform.persistence import UpdateStore, connect
from audition_platform.runtime.config import NO_MATCH_GROUP


def list_update_feed(db_path: Path, group: Optional[str] = None) -> list[UpdateEntry]:
    """Return feed entries newest-first.

    The feed is visible to every group. Passing ``group`` narrows it to
    entries for compers who ranked that group.
    """
    with connect(db_path) as conn:
        entries = [UpdateEntry.from_dict(e) for e in UpdateStore.list_all(conn)]
    if group is None:
        return entries
    return [e for e in entries if group in e.relevant_groups]


def format_update(entry: UpdateEntry) -> str:
    """Render one entry as a human-readable feed line."""
    if entry.group == NO_MATCH_GROUP:
        return f"{entry.name} was not matched to a group"
    return f"{entry.name} matched with {entry.group}!"
