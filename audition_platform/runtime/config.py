"""
Configuration constants for the audition-match system.
"""

import os
from pathlib import Path

# Site copy served to the frontend
SITE_CONFIG = {
    "TITLE": "spring 2024 a cappella auditions",
    "SITE_DESCRIPTION": "Rank group preferences for a cappella final night",
    "AUDITIONEE_DESCRIPTION": (
        "Congratulations on making it to final night! Welcome to the spring 2024 "
        "a cappella auditions site. We're using this app to manage the final night "
        "of auditions and make it easier for you to submit your preferences between "
        "the groups. Sign in and you can submit your preferences :)"
    ),
    "PREFERENCES_DESCRIPTION": (
        "You must either select a unique rank for each group or select 'Do not rank.' "
        "Selecting 'Do not rank' for a group means that you do not want to continue "
        "with that group."
    ),
}

DEFAULT_GROUPS = ("Veritones", "Callbacks", "Lowkeys")

# Stored in matched_group / update.group when every ranked group rejected
NO_MATCH_GROUP = "None"

POLICY_DELAYED = "delayed"
POLICY_IMMEDIATE = "immediate"
ANNOUNCE_POLICIES = (POLICY_DELAYED, POLICY_IMMEDIATE)

DB_FILE = "auditions.db"

# Header carrying the identity resolved by the upstream auth layer
IDENTITY_HEADER = "X-User-Email"

_GROUPS_ENV = "AUDITIONS_GROUPS"
_DB_PATH_ENV = "AUDITIONS_DB_PATH"
_ANNOUNCE_POLICY_ENV = "AUDITIONS_ANNOUNCE_POLICY"
_BUSY_TIMEOUT_ENV = "AUDITIONS_BUSY_TIMEOUT_SECONDS"

_DEFAULT_BUSY_TIMEOUT_SECONDS = 30


def _to_int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def get_groups() -> tuple[str, ...]:
    """Return the fixed set of groups taking part in this round."""
    raw = os.environ.get(_GROUPS_ENV, "").strip()
    if not raw:
        return DEFAULT_GROUPS
    groups = tuple(g.strip() for g in raw.split(",") if g.strip())
    return groups or DEFAULT_GROUPS


def get_db_path() -> Path:
    """Return the database path, honouring ``AUDITIONS_DB_PATH``."""
    override = os.environ.get(_DB_PATH_ENV, "").strip()
    if override:
        return Path(override)
    return Path.cwd() / DB_FILE


def get_announce_policy() -> str:
    """Return ``delayed`` (default) or ``immediate``."""
    raw = os.environ.get(_ANNOUNCE_POLICY_ENV, POLICY_DELAYED).strip().lower()
    return raw if raw in ANNOUNCE_POLICIES else POLICY_DELAYED


def get_busy_timeout_seconds() -> int:
    return _to_int_env(_BUSY_TIMEOUT_ENV, _DEFAULT_BUSY_TIMEOUT_SECONDS)
