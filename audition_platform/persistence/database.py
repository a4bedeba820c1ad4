"""Platform-owned SQLite database primitives."""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from audition_platform.runtime.config import get_busy_timeout_seconds

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


def get_connection(db_path: Path | str) -> sqlite3.Connection:
    """Open (or create) the auditions database and ensure the schema exists.

    The connection runs in autocommit mode: every write goes through
    :func:`transaction`, which issues ``BEGIN IMMEDIATE`` so that a whole
    read-evaluate-write sequence holds the database write lock.
    The caller is responsible for closing the connection.
    """
    conn = sqlite3.connect(
        str(db_path),
        timeout=get_busy_timeout_seconds(),
        isolation_level=None,
    )
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    init_db(conn)
    return conn


@contextmanager
def connect(db_path: Path | str) -> Iterator[sqlite3.Connection]:
    """Context manager yielding a connection that is always closed."""
    conn = get_connection(db_path)
    try:
        yield conn
    finally:
        conn.close()


@contextmanager
def transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """Run the enclosed block as one atomic read-modify-write.

    Commits on success; on any exception rolls back every write made inside
    the block and re-raises.
    """
    conn.execute("BEGIN IMMEDIATE")
    try:
        yield conn
    except BaseException:
        conn.rollback()
        raise
    else:
        conn.commit()


def init_db(conn: sqlite3.Connection) -> None:
    """Create tables if they don't exist and record the schema version."""
    conn.executescript(_SCHEMA_SQL)

    row = conn.execute("SELECT MAX(version) FROM schema_version").fetchone()
    current = row[0] if row[0] is not None else 0

    if current < SCHEMA_VERSION:
        logger.info("Initialising auditions schema v%d", SCHEMA_VERSION)
        with transaction(conn):
            conn.execute(
                "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
                (SCHEMA_VERSION,),
            )


_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY
);

CREATE TABLE IF NOT EXISTS comper (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    email TEXT NOT NULL UNIQUE,
    preferred_name TEXT NOT NULL,
    ranked_groups TEXT NOT NULL,
    unranked_groups TEXT DEFAULT '[]',
    statuses TEXT NOT NULL,
    matched INTEGER DEFAULT 0,
    matched_group TEXT,
    match_scheduled INTEGER DEFAULT 0,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS affiliation (
    email TEXT PRIMARY KEY,
    group_name TEXT NOT NULL,
    is_admin INTEGER DEFAULT 0,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS update_entry (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    comper_id INTEGER REFERENCES comper(id) ON DELETE SET NULL,
    name TEXT NOT NULL,
    email TEXT NOT NULL,
    relevant_groups TEXT DEFAULT '[]',
    group_name TEXT NOT NULL,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_update_entry_comper ON update_entry(comper_id);

CREATE TABLE IF NOT EXISTS delay_config (
    id INTEGER PRIMARY KEY CHECK (id = 1),
    baseline_ms REAL NOT NULL,
    range_ms REAL NOT NULL,
    updated_at TEXT NOT NULL
);
"""


__all__ = ["SCHEMA_VERSION", "get_connection", "connect", "transaction", "init_db"]
