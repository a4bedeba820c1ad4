"""Platform-owned comper store."""

import json
import sqlite3
from datetime import datetime
from typing import Optional

from audition_platform.match_state_machine import initial_statuses


class ComperStore:
    """CRUD operations for compers.

    Methods never commit; callers wrap writes in ``transaction()``.
    """

    @staticmethod
    def create(conn: sqlite3.Connection, email: str, preferred_name: str,
               ranked_groups: list[str],
               unranked_groups: list[str] | None = None) -> int:
        """Insert a new comper with every slot undecided. Returns the comper id."""
        now = datetime.now().isoformat()
        cursor = conn.execute(
            """INSERT INTO comper
               (email, preferred_name, ranked_groups, unranked_groups, statuses, created_at)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (email, preferred_name, json.dumps(ranked_groups),
             json.dumps(unranked_groups or []),
             json.dumps(initial_statuses(ranked_groups)), now),
        )
        return cursor.lastrowid

    @staticmethod
    def get(conn: sqlite3.Connection, comper_id: int) -> Optional[dict]:
        """Load a single comper by id."""
        row = conn.execute(
            "SELECT * FROM comper WHERE id = ?", (comper_id,)
        ).fetchone()
        if row is None:
            return None
        return ComperStore._row_to_dict(row)

    @staticmethod
    def get_by_email(conn: sqlite3.Connection, email: str) -> Optional[dict]:
        """Load a single comper by identity."""
        row = conn.execute(
            "SELECT * FROM comper WHERE email = ?", (email,)
        ).fetchone()
        if row is None:
            return None
        return ComperStore._row_to_dict(row)

    @staticmethod
    def list_all(conn: sqlite3.Connection) -> list[dict]:
        """List all compers in submission order."""
        rows = conn.execute("SELECT * FROM comper ORDER BY id").fetchall()
        return [ComperStore._row_to_dict(r) for r in rows]

    @staticmethod
    def update_statuses(conn: sqlite3.Connection, comper_id: int,
                        statuses: list[str], *,
                        match_scheduled: bool | None = None) -> None:
        """Persist the full status vector, optionally setting ``match_scheduled``."""
        if match_scheduled is None:
            conn.execute(
                "UPDATE comper SET statuses = ? WHERE id = ?",
                (json.dumps(statuses), comper_id),
            )
        else:
            conn.execute(
                "UPDATE comper SET statuses = ?, match_scheduled = ? WHERE id = ?",
                (json.dumps(statuses), int(match_scheduled), comper_id),
            )

    @staticmethod
    def mark_matched(conn: sqlite3.Connection, comper_id: int,
                     matched_group: str) -> bool:
        """Set ``matched`` and ``matched_group`` once.

        Returns False (and writes nothing) if the comper was already matched.
        """
        cursor = conn.execute(
            """UPDATE comper SET matched = 1, matched_group = ?, match_scheduled = 1
               WHERE id = ? AND matched = 0""",
            (matched_group, comper_id),
        )
        return cursor.rowcount > 0

    @staticmethod
    def reset_all(conn: sqlite3.Connection) -> int:
        """Clear every status vector and match flag. Returns the number of compers reset."""
        rows = conn.execute("SELECT id, ranked_groups FROM comper").fetchall()
        for row in rows:
            ranked = json.loads(row["ranked_groups"])
            conn.execute(
                """UPDATE comper SET statuses = ?, matched = 0,
                       matched_group = NULL, match_scheduled = 0
                   WHERE id = ?""",
                (json.dumps(initial_statuses(ranked)), row["id"]),
            )
        return len(rows)

    @staticmethod
    def _row_to_dict(row: sqlite3.Row) -> dict:
        """Convert a sqlite3.Row to a plain dict, deserialising JSON columns."""
        d = dict(row)
        for key in ("ranked_groups", "unranked_groups", "statuses"):
            if key in d and isinstance(d[key], str):
                d[key] = json.loads(d[key])
        for key in ("matched", "match_scheduled"):
            if key in d:
                d[key] = bool(d[key])
        return d


__all__ = ["ComperStore"]
