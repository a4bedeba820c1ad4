"""Platform-owned update feed store (append-only)."""

import json
import sqlite3
from datetime import datetime


class UpdateStore:
    """Append and read operations for the update feed."""

    @staticmethod
    def append(conn: sqlite3.Connection, comper_id: int | None, name: str,
               email: str, relevant_groups: list[str], group: str) -> int:
        """Append a feed entry. Returns the entry id (creation order)."""
        now = datetime.now().isoformat()
        cursor = conn.execute(
            """INSERT INTO update_entry
               (comper_id, name, email, relevant_groups, group_name, created_at)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (comper_id, name, email, json.dumps(relevant_groups), group, now),
        )
        return cursor.lastrowid

    @staticmethod
    def list_all(conn: sqlite3.Connection) -> list[dict]:
        """List all entries, newest first."""
        rows = conn.execute(
            "SELECT * FROM update_entry ORDER BY id DESC"
        ).fetchall()
        return [UpdateStore._row_to_dict(r) for r in rows]

    @staticmethod
    def count_for_comper(conn: sqlite3.Connection, comper_id: int) -> int:
        row = conn.execute(
            "SELECT COUNT(*) FROM update_entry WHERE comper_id = ?", (comper_id,)
        ).fetchone()
        return row[0]

    @staticmethod
    def purge(conn: sqlite3.Connection) -> int:
        """Delete every entry. Only used by the bulk reset."""
        cursor = conn.execute("DELETE FROM update_entry")
        return cursor.rowcount

    @staticmethod
    def _row_to_dict(row: sqlite3.Row) -> dict:
        d = dict(row)
        d["group"] = d.pop("group_name")
        if isinstance(d.get("relevant_groups"), str):
            d["relevant_groups"] = json.loads(d["relevant_groups"])
        return d


__all__ = ["UpdateStore"]
