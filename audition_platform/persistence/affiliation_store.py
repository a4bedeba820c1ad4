"""Platform-owned group affiliation store."""

import sqlite3
from datetime import datetime
from typing import Optional


class AffiliationStore:
    """Maps representative identities to the group they decide for."""

    @staticmethod
    def upsert(conn: sqlite3.Connection, email: str, group: str,
               is_admin: bool = False) -> None:
        """Insert or replace the affiliation for ``email``."""
        now = datetime.now().isoformat()
        conn.execute(
            """INSERT INTO affiliation (email, group_name, is_admin, created_at)
               VALUES (?, ?, ?, ?)
               ON CONFLICT(email) DO UPDATE SET
                   group_name = excluded.group_name,
                   is_admin = excluded.is_admin""",
            (email, group, int(is_admin), now),
        )

    @staticmethod
    def get(conn: sqlite3.Connection, email: str) -> Optional[dict]:
        row = conn.execute(
            "SELECT * FROM affiliation WHERE email = ?", (email,)
        ).fetchone()
        if row is None:
            return None
        return AffiliationStore._row_to_dict(row)

    @staticmethod
    def list_all(conn: sqlite3.Connection) -> list[dict]:
        rows = conn.execute(
            "SELECT * FROM affiliation ORDER BY group_name, email"
        ).fetchall()
        return [AffiliationStore._row_to_dict(r) for r in rows]

    @staticmethod
    def _row_to_dict(row: sqlite3.Row) -> dict:
        d = dict(row)
        d["group"] = d.pop("group_name")
        d["is_admin"] = bool(d.get("is_admin"))
        return d


__all__ = ["AffiliationStore"]
