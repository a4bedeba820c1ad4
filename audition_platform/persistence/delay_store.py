"""Platform-owned announcement delay store (singleton row)."""

import sqlite3
from datetime import datetime
from typing import Optional


class DelayStore:
    """Read and upsert the single delay configuration record."""

    @staticmethod
    def get(conn: sqlite3.Connection) -> Optional[dict]:
        """Return ``{"baseline": ..., "range": ...}`` or None if unset."""
        row = conn.execute(
            "SELECT baseline_ms, range_ms, updated_at FROM delay_config WHERE id = 1"
        ).fetchone()
        if row is None:
            return None
        return {
            "baseline": row["baseline_ms"],
            "range": row["range_ms"],
            "updated_at": row["updated_at"],
        }

    @staticmethod
    def upsert(conn: sqlite3.Connection, baseline: float, range_: float) -> bool:
        """Store the delay window. Returns True if an existing row was updated."""
        existed = DelayStore.get(conn) is not None
        now = datetime.now().isoformat()
        conn.execute(
            """INSERT INTO delay_config (id, baseline_ms, range_ms, updated_at)
               VALUES (1, ?, ?, ?)
               ON CONFLICT(id) DO UPDATE SET
                   baseline_ms = excluded.baseline_ms,
                   range_ms = excluded.range_ms,
                   updated_at = excluded.updated_at""",
            (baseline, range_, now),
        )
        return existed


__all__ = ["DelayStore"]
