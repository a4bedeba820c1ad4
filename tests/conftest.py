"""
Shared fixtures for audition-match tests.
"""

import sqlite3
import threading

import pytest

from audition_platform.persistence import init_db
from audition_platform.services import add_affiliation, set_delay_config, submit_preferences


class ManualScheduler:
    """Scheduler double that records callbacks until a test fires them."""

    def __init__(self):
        self._lock = threading.Lock()
        self.calls: list[tuple[int, object, dict]] = []

    def run_after(self, delay_ms, callback, **kwargs):
        with self._lock:
            self.calls.append((delay_ms, callback, kwargs))

    def fire_all(self):
        """Run every recorded callback once, returning their results."""
        with self._lock:
            calls, self.calls = self.calls, []
        return [callback(**kwargs) for _, callback, kwargs in calls]


@pytest.fixture(autouse=True)
def default_environment(monkeypatch):
    """Keep tests independent of the developer's AUDITIONS_* settings."""
    for name in (
        "AUDITIONS_GROUPS",
        "AUDITIONS_DB_PATH",
        "AUDITIONS_ANNOUNCE_POLICY",
        "AUDITIONS_BUSY_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def db_conn():
    """Create an in-memory SQLite connection with the auditions schema."""
    conn = sqlite3.connect(":memory:", isolation_level=None)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys=ON")
    init_db(conn)
    yield conn
    conn.close()


@pytest.fixture
def db_path(tmp_path):
    """Path to a fresh on-disk database (created on first connect)."""
    return tmp_path / "auditions.db"


@pytest.fixture
def configured_db(db_path):
    """Database with a zero-length announcement delay configured."""
    set_delay_config(db_path, 0, 0)
    return db_path


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def make_comper(configured_db):
    """Submit preferences for a comper and return the resulting ``Comper``."""
    counter = {"n": 0}

    def _make(ranked=("Veritones", "Callbacks", "Lowkeys"), unranked=(), name=None, email=None):
        counter["n"] += 1
        n = counter["n"]
        return submit_preferences(
            configured_db,
            email or f"comper{n}@example.edu",
            name or f"Comper {n}",
            list(ranked),
            list(unranked),
        )

    return _make


@pytest.fixture
def representatives(configured_db):
    """One representative per default group, plus an admin for Veritones."""
    add_affiliation(configured_db, "veri@example.edu", "Veritones")
    add_affiliation(configured_db, "call@example.edu", "Callbacks")
    add_affiliation(configured_db, "low@example.edu", "Lowkeys")
    add_affiliation(configured_db, "admin@example.edu", "Veritones", is_admin=True)
    return {
        "Veritones": "veri@example.edu",
        "Callbacks": "call@example.edu",
        "Lowkeys": "low@example.edu",
        "admin": "admin@example.edu",
    }
