"""
Tests for the SQLite storage layer.
"""

import pytest

from audition_platform.persistence import (
    AffiliationStore,
    ComperStore,
    DelayStore,
    SCHEMA_VERSION,
    UpdateStore,
    get_connection,
    transaction,
)


class TestDatabase:

    def test_schema_version_recorded(self, db_conn):
        row = db_conn.execute("SELECT MAX(version) FROM schema_version").fetchone()
        assert row[0] == SCHEMA_VERSION

    def test_get_connection_is_reentrant(self, db_path):
        conn = get_connection(db_path)
        conn.close()
        conn = get_connection(db_path)
        try:
            row = conn.execute("SELECT COUNT(*) FROM schema_version").fetchone()
            assert row[0] == 1
        finally:
            conn.close()

    def test_transaction_rolls_back_on_error(self, db_conn):
        with pytest.raises(RuntimeError):
            with transaction(db_conn):
                ComperStore.create(db_conn, "a@example.edu", "A", ["Veritones"])
                raise RuntimeError("boom")
        assert ComperStore.list_all(db_conn) == []


class TestComperStore:

    def test_create_and_get(self, db_conn):
        cid = ComperStore.create(db_conn, "a@example.edu", "Ada",
                                 ["Lowkeys", "Veritones"], ["Callbacks"])
        comper = ComperStore.get(db_conn, cid)
        assert comper["email"] == "a@example.edu"
        assert comper["ranked_groups"] == ["Lowkeys", "Veritones"]
        assert comper["unranked_groups"] == ["Callbacks"]
        assert comper["statuses"] == ["undecided", "undecided"]
        assert comper["matched"] is False
        assert comper["matched_group"] is None
        assert comper["match_scheduled"] is False

    def test_get_missing_returns_none(self, db_conn):
        assert ComperStore.get(db_conn, 42) is None
        assert ComperStore.get_by_email(db_conn, "nobody@example.edu") is None

    def test_update_statuses_with_and_without_flag(self, db_conn):
        cid = ComperStore.create(db_conn, "a@example.edu", "Ada", ["Lowkeys", "Veritones"])
        ComperStore.update_statuses(db_conn, cid, ["rejected", "undecided"])
        assert ComperStore.get(db_conn, cid)["match_scheduled"] is False

        ComperStore.update_statuses(db_conn, cid, ["rejected", "accepted"], match_scheduled=True)
        comper = ComperStore.get(db_conn, cid)
        assert comper["statuses"] == ["rejected", "accepted"]
        assert comper["match_scheduled"] is True

    def test_mark_matched_is_write_once(self, db_conn):
        cid = ComperStore.create(db_conn, "a@example.edu", "Ada", ["Lowkeys"])
        assert ComperStore.mark_matched(db_conn, cid, "Lowkeys") is True
        assert ComperStore.mark_matched(db_conn, cid, "None") is False
        assert ComperStore.get(db_conn, cid)["matched_group"] == "Lowkeys"

    def test_reset_all(self, db_conn):
        cid = ComperStore.create(db_conn, "a@example.edu", "Ada", ["Lowkeys", "Callbacks"])
        ComperStore.update_statuses(db_conn, cid, ["accepted", "undecided"], match_scheduled=True)
        ComperStore.mark_matched(db_conn, cid, "Lowkeys")

        assert ComperStore.reset_all(db_conn) == 1
        comper = ComperStore.get(db_conn, cid)
        assert comper["statuses"] == ["undecided", "undecided"]
        assert comper["matched"] is False
        assert comper["matched_group"] is None
        assert comper["match_scheduled"] is False


class TestUpdateStore:

    def test_append_and_list_newest_first(self, db_conn):
        first = UpdateStore.append(db_conn, None, "Ada", "a@example.edu", ["Lowkeys"], "Lowkeys")
        second = UpdateStore.append(db_conn, None, "Bo", "b@example.edu", ["Veritones"], "None")
        entries = UpdateStore.list_all(db_conn)
        assert [e["id"] for e in entries] == [second, first]
        assert entries[0]["group"] == "None"
        assert entries[1]["relevant_groups"] == ["Lowkeys"]
        assert entries[1]["created_at"]

    def test_purge(self, db_conn):
        UpdateStore.append(db_conn, None, "Ada", "a@example.edu", ["Lowkeys"], "Lowkeys")
        assert UpdateStore.purge(db_conn) == 1
        assert UpdateStore.list_all(db_conn) == []


class TestAffiliationStore:

    def test_upsert_replaces_group(self, db_conn):
        AffiliationStore.upsert(db_conn, "rep@example.edu", "Veritones")
        AffiliationStore.upsert(db_conn, "rep@example.edu", "Lowkeys", is_admin=True)
        aff = AffiliationStore.get(db_conn, "rep@example.edu")
        assert aff["group"] == "Lowkeys"
        assert aff["is_admin"] is True
        assert len(AffiliationStore.list_all(db_conn)) == 1


class TestDelayStore:

    def test_missing_returns_none(self, db_conn):
        assert DelayStore.get(db_conn) is None

    def test_upsert_reports_update(self, db_conn):
        assert DelayStore.upsert(db_conn, 1000, 500) is False
        assert DelayStore.upsert(db_conn, 2000, 0) is True
        config = DelayStore.get(db_conn)
        assert config["baseline"] == 2000
        assert config["range"] == 0
