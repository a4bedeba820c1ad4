"""Tests for preference submission and comper lookups."""

import pytest

from audition_platform.errors import (
    DuplicateSubmission,
    EmptyRanking,
    InvalidRanking,
    InvalidReference,
)
from audition_platform.services import (
    get_comper,
    get_submission,
    list_compers_for_group,
    record_group_decision,
    submit_preferences,
)


class TestSubmitPreferences:

    def test_round_trip(self, db_path):
        created = submit_preferences(
            db_path, "ada@example.edu", "Ada", ["Lowkeys", "Veritones"], ["Callbacks"]
        )
        loaded = get_comper(db_path, created.id)

        assert loaded.ranked_groups == ["Lowkeys", "Veritones"]
        assert loaded.unranked_groups == ["Callbacks"]
        assert loaded.statuses == ["undecided", "undecided"]
        assert loaded.matched is False
        assert loaded.matched_group is None
        assert loaded.match_scheduled is False
        assert loaded.announcement == "not_scheduled"

    def test_duplicate_submission(self, db_path):
        submit_preferences(db_path, "ada@example.edu", "Ada", ["Lowkeys"])
        with pytest.raises(DuplicateSubmission):
            submit_preferences(db_path, "ada@example.edu", "Ada again", ["Veritones"])
        assert get_submission(db_path, "ada@example.edu")["ranking"] == ["Lowkeys"]

    def test_empty_ranking(self, db_path):
        with pytest.raises(EmptyRanking):
            submit_preferences(db_path, "ada@example.edu", "Ada", [], ["Lowkeys"])
        assert get_submission(db_path, "ada@example.edu") is None

    def test_repeated_group_rejected(self, db_path):
        with pytest.raises(InvalidRanking):
            submit_preferences(db_path, "ada@example.edu", "Ada", ["Lowkeys", "Lowkeys"])

    def test_ranked_and_unranked_must_be_disjoint(self, db_path):
        with pytest.raises(InvalidRanking):
            submit_preferences(db_path, "ada@example.edu", "Ada", ["Lowkeys"], ["Lowkeys"])

    def test_unknown_group_rejected(self, db_path):
        with pytest.raises(InvalidReference):
            submit_preferences(db_path, "ada@example.edu", "Ada", ["Whiffenpoofs"])

    def test_groups_follow_environment(self, db_path, monkeypatch):
        monkeypatch.setenv("AUDITIONS_GROUPS", "Alpha, Beta")
        comper = submit_preferences(db_path, "ada@example.edu", "Ada", ["Beta", "Alpha"])
        assert comper.ranked_groups == ["Beta", "Alpha"]
        with pytest.raises(InvalidReference):
            submit_preferences(db_path, "bo@example.edu", "Bo", ["Lowkeys"])


class TestLookups:

    def test_get_comper_missing(self, db_path):
        with pytest.raises(InvalidReference):
            get_comper(db_path, 1)

    def test_get_submission(self, db_path):
        submit_preferences(db_path, "ada@example.edu", "Ada", ["Lowkeys"], ["Veritones"])
        assert get_submission(db_path, "ada@example.edu") == {
            "preferred_name": "Ada",
            "ranking": ["Lowkeys"],
            "unranked": ["Veritones"],
        }

    def test_list_compers_for_group(self, configured_db, scheduler, make_comper):
        ranker = make_comper(ranked=["Veritones", "Lowkeys"], unranked=["Callbacks"])
        other = make_comper(ranked=["Callbacks"], unranked=["Lowkeys"])
        record_group_decision(configured_db, ranker.id, "Lowkeys", False, scheduler=scheduler)

        listing = list_compers_for_group(configured_db, "Lowkeys")

        assert [c["id"] for c in listing["ranked"]] == [ranker.id]
        assert listing["ranked"][0]["decision"] == "rejected"
        assert [c["id"] for c in listing["unranked"]] == [other.id]
        assert "statuses" not in listing["unranked"][0]
