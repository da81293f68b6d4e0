"""
Tests for the SQLite repositories.

What we test
------------
UserProfileRepository:  insert / upsert / get round-trip, duplicate insert.
ResultRecordRepository: save_result / get_results round-trip and ordering,
                        unscored results, history kept, save_many.
ChecklistRepository:    save / get_latest (most recent submission wins).
HandwritingRepository:  save / get_latest.
load_json():            corrupt column text falls back to the default.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone

import pytest

from dyslexia_screener.db.repositories.assessment_repo import (
    ChecklistRepository,
    HandwritingRepository,
)
from dyslexia_screener.db.repositories.base import dump_json, load_json
from dyslexia_screener.db.repositories.profile_repo import UserProfileRepository
from dyslexia_screener.db.repositories.result_repo import ResultRecordRepository
from dyslexia_screener.models.checklist import ChecklistResult, HandwritingResult
from dyslexia_screener.models.profile import UserProfile
from dyslexia_screener.models.result import ResultRecord
from dyslexia_screener.taxonomy.checklist_taxonomy import AgeGroup

JAN = datetime(2025, 1, 1, 9, 30, tzinfo=timezone.utc)
FEB = datetime(2025, 2, 1, 9, 30, tzinfo=timezone.utc)


class TestUserProfileRepository:
    def test_insert_and_get(self, in_memory_db, sample_profile):
        repo = UserProfileRepository(in_memory_db)
        repo.insert(sample_profile)
        got = repo.get("user-1")
        assert got is not None
        assert got.name == "Alex"
        assert got.age == 9
        assert got.education == "elementary"
        assert got.created_at is not None

    def test_duplicate_insert_fails(self, in_memory_db, sample_profile):
        repo = UserProfileRepository(in_memory_db)
        repo.insert(sample_profile)
        with pytest.raises(sqlite3.IntegrityError):
            repo.insert(sample_profile)

    def test_upsert_updates(self, in_memory_db, stored_profile):
        repo = UserProfileRepository(in_memory_db)
        repo.upsert(stored_profile.model_copy(update={"name": "Alexandra", "age": 10}))
        got = repo.get("user-1")
        assert (got.name, got.age) == ("Alexandra", 10)
        assert repo.list_ids() == ["user-1"]

    def test_age_group_round_trip(self, in_memory_db):
        repo = UserProfileRepository(in_memory_db)
        repo.insert(UserProfile(user_id="u2", name="Sam", age=30, age_group=AgeGroup.ADOLESCENT))
        assert repo.get("u2").age_group is AgeGroup.ADOLESCENT

    def test_get_unknown(self, in_memory_db):
        assert UserProfileRepository(in_memory_db).get("nobody") is None
        assert not UserProfileRepository(in_memory_db).exists("nobody")


class TestResultRecordRepository:
    def test_round_trip(self, in_memory_db, stored_profile):
        repo = ResultRecordRepository(in_memory_db)
        rec = ResultRecord(
            test_id="working-memory",
            score=62.5,
            time_spent=143.2,
            completed_at=JAN,
            responses=[{"span": 3, "correct": True}],
        )
        repo.save_result("user-1", rec)
        [got] = repo.get_results("user-1")
        assert got == rec

    def test_insertion_order_and_ids(self, in_memory_db, stored_profile, sample_results):
        repo = ResultRecordRepository(in_memory_db)
        ids = [repo.save_result("user-1", r) for r in sample_results]
        assert ids == sorted(ids)
        assert [r.test_id for r in repo.get_results("user-1")] == [
            r.test_id for r in sample_results
        ]

    def test_unscored_result_stored(self, in_memory_db, stored_profile):
        repo = ResultRecordRepository(in_memory_db)
        repo.save_result("user-1", ResultRecord(test_id="sequencing"))
        [got] = repo.get_results("user-1")
        assert got.score is None
        assert got.completed_at is None

    def test_history_kept(self, in_memory_db, stored_profile):
        repo = ResultRecordRepository(in_memory_db)
        repo.save_result("user-1", ResultRecord(test_id="sequencing", score=90, completed_at=FEB))
        repo.save_result("user-1", ResultRecord(test_id="sequencing", score=50, completed_at=JAN))
        assert [r.score for r in repo.get_results("user-1")] == [90.0, 50.0]

    def test_other_user_isolated(self, in_memory_db, stored_profile):
        UserProfileRepository(in_memory_db).insert(UserProfile(user_id="u2", name="B", age=20))
        repo = ResultRecordRepository(in_memory_db)
        repo.save_result("u2", ResultRecord(test_id="sequencing", score=50))
        assert repo.get_results("user-1") == []

    def test_unknown_user_rejected(self, in_memory_db):
        with pytest.raises(sqlite3.IntegrityError):
            ResultRecordRepository(in_memory_db).save_result(
                "ghost", ResultRecord(test_id="sequencing", score=50)
            )

    def test_save_many(self, in_memory_db, stored_profile, sample_results):
        repo = ResultRecordRepository(in_memory_db)
        assert repo.save_many("user-1", sample_results) == 6
        assert [r.test_id for r in repo.get_results("user-1")] == [
            r.test_id for r in sample_results
        ]


class TestChecklistRepository:
    def test_latest_wins(self, in_memory_db, stored_profile, sample_checklist):
        repo = ChecklistRepository(in_memory_db)
        repo.save("user-1", sample_checklist)
        newer = ChecklistResult(
            responses={"m1": True, "m2": None}, age_group=AgeGroup.ADULT, completed_at=FEB
        )
        repo.save("user-1", newer)
        got = repo.get_latest("user-1")
        assert got.responses == {"m1": True, "m2": None}
        assert got.age_group is AgeGroup.ADULT
        assert got.completed_at == FEB

    def test_none_saved(self, in_memory_db, stored_profile):
        assert ChecklistRepository(in_memory_db).get_latest("user-1") is None


class TestHandwritingRepository:
    def test_round_trip(self, in_memory_db, stored_profile, sample_handwriting):
        repo = HandwritingRepository(in_memory_db)
        repo.save("user-1", sample_handwriting)
        assert repo.get_latest("user-1") == sample_handwriting

    def test_latest_wins(self, in_memory_db, stored_profile):
        repo = HandwritingRepository(in_memory_db)
        repo.save("user-1", HandwritingResult(indicator_score=20))
        repo.save("user-1", HandwritingResult(indicator_score=60))
        assert repo.get_latest("user-1").indicator_score == 60.0

    def test_none_saved(self, in_memory_db, stored_profile):
        assert HandwritingRepository(in_memory_db).get_latest("user-1") is None


class TestJsonColumns:
    def test_round_trip(self):
        assert load_json(dump_json({"a": [1, None]}), {}) == {"a": [1, None]}

    @pytest.mark.parametrize("text", [None, "", "{not json"])
    def test_fallback(self, text):
        assert load_json(text, []) == []
