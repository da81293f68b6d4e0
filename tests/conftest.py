"""
Shared pytest fixtures for the dyslexia screener test suite.

Provides:
  - ``in_memory_db``: A fresh in-memory SQLite connection with the full
    schema applied. Created anew for each test that requests it.
  - ``stored_profile``: ``sample_profile`` already written to ``in_memory_db``.
  - Sample domain objects shared by the scoring, reporting and DB tests.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from typing import Generator

import pytest

from dyslexia_screener.db.repositories.profile_repo import UserProfileRepository
from dyslexia_screener.db.schema import apply_schema
from dyslexia_screener.models.checklist import ChecklistResult, HandwritingResult
from dyslexia_screener.models.profile import UserProfile
from dyslexia_screener.models.result import ResultRecord
from dyslexia_screener.taxonomy.checklist_taxonomy import AgeGroup


# ── Database fixture ──────────────────────────────────────────────────────────

@pytest.fixture
def in_memory_db() -> Generator[sqlite3.Connection, None, None]:
    """Yield a fresh in-memory SQLite connection with the full schema applied.

    Foreign key enforcement is ON. Connection is closed after the test.
    """
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    apply_schema(conn)
    yield conn
    conn.close()


# ── Sample domain objects ─────────────────────────────────────────────────────

@pytest.fixture
def sample_profile() -> UserProfile:
    """A nine-year-old (school age group)."""
    return UserProfile(user_id="user-1", name="Alex", age=9, education="elementary")


@pytest.fixture
def stored_profile(in_memory_db: sqlite3.Connection, sample_profile: UserProfile) -> UserProfile:
    UserProfileRepository(in_memory_db).upsert(sample_profile)
    return sample_profile


@pytest.fixture
def sample_results() -> list[ResultRecord]:
    """One record per test; rapid naming and phonemic awareness are weak."""
    ts = datetime(2025, 3, 1, 10, 0, 0, tzinfo=timezone.utc)
    return [
        ResultRecord(test_id="rapid-naming", score=30, time_spent=95.4, completed_at=ts),
        ResultRecord(test_id="phonemic-awareness", score=20, time_spent=120, completed_at=ts),
        ResultRecord(test_id="working-memory", score=65, time_spent=143, completed_at=ts),
        ResultRecord(test_id="visual-processing", score=80, time_spent=60, completed_at=ts),
        ResultRecord(test_id="processing-speed", score=72.5, time_spent=45, completed_at=ts),
        ResultRecord(test_id="sequencing", score=88, time_spent=70, completed_at=ts),
    ]


@pytest.fixture
def sample_checklist() -> ChecklistResult:
    """Reading 2/5 yes (40%), phonological 1/5 yes (20%); channel mean 30%."""
    return ChecklistResult(
        responses={"r1": True, "r2": True, "r3": False, "p1": True, "p2": False},
        age_group=AgeGroup.SCHOOL,
    )


@pytest.fixture
def sample_handwriting() -> HandwritingResult:
    return HandwritingResult(
        indicator_score=35.0,
        features=["Letter reversals detected", "Inconsistent letter sizing"],
        recommendations=["Practise letter formation with guided worksheets."],
    )
