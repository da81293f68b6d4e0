"""Tests for schema DDL and connection management."""

from __future__ import annotations

import sqlite3

import pytest

from dyslexia_screener.db.connection import get_connection
from dyslexia_screener.db.schema import ALL_TABLE_NAMES, apply_schema, get_existing_tables


class TestApplySchema:
    def test_all_tables_created(self, in_memory_db):
        assert get_existing_tables(in_memory_db) == sorted(ALL_TABLE_NAMES)

    def test_idempotent(self, in_memory_db):
        apply_schema(in_memory_db)
        apply_schema(in_memory_db)
        assert get_existing_tables(in_memory_db) == sorted(ALL_TABLE_NAMES)

    def test_foreign_key_enforced(self, in_memory_db):
        with pytest.raises(sqlite3.IntegrityError):
            in_memory_db.execute(
                "INSERT INTO test_results (user_id, test_id, score) VALUES ('ghost', 'sequencing', 50);"
            )

    def test_handwriting_score_checked(self, in_memory_db, stored_profile):
        with pytest.raises(sqlite3.IntegrityError):
            in_memory_db.execute(
                "INSERT INTO handwriting_results (user_id, indicator_score) VALUES (?, 150);",
                (stored_profile.user_id,),
            )

    def test_profile_age_checked(self, in_memory_db):
        with pytest.raises(sqlite3.IntegrityError):
            in_memory_db.execute(
                "INSERT INTO user_profiles (user_id, name, age) VALUES ('u', 'n', 2);"
            )


class TestGetConnection:
    def test_ensure_schema_on_file(self, tmp_path):
        db_path = str(tmp_path / "nested" / "screener.db")
        with get_connection(db_path, ensure_schema=True) as conn:
            tables = get_existing_tables(conn)
        assert tables == sorted(ALL_TABLE_NAMES)

    def test_in_memory_skips_wal(self):
        with get_connection(":memory:", ensure_schema=True) as conn:
            mode = conn.execute("PRAGMA journal_mode;").fetchone()[0]
        assert mode == "memory"

    def test_rows_are_sqlite_rows(self):
        with get_connection(":memory:") as conn:
            row = conn.execute("SELECT 1 AS one;").fetchone()
        assert row["one"] == 1

    def test_commit_on_success(self, tmp_path):
        db_path = str(tmp_path / "screener.db")
        with get_connection(db_path, ensure_schema=True) as conn:
            conn.execute("INSERT INTO user_profiles (user_id, name, age) VALUES ('u1', 'A', 9);")
        with get_connection(db_path) as conn:
            assert conn.execute("SELECT COUNT(*) FROM user_profiles;").fetchone()[0] == 1

    def test_rollback_on_error(self, tmp_path):
        db_path = str(tmp_path / "screener.db")
        with get_connection(db_path, ensure_schema=True):
            pass
        with pytest.raises(RuntimeError):
            with get_connection(db_path) as conn:
                conn.execute(
                    "INSERT INTO user_profiles (user_id, name, age) VALUES ('u1', 'A', 9);"
                )
                raise RuntimeError("boom")
        with get_connection(db_path) as conn:
            assert conn.execute("SELECT COUNT(*) FROM user_profiles;").fetchone()[0] == 0
