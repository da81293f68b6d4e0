"""
SQLite schema DDL for the screening results store.

All statements use ``IF NOT EXISTS`` so ``apply_schema()`` is idempotent.

Tables (creation order respects foreign keys):
  1. user_profiles        (no FKs)
  2. test_results         (→ user_profiles)   one row per completed test run;
                                              duplicates per test are kept and
                                              resolved at read/score time
  3. checklist_results    (→ user_profiles)   responses stored as JSON
  4. handwriting_results  (→ user_profiles)   features/recommendations as JSON
"""

from __future__ import annotations

import logging
import sqlite3

logger = logging.getLogger(__name__)

# ── DDL statements ─────────────────────────────────────────────────────────────

_DDL_USER_PROFILES = """
CREATE TABLE IF NOT EXISTS user_profiles (
    user_id             TEXT    PRIMARY KEY,
    name                TEXT    NOT NULL,
    age                 INTEGER NOT NULL CHECK (age BETWEEN 3 AND 100),
    gender              TEXT    NOT NULL DEFAULT 'prefer-not-to-say',
    education           TEXT,
    has_been_diagnosed  TEXT    NOT NULL DEFAULT 'unsure',
    age_group           TEXT,
    created_at          TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now')),
    updated_at          TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now'))
);
"""

_DDL_TEST_RESULTS = """
CREATE TABLE IF NOT EXISTS test_results (
    result_id       INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id         TEXT    NOT NULL REFERENCES user_profiles(user_id),
    test_id         TEXT    NOT NULL,
    score           REAL,
    time_spent      REAL    NOT NULL DEFAULT 0,
    completed_at    TEXT,
    responses_json  TEXT    NOT NULL DEFAULT '[]',
    created_at      TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now'))
);

CREATE INDEX IF NOT EXISTS idx_test_results_user
    ON test_results (user_id, test_id, completed_at);
"""

_DDL_CHECKLIST_RESULTS = """
CREATE TABLE IF NOT EXISTS checklist_results (
    checklist_id    INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id         TEXT    NOT NULL REFERENCES user_profiles(user_id),
    age_group       TEXT    NOT NULL,
    responses_json  TEXT    NOT NULL,
    completed_at    TEXT,
    created_at      TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now'))
);

CREATE INDEX IF NOT EXISTS idx_checklist_results_user
    ON checklist_results (user_id, checklist_id);
"""

_DDL_HANDWRITING_RESULTS = """
CREATE TABLE IF NOT EXISTS handwriting_results (
    handwriting_id        INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id               TEXT    NOT NULL REFERENCES user_profiles(user_id),
    indicator_score       REAL    NOT NULL CHECK (indicator_score BETWEEN 0 AND 100),
    features_json         TEXT    NOT NULL DEFAULT '[]',
    recommendations_json  TEXT    NOT NULL DEFAULT '[]',
    completed_at          TEXT,
    created_at            TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now'))
);

CREATE INDEX IF NOT EXISTS idx_handwriting_results_user
    ON handwriting_results (user_id, handwriting_id);
"""

_ALL_DDL: list[str] = [
    _DDL_USER_PROFILES,
    _DDL_TEST_RESULTS,
    _DDL_CHECKLIST_RESULTS,
    _DDL_HANDWRITING_RESULTS,
]

ALL_TABLE_NAMES: list[str] = [
    "user_profiles",
    "test_results",
    "checklist_results",
    "handwriting_results",
]


def apply_schema(conn: sqlite3.Connection) -> None:
    """Apply all DDL statements to ``conn``.

    Idempotent: safe to call on an already-initialized database.

    Args:
        conn: An open ``sqlite3.Connection`` (FK enforcement should be ON).
    """
    logger.debug("Applying schema to database...")

    for ddl in _ALL_DDL:
        for statement in _split_ddl(ddl):
            conn.execute(statement)

    conn.commit()
    logger.info("Schema applied: %d tables verified.", len(ALL_TABLE_NAMES))


def _split_ddl(ddl: str) -> list[str]:
    """Split a multi-statement DDL block on semicolons."""
    return [s.strip() for s in ddl.split(";") if s.strip()]


def get_existing_tables(conn: sqlite3.Connection) -> list[str]:
    """Return the sorted table names present in the database."""
    rows = conn.execute(
        "SELECT name FROM sqlite_master WHERE type = 'table' "
        "AND name NOT LIKE 'sqlite_%' ORDER BY name;"
    ).fetchall()
    return [row[0] for row in rows]
