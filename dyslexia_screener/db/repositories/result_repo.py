"""
Repository for cognitive test results: the store the scoring layer reads.

``ResultStore`` is the interface callers depend on; ``ResultRecordRepository``
is the SQLite implementation. The scoring engine never sees either: callers
read a list of ``ResultRecord`` and pass it in.

Every completed run is stored (history is kept). Duplicate test ids are
resolved by the engine at scoring time, latest ``completed_at`` first.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Protocol

from dyslexia_screener.db.repositories.base import BaseRepository, dump_json, load_json
from dyslexia_screener.models.result import ResultRecord
from dyslexia_screener.utils.time_utils import parse_iso, to_iso

logger = logging.getLogger(__name__)


class ResultStore(Protocol):
    """Minimal results store contract used by reporting and the CLI."""

    def get_results(self, user_id: str) -> list[ResultRecord]: ...

    def save_result(self, user_id: str, record: ResultRecord) -> int: ...


class ResultRecordRepository(BaseRepository):
    """Read/write access to the ``test_results`` table."""

    def save_result(self, user_id: str, record: ResultRecord) -> int:
        """Insert one completed test run and return its ``result_id``.

        Args:
            user_id: Owner of the result (must exist in ``user_profiles``).
            record:  The result to persist. ``interpretation`` is not stored;
                it is recomputed on every scoring pass.

        Returns:
            Newly assigned ``result_id``.
        """
        self.execute(
            """
            INSERT INTO test_results (
                user_id, test_id, score, time_spent, completed_at, responses_json
            ) VALUES (?, ?, ?, ?, ?, ?);
            """,
            (
                user_id,
                record.test_id,
                record.score,
                record.time_spent,
                to_iso(record.completed_at),
                dump_json(record.responses),
            ),
        )
        result_id = self.last_insert_rowid()
        logger.debug("Saved result %d for test '%s'", result_id, record.test_id)
        return result_id

    def save_many(self, user_id: str, records: list[ResultRecord]) -> int:
        """Insert several results; returns how many were written."""
        for record in records:
            self.save_result(user_id, record)
        return len(records)

    def get_results(self, user_id: str) -> list[ResultRecord]:
        """All stored results for ``user_id`` in insertion order."""
        rows = self.fetchall(
            "SELECT * FROM test_results WHERE user_id = ? ORDER BY result_id;",
            (user_id,),
        )
        return [_row_to_record(r) for r in rows]


def _row_to_record(row: sqlite3.Row) -> ResultRecord:
    return ResultRecord(
        test_id=row["test_id"],
        score=row["score"],
        time_spent=row["time_spent"],
        completed_at=parse_iso(row["completed_at"]),
        responses=load_json(row["responses_json"], []),
    )
