"""
Repositories for the checklist and handwriting channels.

Each save appends a row; ``get_latest()`` returns the most recent one, which
is the submission the reports use.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Optional

from dyslexia_screener.db.repositories.base import BaseRepository, dump_json, load_json
from dyslexia_screener.models.checklist import ChecklistResult, HandwritingResult
from dyslexia_screener.taxonomy.checklist_taxonomy import AgeGroup
from dyslexia_screener.utils.time_utils import parse_iso, to_iso

logger = logging.getLogger(__name__)


class ChecklistRepository(BaseRepository):
    """Read/write access to the ``checklist_results`` table."""

    def save(self, user_id: str, checklist: ChecklistResult) -> int:
        self.execute(
            """
            INSERT INTO checklist_results (user_id, age_group, responses_json, completed_at)
            VALUES (?, ?, ?, ?);
            """,
            (
                user_id,
                checklist.age_group.value,
                dump_json(checklist.responses),
                to_iso(checklist.completed_at),
            ),
        )
        return self.last_insert_rowid()

    def get_latest(self, user_id: str) -> Optional[ChecklistResult]:
        row = self.fetchone(
            """
            SELECT * FROM checklist_results WHERE user_id = ?
            ORDER BY checklist_id DESC LIMIT 1;
            """,
            (user_id,),
        )
        return _row_to_checklist(row) if row else None


class HandwritingRepository(BaseRepository):
    """Read/write access to the ``handwriting_results`` table."""

    def save(self, user_id: str, result: HandwritingResult) -> int:
        self.execute(
            """
            INSERT INTO handwriting_results (
                user_id, indicator_score, features_json, recommendations_json, completed_at
            ) VALUES (?, ?, ?, ?, ?);
            """,
            (
                user_id,
                result.indicator_score,
                dump_json(result.features),
                dump_json(result.recommendations),
                to_iso(result.completed_at),
            ),
        )
        return self.last_insert_rowid()

    def get_latest(self, user_id: str) -> Optional[HandwritingResult]:
        row = self.fetchone(
            """
            SELECT * FROM handwriting_results WHERE user_id = ?
            ORDER BY handwriting_id DESC LIMIT 1;
            """,
            (user_id,),
        )
        return _row_to_handwriting(row) if row else None


def _row_to_checklist(row: sqlite3.Row) -> ChecklistResult:
    return ChecklistResult(
        responses=load_json(row["responses_json"], {}),
        age_group=AgeGroup(row["age_group"]),
        completed_at=parse_iso(row["completed_at"]),
    )


def _row_to_handwriting(row: sqlite3.Row) -> HandwritingResult:
    return HandwritingResult(
        indicator_score=row["indicator_score"],
        features=load_json(row["features_json"], []),
        recommendations=load_json(row["recommendations_json"], []),
        completed_at=parse_iso(row["completed_at"]),
    )
