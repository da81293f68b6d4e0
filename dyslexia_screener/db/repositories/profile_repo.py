"""
Repository for user profiles.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Optional

from dyslexia_screener.db.repositories.base import BaseRepository
from dyslexia_screener.models.profile import UserProfile
from dyslexia_screener.taxonomy.checklist_taxonomy import AgeGroup
from dyslexia_screener.utils.time_utils import parse_iso

logger = logging.getLogger(__name__)


class UserProfileRepository(BaseRepository):
    """Read/write access to the ``user_profiles`` table."""

    def insert(self, profile: UserProfile) -> str:
        """Insert a new profile.

        Raises:
            sqlite3.IntegrityError: If ``user_id`` already exists.
        """
        self.execute(
            """
            INSERT INTO user_profiles (
                user_id, name, age, gender, education, has_been_diagnosed, age_group
            ) VALUES (?, ?, ?, ?, ?, ?, ?);
            """,
            _profile_params(profile),
        )
        return profile.user_id

    def upsert(self, profile: UserProfile) -> str:
        """Insert or update a profile by ``user_id``; returns the id."""
        self.execute(
            """
            INSERT INTO user_profiles (
                user_id, name, age, gender, education, has_been_diagnosed,
                age_group, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, strftime('%Y-%m-%dT%H:%M:%SZ', 'now'))
            ON CONFLICT(user_id) DO UPDATE SET
                name               = excluded.name,
                age                = excluded.age,
                gender             = excluded.gender,
                education          = excluded.education,
                has_been_diagnosed = excluded.has_been_diagnosed,
                age_group          = excluded.age_group,
                updated_at         = excluded.updated_at;
            """,
            _profile_params(profile),
        )
        logger.debug("Upserted profile '%s'", profile.user_id)
        return profile.user_id

    def get(self, user_id: str) -> Optional[UserProfile]:
        """Fetch a profile, or ``None`` if unknown."""
        row = self.fetchone("SELECT * FROM user_profiles WHERE user_id = ?;", (user_id,))
        return _row_to_profile(row) if row else None

    def exists(self, user_id: str) -> bool:
        row = self.fetchone("SELECT 1 FROM user_profiles WHERE user_id = ?;", (user_id,))
        return row is not None

    def list_ids(self) -> list[str]:
        rows = self.fetchall("SELECT user_id FROM user_profiles ORDER BY user_id;")
        return [r["user_id"] for r in rows]


def _profile_params(profile: UserProfile) -> tuple:
    return (
        profile.user_id,
        profile.name,
        profile.age,
        profile.gender,
        profile.education,
        profile.has_been_diagnosed,
        profile.age_group.value if profile.age_group else None,
    )


def _row_to_profile(row: sqlite3.Row) -> UserProfile:
    return UserProfile(
        user_id=row["user_id"],
        name=row["name"],
        age=row["age"],
        gender=row["gender"],
        education=row["education"],
        has_been_diagnosed=row["has_been_diagnosed"],
        age_group=AgeGroup(row["age_group"]) if row["age_group"] else None,
        created_at=parse_iso(row["created_at"]),
    )
