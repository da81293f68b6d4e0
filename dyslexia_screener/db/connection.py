"""
SQLite connection management for the results store.

``get_connection()`` yields a connection that:
  - enforces foreign keys (profiles → results/checklists/handwriting);
  - optionally uses WAL journal mode;
  - waits ``busy_timeout_ms`` on a locked database;
  - returns ``sqlite3.Row`` rows;
  - commits on clean exit and rolls back on exception.

Pass ``ensure_schema=True`` to apply the (idempotent) schema on open, which
lets CLI commands work against a fresh database file without a separate
``init-db`` step.

Usage::

    from dyslexia_screener.db.connection import get_connection

    with get_connection("data/db/screener.db", ensure_schema=True) as conn:
        ResultRecordRepository(conn).get_results("user-1")
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

logger = logging.getLogger(__name__)


@contextmanager
def get_connection(
    db_path: str,
    wal_mode: bool = True,
    busy_timeout_ms: int = 5000,
    ensure_schema: bool = False,
) -> Generator[sqlite3.Connection, None, None]:
    """Context manager yielding a configured SQLite connection.

    Args:
        db_path: Database file path, or ``":memory:"``. Parent directories
            are created for file paths.
        wal_mode: Enable WAL journal mode (ignored for in-memory databases).
        busy_timeout_ms: Milliseconds to wait on a locked database.
        ensure_schema: Apply the schema before yielding.

    Yields:
        An open, configured ``sqlite3.Connection``.

    Raises:
        sqlite3.OperationalError: If the database cannot be opened or is locked.
    """
    in_memory = db_path == ":memory:"
    if not in_memory:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path, timeout=busy_timeout_ms / 1000)
    conn.row_factory = sqlite3.Row

    try:
        conn.execute("PRAGMA foreign_keys = ON;")
        conn.execute(f"PRAGMA busy_timeout = {int(busy_timeout_ms)};")
        if wal_mode and not in_memory:
            conn.execute("PRAGMA journal_mode = WAL;")

        if ensure_schema:
            from dyslexia_screener.db.schema import apply_schema
            apply_schema(conn)

        yield conn
        conn.commit()

    except Exception:
        logger.debug("Rolling back transaction on %s", db_path)
        conn.rollback()
        raise

    finally:
        conn.close()
