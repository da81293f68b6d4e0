"""
Export helpers for spreadsheets and record keeping.

All functions write to disk and return the written ``Path``.
They accept generic ``list[dict]`` data to stay decoupled from
specific report shapes.

``flatten_results_for_export()`` is the adapter between the nested report
dict built by ``build_assessment_report()`` and a flat per-test CSV.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path

RESULT_EXPORT_COLUMNS: list[str] = ["test", "score", "completed_date", "time_spent_seconds"]


def export_to_csv(
    records: list[dict],
    path: Path,
    fieldnames: list[str] | None = None,
) -> Path:
    """Write ``records`` to a UTF-8 CSV file.

    Args:
        records:    List of row dicts.
        path:       Destination file path (parent dirs created if missing).
        fieldnames: Column order.  If None, uses the keys of the first record.

    Returns:
        ``path`` as written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if not records and fieldnames is None:
        path.write_text("", encoding="utf-8")
        return path
    cols = fieldnames or list(records[0].keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(records)
    return path


def export_to_json(data: dict | list, path: Path) -> Path:
    """Write ``data`` to a pretty-printed JSON file (parent dirs created)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
    return path


def flatten_results_for_export(report: dict) -> list[dict]:
    """One flat row per test from an assessment report.

    Columns (``RESULT_EXPORT_COLUMNS``): ``test`` (display name), ``score``
    (rounded, empty when unscored), ``completed_date`` (``YYYY-MM-DD`` or
    empty) and ``time_spent_seconds``.
    """
    rows: list[dict] = []
    for test in report.get("tests", []):
        score = test.get("score")
        rows.append(
            {
                "test":               test.get("test", test.get("test_id", "")),
                "score":              "" if score is None else score,
                "completed_date":     test.get("completed_date") or "",
                "time_spent_seconds": test.get("time_spent_seconds", 0),
            }
        )
    return rows
