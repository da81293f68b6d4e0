"""
JSON import for screening results exported by the browser app.

File formats
------------
Cognitive results: a JSON array of result payloads::

    [
      {"testId": "rapid-naming", "score": 72, "timeSpent": 95.4,
       "completedAt": "2025-03-01T10:15:00Z", "responses": []},
      ...
    ]

Checklist: either ``{"responses": {...}, "ageGroup": "adult"}`` or the
legacy bare ``{"r1": true, ...}`` answer map.

Handwriting: ``{"dyslexiaIndicatorScore": 35, "features": [...],
"recommendations": [...]}``.

A bad cognitive payload does not abort the import: each rejected entry is
reported as a ``RejectedPayload`` and the valid ones are returned. Checklist
and handwriting files hold a single object, so they either parse or raise
``ValueError``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from dyslexia_screener.models.checklist import ChecklistResult, HandwritingResult
from dyslexia_screener.models.result import (
    InvalidResultError,
    ResultRecord,
    validate_result_payload,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RejectedPayload:
    """One payload that failed store-boundary validation.

    Attributes:
        index:  0-based position in the source array.
        reason: Human-readable error message.
    """

    index: int
    reason: str


@dataclass
class ImportOutcome:
    """Result of ``load_result_payloads()``."""

    records: list[ResultRecord] = field(default_factory=list)
    rejected: list[RejectedPayload] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.rejected


def _read_json(path: Path) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"Import file not found: {path}")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path.name} is not valid JSON: {exc}") from exc


def parse_result_payloads(payloads: list[Any]) -> ImportOutcome:
    """Validate an in-memory list of result payloads.

    Args:
        payloads: Raw decoded JSON values.

    Returns:
        ``ImportOutcome`` with valid records (input order) and rejections.
    """
    outcome = ImportOutcome()
    for i, payload in enumerate(payloads):
        try:
            outcome.records.append(validate_result_payload(payload))
        except InvalidResultError as exc:
            logger.warning("Rejected result payload #%d: %s", i, exc)
            outcome.rejected.append(RejectedPayload(index=i, reason=str(exc)))
    return outcome


def load_result_payloads(path: Path) -> ImportOutcome:
    """Load and validate a JSON array of cognitive result payloads.

    Args:
        path: Path to the JSON file.

    Returns:
        ``ImportOutcome``; rejected payloads do not abort the import.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the file is not JSON or not a JSON array.
    """
    data = _read_json(path)
    if not isinstance(data, list):
        raise ValueError(
            f"{path.name} must contain a JSON array of results, got {type(data).__name__}."
        )
    outcome = parse_result_payloads(data)
    logger.info(
        "Loaded %d result(s) from %s (%d rejected)",
        len(outcome.records), path.name, len(outcome.rejected),
    )
    return outcome


def load_checklist(path: Path) -> ChecklistResult:
    """Load a checklist submission (current or legacy shape).

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the JSON is invalid or fails model validation.
    """
    data = _read_json(path)
    if not isinstance(data, dict):
        raise ValueError(f"{path.name} must contain a JSON object.")
    try:
        return ChecklistResult.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid checklist in {path.name}: {exc}") from exc


def load_handwriting(path: Path) -> HandwritingResult:
    """Load a handwriting analysis result.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the JSON is invalid or fails model validation.
    """
    data = _read_json(path)
    if not isinstance(data, dict):
        raise ValueError(f"{path.name} must contain a JSON object.")
    try:
        return HandwritingResult.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid handwriting result in {path.name}: {exc}") from exc
