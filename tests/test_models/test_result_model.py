"""
Tests for ResultRecord and the store-boundary validator.

What we test
------------
ResultRecord:
  - camelCase wire payloads and snake_case names both parse.
  - testId is trimmed and lowercased; empty / non-string ids are rejected.
  - Unusable scores (missing, bool, NaN, non-numeric) become None.
  - Negative or invalid timeSpent becomes 0.
  - Naive timestamps are read as UTC; unparseable ones become None.
  - Model is frozen; to_payload() emits camelCase without None fields.

validate_result_payload():
  - Unknown testId and unusable score raise InvalidResultError.
  - Out-of-range scores are kept (with a warning).
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from dyslexia_screener.models.result import (
    InvalidResultError,
    ResultRecord,
    coerce_finite,
    validate_result_payload,
)


class TestResultRecord:
    def test_parses_wire_payload(self):
        rec = ResultRecord.model_validate(
            {
                "testId": "rapid-naming",
                "score": 72,
                "timeSpent": 95.4,
                "completedAt": "2025-03-01T10:15:00Z",
                "responses": [{"item": 1, "correct": True}],
            }
        )
        assert rec.test_id == "rapid-naming"
        assert rec.score == 72.0
        assert rec.time_spent == pytest.approx(95.4)
        assert rec.completed_at == datetime(2025, 3, 1, 10, 15, tzinfo=timezone.utc)
        assert rec.responses == [{"item": 1, "correct": True}]

    def test_accepts_field_names(self):
        rec = ResultRecord(test_id="sequencing", score=50)
        assert rec.test_id == "sequencing"

    def test_test_id_normalised(self):
        assert ResultRecord(test_id="  Working-Memory ").test_id == "working-memory"

    @pytest.mark.parametrize("bad", ["", "   ", None, 42])
    def test_bad_test_id_rejected(self, bad):
        with pytest.raises(ValidationError, match="testId"):
            ResultRecord.model_validate({"testId": bad, "score": 50})

    @pytest.mark.parametrize("raw", [None, True, float("nan"), float("inf"), "abc", [1]])
    def test_unusable_score_becomes_none(self, raw):
        rec = ResultRecord.model_validate({"testId": "sequencing", "score": raw})
        assert rec.score is None
        assert not rec.has_score

    def test_numeric_string_score(self):
        assert ResultRecord.model_validate({"testId": "sequencing", "score": "72.5"}).score == 72.5

    def test_out_of_range_score_kept(self):
        assert ResultRecord(test_id="sequencing", score=150).score == 150.0

    @pytest.mark.parametrize("raw", [-5, "x", None, float("nan")])
    def test_bad_time_spent_is_zero(self, raw):
        rec = ResultRecord.model_validate({"testId": "sequencing", "timeSpent": raw})
        assert rec.time_spent == 0.0

    def test_naive_timestamp_is_utc(self):
        rec = ResultRecord(test_id="sequencing", completed_at=datetime(2025, 1, 1, 12, 0))
        assert rec.completed_at.tzinfo is not None
        assert rec.completed_at.utcoffset().total_seconds() == 0

    def test_offset_timestamp_converted(self):
        rec = ResultRecord.model_validate(
            {"testId": "sequencing", "completedAt": "2025-01-01T12:00:00+02:00"}
        )
        assert rec.completed_at == datetime(2025, 1, 1, 10, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize("raw", ["yesterday", "2025-13-45", "", ["2025"]])
    def test_unparseable_timestamp_dropped(self, raw, caplog):
        with caplog.at_level(logging.WARNING):
            rec = ResultRecord.model_validate(
                {"testId": "sequencing", "score": 70, "completedAt": raw}
            )
        assert rec.completed_at is None
        assert rec.score == 70.0
        if raw:
            assert "completedAt" in caplog.text

    def test_frozen(self):
        rec = ResultRecord(test_id="sequencing", score=50)
        with pytest.raises(ValidationError):
            rec.score = 10  # type: ignore[misc]

    def test_to_payload_camel_case(self):
        payload = ResultRecord(test_id="sequencing", score=80).to_payload()
        assert payload == {
            "testId": "sequencing",
            "score": 80.0,
            "timeSpent": 0.0,
            "responses": [],
        }


class TestCoerceFinite:
    @pytest.mark.parametrize(
        "raw, expected",
        [(5, 5.0), (5.5, 5.5), (" 7 ", 7.0), (False, None), (None, None), ({}, None)],
    )
    def test_values(self, raw, expected):
        assert coerce_finite(raw) == expected

    def test_nan(self):
        assert coerce_finite(math.nan) is None


class TestValidateResultPayload:
    def test_valid_payload(self):
        rec = validate_result_payload({"testId": "working-memory", "score": 62})
        assert rec.score == 62.0

    def test_snake_case_key(self):
        rec = validate_result_payload({"test_id": "working-memory", "score": 62})
        assert rec.test_id == "working-memory"

    def test_unknown_test_rejected(self):
        with pytest.raises(InvalidResultError, match="Unknown testId"):
            validate_result_payload({"testId": "spelling", "score": 50})

    @pytest.mark.parametrize("score", [None, "abc", float("nan"), True])
    def test_unusable_score_rejected(self, score):
        with pytest.raises(InvalidResultError, match="no usable score"):
            validate_result_payload({"testId": "sequencing", "score": score})

    def test_missing_score_rejected(self):
        with pytest.raises(InvalidResultError):
            validate_result_payload({"testId": "sequencing"})

    def test_non_mapping_rejected(self):
        with pytest.raises(InvalidResultError, match="must be an object"):
            validate_result_payload(["sequencing", 50])

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            validate_result_payload({"testId": "nope", "score": 1})

    def test_out_of_range_accepted_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="dyslexia_screener.models.result"):
            rec = validate_result_payload({"testId": "sequencing", "score": 150})
        assert rec.score == 150.0
        assert "out-of-range" in caplog.text
