"""Tests for ChecklistResult, HandwritingResult and UserProfile models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from dyslexia_screener.models.checklist import ChecklistResult, HandwritingResult
from dyslexia_screener.models.profile import UserProfile
from dyslexia_screener.taxonomy.checklist_taxonomy import AgeGroup


class TestChecklistResult:
    def test_current_shape(self):
        cl = ChecklistResult.model_validate(
            {"responses": {"r1": True, "r2": None}, "ageGroup": "adult"}
        )
        assert cl.age_group is AgeGroup.ADULT
        assert cl.responses == {"r1": True, "r2": None}

    def test_legacy_bare_map(self):
        cl = ChecklistResult.model_validate({"r1": True, "w2": False, "p1": None})
        assert cl.responses == {"r1": True, "w2": False, "p1": None}
        assert cl.age_group is AgeGroup.SCHOOL
        assert "age_group" not in cl.model_fields_set

    def test_explicit_age_group_recorded_as_set(self):
        cl = ChecklistResult.model_validate({"responses": {}, "ageGroup": "senior"})
        assert "age_group" in cl.model_fields_set

    def test_answered_count(self):
        cl = ChecklistResult(responses={"r1": True, "r2": False, "r3": None})
        assert cl.answered_count == 2

    def test_invalid_age_group(self):
        with pytest.raises(ValidationError):
            ChecklistResult.model_validate({"responses": {}, "ageGroup": "toddler"})

    def test_empty_payload_defaults(self):
        cl = ChecklistResult.model_validate({})
        assert cl.responses == {}
        assert cl.answered_count == 0


class TestHandwritingResult:
    def test_wire_alias(self):
        hw = HandwritingResult.model_validate(
            {"dyslexiaIndicatorScore": 35, "features": ["Letter reversals detected"]}
        )
        assert hw.indicator_score == 35.0
        assert hw.features == ["Letter reversals detected"]

    def test_field_name(self):
        assert HandwritingResult(indicator_score=10).indicator_score == 10.0

    @pytest.mark.parametrize("bad", [-1, 100.5, "abc", float("nan"), None])
    def test_rejects_invalid_score(self, bad):
        with pytest.raises(ValidationError, match="dyslexiaIndicatorScore"):
            HandwritingResult.model_validate({"dyslexiaIndicatorScore": bad})

    def test_missing_score(self):
        with pytest.raises(ValidationError):
            HandwritingResult.model_validate({"features": []})


class TestUserProfile:
    def test_defaults(self):
        p = UserProfile(user_id="u1", name="Sam", age=30)
        assert p.gender == "prefer-not-to-say"
        assert p.has_been_diagnosed == "unsure"
        assert p.education is None

    @pytest.mark.parametrize("age", [2, 101])
    def test_age_range(self, age):
        with pytest.raises(ValidationError):
            UserProfile(user_id="u1", name="Sam", age=age)

    def test_empty_user_id(self):
        with pytest.raises(ValidationError):
            UserProfile(user_id="", name="Sam", age=30)

    def test_invalid_gender(self):
        with pytest.raises(ValidationError):
            UserProfile(user_id="u1", name="Sam", age=30, gender="robot")

    def test_age_group_derived(self):
        assert UserProfile(user_id="u1", name="Sam", age=9).effective_age_group is AgeGroup.SCHOOL
        assert UserProfile(user_id="u1", name="Sam", age=65).effective_age_group is AgeGroup.SENIOR

    def test_explicit_age_group_wins(self):
        p = UserProfile(user_id="u1", name="Sam", age=30, age_group=AgeGroup.ADOLESCENT)
        assert p.effective_age_group is AgeGroup.ADOLESCENT
