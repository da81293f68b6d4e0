"""Tests for assessment taxonomy integrity: test ids, risk tiers, display names."""

from __future__ import annotations

from dyslexia_screener.taxonomy.assessment_taxonomy import (
    TEST_DISPLAY_NAMES,
    VALID_TEST_IDS,
    RiskLevel,
    TestId,
    display_name,
)


class TestTestIdEnum:
    def test_six_tests(self):
        assert len(TestId) == 6

    def test_slug_format(self):
        for member in TestId:
            assert " " not in member.value
            assert member.value == member.value.lower()

    def test_valid_ids_match_enum(self):
        assert VALID_TEST_IDS == {m.value for m in TestId}

    def test_string_comparison(self):
        assert TestId.RAPID_NAMING == "rapid-naming"


class TestRiskLevelEnum:
    def test_three_tiers(self):
        assert [m.value for m in RiskLevel] == ["Low", "Moderate", "High"]

    def test_construct_from_value(self):
        assert RiskLevel("High") is RiskLevel.HIGH


class TestDisplayNames:
    def test_every_test_has_a_name(self):
        assert set(TEST_DISPLAY_NAMES) == set(TestId)

    def test_known_id(self):
        assert display_name("sequencing") == "Sequencing Ability"

    def test_unknown_id_falls_back_to_raw(self):
        assert display_name("spelling") == "spelling"
