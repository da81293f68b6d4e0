"""
Assessment taxonomy: the closed sets every scoring pass is keyed on.

Two dimensions:
  - ``TestId``   : which cognitive test produced a result record.
  - ``RiskLevel``: the three-tier classification shared by the cognitive
    engine, the checklist categories, and the overall combined risk.

``TEST_DISPLAY_NAMES`` is the single mapping used by reports and exports;
ids outside the closed set fall back to the raw id (see ``display_name()``).

This module has NO imports from any other ``dyslexia_screener`` package.
"""

from enum import StrEnum


class TestId(StrEnum):
    """Cognitive test identifiers emitted by the individual test components."""

    # Prevent pytest from collecting this enum as a test class.
    __test__ = False

    RAPID_NAMING = "rapid-naming"
    """Rapid automatized naming of objects, colours and letters."""

    PHONEMIC_AWARENESS = "phonemic-awareness"
    """Sound matching, deletion and blending."""

    WORKING_MEMORY = "working-memory"
    """Recall of item sequences of increasing span."""

    VISUAL_PROCESSING = "visual-processing"
    """Symbol discrimination and odd-one-out patterns."""

    PROCESSING_SPEED = "processing-speed"
    """Timed target clicking; accuracy blended with speed."""

    SEQUENCING = "sequencing"
    """Ordering items by a given pattern."""


class RiskLevel(StrEnum):
    """Three contiguous tiers over a 0–100 risk score."""

    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"


TEST_DISPLAY_NAMES: dict[TestId, str] = {
    TestId.RAPID_NAMING:       "Rapid Naming",
    TestId.PHONEMIC_AWARENESS: "Phonemic Awareness",
    TestId.WORKING_MEMORY:     "Working Memory",
    TestId.VISUAL_PROCESSING:  "Visual Processing",
    TestId.PROCESSING_SPEED:   "Processing Speed",
    TestId.SEQUENCING:         "Sequencing Ability",
}

VALID_TEST_IDS: frozenset[str] = frozenset(t.value for t in TestId)


def display_name(test_id: str) -> str:
    """Return the human-readable name for ``test_id`` (raw id when unknown)."""
    if test_id in VALID_TEST_IDS:
        return TEST_DISPLAY_NAMES[TestId(test_id)]
    return test_id
