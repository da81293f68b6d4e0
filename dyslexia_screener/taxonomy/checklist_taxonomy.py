"""
Symptom checklist taxonomy: age groups, categories and the item bank.

Every ``ChecklistItem`` declares which ``AgeGroup`` values it applies to.
Category percentages are computed over the *applicable* items only, so a
preschool checklist never counts reading-fluency questions against the child.
The per-item age-group sets below are local screening policy: the item
questions themselves carry no age tagging, so the table is maintained here.

Integrity contract (verified in ``tests/test_taxonomy``):
  - Every item id is unique.
  - Every ``ChecklistCategory`` has at least one item.
  - Every item applies to at least one age group.

This module has NO imports from any other ``dyslexia_screener`` package.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class AgeGroup(StrEnum):
    """Age bands that select the active checklist item subset."""

    PRESCHOOL = "preschool"
    SCHOOL = "school"
    ADOLESCENT = "adolescent"
    ADULT = "adult"
    SENIOR = "senior"


class ChecklistCategory(StrEnum):
    """Top-level grouping of checklist items."""

    READING = "reading"
    WRITING = "writing"
    PHONOLOGICAL = "phonological"
    MEMORY = "memory"
    ORGANIZATIONAL = "organizational"


CATEGORY_DISPLAY_NAMES: dict[ChecklistCategory, str] = {
    ChecklistCategory.READING:        "Reading Skills",
    ChecklistCategory.WRITING:        "Writing Skills",
    ChecklistCategory.PHONOLOGICAL:   "Phonological Awareness",
    ChecklistCategory.MEMORY:         "Memory and Processing",
    ChecklistCategory.ORGANIZATIONAL: "Organizational Skills",
}

CATEGORY_DESCRIPTIONS: dict[ChecklistCategory, str] = {
    ChecklistCategory.READING:
        "Challenges related to reading fluency, accuracy, and comprehension",
    ChecklistCategory.WRITING:
        "Difficulties with handwriting, spelling, and written expression",
    ChecklistCategory.PHONOLOGICAL:
        "Ability to recognize and work with sounds in spoken language",
    ChecklistCategory.MEMORY:
        "Challenges with working memory, sequencing, and processing information",
    ChecklistCategory.ORGANIZATIONAL:
        "Difficulties with time management, organization, and following directions",
}


# Age → group boundaries (inclusive lower bound, in years).
_AGE_GROUP_BOUNDS: list[tuple[int, AgeGroup]] = [
    (60, AgeGroup.SENIOR),
    (18, AgeGroup.ADULT),
    (13, AgeGroup.ADOLESCENT),
    (6,  AgeGroup.SCHOOL),
]


def age_group_for_age(age: int) -> AgeGroup:
    """Map an age in years to its ``AgeGroup``.

    3–5 preschool, 6–12 school, 13–17 adolescent, 18–59 adult, 60+ senior.
    Ages below 6 (including out-of-range values) map to ``PRESCHOOL``.
    """
    for lower, group in _AGE_GROUP_BOUNDS:
        if age >= lower:
            return group
    return AgeGroup.PRESCHOOL


@dataclass(frozen=True)
class ChecklistItem:
    """One yes/no checklist question.

    Attributes:
        item_id:    Stable id used as the response key (e.g. ``"r1"``).
        question:   Text shown to the respondent.
        category:   Owning ``ChecklistCategory``.
        age_groups: Age groups for which this item is active.
    """

    item_id:    str
    question:   str
    category:   ChecklistCategory
    age_groups: frozenset[AgeGroup]

    def applies_to(self, age_group: AgeGroup) -> bool:
        return age_group in self.age_groups


_ALL = frozenset(AgeGroup)
_READERS = _ALL - {AgeGroup.PRESCHOOL}
_STUDENTS = frozenset({AgeGroup.SCHOOL, AgeGroup.ADOLESCENT})

_R = ChecklistCategory.READING
_W = ChecklistCategory.WRITING
_P = ChecklistCategory.PHONOLOGICAL
_M = ChecklistCategory.MEMORY
_O = ChecklistCategory.ORGANIZATIONAL

CHECKLIST_ITEMS: tuple[ChecklistItem, ...] = (
    # ── Reading ───────────────────────────────────────────────────────────────
    ChecklistItem("r1", "Reads slowly or laboriously compared to peers", _R, _READERS),
    ChecklistItem("r2", "Has difficulty sounding out new or unfamiliar words", _R, _READERS),
    ChecklistItem("r3", "Often guesses at words based on first or last letters", _R, _READERS),
    ChecklistItem(
        "r4",
        "Skips over or adds small words when reading (e.g., 'the', 'and', 'to')",
        _R, _READERS,
    ),
    ChecklistItem(
        "r5",
        "Struggles to understand what was just read, even if able to read the words",
        _R, _READERS,
    ),
    # ── Writing ───────────────────────────────────────────────────────────────
    ChecklistItem("w1", "Has messy, inconsistent, or laborious handwriting", _W, _READERS),
    ChecklistItem("w2", "Spells the same word differently in a single document", _W, _READERS),
    ChecklistItem("w3", "Has difficulty putting thoughts into written words", _W, _READERS),
    ChecklistItem("w4", "Written work has many grammatical or punctuation errors", _W, _READERS),
    ChecklistItem(
        "w5",
        "Avoids writing tasks or takes much longer than peers to complete them",
        _W, _READERS,
    ),
    # ── Phonological awareness ────────────────────────────────────────────────
    ChecklistItem("p1", "Has difficulty breaking words into individual sounds", _P, _ALL),
    ChecklistItem("p2", "Struggles to rhyme words appropriately", _P, _ALL),
    ChecklistItem("p3", "Has trouble distinguishing between similar-sounding words", _P, _ALL),
    ChecklistItem("p4", "Mispronounces words or confuses words that sound similar", _P, _ALL),
    ChecklistItem("p5", "Has difficulty learning and remembering new vocabulary", _P, _ALL),
    # ── Memory and processing ─────────────────────────────────────────────────
    ChecklistItem(
        "m1",
        "Has trouble remembering sequences (alphabet, days of week, months)",
        _M, _ALL,
    ),
    ChecklistItem("m2", "Struggles to remember verbal instructions", _M, _ALL),
    ChecklistItem(
        "m3",
        "Has difficulty remembering facts and information not experienced directly",
        _M, _READERS,
    ),
    ChecklistItem("m4", "Takes longer to answer questions or retrieve specific words", _M, _ALL),
    ChecklistItem("m5", "Forgets familiar words or names", _M, _ALL),
    # ── Organizational ────────────────────────────────────────────────────────
    ChecklistItem(
        "o1",
        "Has difficulty keeping track of belongings or assignments",
        _O, _STUDENTS,
    ),
    ChecklistItem(
        "o2",
        "Struggles with time management and estimating how long tasks will take",
        _O, _READERS,
    ),
    ChecklistItem("o3", "Has trouble following a sequence of directions", _O, _ALL),
    ChecklistItem("o4", "Often begins tasks without reading instructions thoroughly", _O, _READERS),
    ChecklistItem("o5", "Has difficulty organizing thoughts when speaking", _O, _ALL),
)

CHECKLIST_ITEMS_BY_ID: dict[str, ChecklistItem] = {i.item_id: i for i in CHECKLIST_ITEMS}


def items_for(
    category: ChecklistCategory,
    age_group: AgeGroup,
    items: tuple[ChecklistItem, ...] = CHECKLIST_ITEMS,
) -> list[ChecklistItem]:
    """Return items of ``category`` that apply to ``age_group``, in bank order."""
    return [i for i in items if i.category == category and i.applies_to(age_group)]
