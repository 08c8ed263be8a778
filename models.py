"""
Data models for the CatGuard intake questionnaire.

DraftRecord is a SQLModel data model without a table: the draft lives only in
the in-memory intake session and is never written to a database.

Scored questions are a fixed catalogue. Every option carries its point value
explicitly; the stored answer IS that value, never the option's position.
"""
from dataclasses import dataclass
from typing import Dict, Tuple
from sqlmodel import SQLModel, Field


BUILDING_TYPE_APARTMENT = "Apartment"
BUILDING_TYPE_HOUSE = "House"
BUILDING_TYPES = (BUILDING_TYPE_APARTMENT, BUILDING_TYPE_HOUSE)

UNANSWERED = -1

BASIC_FIELDS = (
    "address",
    "building_type",
    "floor_level",
    "window_count",
    "door_count",
    "heaviest_cat_weight",
)

# door_count is optional; everything else in BASIC_FIELDS must be filled
REQUIRED_BASIC_FIELDS = (
    "address",
    "building_type",
    "floor_level",
    "window_count",
    "heaviest_cat_weight",
)


class DraftRecord(SQLModel):
    """
    The answers collected by one intake session.

    Basic fields are kept as the text the user typed. Scored fields hold the
    selected option's point value, or UNANSWERED (-1) until chosen.
    """
    address: str = ""
    building_type: str = ""  # Apartment or House
    floor_level: str = ""
    window_count: str = ""
    door_count: str = ""
    heaviest_cat_weight: str = ""

    cat_count_score: int = Field(default=UNANSWERED)
    edge_behavior_score: int = Field(default=UNANSWERED)
    structure_score: int = Field(default=UNANSWERED)
    personality_score: int = Field(default=UNANSWERED)
    environment_score: int = Field(default=UNANSWERED)
    expectation_score: int = Field(default=UNANSWERED)

    def scores(self) -> Dict[str, int]:
        """Scored field name -> stored value, in catalogue order."""
        return {q.field: getattr(self, q.field) for q in SCORED_QUESTIONS}


@dataclass(frozen=True)
class QuestionOption:
    value: int
    label_key: str


@dataclass(frozen=True)
class ScoredQuestion:
    """
    One multiple-choice risk question.

    flag_threshold: a stored value at or above it is highlighted in the
    report's score table (independent of the tier cut points).
    """
    id: str
    field: str
    payload_key: str
    options: Tuple[QuestionOption, ...]
    flag_threshold: int

    @property
    def title_key(self) -> str:
        return f"question.{self.id}.title"

    @property
    def score_label_key(self) -> str:
        return f"score.{self.id}"

    @property
    def min_value(self) -> int:
        return min(option.value for option in self.options)

    @property
    def max_value(self) -> int:
        return max(option.value for option in self.options)

    def accepts(self, value: int) -> bool:
        return any(option.value == value for option in self.options)


def _options(question_id: str, values: Tuple[int, ...]) -> Tuple[QuestionOption, ...]:
    return tuple(QuestionOption(v, f"question.{question_id}.opt{v}") for v in values)


SCORED_QUESTIONS: Tuple[ScoredQuestion, ...] = (
    # No "0 cats" option: the cheapest answer is worth 1 point
    ScoredQuestion("cat_count", "cat_count_score", "q3Score",
                   _options("cat_count", (1, 2, 3, 4)), flag_threshold=3),
    ScoredQuestion("edge_behavior", "edge_behavior_score", "q5Score",
                   _options("edge_behavior", (0, 1, 2, 3)), flag_threshold=2),
    ScoredQuestion("structure", "structure_score", "q6Score",
                   _options("structure", (0, 1, 2, 3)), flag_threshold=2),
    ScoredQuestion("personality", "personality_score", "q7Score",
                   _options("personality", (0, 1, 2, 3)), flag_threshold=2),
    ScoredQuestion("environment", "environment_score", "q8Score",
                   _options("environment", (0, 1, 2, 3)), flag_threshold=2),
    ScoredQuestion("expectation", "expectation_score", "q9Score",
                   _options("expectation", (0, 1, 2, 3)), flag_threshold=2),
)

SCORED_FIELDS = tuple(q.field for q in SCORED_QUESTIONS)


def get_question(field: str) -> ScoredQuestion:
    """Find a scored question by its DraftRecord field name."""
    for question in SCORED_QUESTIONS:
        if question.field == field:
            return question
    raise KeyError(field)
