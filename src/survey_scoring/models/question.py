"""Question and logic-rule models for scored surveys.

Questions are authored once per survey and are read-only at scoring time.
Each question declares a ``type`` that decides how its answer turns into
points (see :mod:`survey_scoring.points`):

  Scored as numeric values:
    - rating, nps, number, likert, opinion_scale, slider
  Scored from the selected option(s):
    - multiple_choice, checkbox
  Scored by presence:
    - text, textarea
  Never scored:
    - everything else (dropdown, yes_no, email, date, matrix, media, ...)

Field names accept both the snake_case attribute name and the camelCase
name used by the survey JSON (``scoringCategory``, ``targetQuestionId``...).
"""

from __future__ import annotations

from typing import Dict, List, Literal, Optional, Union, get_args

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SurveyModel(BaseModel):
    """Base model: accepts camelCase wire names and snake_case attribute names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


QuestionType = Literal[
    "text",
    "textarea",
    "multiple_choice",
    "checkbox",
    "dropdown",
    "yes_no",
    "email",
    "phone",
    "url",
    "number",
    "rating",
    "nps",
    "likert",
    "opinion_scale",
    "slider",
    "matrix",
    "ranking",
    "date",
    "section",
    "image_choice",
    "file_upload",
    "signature",
]

# A raw answer as submitted by the respondent.  Multi-select questions
# submit a list of option labels; everything else is a scalar.
Answer = Union[str, int, float, List[str]]


# --- Logic rules ---

class LogicRule(SurveyModel):
    """A skip/branch rule attached to a question.

    ``condition`` is a small boolean expression, e.g.
    ``answer("q1") >= 3 && contains("q2", "Other")``.  Rules are evaluated in
    list order and the first one whose condition holds wins.
    """

    id: str
    condition: str = ""
    action: Literal["show", "skip", "end"]
    target_question_id: Optional[str] = None


# --- Questions ---

class Question(SurveyModel):
    """A single survey question as authored in the builder."""

    id: str
    type: QuestionType
    question: str = ""
    required: bool = False
    options: Optional[List[str]] = None

    # Scoring metadata
    scoring_category: Optional[str] = None
    score_weight: Optional[float] = None
    option_scores: Optional[Dict[str, float]] = None

    # Scale bounds per type
    rating_scale: Optional[int] = None
    likert_points: Optional[int] = None
    min: Optional[float] = None
    max: Optional[float] = None

    logic_rules: List[LogicRule] = []

    @property
    def weight(self) -> float:
        """Score weight, defaulting to 1 when not authored."""
        return self.score_weight if self.score_weight is not None else 1.0


# Every type string the models accept, in declaration order.
QUESTION_TYPES: tuple[str, ...] = get_args(QuestionType)
