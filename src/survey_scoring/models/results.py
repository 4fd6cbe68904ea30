"""Result models returned by the scoring, logic and validation functions.

These are value objects computed fresh per call.  The engine never stores
them; persisting results is the caller's concern.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from survey_scoring.models.question import LogicRule, Question, SurveyModel


class CategoryScoreResult(SurveyModel):
    """Normalized score for one category, on a 0-100 display scale."""

    category_id: str
    category_name: str
    score: float
    max_score: float
    interpretation: str


class CategorySnapshot(SurveyModel):
    """Raw points earned vs. available in one category."""

    score: float
    max_score: float
    label: str

    @property
    def percentage(self) -> float:
        if self.max_score <= 0:
            return 0.0
        return self.score / self.max_score * 100


class ScoringResult(SurveyModel):
    """Output of :func:`survey_scoring.scoring.score_survey`."""

    total_score: float
    max_score: float
    percentage: float
    by_category: Dict[str, CategorySnapshot] = {}


# --- Logic ---

class LogicEvaluationContext(SurveyModel):
    """Read-only snapshot passed to each logic evaluation."""

    questions: List[Question] = []
    answers: Dict[str, Any] = {}


class LogicResult(SurveyModel):
    """Outcome of evaluating a rule list.  All fields None means no match."""

    matched_rule: Optional[LogicRule] = None
    action: Optional[Literal["show", "skip", "end"]] = None
    next_question_id: Optional[str] = None

    @property
    def matched(self) -> bool:
        return self.matched_rule is not None


# --- Validation ---

class ResultsConfigValidation(SurveyModel):
    valid: bool
    errors: List[str] = []


Severity = Literal["error", "warning", "info"]


class ValidationIssue(SurveyModel):
    """A single finding from the pre-publish scoring or logic linters."""

    code: str
    severity: Severity
    message: str
    question_id: Optional[str] = None
    category_id: Optional[str] = None
    band_id: Optional[str] = None
    rule_id: Optional[str] = None
    details: Dict[str, Any] = {}
