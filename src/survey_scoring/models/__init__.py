"""Public model re-exports for survey_scoring.

Consumers should import from ``survey_scoring.models`` rather than
reaching into sub-modules directly.
"""

# --- Questions & rules ---
from survey_scoring.models.question import (
    QUESTION_TYPES,
    Answer,
    LogicRule,
    Question,
    QuestionType,
    SurveyModel,
)

# --- Score configuration ---
from survey_scoring.models.config import (
    BandNarrative,
    CategoryResultConfig,
    ResultsScreenConfig,
    ScoreBand,
    ScoreCategory,
    ScoreConfiguration,
)

# --- Results ---
from survey_scoring.models.results import (
    CategoryScoreResult,
    CategorySnapshot,
    LogicEvaluationContext,
    LogicResult,
    ResultsConfigValidation,
    ScoringResult,
    ValidationIssue,
)

# --- Survey definitions ---
from survey_scoring.models.survey import SurveyDefinition

__all__ = [
    # Questions
    "QUESTION_TYPES",
    "Answer",
    "LogicRule",
    "Question",
    "QuestionType",
    "SurveyModel",
    # Config
    "BandNarrative",
    "CategoryResultConfig",
    "ResultsScreenConfig",
    "ScoreBand",
    "ScoreCategory",
    "ScoreConfiguration",
    # Results
    "CategoryScoreResult",
    "CategorySnapshot",
    "LogicEvaluationContext",
    "LogicResult",
    "ResultsConfigValidation",
    "ScoringResult",
    "ValidationIssue",
    # Surveys
    "SurveyDefinition",
]
