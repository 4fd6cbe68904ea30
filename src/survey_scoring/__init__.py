"""survey_scoring — scoring, band resolution and skip logic for surveys.

Public API:
    calculate_scores       — normalized 0-100 score per declared category
    score_survey           — earned-vs-available totals with per-category snapshots
    resolve_overall_band   — overall percentage -> configured band
    resolve_category_bands — per-category snapshots -> configured bands
    resolve_index_band     — score on the canonical 5-band index scale
    resolve_results_mode   — "index" / "self_assessment" / "none"
    evaluate_condition     — evaluate one skip/branch condition
    evaluate_logic_rules   — first matching logic rule for a question
    LogicEvaluator         — class behind the two functions above
    parse_condition        — parse a condition into clauses (raises on bad syntax)
    SurveyStore            — loads YAML survey templates into typed models

Validation:
    validate_results_config — band ranges, overlaps and dangling categories
    validate_score_config   — pre-publish scoring lint
    validate_survey_logic   — pre-publish logic lint
    summarize_issues        — severity counts for a list of lint findings
"""

from survey_scoring.bands import (
    resolve_category_bands,
    resolve_index_band,
    resolve_overall_band,
)
from survey_scoring.evaluator import LogicEvaluator, evaluate_condition, evaluate_logic_rules
from survey_scoring.expression import ConditionSyntaxError, parse_condition
from survey_scoring.points import extract_points
from survey_scoring.results_mode import (
    get_results_mode_labels,
    resolve_results_mode,
    should_show_results_screen,
)
from survey_scoring.scoring import calculate_scores, score_survey
from survey_scoring.store import SurveyStore
from survey_scoring.validation import (
    summarize_issues,
    validate_results_config,
    validate_score_config,
    validate_survey_logic,
)

__all__ = [
    # Scoring
    "calculate_scores",
    "extract_points",
    "score_survey",
    # Bands
    "resolve_category_bands",
    "resolve_index_band",
    "resolve_overall_band",
    # Results mode
    "get_results_mode_labels",
    "resolve_results_mode",
    "should_show_results_screen",
    # Logic
    "ConditionSyntaxError",
    "LogicEvaluator",
    "evaluate_condition",
    "evaluate_logic_rules",
    "parse_condition",
    # Templates
    "SurveyStore",
    # Validation
    "summarize_issues",
    "validate_results_config",
    "validate_score_config",
    "validate_survey_logic",
]
