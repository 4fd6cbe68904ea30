"""Category aggregation — raw answers to per-category scores.

Two entry points:

  - :func:`calculate_scores` normalizes each category's raw points onto the
    category's configured maximum (assuming 5 points per answered question),
    then reports the result on a 0-100 display scale together with the
    interpretation text of the matching category band.
  - :func:`score_survey` sums earned vs. available points per question
    (weighted) and reports an overall percentage plus a snapshot per
    category.  Its output feeds :func:`survey_scoring.bands.resolve_overall_band`
    and :func:`survey_scoring.bands.resolve_category_bands`.

Both are pure: identical inputs always produce identical output.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, Mapping, Sequence

from survey_scoring.constants import (
    DEFAULT_CATEGORY_MAX_SCORE,
    DEFAULT_ENGINE_ID,
    DISPLAY_MAX_SCORE,
    NO_INTERPRETATION,
    POINTS_CEILING,
)
from survey_scoring.models.config import ScoreConfiguration
from survey_scoring.models.question import Question
from survey_scoring.models.results import (
    CategoryScoreResult,
    CategorySnapshot,
    ScoringResult,
)
from survey_scoring.points import (
    extract_points,
    has_option_scores,
    is_answered,
    is_scorable,
    option_score_points,
)

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (``round()`` rounds to even)."""
    return math.floor(value + 0.5)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def category_max_score(config: ScoreConfiguration, category_id: str) -> float:
    """Largest ``max`` over bands tagged with the category, floored at the default."""
    return max(
        [DEFAULT_CATEGORY_MAX_SCORE] + [b.max for b in config.bands_for_category(category_id)]
    )


# ==================================================================
# Normalized category scores
# ==================================================================

def calculate_scores(
    questions: Sequence[Question],
    answers: Mapping[str, Any],
    score_configuration: ScoreConfiguration | None,
    pre_calculated_scores: Mapping[str, float] | None = None,
) -> list[CategoryScoreResult] | None:
    """Compute one :class:`CategoryScoreResult` per declared category.

    Args:
        questions: the survey's questions, in authored order
        answers: raw answers keyed by question id
        score_configuration: the survey's scoring setup
        pre_calculated_scores: optional category scores from an external
            scoring source; these replace the computed normalized score for
            the categories they name and leave the others untouched

    Returns:
        None when scoring is disabled (or no configuration is given),
        otherwise a result for every category in configuration order.
        Categories with no answered questions score 0.
    """
    if score_configuration is None or not score_configuration.enabled:
        return None

    category_ids = score_configuration.category_ids
    raw_scores: dict[str, float] = {cid: 0 for cid in category_ids}
    question_counts: dict[str, int] = {cid: 0 for cid in category_ids}

    # First pass: raw points and answered-question counts per category
    for q in questions:
        category = q.scoring_category
        if category not in raw_scores or not is_scorable(q):
            continue
        answer = answers.get(q.id)
        if not is_answered(answer):
            continue
        points, _ = extract_points(q, answer)
        if points > 0:
            raw_scores[category] += points
        question_counts[category] += 1

    # Second pass: normalize onto each category's configured maximum
    scores: dict[str, float] = {}
    for cid in category_ids:
        max_configured = category_max_score(score_configuration, cid)
        theoretical_max_raw = max(question_counts[cid], 1) * POINTS_CEILING
        normalized = round_half_up(raw_scores[cid] / theoretical_max_raw * max_configured)
        scores[cid] = clamp(normalized, 0, max_configured)

    if pre_calculated_scores:
        for cid, value in pre_calculated_scores.items():
            if cid in scores:
                scores[cid] = clamp(value, 0, category_max_score(score_configuration, cid))
            else:
                logger.debug("pre-calculated score for unknown category %s ignored", cid)

    results: list[CategoryScoreResult] = []
    for cat in score_configuration.categories:
        category_score = scores[cat.id]
        max_configured = category_max_score(score_configuration, cat.id)
        display_score = (
            round_half_up(category_score / max_configured * DISPLAY_MAX_SCORE)
            if max_configured > 0
            else 0
        )

        # Interpretation is looked up on the category's own scale
        band = next(
            (b for b in score_configuration.bands_for_category(cat.id) if b.contains(category_score)),
            None,
        )
        results.append(
            CategoryScoreResult(
                category_id=cat.id,
                category_name=cat.name,
                score=clamp(display_score, 0, DISPLAY_MAX_SCORE),
                max_score=DISPLAY_MAX_SCORE,
                interpretation=band.interpretation if band is not None else NO_INTERPRETATION,
            )
        )

    logger.debug(
        "calculate_scores: %d categories, counts=%s", len(results), question_counts
    )
    return results


# ==================================================================
# Earned-vs-available scoring (engine registry)
# ==================================================================

def _category_label(config: ScoreConfiguration | None, category_id: str) -> str:
    name = config.category_name(category_id) if config is not None else None
    if name:
        return name
    return category_id[:1].upper() + category_id[1:]


def engagement_scoring_v1(
    questions: Sequence[Question],
    answers: Mapping[str, Any],
    score_configuration: ScoreConfiguration | None = None,
) -> ScoringResult:
    """Sum weighted (points, max_points) over answered scorable questions.

    Choice questions with authored ``option_scores`` are scored from that map;
    everything else follows :func:`extract_points`.
    """
    total_score = 0.0
    max_score = 0.0
    by_category: dict[str, CategorySnapshot] = {}

    for q in questions:
        option_scored = has_option_scores(q)
        if not option_scored and not is_scorable(q):
            continue
        answer = answers.get(q.id)
        if not is_answered(answer):
            continue

        if option_scored:
            points, q_max = option_score_points(q, answer)
        else:
            points, q_max = extract_points(q, answer)
        points *= q.weight
        q_max *= q.weight
        total_score += points
        max_score += q_max

        category = q.scoring_category
        if category:
            snap = by_category.get(category)
            if snap is None:
                snap = CategorySnapshot(
                    score=0, max_score=0, label=_category_label(score_configuration, category)
                )
                by_category[category] = snap
            snap.score += points
            snap.max_score += q_max

    percentage = total_score / max_score * 100 if max_score > 0 else 0.0
    return ScoringResult(
        total_score=total_score,
        max_score=max_score,
        percentage=percentage,
        by_category=by_category,
    )


ScoringEngine = Callable[..., ScoringResult]

# Registry of scoring strategies by engine id.  Existing ids must keep their
# behavior; a breaking change gets a new id.
SCORING_ENGINES: dict[str, ScoringEngine] = {
    "engagement_v1": engagement_scoring_v1,
}


def score_survey(
    questions: Sequence[Question],
    answers: Mapping[str, Any],
    score_configuration: ScoreConfiguration | None = None,
    engine_id: str | None = None,
) -> ScoringResult:
    """Score a response with the named engine (default ``engagement_v1``).

    Unknown engine ids fall back to the default engine.
    """
    engine_id = engine_id or DEFAULT_ENGINE_ID
    engine = SCORING_ENGINES.get(engine_id)
    if engine is None:
        logger.warning("Unknown scoring engine %r, using %s", engine_id, DEFAULT_ENGINE_ID)
        engine = SCORING_ENGINES[DEFAULT_ENGINE_ID]
    return engine(questions, answers, score_configuration)
