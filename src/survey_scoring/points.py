"""Point extraction — turns one answered question into (points, max_points).

Per-type rules:

  - rating:          numeric value, max = rating_scale (default 5)
  - nps:             numeric value 0-10, max = 10
  - number:          numeric value, max = the same value (re-scaled by callers)
  - likert:          numeric value, max = likert_points (default 5)
  - opinion_scale:   numeric value, max = rating_scale (default 10)
  - slider:          numeric value, max = the slider's ``max`` (0 if unset)
  - multiple_choice: leading integer of the label ("5 (Strongly Agree)" -> 5),
                     else the option's ordinal position scaled to 5 points;
                     max = 5
  - checkbox:        number of selections capped at 5, max = 5
  - text, textarea:  1 if non-empty, max = 1
  - anything else:   (0, 0), not scorable

Choice questions with authored ``option_scores`` can instead be scored from
that map with :func:`option_score_points` (used by the engagement_v1 engine).

Malformed answers score 0; nothing in this module raises on bad input.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any

from survey_scoring.constants import (
    DEFAULT_LIKERT_POINTS,
    DEFAULT_OPINION_SCALE,
    DEFAULT_RATING_SCALE,
    NPS_MAX,
    OPTION_SCORED_TYPES,
    POINTS_CEILING,
    SCORABLE_TYPES,
)
from survey_scoring.models.question import Question

logger = logging.getLogger(__name__)

_NUMBER_PREFIX = re.compile(r"^\s*([+-]?\d+(?:\.\d+)?)")
_LEADING_INT = re.compile(r"^(\d+)")


# ------------------------------------------------------------------
# Answer helpers
# ------------------------------------------------------------------

def is_answered(answer: Any) -> bool:
    """True unless the answer is None, a blank string, or an empty list."""
    if answer is None:
        return False
    if isinstance(answer, str):
        return answer.strip() != ""
    if isinstance(answer, (list, tuple)):
        return len(answer) > 0
    return True


def is_scorable(question: Question) -> bool:
    """True if answers to this question type can carry points."""
    return question.type in SCORABLE_TYPES


def first_value(answer: Any) -> Any:
    """Return the single value of a scalar answer, or a list answer's first element."""
    if isinstance(answer, (list, tuple)):
        return answer[0] if answer else None
    return answer


def parse_number(value: Any) -> float | None:
    """Parse a numeric answer.

    Numbers pass through; strings are read from their leading numeric prefix
    (``"4"``, ``" 7 "``, ``"3.5 stars"``).  Returns None when there is no number.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return float(value)
    match = _NUMBER_PREFIX.match(str(value))
    if match is None:
        return None
    return float(match.group(1))


# ------------------------------------------------------------------
# Extraction
# ------------------------------------------------------------------

def extract_points(question: Question, answer: Any) -> tuple[float, float]:
    """Return ``(points, max_points)`` for one answer.

    Callers skip unanswered questions; an absent answer passed here still
    yields zero points.
    """
    qt = question.type
    if qt not in SCORABLE_TYPES:
        return 0, 0

    if qt in ("text", "textarea"):
        return (1 if is_answered(answer) else 0), 1

    if qt == "checkbox":
        if isinstance(answer, (list, tuple)):
            selected = len(answer)
        else:
            selected = 1 if is_answered(answer) else 0
        return min(selected, POINTS_CEILING), POINTS_CEILING

    if qt == "multiple_choice":
        return _multiple_choice_points(question, answer), POINTS_CEILING

    # Numeric scale types
    value = parse_number(first_value(answer))
    points = max(value, 0.0) if value is not None else 0.0
    if value is None and is_answered(answer):
        logger.debug("question %s: non-numeric answer %r scored as 0", question.id, answer)

    if qt == "rating":
        return points, question.rating_scale or DEFAULT_RATING_SCALE
    if qt == "nps":
        return points, NPS_MAX
    if qt == "number":
        return points, points
    if qt == "likert":
        return points, question.likert_points or DEFAULT_LIKERT_POINTS
    if qt == "opinion_scale":
        return points, question.rating_scale or DEFAULT_OPINION_SCALE
    # slider
    return points, question.max if question.max is not None else 0


def _multiple_choice_points(question: Question, answer: Any) -> float:
    """Score a single-choice answer.

    Likert-style labels carry their value as a leading integer.  Otherwise
    the option's 1-based position is scaled onto at most 5 points:
    ``ceil((index + 1) / n * min(n, 5))``.
    """
    text = first_value(answer)
    if text is None:
        return 0
    text = str(text)

    match = _LEADING_INT.match(text)
    if match:
        return int(match.group(1))

    options = question.options or []
    if text not in options:
        return 0
    index = options.index(text)
    num_options = len(options)
    max_points = min(num_options, POINTS_CEILING)
    return math.ceil((index + 1) * max_points / num_options)


# ------------------------------------------------------------------
# Authored option scores
# ------------------------------------------------------------------

def has_option_scores(question: Question) -> bool:
    """True if a choice question carries authored per-option points."""
    return question.type in OPTION_SCORED_TYPES and bool(question.option_scores)


def option_score_points(question: Question, answer: Any) -> tuple[float, float]:
    """Return ``(points, max_points)`` from the question's ``option_scores``.

    Single-choice types (multiple_choice, dropdown, yes_no) earn the selected
    option's score out of the highest option score.  checkbox earns the sum
    of the selected options' scores out of the sum of the positive scores.
    Options missing from the map earn 0.
    """
    scores = question.option_scores or {}
    if not scores:
        return 0, 0

    if question.type == "checkbox":
        selected = answer if isinstance(answer, (list, tuple)) else [answer]
        points = sum(scores.get(str(opt), 0) for opt in selected if opt is not None)
        return points, sum(v for v in scores.values() if v > 0)

    choice = first_value(answer)
    points = scores.get(str(choice), 0) if choice is not None else 0
    return points, max(scores.values())
