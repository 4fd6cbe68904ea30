"""Results-mode classification.

Decides how a survey's results are presented:

  - "index":           broad organizational measures (engagement, 5D) shown
                       with index wording
  - "self_assessment": scored surveys with a personal score and band
  - "none":            non-scored surveys (thank-you screen only)

Decision order, first rule that applies wins:

  1. scoring disabled or absent        -> none
  2. engine id in the index allow-list -> index
  3. any tag in the index tag list     -> index
  4. 3+ canonical 5D category ids      -> index
  5. otherwise                         -> self_assessment
"""

from __future__ import annotations

from typing import Any, Iterable, Literal

from survey_scoring.constants import (
    CANONICAL_5D_CATEGORIES,
    INDEX_CATEGORY_THRESHOLD,
    INDEX_ENGINE_IDS,
    INDEX_TAGS,
)
from survey_scoring.models.config import ScoreConfiguration

ResultsMode = Literal["index", "self_assessment", "none"]

# Display wording per mode.
RESULTS_MODE_LABELS: dict[str, dict[str, str]] = {
    "index": {
        "title": "Your Results",
        "score_label": "Index Score",
        "band_label": "Performance Band",
        "description": "See how your responses compare to organizational benchmarks",
    },
    "self_assessment": {
        "title": "Your Results",
        "score_label": "Your Score",
        "band_label": "Your Band",
        "description": "Personal insights based on your responses",
    },
    "none": {
        "title": "Thank You",
        "score_label": "",
        "band_label": "",
        "description": "Your responses have been recorded",
    },
}


def resolve_results_mode(
    score_configuration: ScoreConfiguration | None,
    scoring_engine_id: str | None = None,
    tags: Iterable[str] | None = None,
) -> ResultsMode:
    """Classify a survey's scoring setup into a presentation mode."""
    if score_configuration is None or not score_configuration.enabled:
        return "none"

    if scoring_engine_id and scoring_engine_id in INDEX_ENGINE_IDS:
        return "index"

    if tags and any(tag.lower() in INDEX_TAGS for tag in tags):
        return "index"

    canonical_hits = set(score_configuration.category_ids) & set(CANONICAL_5D_CATEGORIES)
    if len(canonical_hits) >= INDEX_CATEGORY_THRESHOLD:
        return "index"

    return "self_assessment"


def should_show_results_screen(results_screen_enabled: bool | None, scoring_payload: Any) -> bool:
    """Results screen only when it is enabled and scoring produced a payload."""
    return bool(results_screen_enabled and scoring_payload is not None)


def get_results_mode_labels(mode: ResultsMode) -> dict[str, str]:
    """Return a copy of the display labels for ``mode``."""
    return dict(RESULTS_MODE_LABELS[mode])
