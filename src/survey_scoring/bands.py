"""Band resolution — map a score to a labelled interpretive band.

Two resolution paths read the survey's :class:`ScoreConfiguration`:

  - overall band: ``results_screen.score_ranges`` first, then the global
    ``score_ranges``; the first populated band-set is used
  - per-category band: the category's custom bands when
    ``bands_mode == "custom"`` and bands are present, else the overall set

Within a band-set the first band whose closed ``[min, max]`` contains the
score wins, so array order decides between overlapping bands.

The module also holds the canonical 5-band index scale used by index
surveys (Critical .. Highly Effective) and its helpers.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional, Sequence

from survey_scoring.constants import TREND_THRESHOLD
from survey_scoring.models.config import ScoreBand, ScoreConfiguration
from survey_scoring.models.results import CategorySnapshot

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Canonical index bands
# ---------------------------------------------------------------------------

INDEX_BAND_DEFINITIONS: tuple[ScoreBand, ...] = (
    ScoreBand(id="critical", label="Critical", min=0, max=39,
              interpretation="Critical level"),
    ScoreBand(id="needs-improvement", label="Needs Improvement", min=40, max=54,
              interpretation="Needs improvement"),
    ScoreBand(id="developing", label="Developing", min=55, max=69,
              interpretation="Developing"),
    ScoreBand(id="effective", label="Effective", min=70, max=84,
              interpretation="Effective level"),
    ScoreBand(id="highly-effective", label="Highly Effective", min=85, max=100,
              interpretation="Highly effective"),
)

# Display metadata per canonical band id.
BAND_COLORS: dict[str, str] = {
    "critical": "#ef4444",
    "needs-improvement": "#f97316",
    "developing": "#f59e0b",
    "effective": "#84cc16",
    "highly-effective": "#22c55e",
}
BAND_SEVERITY: dict[str, str] = {
    "critical": "critical",
    "needs-improvement": "warning",
    "developing": "neutral",
    "effective": "good",
    "highly-effective": "excellent",
}

# Returned for missing scores so presentation code always has a band.
DEFAULT_BAND_INDEX = 2
DEFAULT_INDEX_BAND = INDEX_BAND_DEFINITIONS[DEFAULT_BAND_INDEX]


# ---------------------------------------------------------------------------
# Band-set selection
# ---------------------------------------------------------------------------

def first_populated(*candidates: Optional[Sequence[ScoreBand]]) -> list[ScoreBand]:
    """Return the first non-empty band-set among ``candidates``, in order."""
    for bands in candidates:
        if bands:
            return list(bands)
    return []


def overall_band_set(config: ScoreConfiguration | None) -> list[ScoreBand]:
    """Band-set used for the overall score (results screen overrides global)."""
    if config is None:
        return []
    results_screen = config.results_screen
    return first_populated(
        results_screen.score_ranges if results_screen is not None else None,
        config.score_ranges,
    )


def category_band_set(config: ScoreConfiguration | None, category_id: str) -> list[ScoreBand]:
    """Band-set used for one category (custom overrides inherited)."""
    if config is None:
        return []
    custom: list[ScoreBand] | None = None
    if config.results_screen is not None:
        cat_config = config.results_screen.category_config(category_id)
        if cat_config is not None and cat_config.bands_mode == "custom":
            custom = cat_config.bands
    return first_populated(custom, overall_band_set(config))


def find_band(score: float, bands: Iterable[ScoreBand]) -> ScoreBand | None:
    """First band containing ``score``, or None."""
    for band in bands:
        if band.contains(score):
            return band
    return None


# ---------------------------------------------------------------------------
# Public resolution entry points
# ---------------------------------------------------------------------------

def resolve_overall_band(
    percentage: float | None,
    score_configuration: ScoreConfiguration | None,
) -> ScoreBand | None:
    """Resolve the overall band for a 0-100 percentage.

    A missing percentage resolves to the default "Developing" band so
    presentation code always has something to show.  Otherwise returns None
    when no band-set is configured or no band contains the score.
    """
    if percentage is None:
        return DEFAULT_INDEX_BAND
    bands = overall_band_set(score_configuration)
    if not bands:
        return None
    return find_band(percentage, bands)


def resolve_category_bands(
    category_snapshots: Mapping[str, CategorySnapshot],
    score_configuration: ScoreConfiguration | None,
) -> dict[str, ScoreBand | None]:
    """Resolve a band for every category snapshot.

    The lookup uses each category's percentage (``score / max_score * 100``),
    not its raw points.  Categories without a usable band-set map to None.
    """
    result: dict[str, ScoreBand | None] = {}
    if score_configuration is None:
        return result

    for category_id, snap in category_snapshots.items():
        bands = category_band_set(score_configuration, category_id)
        if not bands:
            result[category_id] = None
            continue
        result[category_id] = find_band(snap.percentage, bands)
    return result


# ---------------------------------------------------------------------------
# Canonical index scale helpers
# ---------------------------------------------------------------------------

def resolve_index_band(
    score: float | None,
    *,
    is_burnout: bool = False,
    use_performance_score: bool = False,
) -> ScoreBand:
    """Resolve a 0-100 index score on the canonical 5-band scale.

    A missing score resolves to the default "Developing" band.  Burnout is a
    lower-is-better dimension: with ``use_performance_score`` its score is
    inverted before lookup.
    """
    if score is None:
        return DEFAULT_INDEX_BAND

    lookup = score
    if use_performance_score and is_burnout:
        lookup = 100 - score
    lookup = max(0, min(100, lookup))

    band = find_band(lookup, INDEX_BAND_DEFINITIONS)
    if band is None:
        # Fractional scores can fall between integer thresholds (e.g. 39.5)
        logger.debug("index score %s fell between bands, using default", score)
        return DEFAULT_INDEX_BAND
    return band


def resolve_band_index(score: float) -> int:
    """Index (0-4) of the canonical band containing ``score``, or -1."""
    clamped = max(0, min(100, score))
    for idx, band in enumerate(INDEX_BAND_DEFINITIONS):
        if band.contains(clamped):
            return idx
    return -1


def get_band_by_id(band_id: str) -> ScoreBand:
    """Canonical band by id; unknown ids return the default band."""
    for band in INDEX_BAND_DEFINITIONS:
        if band.id == band_id:
            return band
    return DEFAULT_INDEX_BAND


def get_color_for_score(score: float | None) -> str:
    return BAND_COLORS[resolve_index_band(score).id]


def resolve_trend_direction(change: float | None) -> str:
    """Classify a score change as "up", "down" or "neutral"."""
    if change is None:
        return "neutral"
    if change > TREND_THRESHOLD:
        return "up"
    if change < -TREND_THRESHOLD:
        return "down"
    return "neutral"


def calculate_performance_score(raw_score: float | None, is_burnout: bool) -> float:
    """Higher-is-better score for ranking; burnout scores are inverted."""
    if raw_score is None:
        return 0
    return 100 - raw_score if is_burnout else raw_score


def create_empty_band_stats() -> list[dict]:
    """Zero-count distribution rows, one per canonical band."""
    return [
        {
            "band_id": band.id,
            "label": band.label,
            "color": BAND_COLORS[band.id],
            "severity": BAND_SEVERITY[band.id],
            "count": 0,
            "percentage": 0,
            "min_score": band.min,
            "max_score": band.max,
        }
        for band in INDEX_BAND_DEFINITIONS
    ]
