"""Scoring constants shared across the engine.

These values are referenced by the point extractor, the aggregator, the
band resolver and the results-mode classifier.

A couple of scale defaults can be overridden via environment variables so
deployments can adjust them without code changes.  The classification
allow-lists and the canonical band thresholds are fixed.
"""

import os

# Scale ceiling assumed per question when normalizing category totals, and
# the cap applied to multiple_choice / checkbox points.
POINTS_CEILING = 5

# rating questions without an authored ratingScale are treated as 1-5.
# Overridable via SURVEY_DEFAULT_RATING_SCALE env var.
DEFAULT_RATING_SCALE = int(os.getenv("SURVEY_DEFAULT_RATING_SCALE", "5"))

DEFAULT_LIKERT_POINTS = 5
DEFAULT_OPINION_SCALE = 10
NPS_MAX = 10

# Floor for a category's configured maximum score; also the value used when
# no band is tagged with the category.
# Overridable via SURVEY_DEFAULT_CATEGORY_MAX env var.
DEFAULT_CATEGORY_MAX_SCORE = int(os.getenv("SURVEY_DEFAULT_CATEGORY_MAX", "20"))

# Results are reported on a 0-100 display scale.
DISPLAY_MAX_SCORE = 100

NO_INTERPRETATION = "No interpretation available"

# Question types read as numeric values, and the types scored by selection
# or presence.  Anything else carries no points.
NUMERIC_TYPES: frozenset[str] = frozenset(
    {"rating", "nps", "number", "likert", "opinion_scale", "slider"}
)
CHOICE_TYPES: frozenset[str] = frozenset({"multiple_choice", "checkbox"})
PRESENCE_TYPES: frozenset[str] = frozenset({"text", "textarea"})
SCORABLE_TYPES: frozenset[str] = NUMERIC_TYPES | CHOICE_TYPES | PRESENCE_TYPES

# Choice types scored from authored option_scores by the engagement_v1 engine.
OPTION_SCORED_TYPES: frozenset[str] = frozenset(
    {"multiple_choice", "dropdown", "yes_no", "checkbox"}
)

# --- Results-mode classification ---

# Scoring engines that measure organizational indices.
INDEX_ENGINE_IDS: frozenset[str] = frozenset(
    {"engagement_v1", "5d_wellbeing_v1", "5d_engagement_v1", "evalia_5d_v1"}
)

# Survey tags (compared lower-cased) that mark an index survey.
INDEX_TAGS: frozenset[str] = frozenset(
    {"engagement", "5d", "organizational-index", "team-index"}
)

# Canonical dimension ids of the 5D index.
CANONICAL_5D_CATEGORIES: tuple[str, ...] = (
    "leadership-effectiveness",
    "team-wellbeing",
    "burnout-risk",
    "psychological-safety",
    "engagement",
)

# A survey reusing at least this many canonical dimension ids is an index.
INDEX_CATEGORY_THRESHOLD = 3

DEFAULT_ENGINE_ID = "engagement_v1"

# --- Trends ---

# Changes within +/- this many points are reported as "neutral".
TREND_THRESHOLD = 1
