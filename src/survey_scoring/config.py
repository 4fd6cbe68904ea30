"""Engine configuration — reads settings from environment variables.

All settings have sensible defaults so the library and the CLI work out of
the box.  Deployments override them via ``SURVEY_SCORING_*`` env vars.
"""

import os
from dataclasses import dataclass

from survey_scoring.constants import DEFAULT_ENGINE_ID


@dataclass(frozen=True)
class EngineSettings:
    """Immutable engine configuration read from environment at startup."""

    # Survey template directory (None → SurveyStore default, the packaged templates/)
    templates_dir: str | None = None

    # Logging
    log_level: str = "WARNING"

    # Scoring engine used when a survey does not name one
    default_engine_id: str = DEFAULT_ENGINE_ID


def load_settings() -> EngineSettings:
    """Build settings from ``SURVEY_SCORING_*`` environment variables."""
    return EngineSettings(
        templates_dir=os.getenv("SURVEY_SCORING_TEMPLATES_DIR") or None,
        log_level=os.getenv("SURVEY_SCORING_LOG_LEVEL", "WARNING").upper(),
        default_engine_id=os.getenv("SURVEY_SCORING_ENGINE") or DEFAULT_ENGINE_ID,
    )
