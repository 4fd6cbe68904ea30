"""SurveyStore — loads YAML survey templates into typed models.

Each ``*.yaml`` file in the templates directory holds one survey definition
(``id``, ``title``, ``tags``, ``scoring_engine_id``, ``questions``,
``score_config``).  Keys may be snake_case or the camelCase names used by the
survey JSON.

Usage::

    store = SurveyStore()           # defaults to the packaged templates/
    store.load()                    # parse all YAML files

    survey = store.get("engagement-pulse")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from survey_scoring.models.question import QUESTION_TYPES
from survey_scoring.models.survey import SurveyDefinition

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


def load_yaml(path: Path | str) -> Any:
    """Load a single YAML file and return the parsed contents."""
    if isinstance(path, str):
        path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing YAML file: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def load_survey(path: Path | str) -> SurveyDefinition:
    """Parse one survey YAML file.

    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError: if the file is not a mapping, a question entry is not a
            mapping, or a question has an unknown ``type``.
    """
    path = Path(path)
    raw = load_yaml(path)
    if not isinstance(raw, dict):
        raise ValueError(f"Survey file {path.name} must contain a mapping")

    questions = raw.get("questions") or []
    if not isinstance(questions, list):
        raise ValueError(f"'questions' in {path.name} must be a list")
    for index, q_dict in enumerate(questions):
        if not isinstance(q_dict, dict):
            raise ValueError(f"Question entry {index} in {path.name} must be a mapping")
        qtype = q_dict.get("type")
        if qtype not in QUESTION_TYPES:
            raise ValueError(
                f"Unknown question type '{qtype}' in {path.name} (question {q_dict.get('id')})"
            )
    return SurveyDefinition.model_validate(raw)


class SurveyStore:
    """Loads every survey template from a directory and provides lookup by id."""

    def __init__(self, templates_dir: str | Path | None = None) -> None:
        self._base = Path(templates_dir) if templates_dir is not None else TEMPLATES_DIR

        # Populated by load(), keyed by survey id in file-name order
        self.surveys: dict[str, SurveyDefinition] = {}

    def load(self) -> None:
        """Parse all ``*.yaml`` files under the templates directory.

        Raises ``FileNotFoundError`` if the directory does not exist and
        ``ValueError`` on a duplicate survey id.
        """
        if not self._base.is_dir():
            raise FileNotFoundError(f"Missing templates directory: {self._base}")

        for path in sorted(self._base.glob("*.yaml")):
            survey = load_survey(path)
            if survey.id in self.surveys:
                raise ValueError(f"Duplicate survey id '{survey.id}' in {path.name}")
            self.surveys[survey.id] = survey

        logger.info("SurveyStore loaded %d surveys from %s", len(self.surveys), self._base)

    def get(self, survey_id: str) -> SurveyDefinition:
        """Look up a survey by id.

        Raises:
            KeyError: if no template has that id.
        """
        return self.surveys[survey_id]

    def ids(self) -> list[str]:
        return list(self.surveys)
