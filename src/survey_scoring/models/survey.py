"""Survey definition model, as loaded from the YAML templates in ``templates/``."""

from __future__ import annotations

from typing import List, Optional

from survey_scoring.models.config import ScoreConfiguration
from survey_scoring.models.question import Question, SurveyModel


class SurveyDefinition(SurveyModel):
    """A survey with its questions and scoring setup.

    ``score_config`` is None for non-scored surveys (feedback forms).
    """

    id: str
    title: str
    description: str = ""
    tags: List[str] = []
    scoring_engine_id: Optional[str] = None
    questions: List[Question]
    score_config: Optional[ScoreConfiguration] = None

    def question(self, question_id: str) -> Question:
        """Look up a question by id.

        Raises:
            KeyError: if the survey has no such question.
        """
        for q in self.questions:
            if q.id == question_id:
                return q
        raise KeyError(question_id)
