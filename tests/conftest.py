import pytest

from survey_scoring.bands import INDEX_BAND_DEFINITIONS
from survey_scoring.models import Question, ScoreCategory, ScoreConfiguration
from survey_scoring.store import SurveyStore


@pytest.fixture
def engagement_questions():
    """rating (1-5), nps (0-10) and 5-point likert, all in ``engagement``."""
    return [
        Question(id="q1", type="rating", rating_scale=5, scoring_category="engagement"),
        Question(id="q2", type="nps", scoring_category="engagement"),
        Question(id="q3", type="likert", likert_points=5, scoring_category="engagement"),
    ]


@pytest.fixture
def index_config():
    """Enabled configuration using the canonical five index bands."""
    return ScoreConfiguration(
        enabled=True,
        categories=[ScoreCategory(id="engagement", name="Engagement")],
        score_ranges=list(INDEX_BAND_DEFINITIONS),
    )


@pytest.fixture(scope="session")
def store():
    """Packaged survey templates, loaded once for the session."""
    s = SurveyStore()
    s.load()
    return s
