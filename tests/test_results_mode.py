"""Results-mode classification and display labels."""

import pytest

from survey_scoring.models import ScoreCategory, ScoreConfiguration
from survey_scoring.results_mode import (
    get_results_mode_labels,
    resolve_results_mode,
    should_show_results_screen,
)


def _config(*category_ids, enabled=True):
    return ScoreConfiguration(
        enabled=enabled,
        categories=[ScoreCategory(id=cid, name=cid) for cid in category_ids],
    )


class TestResolveResultsMode:
    """Decision order: disabled, engine id, tags, canonical categories."""

    def test_disabled_or_missing(self):
        assert resolve_results_mode(None) == "none"
        assert resolve_results_mode(_config("engagement", enabled=False), "engagement_v1") == "none"

    def test_index_engine(self):
        assert resolve_results_mode(_config("custom"), "engagement_v1") == "index"

    def test_index_tag_case_insensitive(self):
        assert resolve_results_mode(_config("custom"), None, ["Team-Index"]) == "index"

    def test_three_canonical_categories(self):
        config = _config("engagement", "team-wellbeing", "burnout-risk", "custom")
        assert resolve_results_mode(config) == "index"

    def test_two_canonical_categories_not_enough(self):
        config = _config("engagement", "team-wellbeing", "custom")
        assert resolve_results_mode(config) == "self_assessment"

    def test_self_assessment_default(self):
        assert resolve_results_mode(_config("vision"), "custom_v2", ["leadership"]) == "self_assessment"


class TestLabels:
    def test_labels_per_mode(self):
        assert get_results_mode_labels("index")["score_label"] == "Index Score"
        assert get_results_mode_labels("self_assessment")["score_label"] == "Your Score"
        assert get_results_mode_labels("none")["title"] == "Thank You"

    def test_labels_are_copies(self):
        labels = get_results_mode_labels("index")
        labels["title"] = "changed"
        assert get_results_mode_labels("index")["title"] == "Your Results"


@pytest.mark.parametrize(
    "enabled,payload,expected",
    [(True, {"score": 1}, True), (True, None, False), (False, {"score": 1}, False),
     (None, {"score": 1}, False)],
)
def test_should_show_results_screen(enabled, payload, expected):
    assert should_show_results_screen(enabled, payload) is expected
