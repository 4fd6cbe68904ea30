"""Category aggregation: calculate_scores and score_survey.

calculate_scores normalizes raw points assuming 5 points per answered
question, rescales onto the category's configured maximum and reports a
0-100 display score.  score_survey sums earned vs. available points and
feeds the band resolvers; scenarios A and B run through it end to end.
"""

import logging

import pytest

from survey_scoring import scoring
from survey_scoring.bands import resolve_category_bands, resolve_overall_band
from survey_scoring.constants import NO_INTERPRETATION
from survey_scoring.models import Question, ScoreBand, ScoreCategory, ScoreConfiguration
from survey_scoring.scoring import (
    calculate_scores,
    category_max_score,
    round_half_up,
    score_survey,
)


@pytest.fixture
def tagged_config():
    """One category whose bands are tagged with it, on a 0-20 scale."""
    return ScoreConfiguration(
        enabled=True,
        categories=[ScoreCategory(id="engagement", name="Engagement")],
        score_ranges=[
            ScoreBand(id="low", min=0, max=10, label="Low",
                      interpretation="Low engagement", category="engagement"),
            ScoreBand(id="high", min=11, max=20, label="High",
                      interpretation="High engagement", category="engagement"),
        ],
    )


# =====================================================================
# End-to-end scenarios
# =====================================================================


class TestScenarios:
    """Answers through score_survey and the band resolvers."""

    def test_all_maximum_answers(self, engagement_questions, index_config):
        """Scenario A: every answer at its scale maximum -> 100, Highly Effective."""
        answers = {"q1": "5", "q2": "10", "q3": "5"}
        result = score_survey(engagement_questions, answers, index_config)

        assert result.percentage == 100
        assert result.by_category["engagement"].percentage == 100
        assert resolve_overall_band(result.percentage, index_config).label == "Highly Effective"
        bands = resolve_category_bands(result.by_category, index_config)
        assert bands["engagement"].label == "Highly Effective"

    def test_mid_range_answers(self, engagement_questions, index_config):
        """Scenario B: 13 of 20 points -> 65, Developing."""
        answers = {"q1": "3", "q2": "7", "q3": "3"}
        result = score_survey(engagement_questions, answers, index_config)

        assert result.total_score == 13
        assert result.max_score == 20
        assert 60 <= result.percentage <= 70
        assert resolve_overall_band(result.percentage, index_config).label == "Developing"

    def test_all_maximum_through_calculate_scores(self, engagement_questions, index_config):
        answers = {"q1": "5", "q2": "10", "q3": "5"}
        [result] = calculate_scores(engagement_questions, answers, index_config)
        assert result.score == 100
        assert result.max_score == 100


# =====================================================================
# calculate_scores
# =====================================================================


class TestCalculateScores:
    """Normalized per-category scores."""

    def test_disabled_returns_none(self, engagement_questions):
        config = ScoreConfiguration(enabled=False)
        assert calculate_scores(engagement_questions, {"q1": 5}, config) is None
        assert calculate_scores(engagement_questions, {"q1": 5}, None) is None

    def test_one_result_per_category_in_order(self, engagement_questions):
        config = ScoreConfiguration(
            enabled=True,
            categories=[
                ScoreCategory(id="wellbeing", name="Wellbeing"),
                ScoreCategory(id="engagement", name="Engagement"),
            ],
        )
        results = calculate_scores(engagement_questions, {"q1": 5}, config)
        assert [r.category_id for r in results] == ["wellbeing", "engagement"]

    def test_empty_category_scores_zero(self, engagement_questions):
        config = ScoreConfiguration(
            enabled=True,
            categories=[ScoreCategory(id="wellbeing", name="Wellbeing")],
        )
        [result] = calculate_scores(engagement_questions, {"q1": 5}, config)
        assert result.score == 0
        assert result.interpretation == NO_INTERPRETATION

    def test_normalizes_assuming_five_points_per_question(
        self, engagement_questions, tagged_config
    ):
        """13 raw points over 3 questions -> round(13/15*20) = 17 -> 85 displayed."""
        answers = {"q1": "3", "q2": "7", "q3": "3"}
        [result] = calculate_scores(engagement_questions, answers, tagged_config)
        assert result.score == 85
        assert result.interpretation == "High engagement"

    def test_score_clamped_to_category_max(self, engagement_questions, tagged_config):
        """NPS 10 pushes raw points past the assumed 5-point ceiling."""
        answers = {"q1": "5", "q2": "10", "q3": "5"}
        [result] = calculate_scores(engagement_questions, answers, tagged_config)
        assert result.score == 100

    def test_low_band_interpretation(self, engagement_questions, tagged_config):
        [result] = calculate_scores(engagement_questions, {"q1": "1"}, tagged_config)
        # 1/5 * 20 = 4 on the category scale
        assert result.score == 20
        assert result.interpretation == "Low engagement"

    def test_unanswered_questions_not_counted(self, engagement_questions, tagged_config):
        answers = {"q1": "5", "q2": None, "q3": ""}
        [result] = calculate_scores(engagement_questions, answers, tagged_config)
        assert result.score == 100

    def test_unscorable_question_in_category_ignored(self, tagged_config):
        questions = [
            Question(id="q1", type="rating", scoring_category="engagement"),
            Question(id="q2", type="dropdown", scoring_category="engagement"),
        ]
        [result] = calculate_scores(questions, {"q1": "5", "q2": "Blue"}, tagged_config)
        assert result.score == 100

    def test_pre_calculated_scores_override_named_categories(self, engagement_questions):
        config = ScoreConfiguration(
            enabled=True,
            categories=[
                ScoreCategory(id="engagement", name="Engagement"),
                ScoreCategory(id="wellbeing", name="Wellbeing"),
            ],
        )
        results = calculate_scores(
            engagement_questions,
            {"q1": "5", "q2": "10", "q3": "5"},
            config,
            pre_calculated_scores={"wellbeing": 10, "unknown": 5},
        )
        by_id = {r.category_id: r for r in results}
        assert by_id["engagement"].score == 100, "computed score kept"
        assert by_id["wellbeing"].score == 50, "10 of 20 -> 50"
        assert "unknown" not in by_id

    def test_pre_calculated_scores_clamped(self, engagement_questions, tagged_config):
        [result] = calculate_scores(
            engagement_questions, {}, tagged_config, pre_calculated_scores={"engagement": 99}
        )
        assert result.score == 100

    def test_deterministic(self, engagement_questions, tagged_config):
        answers = {"q1": "4", "q2": "6", "q3": "2"}
        first = calculate_scores(engagement_questions, answers, tagged_config)
        second = calculate_scores(engagement_questions, answers, tagged_config)
        assert first == second

    def test_zero_category_max_scores_zero(self, engagement_questions, index_config, monkeypatch):
        """A category whose configured maximum is 0 displays 0 instead of dividing by it."""
        monkeypatch.setattr(scoring, "DEFAULT_CATEGORY_MAX_SCORE", 0)
        [result] = calculate_scores(engagement_questions, {"q1": "5"}, index_config)
        assert result.score == 0


class TestCategoryMax:
    """category_max_score floors at 20 and follows tagged band maxima."""

    def test_default_without_tagged_bands(self, index_config):
        assert category_max_score(index_config, "engagement") == 20

    def test_largest_tagged_band_max(self):
        config = ScoreConfiguration(
            enabled=True,
            categories=[ScoreCategory(id="c", name="C")],
            score_ranges=[
                ScoreBand(id="a", min=0, max=20, label="A", category="c"),
                ScoreBand(id="b", min=21, max=40, label="B", category="c"),
            ],
        )
        assert category_max_score(config, "c") == 40

    def test_floor_applies_to_small_bands(self):
        config = ScoreConfiguration(
            enabled=True,
            categories=[ScoreCategory(id="c", name="C")],
            score_ranges=[ScoreBand(id="a", min=0, max=5, label="A", category="c")],
        )
        assert category_max_score(config, "c") == 20


def test_round_half_up():
    """.5 always rounds up, unlike round()'s banker's rounding."""
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(2.49) == 2


# =====================================================================
# score_survey
# =====================================================================


class TestScoreSurvey:
    """Earned-vs-available totals."""

    def test_unanswered_excluded_from_denominator(self, engagement_questions):
        result = score_survey(engagement_questions, {"q1": "4"})
        assert result.max_score == 5
        assert result.percentage == 80

    def test_no_answers(self, engagement_questions):
        result = score_survey(engagement_questions, {})
        assert result.percentage == 0
        assert result.by_category == {}

    def test_weights_scale_points_and_max(self):
        questions = [
            Question(id="q1", type="rating", score_weight=2, scoring_category="c"),
            Question(id="q2", type="rating", scoring_category="c"),
        ]
        result = score_survey(questions, {"q1": "5", "q2": "1"})
        assert result.total_score == 11
        assert result.max_score == 15

    def test_category_label_from_config(self, engagement_questions, index_config):
        result = score_survey(engagement_questions, {"q1": "4"}, index_config)
        assert result.by_category["engagement"].label == "Engagement"

    def test_category_label_fallback(self, engagement_questions):
        result = score_survey(engagement_questions, {"q1": "4"})
        assert result.by_category["engagement"].label == "Engagement"

    def test_unknown_engine_falls_back(self, engagement_questions, caplog):
        with caplog.at_level(logging.WARNING, logger="survey_scoring.scoring"):
            result = score_survey(engagement_questions, {"q1": "4"}, engine_id="nope_v9")
        assert result.percentage == 80
        assert "Unknown scoring engine" in caplog.text


class TestOptionScores:
    """engagement_v1 reads authored option_scores before the per-type rules."""

    def test_selected_option_score_out_of_highest(self):
        questions = [
            Question(id="q1", type="multiple_choice", options=["Never", "Always"],
                     option_scores={"Never": 0, "Always": 10}, scoring_category="c"),
        ]
        result = score_survey(questions, {"q1": "Always"})
        assert (result.total_score, result.max_score) == (10, 10)

    def test_weight_applies_to_option_scores(self):
        questions = [
            Question(id="q1", type="multiple_choice", options=["Never", "Always"],
                     option_scores={"Never": 0, "Always": 10}, score_weight=2,
                     scoring_category="c"),
        ]
        result = score_survey(questions, {"q1": "Always"})
        assert (result.total_score, result.max_score) == (20, 20)

    @pytest.mark.parametrize(
        "qtype, scores, answer, expected",
        [
            ("dropdown", {"Red": 1, "Green": 4}, "Red", (1, 4)),
            ("yes_no", {"Yes": 3, "No": 0}, "Yes", (3, 3)),
        ],
    )
    def test_otherwise_unscored_types(self, qtype, scores, answer, expected):
        questions = [
            Question(id="q1", type=qtype, option_scores=scores, scoring_category="c"),
        ]
        result = score_survey(questions, {"q1": answer})
        assert (result.total_score, result.max_score) == expected
        assert "c" in result.by_category

    def test_checkbox_sums_selected_out_of_positive_total(self):
        questions = [
            Question(id="q1", type="checkbox", options=["a", "b", "c"],
                     option_scores={"a": 2, "b": 3, "c": -1}, scoring_category="c"),
        ]
        result = score_survey(questions, {"q1": ["a", "c"]})
        assert (result.total_score, result.max_score) == (1, 5)

    def test_unlisted_option_earns_zero(self):
        questions = [
            Question(id="q1", type="dropdown", option_scores={"Red": 1, "Green": 4},
                     scoring_category="c"),
        ]
        result = score_survey(questions, {"q1": "Blue"})
        assert (result.total_score, result.max_score) == (0, 4)

    def test_without_option_scores_falls_back(self):
        questions = [
            Question(id="q1", type="multiple_choice",
                     options=["1 - Never", "3 - Sometimes", "5 - Always"],
                     scoring_category="c"),
            Question(id="q2", type="dropdown", options=["Red"], scoring_category="c"),
        ]
        result = score_survey(questions, {"q1": "3 - Sometimes", "q2": "Red"})
        assert (result.total_score, result.max_score) == (3, 5)

    def test_calculate_scores_ignores_option_scores(self, tagged_config):
        questions = [
            Question(id="q1", type="rating", scoring_category="engagement"),
            Question(id="q2", type="dropdown", option_scores={"Red": 0, "Green": 5},
                     scoring_category="engagement"),
        ]
        [result] = calculate_scores(questions, {"q1": "5", "q2": "Red"}, tagged_config)
        assert result.score == 100
