"""Score configuration models.

A ``ScoreConfiguration`` is authored once per survey and is the single input
to band resolution and results-mode classification:

  - categories: named scoring buckets (unique ids)
  - score_ranges: the global band-set; bands may be tagged with a category
  - results_screen: optional overrides used when rendering results
      - score_ranges: replaces the global band-set for the overall band
      - categories: per-category ``inherit`` / ``custom`` band choice

Bands are closed intervals ``[min, max]`` on a 0-100 scale.  Bands of one
band-set should not overlap; that is checked by
:func:`survey_scoring.validation.validate_results_config`, never enforced here.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from survey_scoring.models.question import SurveyModel


class ScoreCategory(SurveyModel):
    """A named scoring bucket."""

    id: str
    name: str


class ScoreBand(SurveyModel):
    """A labelled score interval with its interpretation text."""

    id: str
    min: float
    max: float
    label: str
    interpretation: str = ""
    category: Optional[str] = None

    def contains(self, score: float) -> bool:
        """True if ``score`` lies within the closed interval [min, max]."""
        return self.min <= score <= self.max


class BandNarrative(SurveyModel):
    """Author-written narrative shown for one band of a category."""

    band_id: str
    text: str = ""


class CategoryResultConfig(SurveyModel):
    """Per-category results-screen settings.

    ``bands_mode="custom"`` with a non-empty ``bands`` list overrides the
    global band-set for this category; anything else inherits it.
    """

    category_id: str
    bands_mode: Literal["inherit", "custom"] = "inherit"
    bands: Optional[List[ScoreBand]] = None
    band_narratives: Optional[List[BandNarrative]] = None


class ResultsScreenConfig(SurveyModel):
    """Overrides applied when rendering the results screen."""

    enabled: bool = True
    score_ranges: Optional[List[ScoreBand]] = None
    categories: Optional[List[CategoryResultConfig]] = None

    def category_config(self, category_id: str) -> CategoryResultConfig | None:
        """Return the config entry for ``category_id``, or None."""
        for cat in self.categories or []:
            if cat.category_id == category_id:
                return cat
        return None


class ScoreConfiguration(SurveyModel):
    """The survey's complete scoring setup."""

    enabled: bool = False
    categories: List[ScoreCategory] = []
    score_ranges: List[ScoreBand] = []
    results_screen: Optional[ResultsScreenConfig] = None

    @property
    def category_ids(self) -> list[str]:
        return [c.id for c in self.categories]

    def category_name(self, category_id: str) -> str | None:
        for cat in self.categories:
            if cat.id == category_id:
                return cat.name
        return None

    def bands_for_category(self, category_id: str) -> list[ScoreBand]:
        """Global bands tagged with ``category_id``, in authored order."""
        return [b for b in self.score_ranges if b.category == category_id]
