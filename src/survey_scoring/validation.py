"""Configuration validation — advisory checks run before a survey is trusted.

Nothing here raises on bad configuration; problems are returned to the
caller, which decides whether to block publishing.  Band resolution keeps
working on an unvalidated configuration (first match wins on overlap).

  - :func:`validate_results_config`: band ranges, band overlaps per band-set,
    dangling category references in the results screen
  - :func:`validate_score_config`: pre-publish scoring lint (coverage gaps,
    unused categories, weight imbalance, ...)
  - :func:`validate_survey_logic`: pre-publish logic lint (missing targets,
    malformed conditions, backwards jumps, conflicting rules)
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Sequence

from survey_scoring.bands import overall_band_set
from survey_scoring.constants import SCORABLE_TYPES
from survey_scoring.expression import ConditionSyntaxError, parse_condition
from survey_scoring.models.config import ScoreBand, ScoreConfiguration
from survey_scoring.models.question import LogicRule, Question
from survey_scoring.models.results import ResultsConfigValidation, ValidationIssue
from survey_scoring.points import has_option_scores

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Band-sets
# ---------------------------------------------------------------------------

def band_sets(config: ScoreConfiguration) -> list[tuple[str, list[ScoreBand]]]:
    """Every band-set in the configuration, labelled for error messages.

    Global bands are grouped by their ``category`` tag (untagged bands form
    the "overall" set).  The results screen contributes its own overall set
    and each category's custom bands.
    """
    sets: list[tuple[str, list[ScoreBand]]] = []

    grouped: dict[str | None, list[ScoreBand]] = defaultdict(list)
    for band in config.score_ranges:
        grouped[band.category].append(band)
    for tag, bands in grouped.items():
        sets.append(("overall" if tag is None else f"overall:{tag}", bands))

    rs = config.results_screen
    if rs is not None:
        if rs.score_ranges:
            sets.append(("results_screen", list(rs.score_ranges)))
        for cat in rs.categories or []:
            if cat.bands_mode == "custom" and cat.bands:
                sets.append((f"category:{cat.category_id}", list(cat.bands)))
    return sets


def find_overlaps(bands: Sequence[ScoreBand]) -> list[tuple[ScoreBand, ScoreBand]]:
    """Pairs ``(band, earlier_band)`` whose closed intervals share a point.

    Bands are sorted by ``min``; each band is compared with the band reaching
    furthest among those before it.
    """
    overlaps: list[tuple[ScoreBand, ScoreBand]] = []
    reach: ScoreBand | None = None
    for band in sorted(bands, key=lambda b: b.min):
        if reach is not None and band.min <= reach.max:
            overlaps.append((band, reach))
        if reach is None or band.max > reach.max:
            reach = band
    return overlaps


# ---------------------------------------------------------------------------
# Results configuration
# ---------------------------------------------------------------------------

def validate_results_config(
    score_configuration: ScoreConfiguration | None,
) -> ResultsConfigValidation:
    """Check a score configuration for internal consistency.

    Reports bands with ``min > max``, overlapping bands within one band-set,
    duplicate or missing band ids, results-screen categories that are not
    declared, and band narratives pointing at unknown bands.
    """
    errors: list[str] = []
    if score_configuration is None:
        return ResultsConfigValidation(valid=True, errors=errors)

    for context, bands in band_sets(score_configuration):
        _validate_bands(bands, context, errors)

    rs = score_configuration.results_screen
    if rs is not None:
        category_ids = set(score_configuration.category_ids)
        for cat in rs.categories or []:
            if cat.category_id not in category_ids:
                errors.append(
                    f"Category {cat.category_id} is not defined in the score configuration categories"
                )
            if cat.band_narratives:
                if cat.bands_mode == "custom" and cat.bands:
                    available = {b.id for b in cat.bands}
                else:
                    available = {b.id for b in overall_band_set(score_configuration)}
                for narrative in cat.band_narratives:
                    if narrative.band_id not in available:
                        errors.append(
                            f"Narrative bandId {narrative.band_id} for category "
                            f"{cat.category_id} does not match available bands"
                        )

    if errors:
        logger.debug("results config invalid: %d errors", len(errors))
    return ResultsConfigValidation(valid=not errors, errors=errors)


def _validate_bands(bands: Sequence[ScoreBand], context: str, errors: list[str]) -> None:
    seen: set[str] = set()
    for band in bands:
        if not band.id or band.id in seen:
            errors.append(f"Duplicate or missing band id in {context}")
        seen.add(band.id)
        if band.min > band.max:
            errors.append(f"Band {band.id} in {context} has min > max ({band.min} > {band.max})")
    for band, other in find_overlaps(bands):
        errors.append(
            f"Band {band.id} in {context} overlaps with {other.id} "
            f"([{band.min}, {band.max}] and [{other.min}, {other.max}])"
        )


# ---------------------------------------------------------------------------
# Scoring lint
# ---------------------------------------------------------------------------

def validate_score_config(
    questions: Sequence[Question],
    score_configuration: ScoreConfiguration | None,
) -> list[ValidationIssue]:
    """Pre-publish scoring checks.  Disabled scoring yields no issues."""
    if score_configuration is None or not score_configuration.enabled:
        return []

    issues: list[ValidationIssue] = []
    issues += _check_band_ranges(score_configuration)
    issues += _check_band_coverage(score_configuration)
    issues += _check_categories(questions, score_configuration)
    issues += _check_weights(questions)
    return issues


def _check_band_ranges(config: ScoreConfiguration) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    sets = band_sets(config)
    if not sets:
        issues.append(ValidationIssue(
            code="NO_BANDS_DEFINED",
            severity="warning",
            message="Scoring is enabled but no score bands are defined",
        ))
        return issues

    for context, bands in sets:
        for band in bands:
            if band.min >= band.max:
                issues.append(ValidationIssue(
                    code="INVALID_BAND_RANGE",
                    severity="error",
                    message=f'Band "{band.label}" has invalid range: min ({band.min}) >= max ({band.max})',
                    band_id=band.id,
                    details={"min": band.min, "max": band.max, "band_set": context},
                ))
            if band.min < 0:
                issues.append(ValidationIssue(
                    code="BAND_OUT_OF_RANGE",
                    severity="error",
                    message=f'Band "{band.label}" has negative min value ({band.min})',
                    band_id=band.id,
                ))
            if band.max > 100:
                issues.append(ValidationIssue(
                    code="BAND_OUT_OF_RANGE",
                    severity="warning",
                    message=f'Band "{band.label}" max value ({band.max}) exceeds 100',
                    band_id=band.id,
                ))

        for band, other in find_overlaps(bands):
            start, end = max(band.min, other.min), min(band.max, other.max)
            issues.append(ValidationIssue(
                code="BAND_OVERLAP",
                severity="error",
                message=f'Bands "{other.label}" and "{band.label}" overlap in range {start:g}-{end:g}',
                band_id=other.id,
                details={
                    "band_set": context,
                    "band1": other.id,
                    "band2": band.id,
                    "overlap": [start, end],
                },
            ))
    return issues


def _check_band_coverage(config: ScoreConfiguration) -> list[ValidationIssue]:
    """The overall 0-100 band-set should leave no whole-number score unbanded."""
    issues: list[ValidationIssue] = []
    bands = [b for b in overall_band_set(config) if b.category is None]
    if not bands:
        return issues

    covered_to = 0.0
    for band in sorted(bands, key=lambda b: b.min):
        if band.min > covered_to:
            issues.append(ValidationIssue(
                code="BAND_GAP",
                severity="error",
                message=f"Score range {covered_to:g}-{band.min - 1:g} has no assigned band",
                details={"gap_start": covered_to, "gap_end": band.min - 1},
            ))
        covered_to = max(covered_to, band.max + 1)
    if covered_to <= 100:
        issues.append(ValidationIssue(
            code="BAND_GAP",
            severity="error",
            message=f"Score range {covered_to:g}-100 has no assigned band",
            details={"gap_start": covered_to, "gap_end": 100},
        ))
    return issues


def _check_categories(
    questions: Sequence[Question], config: ScoreConfiguration
) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    category_ids = set(config.category_ids)
    usage: dict[str, int] = {cid: 0 for cid in config.category_ids}

    for q in questions:
        if not q.scoring_category:
            continue
        if category_ids and q.scoring_category not in category_ids:
            issues.append(ValidationIssue(
                code="INVALID_CATEGORY_REF",
                severity="error",
                message=f'Question references non-existent category "{q.scoring_category}"',
                question_id=q.id,
                category_id=q.scoring_category,
            ))
            continue
        option_scored = has_option_scores(q)
        if not option_scored and q.type not in SCORABLE_TYPES:
            issues.append(ValidationIssue(
                code="UNSCORED_TYPE_IN_CATEGORY",
                severity="warning",
                message=f"{q.type} questions carry no points but one is assigned to a category",
                question_id=q.id,
                category_id=q.scoring_category,
            ))
            continue
        if q.scoring_category in usage:
            usage[q.scoring_category] += 1

        if not option_scored and q.type == "multiple_choice" and q.options and not any(
            opt[:1].isdigit() for opt in q.options
        ):
            issues.append(ValidationIssue(
                code="ORDINAL_FALLBACK",
                severity="info",
                message="Options have no leading number; points follow option order",
                question_id=q.id,
            ))

    for cat in config.categories:
        if usage.get(cat.id, 0) == 0:
            issues.append(ValidationIssue(
                code="UNUSED_CATEGORY",
                severity="warning",
                message=f'Category "{cat.name or cat.id}" is defined but no questions are assigned to it',
                category_id=cat.id,
            ))
    return issues


def _check_weights(questions: Sequence[Question]) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    scorable = [
        q for q in questions
        if q.scoring_category and (q.type in SCORABLE_TYPES or has_option_scores(q))
    ]
    # Too few questions to call anything an imbalance
    if len(scorable) < 3:
        return issues

    weights = [q.weight for q in scorable]
    total = sum(weights)
    if total > 0:
        for q in scorable:
            share = q.weight / total * 100
            if share > 50:
                issues.append(ValidationIssue(
                    code="WEIGHT_IMBALANCE",
                    severity="warning",
                    message=f"Question has {share:.0f}% of total weight ({q.weight:g} of {total:g})",
                    question_id=q.id,
                    details={"weight": q.weight, "total_weight": total, "percentage": share},
                ))

    low, high = min(weights), max(weights)
    if low > 0 and high > low * 5:
        issues.append(ValidationIssue(
            code="EXTREME_WEIGHT_VARIANCE",
            severity="info",
            message=f"Weight variance is high: max weight ({high:g}) is {high / low:.1f}x the min weight ({low:g})",
            details={"max_weight": high, "min_weight": low, "ratio": high / low},
        ))
    return issues


# ---------------------------------------------------------------------------
# Logic lint
# ---------------------------------------------------------------------------

def validate_survey_logic(questions: Sequence[Question]) -> list[ValidationIssue]:
    """Pre-publish checks over every question's logic rules."""
    issues: list[ValidationIssue] = []
    order = {q.id: idx for idx, q in enumerate(questions)}
    seen_rule_ids: set[str] = set()

    for q in questions:
        by_condition: dict[str, list[LogicRule]] = defaultdict(list)

        for rule in q.logic_rules:
            if rule.id in seen_rule_ids:
                issues.append(ValidationIssue(
                    code="DUPLICATE_RULE_ID",
                    severity="error",
                    message=f'Rule id "{rule.id}" is used more than once',
                    question_id=q.id,
                    rule_id=rule.id,
                ))
            seen_rule_ids.add(rule.id)
            by_condition[rule.condition.strip()].append(rule)

            issues += _check_condition(q, rule, order)
            issues += _check_target(q, rule, order)

        for condition, rules in by_condition.items():
            targets = {r.target_question_id if r.action != "end" else "__END__" for r in rules}
            if len(rules) > 1 and len(targets) > 1:
                issues.append(ValidationIssue(
                    code="CONFLICTING_RULES",
                    severity="warning",
                    message=f'Multiple rules with same condition "{condition}" have different targets',
                    question_id=q.id,
                    details={"condition": condition, "rule_ids": [r.id for r in rules]},
                ))
    return issues


def _check_condition(q: Question, rule: LogicRule, order: dict[str, int]) -> list[ValidationIssue]:
    try:
        parsed = parse_condition(rule.condition)
    except ConditionSyntaxError as exc:
        return [ValidationIssue(
            code="MALFORMED_CONDITION",
            severity="error",
            message=f"Condition cannot be parsed and will never match: {exc}",
            question_id=q.id,
            rule_id=rule.id,
        )]

    return [
        ValidationIssue(
            code="UNKNOWN_CONDITION_REFERENCE",
            severity="error",
            message=f'Condition references non-existent question "{qid}"',
            question_id=q.id,
            rule_id=rule.id,
            details={"referenced_id": qid},
        )
        for qid in parsed.question_ids()
        if qid not in order
    ]


def _check_target(q: Question, rule: LogicRule, order: dict[str, int]) -> list[ValidationIssue]:
    if rule.action == "end":
        return []
    target = rule.target_question_id
    if not target:
        return [ValidationIssue(
            code="MISSING_TARGET",
            severity="error",
            message=f"{rule.action} rule has no target question",
            question_id=q.id,
            rule_id=rule.id,
        )]
    if target not in order:
        return [ValidationIssue(
            code="MISSING_TARGET",
            severity="error",
            message=f'Rule targets non-existent question "{target}"',
            question_id=q.id,
            rule_id=rule.id,
            details={"target_id": target},
        )]
    if target == q.id:
        return [ValidationIssue(
            code="SELF_TARGET",
            severity="warning",
            message="Rule targets its own question",
            question_id=q.id,
            rule_id=rule.id,
        )]
    if order[target] < order[q.id]:
        return [ValidationIssue(
            code="BACKWARDS_JUMP",
            severity="warning",
            message=f'Rule jumps backwards from "{q.id}" to "{target}" which could create a loop',
            question_id=q.id,
            rule_id=rule.id,
            details={"target_id": target},
        )]
    return []


def summarize_issues(issues: Sequence[ValidationIssue]) -> dict[str, int | bool]:
    """Counts per severity and an overall ``is_valid`` (no errors)."""
    counts = {"error": 0, "warning": 0, "info": 0}
    for issue in issues:
        counts[issue.severity] += 1
    return {
        "error_count": counts["error"],
        "warning_count": counts["warning"],
        "info_count": counts["info"],
        "is_valid": counts["error"] == 0,
    }
