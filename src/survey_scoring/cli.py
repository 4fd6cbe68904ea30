"""Command-line interface for scoring, validating and inspecting surveys.

Usage::

    # List the packaged survey templates
    survey-scoring list

    # Score a response (answers YAML maps question id -> answer)
    survey-scoring score engagement-pulse answers.yaml

    # Run the pre-publish validators on a template or a survey file
    survey-scoring validate path/to/survey.yaml

    # Evaluate one question's logic rules against a response
    survey-scoring logic engagement-pulse answers.yaml --question eng_q2

Every command prints JSON on stdout.  Exit codes: 0 success, 1 validation
failed, 2 bad input (unknown survey, missing or malformed file).
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

import yaml
from pydantic import ValidationError

from survey_scoring.bands import resolve_category_bands, resolve_overall_band
from survey_scoring.config import EngineSettings, load_settings
from survey_scoring.evaluator import evaluate_logic_rules
from survey_scoring.models import LogicEvaluationContext, ScoreBand, SurveyDefinition
from survey_scoring.results_mode import (
    get_results_mode_labels,
    resolve_results_mode,
    should_show_results_screen,
)
from survey_scoring.scoring import calculate_scores, score_survey
from survey_scoring.store import SurveyStore, load_survey, load_yaml
from survey_scoring.validation import (
    summarize_issues,
    validate_results_config,
    validate_score_config,
    validate_survey_logic,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_BAD_INPUT = 2


class CLIError(Exception):
    """Bad command-line input; reported on stderr with exit code 2."""


# ---------------------------------------------------------------------------
# Input helpers
# ---------------------------------------------------------------------------

def resolve_survey(ref: str, settings: EngineSettings) -> SurveyDefinition:
    """A survey file path, or the id of a template in the store."""
    path = Path(ref)
    if path.suffix in (".yaml", ".yml"):
        return load_survey(path)

    store = SurveyStore(settings.templates_dir)
    store.load()
    try:
        return store.get(ref)
    except KeyError:
        raise CLIError(
            f"Unknown survey '{ref}'. Available: {', '.join(store.ids()) or '(none)'}"
        ) from None


def load_answers(path: str) -> dict[str, Any]:
    raw = load_yaml(path)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise CLIError(f"Answers file {path} must map question ids to answers")
    return {str(k): v for k, v in raw.items()}


def _band_payload(band: ScoreBand | None) -> dict[str, Any] | None:
    if band is None:
        return None
    return {"id": band.id, "label": band.label, "interpretation": band.interpretation}


def _emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def cmd_list(args: argparse.Namespace, settings: EngineSettings) -> int:
    store = SurveyStore(settings.templates_dir)
    store.load()
    _emit([
        {
            "id": survey.id,
            "title": survey.title,
            "mode": resolve_results_mode(survey.score_config, survey.scoring_engine_id, survey.tags),
            "questions": len(survey.questions),
        }
        for survey in store.surveys.values()
    ])
    return EXIT_OK


def cmd_score(args: argparse.Namespace, settings: EngineSettings) -> int:
    survey = resolve_survey(args.survey, settings)
    answers = load_answers(args.answers)
    config = survey.score_config

    mode = resolve_results_mode(config, survey.scoring_engine_id, survey.tags)
    engine_id = survey.scoring_engine_id or settings.default_engine_id
    result = score_survey(survey.questions, answers, config, engine_id=engine_id)
    category_bands = resolve_category_bands(result.by_category, config)
    normalized = calculate_scores(survey.questions, answers, config)

    results_enabled = config is not None and config.enabled and (
        config.results_screen is None or config.results_screen.enabled
    )
    _emit({
        "survey_id": survey.id,
        "mode": mode,
        "labels": get_results_mode_labels(mode),
        "show_results_screen": should_show_results_screen(results_enabled, normalized),
        "engine_id": engine_id,
        "total_score": result.total_score,
        "max_score": result.max_score,
        "percentage": round(result.percentage, 2),
        "band": _band_payload(resolve_overall_band(result.percentage, config)),
        "categories": {
            cid: {
                "label": snap.label,
                "score": snap.score,
                "max_score": snap.max_score,
                "percentage": round(snap.percentage, 2),
                "band": _band_payload(category_bands.get(cid)),
            }
            for cid, snap in result.by_category.items()
        },
        "category_scores": (
            [r.model_dump() for r in normalized] if normalized is not None else None
        ),
    })
    return EXIT_OK


def cmd_validate(args: argparse.Namespace, settings: EngineSettings) -> int:
    survey = resolve_survey(args.survey, settings)

    results_check = validate_results_config(survey.score_config)
    issues = validate_score_config(survey.questions, survey.score_config)
    issues += validate_survey_logic(survey.questions)
    summary = summarize_issues(issues)

    valid = results_check.valid and bool(summary["is_valid"])
    _emit({
        "survey_id": survey.id,
        "valid": valid,
        "results_config": results_check.model_dump(),
        "issues": [i.model_dump(exclude_none=True) for i in issues],
        "summary": summary,
    })
    return EXIT_OK if valid else EXIT_INVALID


def cmd_logic(args: argparse.Namespace, settings: EngineSettings) -> int:
    survey = resolve_survey(args.survey, settings)
    answers = load_answers(args.answers)
    try:
        question = survey.question(args.question)
    except KeyError:
        raise CLIError(f"Survey '{survey.id}' has no question '{args.question}'") from None

    context = LogicEvaluationContext(questions=survey.questions, answers=answers)
    result = evaluate_logic_rules(question.logic_rules, context)
    _emit({
        "question_id": question.id,
        "matched": result.matched,
        "rule_id": result.matched_rule.id if result.matched_rule else None,
        "action": result.action,
        "next_question_id": result.next_question_id,
    })
    return EXIT_OK


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="survey-scoring",
        description="Score survey responses, resolve bands and lint survey configuration.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable DEBUG logging on stderr",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="List the packaged survey templates")
    p_list.set_defaults(func=cmd_list)

    p_score = sub.add_parser("score", help="Score a response and resolve its bands")
    p_score.add_argument("survey", help="Template id or path to a survey YAML file")
    p_score.add_argument("answers", help="YAML file mapping question id to answer")
    p_score.set_defaults(func=cmd_score)

    p_validate = sub.add_parser("validate", help="Run the pre-publish validators")
    p_validate.add_argument("survey", help="Template id or path to a survey YAML file")
    p_validate.set_defaults(func=cmd_validate)

    p_logic = sub.add_parser("logic", help="Evaluate one question's logic rules")
    p_logic.add_argument("survey", help="Template id or path to a survey YAML file")
    p_logic.add_argument("answers", help="YAML file mapping question id to answer")
    p_logic.add_argument("--question", required=True, help="Question whose rules to evaluate")
    p_logic.set_defaults(func=cmd_logic)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = load_settings()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        return args.func(args, settings)
    except (CLIError, FileNotFoundError, ValueError, ValidationError, yaml.YAMLError) as exc:
        logger.debug("command failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_BAD_INPUT


if __name__ == "__main__":
    sys.exit(main())
