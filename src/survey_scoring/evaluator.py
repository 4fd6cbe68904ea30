"""LogicEvaluator — evaluates skip/branch rules against in-progress answers.

The survey runtime calls :meth:`LogicEvaluator.evaluate_rules` (or the
module-level :func:`evaluate_logic_rules`) after each answer to decide
whether to show, skip to, or end at a question:

  - rules are evaluated in list order; the first rule whose condition holds
    wins and later rules are not evaluated
  - a rule that never matches is not an error; the result is empty
  - a malformed condition evaluates to False (logged), so one bad rule
    cannot halt the respondent flow

Conditions are parsed by :mod:`survey_scoring.expression`; this module only
interprets the parsed clauses.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Mapping, Sequence

from survey_scoring.expression import (
    AnswerComparison,
    Condition,
    ConditionSyntaxError,
    ContainsCheck,
    parse_condition,
)
from survey_scoring.models.question import LogicRule
from survey_scoring.models.results import LogicEvaluationContext, LogicResult

logger = logging.getLogger(__name__)

_DELIMITERS = re.compile(r"[,;]")


class LogicEvaluator:
    """Evaluates logic rules and conditions against a snapshot of answers."""

    def evaluate_rules(
        self,
        rules: Sequence[LogicRule] | None,
        context: LogicEvaluationContext,
    ) -> LogicResult:
        """Return the first matching rule with its action and next question.

        ``next_question_id`` is the rule's target for ``show`` / ``skip``
        actions and None for ``end``.  No match returns an empty result.
        """
        if not rules:
            return LogicResult()

        for rule in rules:
            if self.evaluate(rule.condition, context.answers):
                next_qid = rule.target_question_id if rule.action in ("show", "skip") else None
                logger.debug("rule %s matched: %s -> %s", rule.id, rule.action, next_qid)
                return LogicResult(
                    matched_rule=rule,
                    action=rule.action,
                    next_question_id=next_qid,
                )
        return LogicResult()

    def evaluate(self, condition: str | Condition | None, answers: Mapping[str, Any]) -> bool:
        """Evaluate one condition; malformed or empty conditions are False."""
        if not condition:
            return False
        if isinstance(condition, str):
            try:
                condition = parse_condition(condition)
            except ConditionSyntaxError as exc:
                logger.warning("Malformed logic condition treated as false: %s", exc)
                return False

        # OR across groups, AND within a group
        return any(
            all(self._eval_clause(clause, answers) for clause in group.clauses)
            for group in condition.groups
        )

    # ------------------------------------------------------------------
    # Clause evaluation
    # ------------------------------------------------------------------

    def _eval_clause(self, clause: AnswerComparison | ContainsCheck, answers: Mapping[str, Any]) -> bool:
        answer = answers.get(clause.question_id)
        if answer is None:
            return False
        if isinstance(clause, ContainsCheck):
            return self._contains(answer, clause.value)
        return self._compare(clause, answer)

    @staticmethod
    def _contains(answer: Any, value: str) -> bool:
        """Element membership for list answers or delimited string answers."""
        target = value.strip()
        if isinstance(answer, (list, tuple)):
            return any(str(item).strip() == target for item in answer)
        if isinstance(answer, str):
            if answer.strip() == target:
                return True
            return any(part.strip() == target for part in _DELIMITERS.split(answer))
        return False

    @staticmethod
    def _compare(clause: AnswerComparison, answer: Any) -> bool:
        """Apply a comparison operator to an answer.

        Numeric literals coerce the answer to a number (non-numeric answers
        never match).  String literals only support ``==``, compared
        case-sensitively after trimming.
        """
        op = clause.op
        literal = clause.literal

        if literal.is_number:
            ans_num = _as_number(answer)
            if ans_num is None:
                return False
            target = literal.number
            if op == "==":
                return ans_num == target
            if op == ">=":
                return ans_num >= target
            if op == ">":
                return ans_num > target
            if op == "<=":
                return ans_num <= target
            if op == "<":
                return ans_num < target
            logger.warning("Unknown comparison operator: %s", op)
            return False

        if op != "==":
            return False
        return _as_text(answer) == literal.text.strip()


def _as_number(answer: Any) -> float | None:
    if isinstance(answer, (list, tuple)):
        if len(answer) != 1:
            return None
        answer = answer[0]
    if isinstance(answer, bool):
        return None
    if isinstance(answer, (int, float)):
        value = float(answer)
    else:
        try:
            value = float(str(answer).strip())
        except ValueError:
            return None
    return value if math.isfinite(value) else None


def _as_text(answer: Any) -> str:
    if isinstance(answer, (list, tuple)):
        return ",".join(str(item).strip() for item in answer)
    return str(answer).strip()


# Shared stateless instance for the functional API.
_default_evaluator = LogicEvaluator()


def evaluate_condition(condition: str, answers: Mapping[str, Any]) -> bool:
    """Evaluate one condition string against ``answers``."""
    return _default_evaluator.evaluate(condition, answers)


def evaluate_logic_rules(
    rules: Sequence[LogicRule] | None,
    context: LogicEvaluationContext,
) -> LogicResult:
    """Evaluate ``rules`` in order and return the first match (or an empty result)."""
    return _default_evaluator.evaluate_rules(rules, context)
