"""Condition expressions for skip/branch logic: tokenizer and parser.

A condition is one or more clauses joined by ``&&`` / ``||``::

    answer("q1") >= 3
    answer("q1") == "No" && contains("q2", "Missing")
    answer("role") == Manager || answer("tenure") > 5

Clauses:
  - ``answer("qid") <op> <literal>`` with ``<op>`` one of ``== >= > <= <``
  - ``contains("qid", "value")``

The literal of an ``answer()`` comparison is a quoted string, a number, or
the raw text up to the next ``&&`` / ``||`` (``I don't know``, ``R&D``).
A literal that reads as a number is numeric, quoted or not.
``&&`` groups bind first and the groups are then OR-ed, left to right.
Parentheses only appear in the two call forms; there is no grouping.

The operator set is closed: anything else (``!=``, ``!``, ``=``, unknown
function names) is a :class:`ConditionSyntaxError`.  Expressions are never
handed to a general-purpose evaluator.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Iterator, Union

COMPARISON_OPS: frozenset[str] = frozenset({"==", ">=", ">", "<=", "<"})
FUNCTIONS: frozenset[str] = frozenset({"answer", "contains"})


class ConditionSyntaxError(ValueError):
    """Raised when a condition string does not match the grammar."""

    def __init__(self, message: str, condition: str, position: int | None = None) -> None:
        self.condition = condition
        self.position = position
        where = f" at position {position}" if position is not None else ""
        super().__init__(f"{message}{where} in condition {condition!r}")


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Token:
    kind: str  # STRING, WORD, NUMBER, RAW, OP, AND, OR, LPAREN, RPAREN, COMMA
    value: str
    pos: int


_TOKEN_SPEC = [
    ("WS", r"\s+"),
    ("STRING", r'"[^"]*"|\'[^\']*\''),
    ("OP", r"==|>=|<=|>|<"),
    ("AND", r"&&"),
    ("OR", r"\|\|"),
    ("LPAREN", r"\("),
    ("RPAREN", r"\)"),
    ("COMMA", r","),
    ("WORD", r"[^\s()\"',&|<>=!]+"),
]
_TOKEN_RE = re.compile("|".join(f"(?P<{name}>{pattern})" for name, pattern in _TOKEN_SPEC))
_NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)$")
_CONNECTIVE_RE = re.compile(r"&&|\|\|")
_CALL_RE = re.compile(r"\b(?:answer|contains)\s*\(")


def tokenize(condition: str) -> list[Token]:
    """Split a condition string into tokens.

    Raises:
        ConditionSyntaxError: on any character outside the grammar.
    """
    tokens: list[Token] = []
    pos = 0
    while pos < len(condition):
        if tokens and tokens[-1].kind == "OP":
            pos = _comparison_value(condition, pos, tokens)
            continue
        match = _TOKEN_RE.match(condition, pos)
        if match is None:
            raise ConditionSyntaxError(
                f"unexpected character {condition[pos]!r}", condition, pos
            )
        kind = match.lastgroup
        text = match.group()
        if kind == "STRING":
            tokens.append(Token("STRING", text[1:-1], pos))
        elif kind == "WORD":
            tokens.append(Token("NUMBER" if _NUMBER_RE.match(text) else "WORD", text, pos))
        elif kind != "WS":
            tokens.append(Token(kind, text, pos))
        pos = match.end()
    return tokens


def _comparison_value(condition: str, pos: int, tokens: list[Token]) -> int:
    """Read the value after a comparison operator; return the new position.

    The value runs to the next ``&&`` / ``||`` so option labels keep their
    punctuation and inner whitespace.  A quoted value is a STRING token only
    when nothing but whitespace follows it before the connective.
    """
    start = pos
    while start < len(condition) and condition[start].isspace():
        start += 1

    quoted = _TOKEN_RE.match(condition, start)
    if quoted is not None and quoted.lastgroup == "STRING":
        end = _connective_start(condition, quoted.end())
        if not condition[quoted.end():end].strip():
            tokens.append(Token("STRING", quoted.group()[1:-1], start))
            return end

    end = _connective_start(condition, start)
    text = condition[start:end].strip()
    if not text:
        raise ConditionSyntaxError("missing value", condition, start)

    call = _CALL_RE.search(text)
    if call is not None:
        raise ConditionSyntaxError(
            "expected && or || before the next clause", condition, start + call.start()
        )
    tokens.append(Token("NUMBER" if _NUMBER_RE.match(text) else "RAW", text, start))
    return end


def _connective_start(condition: str, pos: int) -> int:
    match = _CONNECTIVE_RE.search(condition, pos)
    return match.start() if match else len(condition)


# ---------------------------------------------------------------------------
# AST
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LiteralValue:
    """Right-hand side of a comparison.  ``number`` is set for numeric literals."""

    text: str
    number: float | None = None

    @property
    def is_number(self) -> bool:
        return self.number is not None


@dataclass(frozen=True)
class AnswerComparison:
    question_id: str
    op: str
    literal: LiteralValue


@dataclass(frozen=True)
class ContainsCheck:
    question_id: str
    value: str


Clause = Union[AnswerComparison, ContainsCheck]


@dataclass(frozen=True)
class AllOf:
    clauses: tuple[Clause, ...]


@dataclass(frozen=True)
class Condition:
    """Parsed condition: true if any ``AllOf`` group has all clauses true."""

    source: str
    groups: tuple[AllOf, ...]

    def clauses(self) -> Iterator[Clause]:
        for group in self.groups:
            yield from group.clauses

    def question_ids(self) -> list[str]:
        """Question ids referenced by the condition, first-seen order."""
        seen: list[str] = []
        for clause in self.clauses():
            if clause.question_id not in seen:
                seen.append(clause.question_id)
        return seen


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

class _Parser:
    """Recursive-descent parser over the token list."""

    def __init__(self, condition: str, tokens: list[Token]) -> None:
        self._source = condition
        self._tokens = tokens
        self._i = 0

    # --- token cursor ---

    def _peek(self) -> Token | None:
        return self._tokens[self._i] if self._i < len(self._tokens) else None

    def _next(self, *kinds: str) -> Token:
        tok = self._peek()
        if tok is None:
            raise ConditionSyntaxError(
                f"unexpected end of condition, expected {' or '.join(kinds)}", self._source
            )
        if kinds and tok.kind not in kinds:
            raise ConditionSyntaxError(
                f"expected {' or '.join(kinds)}, got {tok.value!r}", self._source, tok.pos
            )
        self._i += 1
        return tok

    def _error(self, message: str, tok: Token | None) -> ConditionSyntaxError:
        return ConditionSyntaxError(message, self._source, tok.pos if tok else None)

    # --- grammar ---

    def parse(self) -> Condition:
        if not self._tokens:
            raise ConditionSyntaxError("empty condition", self._source)
        groups = [self._all_of()]
        while (tok := self._peek()) is not None and tok.kind == "OR":
            self._i += 1
            groups.append(self._all_of())
        tok = self._peek()
        if tok is not None:
            raise self._error(f"unexpected {tok.value!r}", tok)
        return Condition(source=self._source, groups=tuple(groups))

    def _all_of(self) -> AllOf:
        clauses = [self._clause()]
        while (tok := self._peek()) is not None and tok.kind == "AND":
            self._i += 1
            clauses.append(self._clause())
        return AllOf(tuple(clauses))

    def _clause(self) -> Clause:
        name = self._next("WORD")
        if name.value not in FUNCTIONS:
            raise self._error(f"unknown function {name.value!r}", name)
        self._next("LPAREN")
        question_id = self._next("STRING").value

        if name.value == "contains":
            self._next("COMMA")
            value = self._contains_value()
            self._next("RPAREN")
            return ContainsCheck(question_id=question_id, value=value)

        self._next("RPAREN")
        op = self._next("OP").value
        tok = self._peek()
        if tok is None or tok.kind not in ("STRING", "NUMBER", "RAW"):
            raise self._error("missing value", tok)
        self._i += 1
        return AnswerComparison(question_id=question_id, op=op, literal=_literal_value(tok.value))

    def _contains_value(self) -> str:
        """A quoted string or a run of bare words."""
        tok = self._peek()
        if tok is None or tok.kind == "RPAREN":
            raise self._error("missing value", tok)
        if tok.kind == "STRING":
            self._i += 1
            return tok.value

        words: list[Token] = []
        while (tok := self._peek()) is not None and tok.kind in ("WORD", "NUMBER"):
            words.append(tok)
            self._i += 1
        if not words:
            raise self._error(f"unexpected {tok.value!r}", tok)
        return " ".join(w.value for w in words)


def _literal_value(text: str) -> LiteralValue:
    """Numeric when the text reads as a finite number, else a string."""
    if _NUMBER_RE.match(text.strip()):
        number = float(text)
        if math.isfinite(number):
            return LiteralValue(text=text, number=number)
    return LiteralValue(text=text)


def parse_condition(condition: str) -> Condition:
    """Parse a condition string into a :class:`Condition`.

    Raises:
        ConditionSyntaxError: if the string does not match the grammar.
    """
    return _Parser(condition, tokenize(condition)).parse()
