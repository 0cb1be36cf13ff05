"""Parse arithmetic text into flattened ExpressionFragment trees.

Grammar (resolved procedurally, not by a generated parser):
    E := A | X
    A := A '+' M | M
    M := M '*' M | X
    X := '(' E ')' | L
    L := [0-9]+ | [a-z]

Precedence comes from split order: a fragment is split at its first top-level
'+' before any '*' is considered, so additions end up as the outer nodes.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from expredit.core.errors import (
    EmptyFragment, EmptyGroup, InvalidLiteral, ParseError, ParseErrorKind,
    UnbalancedParentheses,
)
from expredit.core.fragment import LITERAL_RE, OPERATORS, CompoundType, ExpressionFragment

log = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")

_SPLIT_ORDER = (
    ("+", CompoundType.ADDITIVE),
    ("*", CompoundType.MULTIPLICATIVE),
)


def _balanced(text: str, start: int, end: int) -> bool:
    """Equal counts of '(' and ')' in text[start:end]."""
    segment = text[start:end]
    return segment.count("(") == segment.count(")")


def _matching_close(text: str) -> int:
    """Index of the ')' closing the '(' at text[0], or -1."""
    opened, closed = 1, 0
    for i in range(1, len(text)):
        if text[i] == "(":
            opened += 1
        elif text[i] == ")":
            closed += 1
        if opened == closed:
            return i
    return -1


def _top_level_operators(text: str) -> list[int]:
    """Indices of '+' and '*' whose prefix has balanced parentheses."""
    indices: list[int] = []
    opened = closed = 0
    for i, ch in enumerate(text):
        if ch in "+*" and opened == closed:
            indices.append(i)
        elif ch == "(":
            opened += 1
        elif ch == ")":
            closed += 1
    return indices


def _split_point(text: str) -> tuple[int, CompoundType] | None:
    candidates = _top_level_operators(text)
    for symbol, kind in _SPLIT_ORDER:
        for index in candidates:
            if text[index] == symbol:
                return index, kind
    return None


class ExpressionParser:
    """Stateless recursive-descent parser.

    Usage:
        tree = ExpressionParser().parse("2*x + (3+y)")
    """

    def parse(self, text: str) -> ExpressionFragment:
        """Parse text into a flattened tree or raise a ParseError subclass."""
        source = _WHITESPACE_RE.sub("", text)
        if not source:
            raise EmptyFragment("empty fragment")

        # Reject unbalanced input before any structural work
        if not _balanced(source, 0, len(source)):
            raise UnbalancedParentheses(f"unbalanced parentheses in {source!r}")

        tree = self._parse_fragment(source)
        tree.flatten()

        if tree.is_empty():
            raise EmptyGroup("empty expression")

        log.debug("Parsed %r into %d nodes", source, tree.size())
        return tree

    def _parse_fragment(self, text: str) -> ExpressionFragment:
        if not text:
            raise EmptyFragment("empty fragment")

        if text[0] == "(":
            close = _matching_close(text)
            if close == len(text) - 1:
                inner = text[1:close]
                if not inner:
                    raise EmptyGroup("empty parenthesis group")
                group = ExpressionFragment(CompoundType.PARENTHETICAL)
                group.add_child(self._parse_fragment(inner))
                return group
            if close == 1:
                raise EmptyGroup("empty parenthesis group")

        split = _split_point(text)
        if split is None:
            if not LITERAL_RE.fullmatch(text):
                raise InvalidLiteral(f'invalid literal "{text}"')
            return ExpressionFragment.of_literal(text)

        # Splitting at every top-level occurrence at once gives the same tree
        # as repeated binary splits after flatten, without one level per term
        _, kind = split
        symbol = OPERATORS[kind]
        bounds = [-1] + [i for i in _top_level_operators(text) if text[i] == symbol] + [len(text)]
        log.debug("Splitting %r into %d %s operands", text, len(bounds) - 1, kind.value)
        node = ExpressionFragment(kind)
        for start, end in zip(bounds, bounds[1:]):
            node.add_child(self._parse_fragment(text[start + 1:end]))
        return node


@dataclass(frozen=True)
class ParseOutcome:
    """Explicit result of a parse attempt: exactly one of tree/error is set."""

    text: str
    tree: ExpressionFragment | None = None
    error: ParseError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> ParseErrorKind | None:
        return self.error.kind if self.error is not None else None

    @property
    def message(self) -> str:
        return self.error.message if self.error is not None else ""


def parse(text: str) -> ExpressionFragment:
    """Parse text with a fresh ExpressionParser."""
    return ExpressionParser().parse(text)


def try_parse(text: str) -> ParseOutcome:
    """Parse without raising for bad input; the failure is in the outcome."""
    try:
        tree = parse(text)
    except ParseError as exc:
        log.debug("Rejected %r: %s (%s)", text, exc.message, exc.kind.value)
        return ParseOutcome(text=text, error=exc)
    return ParseOutcome(text=text, tree=tree)
