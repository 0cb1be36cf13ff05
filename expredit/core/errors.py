"""Error kinds raised by the parser and the tree model."""

from __future__ import annotations

from enum import Enum


class ParseErrorKind(str, Enum):
    """Every way an input string can fail to parse."""

    UNBALANCED_PARENTHESES = "UNBALANCED_PARENTHESES"
    EMPTY_GROUP = "EMPTY_GROUP"
    EMPTY_FRAGMENT = "EMPTY_FRAGMENT"
    INVALID_LITERAL = "INVALID_LITERAL"


class ParseError(ValueError):
    """Base class for user-input parse failures.

    Parsing never retries: a malformed string fails the same way every time,
    and the caller decides how to surface it.
    """

    kind: ParseErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnbalancedParentheses(ParseError):
    kind = ParseErrorKind.UNBALANCED_PARENTHESES


class EmptyGroup(ParseError):
    kind = ParseErrorKind.EMPTY_GROUP


class EmptyFragment(ParseError):
    kind = ParseErrorKind.EMPTY_FRAGMENT


class InvalidLiteral(ParseError):
    kind = ParseErrorKind.INVALID_LITERAL


class InvalidFragment(ValueError):
    """A tree was assembled in a way the model does not allow."""


class FocusedNodeNotFound(LookupError):
    """The focused sub-expression is not a child of the given parent.

    This signals a broken caller contract, not bad user input.
    """
