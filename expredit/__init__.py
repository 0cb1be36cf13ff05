"""Parse arithmetic expressions into canonical trees and reorder their parts."""

from expredit.core.errors import (
    EmptyFragment, EmptyGroup, FocusedNodeNotFound, InvalidFragment, InvalidLiteral,
    ParseError, ParseErrorKind, UnbalancedParentheses,
)
from expredit.core.fragment import CompoundType, ExpressionFragment
from expredit.core.parser import ExpressionParser, ParseOutcome, parse, try_parse
from expredit.moves.engine import CandidateTree, ReorderEngine, generate_candidate_trees
from expredit.editor.session import ReorderSession

__all__ = [
    "CandidateTree", "CompoundType", "EmptyFragment", "EmptyGroup",
    "ExpressionFragment", "ExpressionParser", "FocusedNodeNotFound",
    "InvalidFragment", "InvalidLiteral", "ParseError", "ParseErrorKind",
    "ParseOutcome", "ReorderEngine", "ReorderSession", "UnbalancedParentheses",
    "generate_candidate_trees", "parse", "try_parse",
]
