from expredit.core.errors import ParseError, ParseErrorKind, FocusedNodeNotFound, InvalidFragment
from expredit.core.fragment import CompoundType, ExpressionFragment
from expredit.core.parser import ExpressionParser, ParseOutcome, parse, try_parse

__all__ = [
    "ParseError", "ParseErrorKind", "FocusedNodeNotFound", "InvalidFragment",
    "CompoundType", "ExpressionFragment",
    "ExpressionParser", "ParseOutcome", "parse", "try_parse",
]
