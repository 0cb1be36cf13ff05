"""Headless reorder session: the editor's state machine without any widgets.

A session owns one canonical tree, a focused node inside it, and the
history of committed expressions. Every node carries an integer handle so
that the focus can follow a fragment across candidate trees, which are
copies of the original nodes.
"""

from __future__ import annotations

import itertools
import logging
from typing import Sequence

from expredit.config import EditorConfig
from expredit.core.fragment import ExpressionFragment
from expredit.core.parser import parse
from expredit.moves.engine import CandidateTree, ReorderEngine

log = logging.getLogger(__name__)


class ReorderSession:
    """Select a sub-expression, preview its placements, move it, commit.

    Usage:
        session = ReorderSession("2*x+3*y+4*z")
        session.select(2)
        session.move_to(0)
        session.commit()   # "4*z+2*x+3*y"
    """

    def __init__(self, source: str | ExpressionFragment, config: EditorConfig | None = None):
        self.config = config or EditorConfig()
        self.engine = ReorderEngine()
        self.history: list[str] = []
        self._handles = itertools.count(1)

        if isinstance(source, ExpressionFragment):
            root = source.deep_copy().flatten()
        else:
            root = parse(source)
        self._load(root)

    def _load(self, root: ExpressionFragment) -> None:
        for node in root.walk():
            node.handle = next(self._handles)
        self.root = root
        self.focus = root

    @property
    def text(self) -> str:
        return self.root.to_flat_string()

    @property
    def focus_path(self) -> tuple[int, ...]:
        return self.focus.child_path()

    # --- focus ---

    def select(self, index: int) -> ExpressionFragment:
        """Focus the index-th child of the current focus."""
        children = self.focus.children
        if not 0 <= index < len(children):
            raise IndexError(
                f"Focused {self.focus.kind.value} node has {len(children)} children, no index {index}"
            )
        self.focus = children[index]
        return self.focus

    def select_path(self, path: Sequence[int]) -> ExpressionFragment:
        self.focus = self.root.node_at(path)
        return self.focus

    def reset(self) -> None:
        self.focus = self.root

    # --- reordering ---

    def candidates(self) -> list[CandidateTree]:
        return self.engine.candidates(self.focus)

    def preview(self, position: int) -> CandidateTree:
        """The candidate placing the focus at position, without applying it."""
        candidates = self.candidates()
        if not candidates:
            log.warning("Preview requested with the root focused; nothing can move")
            raise LookupError("The root expression has no siblings to move among")
        if not 0 <= position < len(candidates):
            raise IndexError(f"Position {position} outside 0..{len(candidates) - 1}")
        return candidates[position]

    def move_to(self, position: int) -> ExpressionFragment:
        """Apply the candidate at position and keep the moved fragment focused."""
        candidate = self.preview(position)
        target = self.focus.parent
        if target is None:
            raise LookupError("The root expression has no siblings to move among")

        self.engine.splice(target, candidate)
        moved = target.find_by_handle(candidate.moved.handle)
        if moved is None:
            raise LookupError("Moved fragment lost its handle during splice")
        self.focus = moved

        log.debug("Moved fragment to position %d: %s", position, self.text)
        return self.root

    def commit(self) -> str:
        """Serialize the current tree, re-parse it if configured, and reset focus."""
        text = self.root.to_flat_string()
        if self.config.reparse_on_commit:
            self._load(parse(text))
        else:
            self.focus = self.root
        self.history.append(text)
        return text
