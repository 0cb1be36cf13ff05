"""Candidate trees for reordering a sub-expression among its siblings.

A focused fragment is detached from its parent and reinserted at every
position among the remaining siblings. Each placement is one candidate; the
editor picks among them (by pointer geometry, keyboard, ...) and splices the
winner back into the full tree.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from expredit.core.errors import FocusedNodeNotFound
from expredit.core.fragment import ExpressionFragment

log = logging.getLogger(__name__)


def generate_candidate_trees(
    parent: ExpressionFragment, focused_repr: str, focused_index: int | None = None
) -> list[ExpressionFragment]:
    """Every placement of the focused child among its siblings.

    parent: node whose children are being reordered; left untouched
    focused_repr: indented form (indent 0) of the child to move
    focused_index: child index to use when equal siblings make the text
        ambiguous; by default the first matching child is moved

    Returns k+1 copies of parent for k remaining siblings, ordered by the
    insertion index of the focused child. Display handles are kept so the
    editor can reuse its widgets.
    """
    siblings = list(parent.children)
    if focused_index is None:
        focused_index = next(
            (i for i, child in enumerate(siblings) if child.to_indented_string(0) == focused_repr),
            None,
        )
    elif not (
        0 <= focused_index < len(siblings)
        and siblings[focused_index].to_indented_string(0) == focused_repr
    ):
        focused_index = None
    if focused_index is None:
        raise FocusedNodeNotFound(
            f"No child of {parent.kind.value} node matches focused fragment {focused_repr!r}"
        )

    focused = siblings.pop(focused_index)
    candidates: list[ExpressionFragment] = []

    for position in range(len(siblings) + 1):
        ordered = [s.deep_copy_with_handles() for s in siblings]
        ordered.insert(position, focused.deep_copy_with_handles())

        candidate = ExpressionFragment(parent.kind, handle=parent.handle)
        candidate.set_children(ordered)
        candidates.append(candidate)

    log.debug(
        "Generated %d candidates for %s under %s",
        len(candidates), focused.to_flat_string(), parent.kind.value,
    )
    return candidates


@dataclass
class CandidateTree:
    tree: ExpressionFragment
    position: int  # index of the moved fragment among the candidate's children
    moved: ExpressionFragment  # the moved fragment inside tree

    @property
    def flat(self) -> str:
        return self.tree.to_flat_string()


class ReorderEngine:
    """Generates candidates for a focused node and applies the chosen one."""

    def candidates(self, focused: ExpressionFragment) -> list[CandidateTree]:
        """Candidates for moving focused within its parent.

        The root has no siblings to move among, so it yields no candidates.
        """
        parent = focused.parent
        if parent is None:
            return []

        original_index = focused.index_in_parent()
        trees = generate_candidate_trees(parent, focused.to_indented_string(0), original_index)
        results: list[CandidateTree] = []
        for position, tree in enumerate(trees):
            results.append(CandidateTree(
                tree=tree,
                position=position,
                moved=tree.children[position],
            ))

        log.debug(
            "Focused %s at index %d of %d siblings",
            focused.to_flat_string(), original_index, len(parent.children),
        )
        return results

    def splice(self, target: ExpressionFragment, candidate: CandidateTree) -> ExpressionFragment:
        """Replace target's children by the candidate's, in place.

        target must be the node the candidate was generated from (same kind,
        same multiset of children); it keeps its identity and its own parent.
        """
        if target.kind != candidate.tree.kind:
            raise ValueError(
                f"Cannot splice {candidate.tree.kind.value} candidate into {target.kind.value} node"
            )
        if sorted(c.to_indented_string() for c in target.children) != sorted(
            c.to_indented_string() for c in candidate.tree.children
        ):
            raise ValueError("Candidate children do not match the target's children")

        target.set_children([c.deep_copy_with_handles() for c in candidate.tree.children])
        return target
