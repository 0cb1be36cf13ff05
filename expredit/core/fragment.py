"""Expression tree nodes for the reorderable arithmetic editor.

One node class covers every kind of sub-expression; the differences are
carried by its CompoundType rather than by subclasses.
"""

from __future__ import annotations

import re
import weakref
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Sequence

from expredit.core.errors import InvalidFragment

LITERAL_RE = re.compile(r"[0-9]+|[a-z]")


class CompoundType(str, Enum):
    ADDITIVE = "ADDITIVE"
    MULTIPLICATIVE = "MULTIPLICATIVE"
    PARENTHETICAL = "PARENTHETICAL"
    LITERAL = "LITERAL"


# Kinds whose same-kind children are merged by flatten().
OPERATORS: dict[CompoundType, str] = {
    CompoundType.ADDITIVE: "+",
    CompoundType.MULTIPLICATIVE: "*",
}

_MARKERS: dict[CompoundType, str] = {
    CompoundType.ADDITIVE: "+",
    CompoundType.MULTIPLICATIVE: "*",
    CompoundType.PARENTHETICAL: "()",
}


@dataclass(eq=False, repr=False)
class ExpressionFragment:
    """A node of the expression tree.

    kind: fixed at construction
    literal: digits or a single lowercase letter, only for LITERAL nodes
    children: owned sub-expressions, in order
    handle: opaque display handle owned by the editor, never compared
    """

    kind: CompoundType
    literal: str | None = None
    children: list[ExpressionFragment] = field(default_factory=list)
    handle: Any = None
    _parent: weakref.ReferenceType | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        self.kind = CompoundType(self.kind)
        if self.kind == CompoundType.LITERAL:
            if not isinstance(self.literal, str) or not LITERAL_RE.fullmatch(self.literal):
                raise InvalidFragment(f"Invalid literal text: {self.literal!r}")
            if self.children:
                raise InvalidFragment("Literal fragments cannot have children")
        elif self.literal is not None:
            raise InvalidFragment(f"Only literal fragments carry text, got {self.kind.value}")
        self.set_children(self.children)

    @classmethod
    def of_literal(cls, text: str) -> ExpressionFragment:
        return cls(CompoundType.LITERAL, text)

    @classmethod
    def compound(cls, kind: CompoundType, children: Sequence[ExpressionFragment]) -> ExpressionFragment:
        return cls(kind, children=list(children))

    # --- structure ---

    @property
    def parent(self) -> ExpressionFragment | None:
        return self._parent() if self._parent is not None else None

    @property
    def root(self) -> ExpressionFragment:
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    @property
    def is_leaf(self) -> bool:
        return self.kind == CompoundType.LITERAL

    def is_empty(self) -> bool:
        """A parenthetical that never received its child."""
        return self.kind == CompoundType.PARENTHETICAL and not self.children

    def add_child(self, child: ExpressionFragment) -> None:
        if self.kind == CompoundType.LITERAL:
            raise InvalidFragment("Literal fragments cannot have children")
        child._parent = weakref.ref(self)
        self.children.append(child)

    def set_children(self, children: Sequence[ExpressionFragment]) -> None:
        """Replace the child list and repoint every child at this node."""
        if children and self.kind == CompoundType.LITERAL:
            raise InvalidFragment("Literal fragments cannot have children")
        self.children = list(children)
        for child in self.children:
            child._parent = weakref.ref(self)

    def index_in_parent(self) -> int:
        """Position among the parent's children, by identity."""
        parent = self.parent
        if parent is None:
            raise LookupError("Root fragment has no parent")
        for i, sibling in enumerate(parent.children):
            if sibling is self:
                return i
        raise LookupError("Fragment is detached from its recorded parent")

    def child_path(self) -> tuple[int, ...]:
        """Child indices leading from the root down to this node."""
        path: list[int] = []
        node = self
        while node.parent is not None:
            path.append(node.index_in_parent())
            node = node.parent
        return tuple(reversed(path))

    def node_at(self, path: Sequence[int]) -> ExpressionFragment:
        node = self
        for depth, index in enumerate(path):
            if not 0 <= index < len(node.children):
                raise IndexError(
                    f"No child {index} at depth {depth} (node has {len(node.children)})"
                )
            node = node.children[index]
        return node

    def walk(self) -> Iterator[ExpressionFragment]:
        """Yield every node of the subtree in pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def contains(self, other: ExpressionFragment) -> bool:
        return any(node is other for node in self.walk())

    def find_by_handle(self, handle: Any) -> ExpressionFragment | None:
        if handle is None:
            return None
        for node in self.walk():
            if node.handle == handle:
                return node
        return None

    def size(self) -> int:
        return 1 + sum(child.size() for child in self.children)

    # --- canonicalization ---

    def flatten(self) -> ExpressionFragment:
        """Merge same-kind operator chains into n-ary nodes, bottom-up.

        Modifies the tree in place and returns self. Parentheticals are
        flattened inside but never merged into their parent.
        """
        for child in self.children:
            child.flatten()

        if self.kind in OPERATORS:
            merged: list[ExpressionFragment] = []
            for child in self.children:
                if child.kind == self.kind:
                    merged.extend(child.children)
                else:
                    merged.append(child)
            self.set_children(merged)
        return self

    def is_flat(self) -> bool:
        return not any(
            node.kind in OPERATORS and any(c.kind == node.kind for c in node.children)
            for node in self.walk()
        )

    # --- copying ---

    def deep_copy(self) -> ExpressionFragment:
        """Independent copy of the subtree without display handles."""
        return self._copy(keep_handles=False)

    def deep_copy_with_handles(self) -> ExpressionFragment:
        """Independent copy that keeps each node's display handle."""
        return self._copy(keep_handles=True)

    def _copy(self, keep_handles: bool) -> ExpressionFragment:
        copy = ExpressionFragment(
            self.kind,
            self.literal,
            handle=self.handle if keep_handles else None,
        )
        for child in self.children:
            copy.add_child(child._copy(keep_handles))
        return copy

    # --- serialization ---

    @property
    def marker(self) -> str:
        if self.kind == CompoundType.LITERAL:
            return self.literal or ""
        return _MARKERS[self.kind]

    def to_indented_string(self, indent: int = 0) -> str:
        """One line per node, pre-order, each prefixed by a tab per depth level."""
        lines: list[str] = []
        self._indented_lines(indent, lines)
        return "".join(lines)

    def _indented_lines(self, indent: int, lines: list[str]) -> None:
        lines.append("\t" * indent + self.marker + "\n")
        for child in self.children:
            child._indented_lines(indent + 1, lines)

    def to_flat_string(self) -> str:
        """Infix text that parses back into an equal tree."""
        if self.kind == CompoundType.LITERAL:
            return self.literal or ""
        if self.kind == CompoundType.PARENTHETICAL:
            inner = self.children[0].to_flat_string() if self.children else ""
            return f"({inner})"
        return OPERATORS[self.kind].join(child.to_flat_string() for child in self.children)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": self.kind.value}
        if self.literal is not None:
            data["literal"] = self.literal
        data["children"] = [child.to_dict() for child in self.children]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExpressionFragment:
        """Rebuild a tree from its to_dict() form, validating as it goes."""
        try:
            kind = CompoundType(data["kind"])
        except (KeyError, ValueError) as exc:
            raise InvalidFragment(f"Bad fragment kind in {data!r}") from exc
        children = [cls.from_dict(child) for child in data.get("children", [])]
        return cls(kind, data.get("literal"), children=children)

    # --- comparison ---

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, ExpressionFragment):
            return NotImplemented
        return (
            self.kind == other.kind
            and self.literal == other.literal
            and self.children == other.children
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{self.kind.value}[{self.to_flat_string()}]"
