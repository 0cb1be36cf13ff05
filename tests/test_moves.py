"""Tests for candidate-tree generation and the reorder engine."""

from collections import Counter

import pytest

from expredit.core.errors import FocusedNodeNotFound
from expredit.core.parser import parse
from expredit.moves.engine import ReorderEngine, generate_candidate_trees


@pytest.fixture
def engine():
    return ReorderEngine()


@pytest.fixture
def example():
    return parse("2*x+3*y+4*z+(7+6*z)")


def _children_multiset(tree):
    return Counter(child.to_indented_string() for child in tree.children)


class TestGenerateCandidateTrees:
    def test_candidate_count_matches_children(self, example):
        focused = example.children[0]
        candidates = generate_candidate_trees(example, focused.to_indented_string())
        assert len(candidates) == len(example.children)

    def test_candidates_in_position_order(self, example):
        candidates = generate_candidate_trees(example, example.children[0].to_indented_string())
        assert [c.to_flat_string() for c in candidates] == [
            "2*x+3*y+4*z+(7+6*z)",
            "3*y+2*x+4*z+(7+6*z)",
            "3*y+4*z+2*x+(7+6*z)",
            "3*y+4*z+(7+6*z)+2*x",
        ]

    def test_moving_last_child(self, example):
        focused = example.children[3]
        candidates = generate_candidate_trees(example, focused.to_indented_string())
        assert candidates[0].to_flat_string() == "(7+6*z)+2*x+3*y+4*z"
        assert candidates[-1] == example

    def test_same_children_multiset(self, example):
        expected = _children_multiset(example)
        for candidate in generate_candidate_trees(example, example.children[2].to_indented_string()):
            assert _children_multiset(candidate) == expected
            assert candidate.kind == example.kind

    def test_parent_left_untouched(self, example):
        before = example.deep_copy()
        generate_candidate_trees(example, example.children[1].to_indented_string())
        assert example == before
        assert all(child.parent is example for child in example.children)

    def test_candidates_share_no_nodes(self, example):
        candidates = generate_candidate_trees(example, example.children[1].to_indented_string())
        original_ids = {id(n) for n in example.walk()}
        seen = set()
        for candidate in candidates:
            ids = {id(n) for n in candidate.walk()}
            assert not ids & original_ids
            assert not ids & seen
            seen |= ids

    def test_candidate_parents_consistent(self, example):
        for candidate in generate_candidate_trees(example, example.children[0].to_indented_string()):
            assert candidate.parent is None
            for n in candidate.walk():
                for child in n.children:
                    assert child.parent is n

    def test_handles_preserved(self, example):
        for i, n in enumerate(example.walk()):
            n.handle = i
        focused = example.children[0]
        candidates = generate_candidate_trees(example, focused.to_indented_string())
        assert candidates[2].children[2].handle == focused.handle
        assert all(c.handle == example.handle for c in candidates)

    def test_single_child_parent(self):
        group = parse("(x)")
        candidates = generate_candidate_trees(group, "x\n")
        assert len(candidates) == 1
        assert candidates[0] == group

    def test_nested_parent(self):
        tree = parse("a*(3+1+2)")
        inner = tree.node_at((1, 0))
        candidates = generate_candidate_trees(inner, "2\n")
        assert [c.to_flat_string() for c in candidates] == ["2+3+1", "3+2+1", "3+1+2"]

    def test_duplicate_siblings_use_first_match(self):
        tree = parse("x+1+x")
        candidates = generate_candidate_trees(tree, "x\n")
        assert [c.to_flat_string() for c in candidates] == ["x+1+x", "1+x+x", "1+x+x"]

    def test_explicit_index_disambiguates(self):
        tree = parse("x+1+x")
        candidates = generate_candidate_trees(tree, "x\n", focused_index=2)
        assert [c.to_flat_string() for c in candidates] == ["x+x+1", "x+x+1", "x+1+x"]

    def test_explicit_index_must_match(self):
        tree = parse("x+1+x")
        with pytest.raises(FocusedNodeNotFound):
            generate_candidate_trees(tree, "x\n", focused_index=1)
        with pytest.raises(FocusedNodeNotFound):
            generate_candidate_trees(tree, "x\n", focused_index=3)

    def test_focused_not_found(self, example):
        with pytest.raises(FocusedNodeNotFound):
            generate_candidate_trees(example, "q\n")

    def test_indented_form_must_match_exactly(self, example):
        # Flat text is not the indented form
        with pytest.raises(FocusedNodeNotFound):
            generate_candidate_trees(example, "2*x")

    def test_not_found_is_not_a_parse_error(self, example):
        with pytest.raises(LookupError):
            generate_candidate_trees(example, "")


class TestReorderEngine:
    def test_candidates_for_child(self, engine, example):
        results = engine.candidates(example.children[1])
        assert len(results) == 4
        assert [r.position for r in results] == [0, 1, 2, 3]
        for r in results:
            assert r.moved.to_flat_string() == "3*y"
            assert r.tree.children[r.position] is r.moved

    def test_root_has_no_candidates(self, engine, example):
        assert engine.candidates(example) == []

    def test_flat_property(self, engine):
        tree = parse("1+2")
        assert [r.flat for r in engine.candidates(tree.children[1])] == ["2+1", "1+2"]

    def test_splice_replaces_children_in_place(self, engine):
        tree = parse("a*(3+1+2)")
        inner = tree.node_at((1, 0))
        chosen = engine.candidates(inner.children[2])[0]
        result = engine.splice(inner, chosen)
        assert result is inner
        assert tree.to_flat_string() == "a*(2+3+1)"
        assert inner.parent is tree.children[1]
        assert all(child.parent is inner for child in inner.children)

    def test_splice_rejects_other_kind(self, engine):
        tree = parse("1+2")
        other = parse("1*2")
        chosen = engine.candidates(other.children[0])[1]
        with pytest.raises(ValueError):
            engine.splice(tree, chosen)

    def test_splice_rejects_other_children(self, engine):
        tree = parse("1+2")
        other = parse("1+3")
        chosen = engine.candidates(other.children[0])[1]
        with pytest.raises(ValueError):
            engine.splice(tree, chosen)
