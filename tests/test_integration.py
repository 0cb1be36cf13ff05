"""Integration tests: full pipeline from text to reordered, re-parsed text."""

from collections import Counter

from expredit import ExpressionFragment, ReorderEngine, ReorderSession, parse, try_parse


class TestReorderPipeline:
    """Test the full parse → candidates → move → commit → reparse pipeline."""

    def test_every_candidate_reparses_to_itself(self):
        tree = parse("2*x+3*y+4*z+(7+6*z)")
        engine = ReorderEngine()

        for focused in tree.walk():
            for candidate in engine.candidates(focused):
                # Splice each candidate into a copy of the whole expression
                whole = tree.deep_copy_with_handles()
                target = whole.node_at(focused.parent.child_path())
                engine.splice(target, candidate)
                outcome = try_parse(whole.to_flat_string())
                assert outcome.ok
                assert outcome.tree == whole

    def test_moves_preserve_leaf_multiset(self):
        session = ReorderSession("2*x+3*y+4*z+(7+6*z)")
        leaves = Counter(n.literal for n in session.root.walk() if n.is_leaf)

        session.select_path((3, 0, 1))
        session.move_to(0)
        session.commit()
        session.select(2)
        session.move_to(0)
        text = session.commit()

        assert text == "4*z+2*x+3*y+(6*z+7)"
        assert Counter(n.literal for n in parse(text).walk() if n.is_leaf) == leaves
        assert session.history == ["2*x+3*y+4*z+(6*z+7)", text]

    def test_all_placements_of_each_term(self):
        """Moving each term to every slot yields k distinct orderings per term."""
        text = "a+b+c"
        seen = set()
        for index in range(3):
            for position in range(3):
                session = ReorderSession(text)
                session.select(index)
                session.move_to(position)
                seen.add(session.commit())
        # Identity plus every single-element rotation of three terms
        assert seen == {"a+b+c", "b+a+c", "b+c+a", "c+a+b", "a+c+b"}

    def test_dict_round_trip_of_committed_tree(self):
        session = ReorderSession("(1+2)*x+y")
        session.select_path((0, 0, 0, 1))
        session.move_to(0)
        session.commit()
        rebuilt = ExpressionFragment.from_dict(session.root.to_dict())
        assert rebuilt == session.root
        assert rebuilt.to_flat_string() == "(2+1)*x+y"
