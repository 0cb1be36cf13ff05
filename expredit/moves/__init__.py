from expredit.moves.engine import CandidateTree, ReorderEngine, generate_candidate_trees

__all__ = ["CandidateTree", "ReorderEngine", "generate_candidate_trees"]
