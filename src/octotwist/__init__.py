"""octotwist package."""

from .core.permutation import ArrayPermutation, SparsePermutation
from .core.puzzle import PuzzleConfig, PuzzleState
from .explorer.random_walk import explore_random

__all__ = ["ArrayPermutation", "SparsePermutation", "PuzzleConfig", "PuzzleState", "explore_random"]
