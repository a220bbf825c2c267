"""Candidate presentation orders for a swipe session."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Optional

from ..models import PreferenceModel
from .ranker import Ranker


class TraversalMode(str, Enum):
    """How the next candidate to present is chosen."""

    SEQUENTIAL = 'sequential'
    GREEDY = 'greedy'


class FinalPool(str, Enum):
    """Which candidates the final recommendations are drawn from."""

    # Every loaded candidate, including ones already swiped
    FULL_CORPUS = 'full_corpus'
    # Only candidates never presented
    REMAINING = 'remaining'


class TraversalStrategy(ABC):
    """Tracks which candidates have been presented and picks the next one."""
    
    mode: TraversalMode
    default_final_pool: FinalPool
    
    def __init__(self, size: int):
        self.size = size
    
    @abstractmethod
    def next_index(self, ranker: Ranker, model: PreferenceModel) -> Optional[int]:
        """Index of the candidate to present next, or None when exhausted."""
        pass
    
    @abstractmethod
    def mark_presented(self, index: int) -> None:
        pass
    
    @abstractmethod
    def remaining(self) -> List[int]:
        """Indices never presented, in load order."""
        pass
    
    @property
    def exhausted(self) -> bool:
        return not self.remaining()


class SequentialTraversal(TraversalStrategy):
    """Presents candidates strictly in load order."""
    
    mode = TraversalMode.SEQUENTIAL
    default_final_pool = FinalPool.FULL_CORPUS
    
    def __init__(self, size: int):
        super().__init__(size)
        self.cursor = 0
    
    def next_index(self, ranker: Ranker, model: PreferenceModel) -> Optional[int]:
        return self.cursor if self.cursor < self.size else None
    
    def mark_presented(self, index: int) -> None:
        if index != self.cursor:
            raise ValueError(f"Expected feedback for index {self.cursor}, got {index}")
        self.cursor += 1
    
    def remaining(self) -> List[int]:
        return list(range(self.cursor, self.size))


class GreedyTraversal(TraversalStrategy):
    """Presents the highest-scoring candidate not yet presented."""
    
    mode = TraversalMode.GREEDY
    default_final_pool = FinalPool.REMAINING
    
    def __init__(self, size: int):
        super().__init__(size)
        self.pool = list(range(size))
    
    def next_index(self, ranker: Ranker, model: PreferenceModel) -> Optional[int]:
        return ranker.best(model, self.pool)
    
    def mark_presented(self, index: int) -> None:
        self.pool.remove(index)
    
    def remaining(self) -> List[int]:
        return list(self.pool)


TRAVERSALS = {
    TraversalMode.SEQUENTIAL: SequentialTraversal,
    TraversalMode.GREEDY: GreedyTraversal,
}


def create_traversal(mode, size: int) -> TraversalStrategy:
    """
    Factory function for traversal strategies.
    
    Args:
        mode: TraversalMode or its string value
        size: Number of candidates in the session
    """
    return TRAVERSALS[TraversalMode(mode)](size)
