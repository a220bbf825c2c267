"""Ranking and swipe-session orchestration."""

from .ranker import Ranker
from .session import FeedbackEvent, SessionController, SessionState
from .traversal import (
    FinalPool,
    GreedyTraversal,
    SequentialTraversal,
    TraversalMode,
    TraversalStrategy,
    create_traversal,
)

__all__ = [
    'Ranker',
    'SessionController',
    'SessionState',
    'FeedbackEvent',
    'TraversalMode',
    'FinalPool',
    'TraversalStrategy',
    'SequentialTraversal',
    'GreedyTraversal',
    'create_traversal',
]
