"""Example usage of the preference engine."""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from stock_match.data import Candidate, WordVectorEmbedder
from stock_match.features import CandidateFeatureEngine
from stock_match.ranking import SessionController


CANDIDATES = [
    Candidate('AAPL', 189.5, 2.9e12, 29.1, 'Technology', 0.24, 'Medium',
              'Designs consumer electronics, software and services.'),
    Candidate('XOM', 104.2, 4.1e11, 12.3, 'Energy', 0.28, 'Medium',
              'Explores for and produces crude oil and natural gas.'),
    Candidate('JNJ', 152.8, 3.7e11, 15.4, 'Healthcare', 0.15, 'Low',
              'Develops pharmaceuticals and medical devices.'),
    Candidate('NVDA', 875.3, 2.2e12, 71.8, 'Technology', 0.52, 'High',
              'Designs graphics processors and software for AI.'),
    Candidate('CVX', 155.1, 2.9e11, 13.9, 'Energy', 0.26, 'Medium',
              'Integrated energy company producing oil and gas.'),
]

# Toy 3-dimensional vectors standing in for real word embeddings
VECTORS = {
    'software': [1.0, 0.0, 0.0],
    'processors': [0.9, 0.1, 0.0],
    'oil': [0.0, 1.0, 0.0],
    'gas': [0.0, 0.9, 0.1],
    'pharmaceuticals': [0.0, 0.0, 1.0],
}


def example_1_features():
    """Example 1: Building the feature matrix."""
    print("=" * 80)
    print("Example 1: Feature matrix")
    print("=" * 80)
    
    engine = CandidateFeatureEngine(embedder=WordVectorEmbedder(VECTORS, dimension=3))
    frame = engine.build_feature_frame(CANDIDATES)
    print(frame.round(3).to_string())
    
    print("\n✓ Example 1 complete\n")


def example_2_greedy_session():
    """Example 2: A greedy session that always likes technology."""
    print("=" * 80)
    print("Example 2: Greedy session")
    print("=" * 80)
    
    engine = CandidateFeatureEngine(embedder=WordVectorEmbedder(VECTORS, dimension=3))
    session = SessionController(
        feature_engine=engine,
        mode='greedy',
        swipe_budget=3,
        recommendation_count=2
    )
    session.start(CANDIDATES)
    
    while session.current_candidate is not None:
        candidate = session.current_candidate
        liked = candidate.sector == 'Technology'
        print(f"  {candidate.ticker:<6} {'like' if liked else 'dislike'}")
        session.submit_feedback(liked)
    
    print("\nRecommendations:")
    for candidate in session.recommendations:
        print(f"  {candidate.ticker} ({candidate.sector})")
    
    print("\nScores:")
    print(session.score_table().round(3).to_string())
    
    print("\n✓ Example 2 complete\n")


if __name__ == '__main__':
    example_1_features()
    example_2_greedy_session()
