"""Shared fixtures for the test suite."""

import pytest

from stock_match.data import Candidate, WordVectorEmbedder
from stock_match.features import CandidateFeatureEngine

_DIM = 3

_VECTORS = {
    'oil': [1.0, 0.0, 0.0],
    'gas': [0.0, 1.0, 0.0],
    'chips': [0.0, 0.0, 1.0],
    'software': [0.5, 0.5, 0.0],
}


@pytest.fixture
def make_candidate():
    """Factory for candidates with sensible defaults."""
    def _make(ticker="AAA", **overrides):
        fields = dict(
            ticker=ticker,
            price=100.0,
            market_cap=1e9,
            pe_ratio=15.0,
            sector="Technology",
            volatility=0.2,
            volatility_category="Low",
            summary="",
        )
        fields.update(overrides)
        return Candidate(**fields)
    return _make


@pytest.fixture
def word_vectors():
    """Toy 3-d word vectors shared by the feature tests."""
    return dict(_VECTORS)


@pytest.fixture
def embedding_dim():
    return _DIM


@pytest.fixture
def embedder(word_vectors, embedding_dim):
    return WordVectorEmbedder(word_vectors, dimension=embedding_dim)


@pytest.fixture
def engine(embedder):
    return CandidateFeatureEngine(embedder=embedder)
