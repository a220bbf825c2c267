"""Feature engineering modules."""

from .candidate_features import (
    CandidateFeatureEngine,
    FeatureMatrix,
    FeatureWeights,
    NUMERIC_FEATURES,
    normalize,
    one_hot_encode,
    tokenize,
)

__all__ = [
    'CandidateFeatureEngine',
    'FeatureMatrix',
    'FeatureWeights',
    'NUMERIC_FEATURES',
    'normalize',
    'one_hot_encode',
    'tokenize',
]
