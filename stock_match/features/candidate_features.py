"""Candidate-level feature engineering."""

import logging
import unicodedata
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..config import get_config
from ..data import Candidate, Embedder, get_embedder
from ..exceptions import FeatureDimensionError

logger = logging.getLogger(__name__)

# (Candidate attribute, feature name), in feature-vector order
NUMERIC_FEATURES = [
    ('volatility', 'Volatility'),
    ('market_cap', 'Market Cap'),
    ('pe_ratio', 'P/E Ratio'),
    ('price', 'Price'),
]


@dataclass(frozen=True)
class FeatureWeights:
    """Scalar multipliers applied to each feature block."""

    numeric: float = 1.0
    categorical: float = 0.8
    text: float = 0.5


@dataclass(frozen=True, eq=False)
class FeatureMatrix:
    """Read-only (N, L) feature matrix with one name per column."""

    values: np.ndarray
    feature_names: Tuple[str, ...]

    def __post_init__(self):
        values = np.array(self.values, dtype=float)
        feature_names = tuple(self.feature_names)
        if values.ndim != 2 or values.shape[1] != len(feature_names):
            raise FeatureDimensionError(
                f"Matrix shape {values.shape} does not match "
                f"{len(feature_names)} feature names"
            )
        values.setflags(write=False)
        object.__setattr__(self, 'values', values)
        object.__setattr__(self, 'feature_names', feature_names)

    def __len__(self) -> int:
        return self.values.shape[0]

    @property
    def dimension(self) -> int:
        return self.values.shape[1]

    def row(self, index: int) -> np.ndarray:
        """Feature vector of candidate ``index``."""
        return self.values[index]

    def to_frame(self, index: Optional[Sequence[str]] = None) -> pd.DataFrame:
        return pd.DataFrame(self.values, columns=list(self.feature_names), index=index)


def normalize(matrix) -> np.ndarray:
    """
    Min-max scale every column to [0, 1].
    
    Constant columns map to 0.0.
    """
    values = np.asarray(matrix, dtype=float)
    if values.size == 0:
        return values.copy()
    
    col_min = values.min(axis=0)
    col_range = values.max(axis=0) - col_min
    safe_range = np.where(col_range != 0, col_range, 1.0)
    scaled = (values - col_min) / safe_range
    scaled[:, col_range == 0] = 0.0
    return scaled


def one_hot_encode(categories: Sequence[str], prefix: str = 'Sector') -> Tuple[np.ndarray, List[str]]:
    """
    One-hot encode categories over their sorted distinct values.
    
    Returns:
        Tuple of (N x K matrix, K feature names '<prefix>_<value>')
    """
    unique = sorted(set(categories))
    column_of = {value: i for i, value in enumerate(unique)}
    
    encoded = np.zeros((len(categories), len(unique)))
    for row, value in enumerate(categories):
        encoded[row, column_of[value]] = 1.0
    
    return encoded, [f"{prefix}_{value}" for value in unique]


def tokenize(text: str) -> List[str]:
    """Lowercase, turn punctuation into separators, split on whitespace."""
    lowered = text.lower()
    cleaned = ''.join(
        ' ' if unicodedata.category(ch).startswith('P') else ch
        for ch in lowered
    )
    return cleaned.split()


class CandidateFeatureEngine:
    """Engine for turning candidates into feature vectors."""
    
    def __init__(
        self,
        embedder: Optional[Embedder] = None,
        weights: Optional[FeatureWeights] = None
    ):
        """
        Initialize feature engine.
        
        Args:
            embedder: Word embedder for summaries; defaults to the configured one
            weights: Block weights; defaults to the configured ones
        """
        self.config = get_config()
        self.embedder = embedder if embedder is not None else get_embedder()
        self.weights = weights or FeatureWeights(**self.config.feature_weights)
    
    @property
    def embedding_dimension(self) -> int:
        return self.embedder.dimension
    
    def normalize(self, matrix) -> np.ndarray:
        return normalize(matrix)
    
    def one_hot_encode(self, categories: Sequence[str]) -> Tuple[np.ndarray, List[str]]:
        return one_hot_encode(categories)
    
    def embed_text(self, text: str) -> np.ndarray:
        """
        Mean word vector of a text.
        
        Tokens unknown to the embedder are skipped. Returns the zero vector
        when no token matched.
        """
        dimension = self.embedding_dimension
        matched = []
        for token in tokenize(text):
            vector = self.embedder.vector(token)
            if vector is None:
                continue
            vector = np.asarray(vector, dtype=float)
            if vector.shape != (dimension,):
                raise FeatureDimensionError(
                    f"Embedding for {token!r} has shape {vector.shape}, expected ({dimension},)"
                )
            matched.append(vector)
        
        if not matched:
            return np.zeros(dimension)
        return np.mean(matched, axis=0)
    
    def build_feature_matrix(self, candidates: Iterable[Candidate]) -> FeatureMatrix:
        """
        Build the weighted feature matrix for a candidate set.
        
        Layout per row: normalized numeric block, one-hot sector block, then
        normalized summary-embedding block, each scaled by its block weight.
        
        Args:
            candidates: Candidates in load order
        
        Returns:
            FeatureMatrix with rows in the same order
        """
        candidates = list(candidates)
        dimension = self.embedding_dimension
        n = len(candidates)
        
        numeric = np.array(
            [[getattr(c, attr) for attr, _ in NUMERIC_FEATURES] for c in candidates],
            dtype=float
        ).reshape(n, len(NUMERIC_FEATURES))
        numeric = self.normalize(numeric)
        
        categorical, categorical_names = self.one_hot_encode([c.sector for c in candidates])
        
        text = np.array(
            [self.embed_text(c.summary) for c in candidates],
            dtype=float
        ).reshape(n, dimension)
        text = self.normalize(text)
        
        values = np.hstack([
            numeric * self.weights.numeric,
            categorical * self.weights.categorical,
            text * self.weights.text,
        ])
        
        feature_names = (
            [name for _, name in NUMERIC_FEATURES]
            + categorical_names
            + [f"Summary_{i}" for i in range(dimension)]
        )
        
        logger.debug(
            "Built feature matrix: %d candidates x %d features", n, len(feature_names)
        )
        return FeatureMatrix(values=values, feature_names=tuple(feature_names))
    
    def build_feature_frame(self, candidates: Sequence[Candidate]) -> pd.DataFrame:
        """
        Feature matrix as a DataFrame with ticker index and named columns.
        """
        matrix = self.build_feature_matrix(candidates)
        return matrix.to_frame(index=[c.ticker for c in candidates])
