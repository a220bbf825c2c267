"""Scoring and top-K ranking of candidates under a preference model."""

from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from ..data import Candidate, CandidateStore
from ..exceptions import FeatureDimensionError
from ..features import FeatureMatrix
from ..models import PreferenceModel


class Ranker:
    """Ranks a fixed candidate set against its feature matrix."""
    
    def __init__(self, candidates: CandidateStore, feature_matrix: FeatureMatrix):
        """
        Initialize ranker.
        
        Args:
            candidates: Candidates in load order
            feature_matrix: One row per candidate, same order
        """
        if len(candidates) != len(feature_matrix):
            raise FeatureDimensionError(
                f"{len(candidates)} candidates but {len(feature_matrix)} feature rows"
            )
        self.candidates = candidates
        self.feature_matrix = feature_matrix
    
    def __len__(self) -> int:
        return len(self.candidates)
    
    def _pool(self, indices: Optional[Sequence[int]]) -> np.ndarray:
        if indices is None:
            return np.arange(len(self.candidates))
        return np.asarray(indices, dtype=int)
    
    def scores(self, model: PreferenceModel, indices: Optional[Sequence[int]] = None) -> np.ndarray:
        """
        Scores for the candidates at ``indices`` (all candidates when None).
        """
        pool = self._pool(indices)
        if pool.size == 0:
            return np.zeros(0)
        return model.score_all(self.feature_matrix.values[pool])
    
    def rank(self, model: PreferenceModel, indices: Optional[Sequence[int]] = None) -> List[int]:
        """
        Candidate indices by descending score.
        
        Equal scores keep their order within ``indices``.
        """
        pool = self._pool(indices)
        scores = self.scores(model, pool)
        order = np.argsort(-scores, kind='stable')
        return [int(i) for i in pool[order]]
    
    def best(self, model: PreferenceModel, indices: Optional[Sequence[int]] = None) -> Optional[int]:
        """Highest-scoring index, first one on ties; None for an empty pool."""
        pool = self._pool(indices)
        if pool.size == 0:
            return None
        return int(pool[int(np.argmax(self.scores(model, pool)))])
    
    def get_top_recommendations(
        self,
        model: PreferenceModel,
        count: int = 5,
        indices: Optional[Sequence[int]] = None
    ) -> List[Candidate]:
        """
        Top ``count`` candidates by descending score.
        
        Args:
            model: Preference model to score with
            count: Maximum number of candidates to return
            indices: Restrict the pool to these candidates (all when None)
        
        Returns:
            min(count, pool size) candidates, ties in pool order
        """
        if count < 0:
            raise ValueError("count must be non-negative")
        return [self.candidates[i] for i in self.rank(model, indices)[:count]]
    
    def score_table(self, model: PreferenceModel) -> pd.DataFrame:
        """
        Every candidate with its score and rank, in load order.
        """
        scores = self.scores(model)
        ranks = np.empty(len(scores), dtype=int)
        ranks[self.rank(model)] = np.arange(1, len(scores) + 1)
        return pd.DataFrame(
            {
                'sector': [c.sector for c in self.candidates],
                'score': scores,
                'rank': ranks,
            },
            index=pd.Index(self.candidates.tickers, name='ticker'),
        )
