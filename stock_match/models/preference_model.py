"""Online linear preference model learned from swipe feedback."""

from dataclasses import dataclass
from typing import Sequence

import numpy as np
import pandas as pd

from ..exceptions import FeatureDimensionError


def _check_length(weights: np.ndarray, features: np.ndarray) -> None:
    if features.shape[-1] != weights.shape[0]:
        raise FeatureDimensionError(
            f"Feature length {features.shape[-1]} does not match "
            f"weight length {weights.shape[0]}"
        )


def update_weights(weights, feature_vector, liked: bool) -> np.ndarray:
    """
    Additive (perceptron-style) preference update.
    
    Returns ``weights + feature_vector`` for a like and
    ``weights - feature_vector`` for a dislike, as a new array. There is no
    learning rate, decay or regularization, so weights grow without bound
    over long sessions.
    """
    weights = np.asarray(weights, dtype=float)
    feature_vector = np.asarray(feature_vector, dtype=float)
    if feature_vector.ndim != 1:
        raise FeatureDimensionError("Feature vector must be one-dimensional")
    _check_length(weights, feature_vector)
    
    return weights + feature_vector * (1.0 if liked else -1.0)


@dataclass(frozen=True, eq=False)
class PreferenceModel:
    """Immutable weight vector; every update returns a new model."""

    weights: np.ndarray

    def __post_init__(self):
        weights = np.array(self.weights, dtype=float)
        if weights.ndim != 1:
            raise FeatureDimensionError("Weights must be one-dimensional")
        weights.setflags(write=False)
        object.__setattr__(self, 'weights', weights)

    @classmethod
    def zeros(cls, dimension: int) -> "PreferenceModel":
        return cls(np.zeros(dimension))

    @property
    def dimension(self) -> int:
        return self.weights.shape[0]

    def score(self, feature_vector) -> float:
        """Dot product of a single feature vector with the weights."""
        feature_vector = np.asarray(feature_vector, dtype=float)
        _check_length(self.weights, feature_vector)
        return float(feature_vector @ self.weights)

    def score_all(self, matrix) -> np.ndarray:
        """Scores for every row of an (N, L) matrix."""
        matrix = np.asarray(matrix, dtype=float)
        if matrix.ndim != 2:
            raise FeatureDimensionError("Expected a two-dimensional feature matrix")
        _check_length(self.weights, matrix)
        return matrix @ self.weights

    def update(self, feature_vector, liked: bool) -> "PreferenceModel":
        return PreferenceModel(update_weights(self.weights, feature_vector, liked))

    def feature_contributions(self, feature_names: Sequence[str], top_n: int = 10) -> pd.Series:
        """
        Largest learned weights by magnitude, keyed by feature name.
        """
        if len(feature_names) != self.dimension:
            raise FeatureDimensionError(
                f"{len(feature_names)} feature names for {self.dimension} weights"
            )
        order = np.argsort(-np.abs(self.weights), kind='stable')[:top_n]
        return pd.Series(self.weights[order], index=[feature_names[i] for i in order])
