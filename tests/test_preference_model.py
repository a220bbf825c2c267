"""Tests for the additive preference model."""

import numpy as np
import pytest

from stock_match.exceptions import FeatureDimensionError
from stock_match.models import PreferenceModel, update_weights


class TestUpdateWeights:
    def test_like_adds_features(self):
        np.testing.assert_array_equal(update_weights([1.0, 1.0], [0.5, 2.0], True), [1.5, 3.0])

    def test_dislike_subtracts_features(self):
        np.testing.assert_array_equal(update_weights([1.0, 1.0], [0.5, 2.0], False), [0.5, -1.0])

    def test_returns_new_array(self):
        weights = np.zeros(2)
        update_weights(weights, [1.0, 1.0], True)
        np.testing.assert_array_equal(weights, [0.0, 0.0])

    def test_length_mismatch_fails(self):
        with pytest.raises(FeatureDimensionError):
            update_weights(np.zeros(3), [1.0, 1.0], True)

    def test_matrix_feature_vector_fails(self):
        with pytest.raises(FeatureDimensionError):
            update_weights(np.zeros(2), [[1.0, 1.0]], True)


class TestPreferenceModel:
    def test_zeros(self):
        model = PreferenceModel.zeros(4)
        assert model.dimension == 4
        assert model.score([1.0, 2.0, 3.0, 4.0]) == 0.0

    def test_score_is_dot_product(self):
        model = PreferenceModel(np.array([1.0, -2.0, 0.5]))
        assert model.score([2.0, 1.0, 4.0]) == pytest.approx(2.0)

    def test_score_all(self):
        model = PreferenceModel(np.array([1.0, 1.0]))
        np.testing.assert_allclose(model.score_all([[1.0, 2.0], [0.0, -1.0]]), [3.0, -1.0])

    def test_update_leaves_original_unchanged(self):
        model = PreferenceModel.zeros(2)
        updated = model.update([1.0, 2.0], liked=True)
        np.testing.assert_array_equal(model.weights, [0.0, 0.0])
        np.testing.assert_array_equal(updated.weights, [1.0, 2.0])

    def test_weights_are_read_only(self):
        model = PreferenceModel.zeros(2)
        with pytest.raises(ValueError):
            model.weights[0] = 1.0

    def test_like_then_dislike_cancels(self):
        x = np.array([0.3, 0.8, 0.1])
        other = np.array([1.0, 0.0, 0.25])
        model = (
            PreferenceModel.zeros(3)
            .update(x, liked=True)
            .update(other, liked=True)
            .update(x, liked=False)
        )
        np.testing.assert_allclose(model.weights, other)

    def test_score_length_mismatch_fails(self):
        with pytest.raises(FeatureDimensionError):
            PreferenceModel.zeros(3).score([1.0, 2.0])
        with pytest.raises(FeatureDimensionError):
            PreferenceModel.zeros(3).score_all(np.zeros((2, 2)))

    def test_feature_contributions(self):
        model = PreferenceModel(np.array([0.1, -2.0, 0.5, 0.0]))
        contributions = model.feature_contributions(["a", "b", "c", "d"], top_n=2)
        assert list(contributions.index) == ["b", "c"]
        assert contributions["b"] == -2.0

    def test_feature_contributions_name_mismatch(self):
        with pytest.raises(FeatureDimensionError):
            PreferenceModel.zeros(2).feature_contributions(["a"])
