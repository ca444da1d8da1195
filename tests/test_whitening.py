"""Tests for smo_svm.models.whitening."""

from __future__ import annotations

import numpy as np
import pytest

from smo_svm.exceptions import InvalidInputError, NotReadyError, NumericDegeneracyError
from smo_svm.models.whitening import MinMaxWhitener


class TestFit:
    """Tests for learning min/max statistics."""

    def test_stats_per_dimension(self, toy_data) -> None:
        X, _ = toy_data
        w = MinMaxWhitener().fit(X)
        assert w.stats == [(0.0, 5.0), (0.0, 6.0)]
        assert w.n_features == 2

    def test_whitened_training_values_in_unit_range(self) -> None:
        X = np.random.default_rng(3).normal(10.0, 4.0, size=(50, 5))
        Xw = MinMaxWhitener().fit_transform(X)
        assert Xw.min() >= 0.0
        assert Xw.max() <= 1.0
        assert np.allclose(Xw.min(axis=0), 0.0)
        assert np.allclose(Xw.max(axis=0), 1.0)

    def test_constant_dimension_raises(self) -> None:
        X = np.array([[1.0, 2.0, 3.0], [4.0, 2.0, 5.0], [7.0, 2.0, 3.0]])
        with pytest.raises(NumericDegeneracyError) as exc_info:
            MinMaxWhitener().fit(X)
        assert exc_info.value.dimensions == [1]

    def test_degeneracy_is_invalid_input(self) -> None:
        assert issubclass(NumericDegeneracyError, InvalidInputError)

    def test_failed_fit_keeps_whitener_unfitted(self) -> None:
        w = MinMaxWhitener()
        with pytest.raises(NumericDegeneracyError):
            w.fit(np.ones((3, 2)))
        assert not w.is_fitted


class TestTransform:
    """Tests for applying stored statistics."""

    def test_uses_training_stats(self, toy_data) -> None:
        X, _ = toy_data
        w = MinMaxWhitener().fit(X)
        assert np.allclose(w.transform([0.0, 0.5]), [0.0, 0.5 / 6.0])
        # values outside the training range are not clipped
        assert np.allclose(w.transform([10.0, 12.0]), [2.0, 2.0])

    def test_wrong_length_raises(self, toy_data) -> None:
        X, _ = toy_data
        w = MinMaxWhitener().fit(X)
        with pytest.raises(InvalidInputError):
            w.transform([1.0, 2.0, 3.0])

    def test_not_fitted_raises(self) -> None:
        with pytest.raises(NotReadyError):
            MinMaxWhitener().transform([1.0])


class TestFromStats:
    """Tests for rebuilding a whitener from exported statistics."""

    def test_round_trip(self, toy_data) -> None:
        X, _ = toy_data
        original = MinMaxWhitener().fit(X)
        rebuilt = MinMaxWhitener.from_stats(original.stats)
        assert np.array_equal(rebuilt.transform(X), original.transform(X))

    def test_bad_shape_raises(self) -> None:
        with pytest.raises(InvalidInputError):
            MinMaxWhitener.from_stats([[0.0, 1.0, 2.0]])
