"""Per-dimension min/max feature whitening."""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from smo_svm.exceptions import InvalidInputError, NotReadyError, NumericDegeneracyError
from smo_svm.utils.logger import get_logger

log = get_logger(__name__)


class MinMaxWhitener:
    """Rescale each feature to ``[0, 1]`` using training-set min and max.

    The statistics are learned once by :meth:`fit` and never change; they
    are what a saved model stores to whiten vectors at prediction time.

    Constant columns (``max == min``) are rejected with
    :class:`~smo_svm.exceptions.NumericDegeneracyError` instead of
    producing non-finite values.
    """

    def __init__(self) -> None:
        self.min_: Optional[np.ndarray] = None
        self.max_: Optional[np.ndarray] = None

    @classmethod
    def from_stats(cls, stats: Sequence[Sequence[float]]) -> "MinMaxWhitener":
        """Rebuild a fitted whitener from ``[(min, max), ...]`` pairs."""
        arr = np.asarray(stats, dtype=float)
        if arr.ndim != 2 or arr.shape[1] != 2:
            raise InvalidInputError(
                f"Whitening stats must be (min, max) pairs, got shape {arr.shape}"
            )
        whitener = cls()
        whitener._set(arr[:, 0].copy(), arr[:, 1].copy())
        return whitener

    @property
    def is_fitted(self) -> bool:
        return self.min_ is not None

    @property
    def n_features(self) -> int:
        self._check_fitted()
        return len(self.min_)

    @property
    def stats(self) -> list[tuple[float, float]]:
        """Ordered ``(min, max)`` pair per feature dimension."""
        self._check_fitted()
        return [(float(lo), float(hi)) for lo, hi in zip(self.min_, self.max_)]

    def fit(self, X: np.ndarray) -> "MinMaxWhitener":
        """Learn per-dimension min and max from a training matrix.

        Args:
            X: Array of shape ``(n_samples, n_features)``.

        Returns:
            ``self`` for chaining.

        Raises:
            NumericDegeneracyError: If any column is constant.
        """
        X = np.asarray(X, dtype=float)
        if X.ndim != 2 or X.shape[0] == 0:
            raise InvalidInputError(f"Expected a non-empty 2-D matrix, got shape {X.shape}")
        self._set(X.min(axis=0), X.max(axis=0))
        log.debug("Whitening fitted on %d samples × %d features", *X.shape)
        return self

    def transform(self, X: np.ndarray) -> np.ndarray:
        """Apply ``(x - min) / (max - min)`` column-wise.

        Args:
            X: One feature vector or a matrix of them.

        Returns:
            Whitened copy with the same shape as *X*.
        """
        self._check_fitted()
        X = np.asarray(X, dtype=float)
        if X.shape[-1] != len(self.min_):
            raise InvalidInputError(
                f"Expected {len(self.min_)} features, got {X.shape[-1]}"
            )
        return (X - self.min_) / (self.max_ - self.min_)

    def fit_transform(self, X: np.ndarray) -> np.ndarray:
        return self.fit(X).transform(X)

    # ── internals ────────────────────────────────────────────────
    def _set(self, lo: np.ndarray, hi: np.ndarray) -> None:
        degenerate = np.flatnonzero(hi == lo)
        if degenerate.size:
            raise NumericDegeneracyError(degenerate.tolist())
        self.min_, self.max_ = lo, hi

    def _check_fitted(self) -> None:
        if self.min_ is None:
            raise NotReadyError("Whitening statistics are not fitted")

    def __repr__(self) -> str:
        n = len(self.min_) if self.min_ is not None else 0
        return f"MinMaxWhitener(n_features={n})"
