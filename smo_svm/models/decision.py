"""Decision functions of a trained SVM.

A trained model holds exactly one of two variants, chosen once when
training finishes:

* :class:`LinearDecision` — primal weights, for the linear kernel;
* :class:`KernelDecision` — support vectors with their labels and alphas.

Both score vectors that are already in the model's (whitened) space.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import numpy as np

from smo_svm.models.kernels import Kernel


@dataclass(frozen=True)
class LinearDecision:
    """``score = w·x + b``."""

    weights: np.ndarray
    bias: float

    @property
    def n_features(self) -> int:
        return len(self.weights)

    def margin(self, X: np.ndarray) -> np.ndarray:
        return np.atleast_2d(X) @ self.weights + self.bias


@dataclass(frozen=True)
class KernelDecision:
    """``score = Σ_i alpha_i · y_i · k(x, sv_i) + b``."""

    support_vectors: np.ndarray
    labels: np.ndarray
    alphas: np.ndarray
    bias: float
    kernel: Kernel

    @property
    def n_features(self) -> int:
        return self.support_vectors.shape[1]

    def margin(self, X: np.ndarray) -> np.ndarray:
        X = np.atleast_2d(X)
        if len(self.alphas) == 0:
            return np.full(len(X), self.bias, dtype=float)
        K = self.kernel.compute(X, self.support_vectors)
        return K @ (self.alphas * self.labels) + self.bias


DecisionFunction = Union[LinearDecision, KernelDecision]


def classify(scores: np.ndarray) -> np.ndarray:
    """Map margins to ``+1`` when strictly positive, else ``-1``."""
    return np.where(np.asarray(scores) > 0, 1, -1)
