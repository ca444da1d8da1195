"""Kernel functions producing pairwise similarity (Gram) matrices.

A :class:`Kernel` is built from a kind tag (``"linear"``, ``"rbf"``, ...)
and the options of that kernel family.  It is stateless: :meth:`Kernel.compute`
only depends on its inputs, and returns a symmetric matrix when called with a
single feature set.

Supported kinds and their options (defaults in brackets):

=========================  ====================================================
``linear``                 ``x·y``
``gaussian`` / ``rbf``     ``exp(-|x-y|² / 2σ²)``  ``sigma`` [1]
``polynomial``             ``(scale·x·y + constant)^degree``
                           ``degree`` [1], ``constant`` [1], ``scale`` [1]
``sigmoid``                ``tanh(alpha·x·y + constant)``
                           ``alpha`` [0.01], ``constant`` [-e]
``laplacian``              ``exp(-|x-y| / σ)``  ``sigma`` [1]
``exponential``            ``exp(-|x-y| / 2σ²)``  ``sigma`` [1]
``cauchy``                 ``1 / (1 + |x-y|² / σ²)``  ``sigma`` [1]
``anova``                  ``Σ_k exp(-σ(x_k-y_k)²)^degree``
                           ``sigma`` [1], ``degree`` [1]
``rational_quadratic``     ``1 - |x-y|² / (|x-y|² + constant)``  ``constant`` [1]
``multiquadratic``         ``sqrt(|x-y|² + constant²)``  ``constant`` [1]
``histogram_intersection`` ``Σ_k min(x_k, y_k)``
=========================  ====================================================

Any callable ``f(X, Y) -> ndarray`` can be passed instead of a kind tag.
"""

from __future__ import annotations

import math
from typing import Any, Callable, Dict, Optional

import numpy as np
from sklearn.metrics.pairwise import (
    euclidean_distances,
    linear_kernel,
    polynomial_kernel,
    rbf_kernel,
    sigmoid_kernel,
)

from smo_svm.exceptions import InvalidInputError

KernelFunction = Callable[..., np.ndarray]


# ── kernel families ──────────────────────────────────────────────
def _linear(X: np.ndarray, Y: np.ndarray) -> np.ndarray:
    return linear_kernel(X, Y)


def _gaussian(X: np.ndarray, Y: np.ndarray, sigma: float) -> np.ndarray:
    return rbf_kernel(X, Y, gamma=1.0 / (2.0 * sigma ** 2))


def _polynomial(
    X: np.ndarray, Y: np.ndarray, degree: float, constant: float, scale: float
) -> np.ndarray:
    return polynomial_kernel(X, Y, degree=degree, gamma=scale, coef0=constant)


def _sigmoid(X: np.ndarray, Y: np.ndarray, alpha: float, constant: float) -> np.ndarray:
    return sigmoid_kernel(X, Y, gamma=alpha, coef0=constant)


def _laplacian(X: np.ndarray, Y: np.ndarray, sigma: float) -> np.ndarray:
    return np.exp(-euclidean_distances(X, Y) / sigma)


def _exponential(X: np.ndarray, Y: np.ndarray, sigma: float) -> np.ndarray:
    return np.exp(-euclidean_distances(X, Y) / (2.0 * sigma ** 2))


def _cauchy(X: np.ndarray, Y: np.ndarray, sigma: float) -> np.ndarray:
    return 1.0 / (1.0 + euclidean_distances(X, Y, squared=True) / sigma ** 2)


def _anova(X: np.ndarray, Y: np.ndarray, sigma: float, degree: float) -> np.ndarray:
    diff = X[:, np.newaxis, :] - Y[np.newaxis, :, :]
    return (np.exp(-sigma * diff ** 2) ** degree).sum(axis=2)


def _rational_quadratic(X: np.ndarray, Y: np.ndarray, constant: float) -> np.ndarray:
    d2 = euclidean_distances(X, Y, squared=True)
    return 1.0 - d2 / (d2 + constant)


def _multiquadratic(X: np.ndarray, Y: np.ndarray, constant: float) -> np.ndarray:
    return np.sqrt(euclidean_distances(X, Y, squared=True) + constant ** 2)


def _histogram_intersection(X: np.ndarray, Y: np.ndarray) -> np.ndarray:
    return np.minimum(X[:, np.newaxis, :], Y[np.newaxis, :, :]).sum(axis=2)


# kind -> (function, default options)
KERNELS: Dict[str, tuple[KernelFunction, Dict[str, float]]] = {
    "linear": (_linear, {}),
    "gaussian": (_gaussian, {"sigma": 1.0}),
    "polynomial": (_polynomial, {"degree": 1, "constant": 1.0, "scale": 1.0}),
    "sigmoid": (_sigmoid, {"alpha": 0.01, "constant": -math.e}),
    "laplacian": (_laplacian, {"sigma": 1.0}),
    "exponential": (_exponential, {"sigma": 1.0}),
    "cauchy": (_cauchy, {"sigma": 1.0}),
    "anova": (_anova, {"sigma": 1.0, "degree": 1}),
    "rational_quadratic": (_rational_quadratic, {"constant": 1.0}),
    "multiquadratic": (_multiquadratic, {"constant": 1.0}),
    "histogram_intersection": (_histogram_intersection, {}),
}

ALIASES: Dict[str, str] = {
    "rbf": "gaussian",
    "poly": "polynomial",
    "rationalquadratic": "rational_quadratic",
    "histogram": "histogram_intersection",
    "min": "histogram_intersection",
    "mlp": "sigmoid",
    "rational": "rational_quadratic",
}


def resolve_kind(kind: str) -> str:
    """Map a kernel tag (or alias) to its canonical name.

    Args:
        kind: Kernel tag, case-insensitive, e.g. ``"RBF"``.

    Returns:
        The canonical kind, a key of :data:`KERNELS`.

    Raises:
        InvalidInputError: If the tag is unknown.
    """
    key = kind.lower()
    key = ALIASES.get(key, key)
    if key not in KERNELS:
        raise InvalidInputError(
            f"Unknown kernel {kind!r}. Available: {sorted(KERNELS)}"
        )
    return key


class Kernel:
    """Pairwise similarity capability owned by a single model.

    Args:
        kind: Kernel tag (see module docstring) or a callable
            ``f(X, Y) -> ndarray``.
        options: Kernel-specific options; unspecified ones take the family
            defaults.

    Raises:
        InvalidInputError: On unknown kinds or option names.
    """

    def __init__(
        self,
        kind: str | KernelFunction = "linear",
        options: Optional[Dict[str, Any]] = None,
    ) -> None:
        options = dict(options or {})
        if callable(kind):
            self.kind = getattr(kind, "__name__", "custom")
            self._func: KernelFunction = kind
            self.options: Dict[str, Any] = options
            self.is_custom = True
            return

        self.kind = resolve_kind(kind)
        func, defaults = KERNELS[self.kind]
        unknown = set(options) - set(defaults)
        if unknown:
            raise InvalidInputError(
                f"Unknown option(s) {sorted(unknown)} for kernel {self.kind!r}; "
                f"expected a subset of {sorted(defaults)}"
            )
        self._func = func
        self.options = {**defaults, **options}
        self.is_custom = False

    @property
    def is_linear(self) -> bool:
        """Whether the primal weight vector can replace the support vectors."""
        return not self.is_custom and self.kind == "linear"

    def compute(self, X: np.ndarray, Y: Optional[np.ndarray] = None) -> np.ndarray:
        """Compute the kernel matrix between two feature sets.

        Args:
            X: Array of shape ``(n, d)``.
            Y: Array of shape ``(m, d)``.  When *None*, ``Y = X`` and the
                result is symmetric.

        Returns:
            Array of shape ``(n, m)`` with ``K[i, j] = k(X[i], Y[j])``.
        """
        X = np.atleast_2d(np.asarray(X, dtype=float))
        Y = X if Y is None else np.atleast_2d(np.asarray(Y, dtype=float))
        return np.asarray(self._func(X, Y, **self.options), dtype=float)

    def __call__(self, X: np.ndarray, Y: Optional[np.ndarray] = None) -> np.ndarray:
        return self.compute(X, Y)

    def __repr__(self) -> str:
        return f"Kernel(kind={self.kind!r}, options={self.options})"
