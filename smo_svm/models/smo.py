"""Sequential Minimal Optimization on a precomputed Gram matrix.

This is the simplified SMO variant: every KKT violator ``i`` is paired
with a uniformly random partner ``j != i`` and the two dual coefficients
are optimised analytically.  Training stops after ``max_passes``
consecutive sweeps without a single update.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Optional, Union

import numpy as np

from smo_svm.config import SVMConfig
from smo_svm.exceptions import InvalidInputError, TrainingDidNotConvergeError
from smo_svm.utils.logger import get_logger

log = get_logger(__name__)

RandomSource = Union[Callable[[], float], np.random.Generator]

# Pairs whose box is narrower than this cannot move.
BOX_EPS = 1e-4
# Smaller alpha_j changes are not counted as updates.
STEP_EPS = 1e-3


@dataclass
class SMOResult:
    """Dual solution returned by :func:`smo_solve`.

    Attributes:
        alphas: Dual coefficient per training row, each in ``[0, C]``.
        b: Bias of the decision function.
        iterations: Number of full sweeps performed.
    """

    alphas: np.ndarray
    b: float
    iterations: int


def as_random_source(
    random: Optional[RandomSource] = None,
    seed: Optional[int] = None,
) -> Callable[[], float]:
    """Normalise an injected random source to ``() -> float in [0, 1)``.

    Args:
        random: A zero-argument callable, a ``numpy.random.Generator``, or
            *None* to build ``np.random.default_rng(seed)``.
        seed: Seed used only when *random* is *None*.

    Returns:
        A zero-argument callable returning uniform floats.
    """
    if random is None:
        random = np.random.default_rng(seed)
    if isinstance(random, np.random.Generator):
        return random.random
    if not callable(random):
        raise InvalidInputError(
            f"random must be callable or a numpy Generator, got {type(random).__name__}"
        )
    return random


def smo_solve(
    gram: np.ndarray,
    labels: np.ndarray,
    config: SVMConfig,
    random: Callable[[], float],
) -> SMOResult:
    """Solve the SVM dual problem with simplified SMO.

    Args:
        gram: Symmetric ``(n, n)`` kernel matrix of the training rows.
        labels: ``(n,)`` array of ``+1`` / ``-1``.
        config: Hyperparameters (``C``, ``tol``, ``max_passes``,
            ``max_iterations``).
        random: Uniform ``[0, 1)`` source used to pick partners.

    Returns:
        The converged :class:`SMOResult`.

    Raises:
        InvalidInputError: If shapes disagree or fewer than 2 rows.
        TrainingDidNotConvergeError: If ``max_iterations`` sweeps run
            without reaching ``max_passes`` quiet sweeps.
    """
    K = np.asarray(gram, dtype=float)
    y = np.asarray(labels, dtype=float)
    n = len(y)
    if n < 2:
        raise InvalidInputError(f"Cannot train with less than 2 observations, got {n}")
    if K.shape != (n, n):
        raise InvalidInputError(f"Gram matrix must be ({n}, {n}), got {K.shape}")

    C, tol = config.C, config.tol
    alpha = np.zeros(n, dtype=float)
    b = 0.0
    iteration = 0
    passes = 0

    while passes < config.max_passes and iteration < config.max_iterations:
        num_changed = 0
        for i in range(n):
            Ei = b + np.dot(alpha * y, K[i]) - y[i]
            if not ((y[i] * Ei < -tol and alpha[i] < C) or (y[i] * Ei > tol and alpha[i] > 0)):
                continue

            j = i
            while j == i:
                j = int(math.floor(random() * n))
            Ej = b + np.dot(alpha * y, K[j]) - y[j]

            ai, aj = alpha[i], alpha[j]
            if y[i] == y[j]:
                L = max(0.0, ai + aj - C)
                H = min(C, ai + aj)
            else:
                L = max(0.0, aj - ai)
                H = min(C, C + aj - ai)
            if abs(L - H) < BOX_EPS:
                continue

            eta = 2.0 * K[i, j] - K[i, i] - K[j, j]
            if eta >= 0:
                continue

            new_aj = aj - y[j] * (Ei - Ej) / eta
            new_aj = min(max(new_aj, L), H)
            if abs(aj - new_aj) < STEP_EPS:
                continue

            alpha[j] = new_aj
            alpha[i] += y[i] * y[j] * (aj - new_aj)

            b1 = b - Ei - y[i] * (alpha[i] - ai) * K[i, i] - y[j] * (alpha[j] - aj) * K[i, j]
            b2 = b - Ej - y[i] * (alpha[i] - ai) * K[i, j] - y[j] * (alpha[j] - aj) * K[j, j]
            b = (b1 + b2) / 2.0
            if 0 < alpha[i] < C:
                b = b1
            if 0 < alpha[j] < C:
                b = b2
            num_changed += 1

        iteration += 1
        passes = passes + 1 if num_changed == 0 else 0
        log.debug("SMO sweep %d: %d update(s), %d quiet pass(es)", iteration, num_changed, passes)

    if passes < config.max_passes:
        raise TrainingDidNotConvergeError(iteration)

    log.info("SMO converged after %d sweep(s)", iteration)
    return SMOResult(alphas=alpha, b=float(b), iterations=iteration)
