"""Binary Support Vector Machine trained with SMO.

Example::

    from smo_svm import SVM

    svm = SVM(kernel="rbf", kernel_options={"sigma": 0.2}, random_state=0)
    svm.train(features, labels)          # labels in {+1, -1}
    svm.predict([5.1, 3.5, 1.4, 0.2])    # -> 1 or -1
    model = svm.export()                 # ModelSnapshot
    same = SVM.from_snapshot(model)      # 'loaded' state
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

from smo_svm.config import SVMConfig
from smo_svm.exceptions import (
    InvalidInputError,
    NotReadyError,
    UnsupportedOperationError,
)
from smo_svm.models.base_model import BaseModel
from smo_svm.models.decision import (
    DecisionFunction,
    KernelDecision,
    LinearDecision,
    classify,
)
from smo_svm.models.kernels import Kernel
from smo_svm.models.smo import RandomSource, as_random_source, smo_solve
from smo_svm.models.snapshot import ModelSnapshot
from smo_svm.models.whitening import MinMaxWhitener
from smo_svm.utils.logger import get_logger

log = get_logger(__name__)


class ModelState(Enum):
    UNTRAINED = "untrained"
    TRAINED = "trained"
    LOADED = "loaded"


@dataclass(frozen=True)
class SupportSet:
    """Training rows kept after pruning, with their original positions."""

    indices: np.ndarray
    vectors: np.ndarray
    labels: np.ndarray
    alphas: np.ndarray


class SVM(BaseModel):
    """Binary ``±1`` classifier trained with Sequential Minimal Optimization.

    Args:
        config: An :class:`SVMConfig`, a mapping of its fields, or *None*
            for the defaults.
        random: Uniform random source for SMO partner selection (a
            zero-argument callable or ``numpy.random.Generator``).  When
            *None*, a generator seeded with ``config.random_state`` is
            created for every training call.
        **params: Individual hyperparameters overriding *config*.
    """

    name: str = "SVM"

    def __init__(
        self,
        config: SVMConfig | Dict[str, Any] | None = None,
        random: Optional[RandomSource] = None,
        **params: Any,
    ) -> None:
        if isinstance(config, SVMConfig):
            config = dataclasses.replace(config, **params) if params else config
        else:
            config = SVMConfig.from_dict({**(config or {}), **params})
        self.config: SVMConfig = config
        self.kernel = Kernel(config.kernel, config.kernel_options)
        self._random = random

        self._state = ModelState.UNTRAINED
        self._decision: Optional[DecisionFunction] = None
        self._whitener: Optional[MinMaxWhitener] = None
        self._support: Optional[SupportSet] = None
        self.n_features: Optional[int] = None
        self.iterations: Optional[int] = None

    # ── state ────────────────────────────────────────────────────
    @property
    def state(self) -> ModelState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is not ModelState.UNTRAINED

    @property
    def bias(self) -> float:
        self._check_ready("read the bias")
        return self._decision.bias

    @property
    def weights(self) -> Optional[np.ndarray]:
        """Primal weight vector, or *None* for non-linear kernels."""
        self._check_ready("read the weights")
        if isinstance(self._decision, LinearDecision):
            return self._decision.weights.copy()
        return None

    @property
    def alphas(self) -> np.ndarray:
        """Dual coefficients of the retained support vectors."""
        self._check_ready("read the alphas")
        if self._support is not None:
            return self._support.alphas.copy()
        if isinstance(self._decision, KernelDecision):
            return self._decision.alphas.copy()
        raise UnsupportedOperationError(
            "A loaded linear model keeps only its weights, not the alphas"
        )

    @property
    def whitening_stats(self) -> Optional[List[Tuple[float, float]]]:
        self._check_ready("read the whitening statistics")
        return self._whitener.stats if self._whitener is not None else None

    # ── training ─────────────────────────────────────────────────
    def train(
        self,
        features: pd.DataFrame | np.ndarray | List[List[float]],
        labels: pd.Series | np.ndarray | List[int],
    ) -> "SVM":
        """Fit the model with SMO.

        The inputs are copied.  On any error the model keeps its previous
        state (an untrained model stays untrained).

        Args:
            features: ``(n_samples, n_features)`` matrix.
            labels: ``n_samples`` labels in ``{+1, -1}``.

        Returns:
            ``self`` for chaining.

        Raises:
            InvalidInputError: Mismatched lengths, fewer than 2 samples, no
                features, or a feature count different from an earlier
                training.
            NumericDegeneracyError: A constant feature with whitening on.
            TrainingDidNotConvergeError: ``max_iterations`` reached.
        """
        X = np.array(features, dtype=float, copy=True)
        y = np.array(labels, dtype=float, copy=True).reshape(-1)
        if X.ndim != 2:
            raise InvalidInputError(f"Features must be a 2-D matrix, got {X.ndim} dimension(s)")
        if len(X) != len(y):
            raise InvalidInputError(
                f"Features and labels should have the same length ({len(X)} != {len(y)})"
            )
        if len(X) < 2:
            raise InvalidInputError("Cannot train with less than 2 observations")
        n, d = X.shape
        if d == 0:
            raise InvalidInputError("Cannot train without any feature")
        if self.n_features is not None and d != self.n_features:
            raise InvalidInputError(
                f"Model was built for {self.n_features} features, got {d}"
            )

        log.info("Training SVM: %d samples × %d features, kernel=%s", n, d, self.kernel.kind)

        whitener = MinMaxWhitener().fit(X) if self.config.whitening else None
        if whitener is not None:
            X = whitener.transform(X)

        gram = self.kernel.compute(X)
        result = smo_solve(
            gram,
            y,
            self.config,
            as_random_source(self._random, self.config.random_state),
        )
        del gram

        alphas = result.alphas
        keep = np.flatnonzero(alphas > self.config.alpha_tol)
        support = SupportSet(
            indices=keep,
            vectors=X[keep],
            labels=y[keep],
            alphas=alphas[keep],
        )
        decision: DecisionFunction
        if self.kernel.is_linear:
            decision = LinearDecision(weights=(y * alphas) @ X, bias=result.b)
        else:
            decision = KernelDecision(
                support_vectors=support.vectors,
                labels=support.labels,
                alphas=support.alphas,
                bias=result.b,
                kernel=self.kernel,
            )

        self._whitener = whitener
        self._decision = decision
        self._support = support
        self.n_features = d
        self.iterations = result.iterations
        self._state = ModelState.TRAINED
        log.info("SVM trained: %d support vector(s), b=%.6g", len(keep), result.b)
        return self

    def fit(
        self,
        X_train: pd.DataFrame | np.ndarray,
        y_train: pd.Series | np.ndarray,
    ) -> "SVM":
        """Alias of :meth:`train`."""
        return self.train(X_train, y_train)

    # ── decision function ────────────────────────────────────────
    def margin(
        self,
        features: pd.DataFrame | np.ndarray | List[float],
        whiten: bool = True,
    ) -> float | np.ndarray:
        """Raw decision value of one vector (float) or a matrix (array).

        Args:
            features: Raw feature vector or matrix.
            whiten: Set to *False* when *features* are already whitened.
        """
        self._check_ready("compute margins")
        X, single = self._as_matrix(features)
        if whiten and self._whitener is not None:
            X = self._whitener.transform(X)
        scores = self._decision.margin(X)
        return float(scores[0]) if single else scores

    def decision_function(self, X: pd.DataFrame | np.ndarray) -> np.ndarray:
        return np.atleast_1d(self.margin(X))

    def predict(
        self,
        features: pd.DataFrame | np.ndarray | List[float],
    ) -> int | np.ndarray:
        """Classify one vector (returns ``int``) or a matrix (returns array).

        Raises:
            NotReadyError: Before training or loading.
        """
        self._check_ready("predict")
        scores = self.margin(features)
        if np.ndim(scores) == 0:
            return 1 if scores > 0 else -1
        return classify(scores)

    def support_vectors(self) -> np.ndarray:
        """Original training-row indices of the support vectors.

        For a loaded non-linear model these are positions within the
        snapshot's support-vector list.

        Raises:
            NotReadyError: Before training or loading.
            UnsupportedOperationError: On a loaded linear model.
        """
        self._check_ready("get support vectors")
        if self._support is not None:
            return self._support.indices.copy()
        if isinstance(self._decision, LinearDecision):
            raise UnsupportedOperationError(
                "Cannot get support vectors from a saved linear model; "
                "train the SVM to have them"
            )
        return np.arange(len(self._decision.alphas))

    # ── (de)serialisation ────────────────────────────────────────
    def export(self) -> ModelSnapshot:
        """Snapshot of the trained or loaded model.

        Raises:
            NotReadyError: Before training or loading.
            UnsupportedOperationError: For a callable (custom) kernel.
        """
        self._check_ready("export")
        if self.kernel.is_custom:
            raise UnsupportedOperationError("Models with a callable kernel cannot be exported")
        options = self.config.to_dict()
        stats = self.whitening_stats
        if isinstance(self._decision, LinearDecision):
            return ModelSnapshot(
                options=options,
                bias=self._decision.bias,
                whitening_stats=stats,
                weights=self._decision.weights.tolist(),
            )
        return ModelSnapshot(
            options=options,
            bias=self._decision.bias,
            whitening_stats=stats,
            support_vectors=self._decision.support_vectors.tolist(),
            labels=self._decision.labels.astype(int).tolist(),
            alphas=self._decision.alphas.tolist(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.export().to_dict()

    @classmethod
    def from_snapshot(
        cls,
        snapshot: ModelSnapshot | Dict[str, Any],
        random: Optional[RandomSource] = None,
    ) -> "SVM":
        """Rebuild a model in the *loaded* state without retraining.

        Args:
            snapshot: Output of :meth:`export` or its dictionary form.
            random: Random source used if the model is later retrained.

        Raises:
            InvalidInputError: If the payload does not match the kernel or
                the whitening setting, or its feature count differs
                from the whitening statistics.
        """
        if not isinstance(snapshot, ModelSnapshot):
            snapshot = ModelSnapshot.from_dict(snapshot)
        svm = cls(SVMConfig.from_dict(snapshot.options), random=random)

        if svm.kernel.is_linear != snapshot.is_linear:
            raise InvalidInputError(
                f"Snapshot payload does not match kernel {svm.kernel.kind!r}"
            )
        whitener = None
        if svm.config.whitening:
            if snapshot.whitening_stats is None:
                raise InvalidInputError("Snapshot has whitening enabled but no statistics")
            whitener = MinMaxWhitener.from_stats(snapshot.whitening_stats)

        decision: DecisionFunction
        if snapshot.is_linear:
            decision = LinearDecision(weights=snapshot.weights_array(), bias=snapshot.bias)
            n_features: Optional[int] = decision.n_features
        else:
            vectors, labels, alphas = snapshot.support_arrays()
            decision = KernelDecision(
                support_vectors=vectors,
                labels=labels,
                alphas=alphas,
                bias=snapshot.bias,
                kernel=svm.kernel,
            )
            n_features = decision.n_features if len(alphas) else None
        if whitener is not None:
            if n_features is not None and n_features != whitener.n_features:
                raise InvalidInputError(
                    f"Snapshot payload has {n_features} features but whitening "
                    f"statistics for {whitener.n_features}"
                )
            n_features = whitener.n_features

        svm._whitener = whitener
        svm._decision = decision
        svm.n_features = n_features
        svm._state = ModelState.LOADED
        return svm

    # ── internals ────────────────────────────────────────────────
    def _check_ready(self, action: str) -> None:
        if self._state is ModelState.UNTRAINED:
            raise NotReadyError(f"Cannot {action}, you need to train the SVM first")

    def _as_matrix(self, features: Any) -> Tuple[np.ndarray, bool]:
        X = np.asarray(features, dtype=float)
        single = X.ndim == 1
        X = np.atleast_2d(X)
        if X.ndim != 2:
            raise InvalidInputError(f"Expected a vector or a matrix, got {X.ndim} dimensions")
        if self.n_features is not None and X.shape[1] != self.n_features:
            raise InvalidInputError(
                f"Expected {self.n_features} features, got {X.shape[1]}"
            )
        return X, single

    def __repr__(self) -> str:
        return (
            f"SVM(kernel={self.kernel.kind!r}, C={self.config.C}, "
            f"state={self._state.value})"
        )
