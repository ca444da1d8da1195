"""Tests for the SVM model in smo_svm.models.svm."""

from __future__ import annotations

import numpy as np
import pytest

from smo_svm import SVM, ModelState, SVMConfig
from smo_svm.exceptions import (
    InvalidInputError,
    NotReadyError,
    NumericDegeneracyError,
    TrainingDidNotConvergeError,
    UnsupportedOperationError,
)
from smo_svm.models.base_model import BaseModel
from smo_svm.models.kernels import Kernel
from smo_svm.models.smo import as_random_source, smo_solve
from smo_svm.models.whitening import MinMaxWhitener


def constant_kernel(X, Y):
    return np.ones((len(X), len(Y)))


# ── construction ─────────────────────────────────────────────────
class TestConstruction:
    """Config handling and the initial state."""

    def test_is_base_model(self) -> None:
        assert issubclass(SVM, BaseModel)
        assert SVM.name == "SVM"

    def test_defaults(self) -> None:
        svm = SVM()
        assert svm.config == SVMConfig()
        assert svm.state is ModelState.UNTRAINED
        assert not svm.is_ready

    def test_keyword_overrides(self) -> None:
        svm = SVM(SVMConfig(C=2.0), kernel="rbf", kernel_options={"sigma": 0.5})
        assert svm.config.C == 2.0
        assert svm.kernel.kind == "gaussian"
        assert svm.kernel.options == {"sigma": 0.5}

    def test_dict_config(self) -> None:
        svm = SVM({"C": 3.0, "maxPasses": 4})
        assert svm.config.C == 3.0
        assert svm.config.max_passes == 4


# ── training ─────────────────────────────────────────────────────
class TestTraining:
    """Training on small problems."""

    def test_toy_dataset(self, toy_data) -> None:
        X, y = toy_data
        svm = SVM(random_state=0).train(X, y)
        assert svm.state is ModelState.TRAINED
        assert svm.iterations < svm.config.max_iterations
        assert svm.predict([0.0, 0.5]) == -1
        assert svm.predict([5.0, 5.5]) == 1

    def test_two_point_solution(self) -> None:
        svm = SVM(random_state=0).train([[10.0], [20.0]], [-1, 1])
        assert np.allclose(svm.weights, [1.0])
        assert svm.bias == pytest.approx(-0.5)
        assert np.allclose(svm.alphas, [1.0, 1.0])
        assert svm.margin([18.0]) == pytest.approx(0.3)
        assert svm.predict([12.0]) == -1
        assert svm.predict([18.0]) == 1

    def test_fit_alias_returns_self(self, toy_data) -> None:
        X, y = toy_data
        svm = SVM(random_state=0)
        assert svm.fit(X, y) is svm

    def test_accepts_lists(self) -> None:
        svm = SVM(random_state=0).train([[0, 0], [0, 1], [5, 5], [5, 6]], [-1, -1, 1, 1])
        assert svm.predict([5, 5.5]) == 1

    def test_iris_setosa_linear(self, iris_setosa) -> None:
        X, y = iris_setosa
        svm = SVM(random_state=0).train(X, y)
        assert np.mean(svm.predict(X) == y) >= 0.95

    def test_iris_setosa_rbf(self, iris_setosa) -> None:
        X, y = iris_setosa
        svm = SVM(kernel="rbf", kernel_options={"sigma": 0.2}, random_state=0).train(X, y)
        assert svm.weights is None
        assert np.mean(svm.predict(X) == y) > 0.95

    def test_without_whitening(self, toy_data) -> None:
        X, y = toy_data
        svm = SVM(whitening=False, random_state=0).train(X, y)
        assert svm.whitening_stats is None
        assert svm.predict([0.0, 0.5]) == -1
        assert svm.predict([5.0, 5.5]) == 1

    def test_inputs_are_copied(self, toy_data) -> None:
        X, y = toy_data
        X_in, y_in = X.copy(), y.copy()
        svm = SVM(kernel="rbf", random_state=0).train(X_in, y_in)
        before = svm.margin(X)
        X_in[:] = 100.0
        y_in[:] = 1
        assert np.array_equal(svm.margin(X), before)


class TestSupportVectors:
    """Pruning to support vectors."""

    @pytest.mark.parametrize("kernel", ["linear", "rbf"])
    def test_alphas_within_bounds(self, blobs, kernel: str) -> None:
        X, y = blobs
        svm = SVM(C=0.8, kernel=kernel, random_state=2).train(X, y)
        alphas = svm.alphas
        assert len(alphas) == len(svm.support_vectors())
        assert np.all(alphas > svm.config.alpha_tol)
        assert np.all(alphas <= svm.config.C + 1e-9)

    def test_pruned_rows_had_small_alphas(self, blobs) -> None:
        X, y = blobs
        svm = SVM(kernel="rbf", random_state=4).train(X, y)

        # replay the solver with the same seed on the same Gram matrix
        gram = Kernel("rbf").compute(MinMaxWhitener().fit_transform(X))
        full = smo_solve(gram, y, svm.config, as_random_source(seed=4)).alphas

        kept = svm.support_vectors()
        dropped = np.setdiff1d(np.arange(len(y)), kept)
        assert np.array_equal(kept, np.flatnonzero(full > svm.config.alpha_tol))
        assert np.all(full[dropped] <= svm.config.alpha_tol)
        assert np.array_equal(svm.alphas, full[kept])

    def test_kernel_decision_matches_linear_weights(self, blobs) -> None:
        X, y = blobs
        linear = SVM(random_state=3).train(X, y)
        # (1·x·y + 0)^1 has the same Gram matrix as the linear kernel
        poly = SVM(
            kernel="polynomial",
            kernel_options={"degree": 1, "constant": 0.0, "scale": 1.0},
            random_state=3,
        ).train(X, y)
        assert np.array_equal(linear.support_vectors(), poly.support_vectors())
        assert np.allclose(linear.margin(X), poly.margin(X))


class TestDeterminism:
    """Same seed, same inputs → same model."""

    @pytest.mark.parametrize("kernel", ["linear", "rbf"])
    def test_repeatable(self, blobs, kernel: str) -> None:
        X, y = blobs
        a = SVM(kernel=kernel, random_state=11).train(X, y)
        b = SVM(kernel=kernel, random_state=11).train(X, y)
        assert a.bias == b.bias
        assert np.array_equal(a.alphas, b.alphas)
        assert np.array_equal(a.support_vectors(), b.support_vectors())
        if kernel == "linear":
            assert np.array_equal(a.weights, b.weights)

    def test_retrain_same_instance(self, blobs) -> None:
        X, y = blobs
        svm = SVM(random_state=11)
        first = svm.train(X, y).bias
        assert svm.train(X, y).bias == first


class TestDegenerateKernel:
    """A kernel with eta >= 0 for every pair never updates any alpha."""

    def test_all_alphas_zero(self, toy_data) -> None:
        X, y = toy_data
        svm = SVM(kernel=constant_kernel, random_state=0).train(X, y)
        assert svm.iterations == svm.config.max_passes
        assert len(svm.support_vectors()) == 0
        assert svm.bias == 0.0
        # constant decision function b = 0 → everything is -1
        assert svm.predict(X).tolist() == [-1, -1, -1, -1]
        assert svm.margin([3.0, 3.0]) == 0.0


# ── errors ───────────────────────────────────────────────────────
class TestTrainingErrors:
    """Typed failures and state preservation."""

    def test_mismatched_lengths(self) -> None:
        with pytest.raises(InvalidInputError):
            SVM().train([[0, 0], [1, 1], [2, 2]], [-1, 1])

    def test_single_sample(self) -> None:
        with pytest.raises(InvalidInputError):
            SVM().train([[0, 0]], [1])

    def test_not_a_matrix(self) -> None:
        with pytest.raises(InvalidInputError):
            SVM().train([0.0, 1.0, 2.0], [-1, 1, 1])

    def test_no_features(self) -> None:
        with pytest.raises(InvalidInputError):
            SVM().train(np.empty((3, 0)), [-1, 1, 1])

    def test_constant_feature(self) -> None:
        with pytest.raises(NumericDegeneracyError):
            SVM().train([[0.0, 1.0], [1.0, 1.0], [2.0, 1.0]], [-1, 1, 1])

    def test_convergence_on_last_allowed_sweep(self, toy_data) -> None:
        X, y = toy_data
        svm = SVM(kernel=constant_kernel, max_passes=10, max_iterations=10, random_state=0)
        svm.train(X, y)
        assert svm.state is ModelState.TRAINED
        assert svm.iterations == 10

    def test_non_convergence_leaves_untrained(self, toy_data) -> None:
        X, y = toy_data
        svm = SVM(max_iterations=1, random_state=0)
        with pytest.raises(TrainingDidNotConvergeError):
            svm.train(X, y)
        assert svm.state is ModelState.UNTRAINED
        with pytest.raises(NotReadyError):
            svm.predict([0.0, 0.0])

    def test_failed_retrain_keeps_model(self, toy_data) -> None:
        X, y = toy_data
        svm = SVM(random_state=0).train(X, y)
        before = svm.margin(X)
        with pytest.raises(InvalidInputError):
            svm.train(X[:3], y)
        with pytest.raises(NumericDegeneracyError):
            svm.train(np.column_stack([X[:, 0], np.ones(4)]), y)
        assert svm.state is ModelState.TRAINED
        assert np.array_equal(svm.margin(X), before)

    def test_feature_count_is_fixed(self, toy_data) -> None:
        X, y = toy_data
        svm = SVM(random_state=0).train(X, y)
        with pytest.raises(InvalidInputError):
            svm.train(np.column_stack([X, X[:, 0] * 2]), y)
        with pytest.raises(InvalidInputError):
            svm.predict([1.0, 2.0, 3.0])


class TestNotReady:
    """Every query before training or loading fails."""

    @pytest.mark.parametrize(
        "call",
        [
            lambda svm: svm.predict([0.0, 0.0]),
            lambda svm: svm.margin([0.0, 0.0]),
            lambda svm: svm.export(),
            lambda svm: svm.support_vectors(),
            lambda svm: svm.bias,
            lambda svm: svm.weights,
        ],
        ids=["predict", "margin", "export", "support_vectors", "bias", "weights"],
    )
    def test_raises(self, call) -> None:
        with pytest.raises(NotReadyError):
            call(SVM())


# ── decision function ────────────────────────────────────────────
class TestDecisionFunction:
    """Margins, thresholds and batch prediction."""

    def test_single_vs_batch(self, blobs) -> None:
        X, y = blobs
        svm = SVM(kernel="rbf", random_state=0).train(X, y)
        batch = svm.predict(X)
        assert isinstance(batch, np.ndarray)
        assert batch.tolist() == [svm.predict(row) for row in X]
        assert isinstance(svm.predict(X[0]), int)
        assert isinstance(svm.margin(X[0]), float)

    def test_threshold_is_strict(self, toy_data) -> None:
        X, y = toy_data
        svm = SVM(random_state=0).train(X, y)
        scores = svm.margin(X)
        assert svm.predict(X).tolist() == [1 if s > 0 else -1 for s in scores]

    def test_margin_without_whitening_flag(self, toy_data) -> None:
        X, y = toy_data
        svm = SVM(random_state=0).train(X, y)
        whitened = MinMaxWhitener.from_stats(svm.whitening_stats).transform(X)
        assert np.allclose(svm.margin(whitened, whiten=False), svm.margin(X))

    def test_evaluate_metrics(self, blobs) -> None:
        X, y = blobs
        metrics = SVM(random_state=0).train(X, y).evaluate(X, y)
        for key in ("accuracy", "precision", "recall", "f1", "roc_auc"):
            assert 0.0 <= metrics[key] <= 1.0
        assert metrics["accuracy"] > 0.8

    def test_evaluate_single_class_has_nan_auc(self, toy_data) -> None:
        X, y = toy_data
        metrics = SVM(random_state=0).train(X, y).evaluate(X[:2], y[:2])
        assert np.isnan(metrics["roc_auc"])


class TestSupportVectorQueries:
    """support_vectors() on trained and loaded models."""

    def test_loaded_linear_is_unsupported(self, toy_data) -> None:
        X, y = toy_data
        loaded = SVM.from_snapshot(SVM(random_state=0).train(X, y).export())
        with pytest.raises(UnsupportedOperationError):
            loaded.support_vectors()
        with pytest.raises(UnsupportedOperationError):
            loaded.alphas

    def test_loaded_kernel_model_indexes_snapshot_rows(self, blobs) -> None:
        X, y = blobs
        trained = SVM(kernel="rbf", random_state=0).train(X, y)
        loaded = SVM.from_snapshot(trained.export())
        n_sv = len(trained.support_vectors())
        assert loaded.support_vectors().tolist() == list(range(n_sv))
        assert np.array_equal(loaded.alphas, trained.alphas)

    def test_custom_kernel_cannot_be_exported(self, toy_data) -> None:
        X, y = toy_data
        svm = SVM(kernel=constant_kernel, random_state=0).train(X, y)
        with pytest.raises(UnsupportedOperationError):
            svm.export()
