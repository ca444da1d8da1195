"""Training pipeline: cross-validate the SVM, fit it and save the model.

Usage:
    python -m smo_svm.pipeline.train [--config path/to/config.yaml]
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Dict, Optional, Tuple

import numpy as np
import pandas as pd
from sklearn.model_selection import LeaveOneOut, StratifiedKFold

from smo_svm.config import SVMConfig, load_config, output_dir, svm_config_from
from smo_svm.data.loader import DataBundle, load_dataset
from smo_svm.models.svm import SVM
from smo_svm.utils.logger import get_logger

log = get_logger(__name__)

MODEL_FILENAME = "svm.json"


def cross_validate_model(
    svm_config: SVMConfig,
    X: np.ndarray,
    y: np.ndarray,
    cv: int | str = 5,
    random_state: int = 42,
) -> Dict[str, float]:
    """Cross-validate a fresh :class:`SVM` per fold.

    Args:
        svm_config: Hyperparameters of every fold's model.
        X: Feature matrix.
        y: ``±1`` labels.
        cv: Number of stratified folds, or ``"loo"`` for leave-one-out.
        random_state: Seed of the fold shuffling.

    Returns:
        Dictionary with ``accuracy_mean``, ``accuracy_std`` and ``n_folds``.
    """
    X = np.asarray(X, dtype=float)
    y = np.asarray(y).reshape(-1)
    if isinstance(cv, str) and cv.lower() == "loo":
        splitter = LeaveOneOut()
    else:
        splitter = StratifiedKFold(n_splits=int(cv), shuffle=True, random_state=random_state)

    scores: list[float] = []
    for train_idx, test_idx in splitter.split(X, y):
        model = SVM(svm_config).train(X[train_idx], y[train_idx])
        preds = np.atleast_1d(model.predict(X[test_idx]))
        scores.append(float(np.mean(preds == y[test_idx])))

    metrics = {
        "accuracy_mean": float(np.mean(scores)),
        "accuracy_std": float(np.std(scores)),
        "n_folds": float(len(scores)),
    }
    log.info(
        "Cross-validation (%d folds): accuracy %.4f ± %.4f",
        len(scores), metrics["accuracy_mean"], metrics["accuracy_std"],
    )
    return metrics


def train_model(config: Optional[dict] = None) -> Tuple[SVM, pd.DataFrame]:
    """Cross-validate, fit on the training split, evaluate and save.

    Args:
        config: Configuration dictionary.  Loaded from disk when *None*.

    Returns:
        Tuple of (fitted model, one-row DataFrame of results).
    """
    if config is None:
        config = load_config()

    bundle: DataBundle = load_dataset(config)
    svm_config = svm_config_from(config)
    rs: int = config.get("random_state", 42)

    log.info("── Training pipeline ─────────────────────────────")
    cv_metrics = cross_validate_model(
        svm_config, bundle.X_train, bundle.y_train, config.get("cv_folds", 5), rs
    )

    model = SVM(svm_config).train(bundle.X_train, bundle.y_train)
    test_metrics = model.evaluate(bundle.X_test, bundle.y_test)
    for k, v in test_metrics.items():
        log.info("    test %-10s: %.4f", k, v)

    model_path = model.save(output_dir(config, "models") / MODEL_FILENAME)

    results_df = pd.DataFrame([{
        "model": model.name,
        "kernel": model.kernel.kind,
        "n_support_vectors": len(model.support_vectors()),
        "sweeps": model.iterations,
        **{f"cv_{k}": v for k, v in cv_metrics.items()},
        **{f"test_{k}": v for k, v in test_metrics.items()},
    }])
    csv_path = output_dir(config, "reports") / "cv_results.csv"
    results_df.to_csv(csv_path, index=False)
    log.info("Model → %s, results → %s", model_path, csv_path)

    return model, results_df


# ── CLI ──────────────────────────────────────────────────────────
def main() -> None:
    """Parse CLI arguments and run the training pipeline."""
    parser = argparse.ArgumentParser(description="Train an SMO-SVM model.")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a YAML configuration (defaults to the bundled one)",
    )
    args = parser.parse_args()
    train_model(load_config(args.config))


if __name__ == "__main__":
    main()
