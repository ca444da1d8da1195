"""Evaluation pipeline — metrics, confusion matrix and ROC curve.

Usage:
    python -m smo_svm.pipeline.evaluate [--config path/to/config.yaml]
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional

import matplotlib
matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pandas as pd  # noqa: E402
import seaborn as sns  # noqa: E402
from sklearn.metrics import (  # noqa: E402
    classification_report,
    confusion_matrix,
    roc_auc_score,
    roc_curve,
)

from smo_svm.config import load_config, output_dir  # noqa: E402
from smo_svm.data.loader import DataBundle, load_dataset  # noqa: E402
from smo_svm.models.base_model import BaseModel  # noqa: E402
from smo_svm.pipeline.predict import load_model  # noqa: E402
from smo_svm.utils.logger import get_logger  # noqa: E402

log = get_logger(__name__)

DPI = 150
LABELS = [-1, 1]
sns.set_theme(style="whitegrid", palette="muted", font_scale=1.05)


# ─────────────────────────────────────────────────────────────────
#  Confusion matrix
# ─────────────────────────────────────────────────────────────────
def plot_confusion_matrix(
    model: BaseModel,
    X_test: np.ndarray,
    y_test: np.ndarray,
    class_names: list[str],
    save_dir: Path,
) -> Path:
    """Plot and save a confusion-matrix heatmap.

    Args:
        model: Trained or loaded model.
        X_test: Test features.
        y_test: True ``±1`` labels.
        class_names: Display names for ``-1`` and ``+1``, in that order.
        save_dir: Directory for the PNG.

    Returns:
        Path of the saved figure.
    """
    y_pred = model.predict(X_test)
    cm = confusion_matrix(y_test, y_pred, labels=LABELS)

    fig, ax = plt.subplots(figsize=(6, 5))
    sns.heatmap(
        cm,
        annot=True,
        fmt="d",
        cmap="Blues",
        xticklabels=class_names,
        yticklabels=class_names,
        ax=ax,
        linewidths=0.5,
    )
    ax.set_xlabel("Predicted")
    ax.set_ylabel("Actual")
    ax.set_title(f"Confusion Matrix — {model.name}", fontsize=13, fontweight="bold")
    fig.tight_layout()
    path = save_dir / f"confusion_matrix_{model.name.lower()}.png"
    fig.savefig(path, dpi=DPI)
    plt.close(fig)
    return path


# ─────────────────────────────────────────────────────────────────
#  ROC curve
# ─────────────────────────────────────────────────────────────────
def plot_roc_curve(
    model: BaseModel,
    X_test: np.ndarray,
    y_test: np.ndarray,
    save_dir: Path,
) -> Path:
    """Plot the ROC curve obtained by thresholding the raw margins.

    Args:
        model: Trained or loaded model.
        X_test: Test features.
        y_test: True ``±1`` labels (both classes must be present).
        save_dir: Directory for the PNG.

    Returns:
        Path of the saved figure.
    """
    scores = model.decision_function(X_test)
    fpr, tpr, _ = roc_curve(y_test, scores, pos_label=1)
    auc_val = roc_auc_score(y_test, scores)

    fig, ax = plt.subplots(figsize=(8, 6))
    ax.plot(fpr, tpr, lw=2, label=f"{model.name} (AUC={auc_val:.3f})")
    ax.plot([0, 1], [0, 1], "k--", lw=1, alpha=0.5, label="Random")
    ax.set_xlabel("False Positive Rate")
    ax.set_ylabel("True Positive Rate")
    ax.set_title("ROC Curve", fontsize=14, fontweight="bold")
    ax.legend(loc="lower right", fontsize=10)
    sns.despine()
    fig.tight_layout()
    path = save_dir / "roc_curve.png"
    fig.savefig(path, dpi=DPI)
    plt.close(fig)
    return path


# ─────────────────────────────────────────────────────────────────
#  Full evaluation
# ─────────────────────────────────────────────────────────────────
def evaluate_model(
    model: BaseModel,
    bundle: DataBundle,
    plots_dir: Path,
    reports_dir: Path,
) -> dict:
    """Compute metrics and write the report and plots for one model.

    Returns:
        Metrics dictionary (see :meth:`BaseModel.evaluate`).
    """
    metrics = model.evaluate(bundle.X_test, bundle.y_test)
    for k, v in metrics.items():
        log.info("    %-12s: %.4f", k, v)

    names = [f"not {bundle.positive_class}", bundle.positive_class]
    report = classification_report(
        bundle.y_test, model.predict(bundle.X_test), labels=LABELS,
        target_names=names, zero_division=0,
    )
    (reports_dir / f"classification_report_{model.name.lower()}.txt").write_text(
        report, encoding="utf-8"
    )

    plot_confusion_matrix(model, bundle.X_test, bundle.y_test, names, plots_dir)
    if len(np.unique(bundle.y_test)) == 2:
        plot_roc_curve(model, bundle.X_test, bundle.y_test, plots_dir)
    return metrics


def evaluate_saved(
    config: Optional[dict] = None,
    model_path: Optional[Path] = None,
) -> pd.DataFrame:
    """Evaluate the saved model on the test split and generate artefacts.

    Args:
        config: Configuration dictionary.
        model_path: Saved model; defaults to the training output.

    Returns:
        One-row DataFrame of metrics (empty when no model is saved).
    """
    if config is None:
        config = load_config()

    try:
        model = load_model(model_path, config)
    except FileNotFoundError as exc:
        log.warning("%s. Run `python -m smo_svm.pipeline.train` first.", exc)
        return pd.DataFrame()

    bundle = load_dataset(config)
    plots_dir = output_dir(config, "plots")
    reports_dir = output_dir(config, "reports")

    log.info("── Evaluation pipeline ───────────────────────────")
    metrics = evaluate_model(model, bundle, plots_dir, reports_dir)

    results = pd.DataFrame([{"model": model.name, **metrics}])
    results.to_csv(reports_dir / "evaluation_results.csv", index=False)
    log.info("Plots → %s, reports → %s", plots_dir, reports_dir)
    return results


# ── CLI ──────────────────────────────────────────────────────────
def main() -> None:
    parser = argparse.ArgumentParser(description="Evaluate a saved SMO-SVM model.")
    parser.add_argument("--config", type=Path, default=None, help="YAML configuration")
    parser.add_argument("--model", type=Path, default=None, help="Saved model file")
    args = parser.parse_args()
    evaluate_saved(load_config(args.config), args.model)


if __name__ == "__main__":
    main()
