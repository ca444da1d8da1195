"""Prediction module — load a saved model and classify new samples.

Usage:
    python -m smo_svm.pipeline.predict --model outputs/models/svm.json \
        --input "[5.1, 3.5, 1.4, 0.2]"
"""

from __future__ import annotations

import argparse
import ast
import sys
from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd

from smo_svm.config import load_config, output_dir
from smo_svm.exceptions import SVMError
from smo_svm.models.svm import SVM
from smo_svm.pipeline.train import MODEL_FILENAME


def load_model(model_path: Optional[Path | str] = None, config: Optional[dict] = None) -> SVM:
    """Load a saved model.

    Args:
        model_path: Snapshot file.  Defaults to the training pipeline's
            output under ``paths.models``.
        config: Configuration dictionary, used only to find the default path.

    Raises:
        FileNotFoundError: If the model file does not exist.
    """
    if model_path is None:
        if config is None:
            config = load_config()
        model_path = output_dir(config, "models") / MODEL_FILENAME
    return SVM.load(model_path)


def predict(
    model: SVM | Path | str,
    input_data: np.ndarray | pd.DataFrame | list[float] | list[list[float]],
) -> dict:
    """Run inference on new sample(s).

    Args:
        model: A ready :class:`SVM` or the path of a saved one.
        input_data: One raw feature vector or a matrix of them.

    Returns:
        ``{"prediction": ±1, "margin": float}`` for one sample, or
        ``{"predictions": [...]}`` for several.
    """
    if not isinstance(model, SVM):
        model = load_model(model)

    X = np.asarray(input_data, dtype=float)
    if X.ndim == 1:
        return {
            "prediction": int(model.predict(X)),
            "margin": float(model.margin(X)),
        }

    margins = model.margin(X)
    labels = model.predict(X)
    return {
        "predictions": [
            {"prediction": int(label), "margin": float(m)}
            for label, m in zip(labels, margins)
        ]
    }


# ── CLI ──────────────────────────────────────────────────────────
def main() -> None:
    """Parse CLI arguments and run inference."""
    parser = argparse.ArgumentParser(description="Classify samples with a saved SMO-SVM model.")
    parser.add_argument(
        "--model",
        type=Path,
        default=None,
        help="Saved model (.json or joblib); defaults to the training output",
    )
    parser.add_argument(
        "--input",
        type=str,
        required=True,
        help='Feature vector(s) as a Python list string, e.g. "[5.1, 3.5, 1.4, 0.2]"',
    )
    args = parser.parse_args()

    try:
        features = ast.literal_eval(args.input)
    except (ValueError, SyntaxError) as exc:
        print(f"Error parsing input: {exc}")
        sys.exit(1)

    try:
        result = predict(load_model(args.model), features)
    except (SVMError, FileNotFoundError) as exc:
        print(f"Error: {exc}")
        sys.exit(1)

    rows = result.get("predictions", [result])
    print("\n── Prediction ──")
    for row in rows:
        print(f"  Class : {row['prediction']:+d}   margin : {row['margin']:.4f}")


if __name__ == "__main__":
    main()
