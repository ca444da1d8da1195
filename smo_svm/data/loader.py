"""Dataset loading for the SMO-SVM pipelines.

Loads a bundled scikit-learn dataset or a CSV file, reduces the target to
``±1`` labels (one class against the rest) and makes a stratified
train/test split.  Whitening is left to the model.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import numpy as np
import pandas as pd
from sklearn.datasets import load_breast_cancer, load_iris, load_wine
from sklearn.model_selection import train_test_split

from smo_svm.config import load_config
from smo_svm.exceptions import InvalidInputError
from smo_svm.utils.logger import get_logger

log = get_logger(__name__)

BUILTIN_DATASETS: Dict[str, Callable[..., Any]] = {
    "iris": load_iris,
    "breast_cancer": load_breast_cancer,
    "wine": load_wine,
}


@dataclass
class DataBundle:
    """Container for train/test splits and metadata."""

    X_train: np.ndarray
    X_test: np.ndarray
    y_train: np.ndarray
    y_test: np.ndarray
    feature_names: list[str]
    class_names: list[str]
    positive_class: str


def encode_labels(y: np.ndarray | pd.Series, positive: Any) -> np.ndarray:
    """Map *positive* to ``+1`` and every other value to ``-1``.

    Args:
        y: Raw target values.
        positive: The target value treated as the positive class.

    Returns:
        Integer array of ``+1`` / ``-1``.

    Raises:
        InvalidInputError: If *positive* never occurs in *y*.
    """
    y = np.asarray(y)
    mask = y == positive
    if not mask.any():
        raise InvalidInputError(f"Positive class {positive!r} not found in the target")
    return np.where(mask, 1, -1)


def read_frame(dataset_cfg: Dict[str, Any]) -> tuple[pd.DataFrame, pd.Series, list[str]]:
    """Read features, raw target and class names described by *dataset_cfg*.

    Args:
        dataset_cfg: The ``dataset`` section of the configuration.

    Returns:
        ``(features, target, class_names)``.
    """
    path = dataset_cfg.get("path")
    if path:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"CSV file not found: {path}")
        target_col = dataset_cfg.get("target", "target")
        df = pd.read_csv(path)
        if target_col not in df.columns:
            raise InvalidInputError(f"CSV has no {target_col!r} column")
        target = df.pop(target_col)
        features = df.select_dtypes(include=[np.number])
        classes = [str(c) for c in sorted(target.unique())]
        return features, target, classes

    name = dataset_cfg.get("name", "iris")
    if name not in BUILTIN_DATASETS:
        raise InvalidInputError(
            f"Unknown dataset {name!r}. Available: {sorted(BUILTIN_DATASETS)}"
        )
    bunch = BUILTIN_DATASETS[name](as_frame=True)
    return bunch.data, bunch.target, [str(c) for c in bunch.target_names]


def load_dataset(config: Optional[dict] = None) -> DataBundle:
    """Load the configured dataset as a ``±1`` binary problem and split it.

    Args:
        config: Configuration dict.  Loaded from disk when *None*.

    Returns:
        A :class:`DataBundle` with all artefacts.
    """
    if config is None:
        config = load_config()

    dataset_cfg: dict = config.get("dataset") or {}
    random_state: int = config.get("random_state", 42)
    test_size: float = config.get("test_size", 0.2)

    X, target, class_names = read_frame(dataset_cfg)

    positive = dataset_cfg.get("positive_class", 0)
    if dataset_cfg.get("path"):
        y = encode_labels(target, positive)
        positive_name = str(positive)
    else:
        # built-in targets are integer indices into class_names
        if isinstance(positive, str):
            if positive not in class_names:
                raise InvalidInputError(
                    f"Unknown class {positive!r}; expected one of {class_names}"
                )
            positive = class_names.index(positive)
        y = encode_labels(target, positive)
        positive_name = class_names[positive]

    X_train, X_test, y_train, y_test = train_test_split(
        X.to_numpy(dtype=float),
        y,
        test_size=test_size,
        random_state=random_state,
        stratify=y,
    )
    log.info(
        "Loaded %s: %d train / %d test rows, %d features, positive class %r",
        dataset_cfg.get("path") or dataset_cfg.get("name", "iris"),
        len(X_train),
        len(X_test),
        X.shape[1],
        positive_name,
    )

    return DataBundle(
        X_train=X_train,
        X_test=X_test,
        y_train=y_train,
        y_test=y_test,
        feature_names=list(X.columns),
        class_names=class_names,
        positive_class=positive_name,
    )


# ── CLI convenience ──────────────────────────────────────────────
if __name__ == "__main__":
    bundle = load_dataset()
    print(f"Train set : {bundle.X_train.shape}")
    print(f"Test set  : {bundle.X_test.shape}")
    print(f"Features  : {len(bundle.feature_names)}")
    print(f"Positive  : {bundle.positive_class}")
