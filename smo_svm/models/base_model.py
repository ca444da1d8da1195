"""Abstract base class for classifiers in the SMO-SVM package."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict

import numpy as np
import pandas as pd
from sklearn.metrics import (
    accuracy_score,
    f1_score,
    precision_score,
    recall_score,
    roc_auc_score,
)

from smo_svm.models.decision import classify
from smo_svm.models.snapshot import ModelSnapshot, load_snapshot, save_snapshot


class BaseModel(ABC):
    """Interface shared by binary ``±1`` classifiers.

    Subclasses implement training, raw scoring and snapshot export/import;
    prediction thresholds, evaluation and persistence are provided here.

    Attributes:
        name: Human-readable model name (e.g. ``"SVM"``).
    """

    name: str = "BaseModel"

    @abstractmethod
    def fit(
        self,
        X_train: pd.DataFrame | np.ndarray,
        y_train: pd.Series | np.ndarray,
    ) -> "BaseModel":
        """Fit the model on the training data.

        Args:
            X_train: Training feature matrix.
            y_train: Training labels in ``{+1, -1}``.

        Returns:
            ``self`` for chaining.
        """
        ...

    @abstractmethod
    def decision_function(self, X: pd.DataFrame | np.ndarray) -> np.ndarray:
        """Return the raw margin of every row of *X*."""
        ...

    @abstractmethod
    def export(self) -> ModelSnapshot:
        """Return the state needed to rebuild the model without retraining."""
        ...

    @classmethod
    @abstractmethod
    def from_snapshot(cls, snapshot: ModelSnapshot | Dict[str, Any]) -> "BaseModel":
        """Rebuild a model from :meth:`export` output."""
        ...

    def predict(self, X: pd.DataFrame | np.ndarray) -> Any:
        """Generate ``+1`` / ``-1`` class predictions.

        Args:
            X: Feature matrix.

        Returns:
            1-D array of predicted class labels.
        """
        return classify(self.decision_function(X))

    def evaluate(
        self,
        X_test: pd.DataFrame | np.ndarray,
        y_test: pd.Series | np.ndarray,
    ) -> Dict[str, float]:
        """Compute a dictionary of evaluation metrics.

        ROC AUC is computed from the raw margins and is ``nan`` when
        *y_test* holds a single class.

        Args:
            X_test: Test feature matrix.
            y_test: True labels in ``{+1, -1}``.

        Returns:
            Dictionary with accuracy, precision, recall, f1, and roc_auc.
        """
        y_true = np.asarray(y_test).reshape(-1)
        scores = self.decision_function(X_test)
        y_pred = classify(scores)

        roc_auc = float("nan")
        if len(np.unique(y_true)) == 2:
            roc_auc = float(roc_auc_score(y_true, scores))

        return {
            "accuracy": float(accuracy_score(y_true, y_pred)),
            "precision": float(precision_score(y_true, y_pred, pos_label=1, zero_division=0)),
            "recall": float(recall_score(y_true, y_pred, pos_label=1, zero_division=0)),
            "f1": float(f1_score(y_true, y_pred, pos_label=1, zero_division=0)),
            "roc_auc": roc_auc,
        }

    def save(self, path: Path | str) -> Path:
        """Serialise the model snapshot to disk.

        Args:
            path: File path; ``*.json`` is written as JSON, anything else
                with joblib.
        """
        return save_snapshot(self.export(), path)

    @classmethod
    def load(cls, path: Path | str) -> "BaseModel":
        """Deserialise a model saved with :meth:`save`.

        Args:
            path: Path to the saved snapshot.

        Returns:
            A model in the *loaded* state.
        """
        return cls.from_snapshot(load_snapshot(path))
