"""Exportable model state and its persistence.

A :class:`ModelSnapshot` carries everything needed to rebuild the decision
function without retraining: hyperparameters, bias, whitening statistics
and *either* the linear weight vector *or* the support vectors with their
labels and alphas.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import joblib
import numpy as np

from smo_svm.exceptions import InvalidInputError
from smo_svm.utils.logger import get_logger

log = get_logger(__name__)

# camelCase record keys -> snapshot keys
_KEY_ALIASES: Dict[str, str] = {
    "b": "bias",
    "W": "weights",
    "X": "support_vectors",
    "Y": "labels",
    "minMax": "whitening_stats",
}


@dataclass
class ModelSnapshot:
    """Minimal state of a trained SVM.

    Attributes:
        options: Hyperparameters, as produced by ``SVMConfig.to_dict``.
        bias: Decision function offset.
        whitening_stats: ``(min, max)`` per feature, or *None* when
            whitening is disabled.
        weights: Primal weights (linear kernel only).
        support_vectors: Whitened support vectors (non-linear kernels only).
        labels: Labels of the support vectors.
        alphas: Dual coefficients of the support vectors.
    """

    options: Dict[str, Any]
    bias: float
    whitening_stats: Optional[List[Tuple[float, float]]] = None
    weights: Optional[List[float]] = None
    support_vectors: Optional[List[List[float]]] = None
    labels: Optional[List[int]] = None
    alphas: Optional[List[float]] = None

    def __post_init__(self) -> None:
        has_linear = self.weights is not None
        kernel_parts = (self.support_vectors, self.labels, self.alphas)
        has_kernel = any(p is not None for p in kernel_parts)
        if has_linear == has_kernel:
            raise InvalidInputError(
                "A snapshot holds exactly one of `weights` or "
                "`support_vectors`/`labels`/`alphas`"
            )
        if has_kernel:
            if any(p is None for p in kernel_parts):
                raise InvalidInputError(
                    "`support_vectors`, `labels` and `alphas` must all be present"
                )
            if not len(self.support_vectors) == len(self.labels) == len(self.alphas):
                raise InvalidInputError(
                    "`support_vectors`, `labels` and `alphas` must have the same length"
                )

    @property
    def is_linear(self) -> bool:
        return self.weights is not None

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-compatible record; absent fields are omitted."""
        record: Dict[str, Any] = {
            "options": dict(self.options),
            "bias": float(self.bias),
            "whitening_stats": (
                [[float(lo), float(hi)] for lo, hi in self.whitening_stats]
                if self.whitening_stats is not None
                else None
            ),
        }
        if self.is_linear:
            record["weights"] = [float(w) for w in self.weights]
        else:
            record["support_vectors"] = [[float(v) for v in row] for row in self.support_vectors]
            record["labels"] = [int(label) for label in self.labels]
            record["alphas"] = [float(a) for a in self.alphas]
        return record

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> "ModelSnapshot":
        """Parse a record written by :meth:`to_dict`.

        camelCase records (``b``, ``W``, ``X``, ``Y``, ``minMax`` with
        ``{"min": .., "max": ..}`` entries) are accepted as well.

        Raises:
            InvalidInputError: If required keys are missing or both payload
                shapes are present.
        """
        if not isinstance(record, dict):
            raise InvalidInputError(f"Snapshot must be a mapping, got {type(record).__name__}")
        data = {_KEY_ALIASES.get(k, k): v for k, v in record.items()}
        for key in ("options", "bias"):
            if key not in data:
                raise InvalidInputError(f"Snapshot is missing {key!r}")

        stats = data.get("whitening_stats")
        if stats is not None:
            stats = [
                (float(s["min"]), float(s["max"])) if isinstance(s, dict) else (float(s[0]), float(s[1]))
                for s in stats
            ]

        return cls(
            options=dict(data["options"]),
            bias=float(data["bias"]),
            whitening_stats=stats,
            weights=data.get("weights"),
            support_vectors=data.get("support_vectors"),
            labels=data.get("labels"),
            alphas=data.get("alphas"),
        )

    # ── arrays for the decision function ─────────────────────────
    def weights_array(self) -> np.ndarray:
        return np.asarray(self.weights, dtype=float)

    def support_arrays(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        sv = np.asarray(self.support_vectors, dtype=float)
        if sv.size == 0:
            n_features = len(self.whitening_stats) if self.whitening_stats else 0
            sv = sv.reshape(0, n_features)
        return (
            sv,
            np.asarray(self.labels, dtype=float),
            np.asarray(self.alphas, dtype=float),
        )


def save_snapshot(snapshot: ModelSnapshot, path: Path | str) -> Path:
    """Persist a snapshot: JSON for ``*.json`` paths, joblib otherwise.

    Args:
        snapshot: The snapshot to write.
        path: Destination file.

    Returns:
        The written path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() == ".json":
        path.write_text(json.dumps(snapshot.to_dict(), indent=2), encoding="utf-8")
    else:
        joblib.dump(snapshot.to_dict(), path)
    log.info("Saved model → %s", path)
    return path


def load_snapshot(path: Path | str) -> ModelSnapshot:
    """Read a snapshot written by :func:`save_snapshot`.

    Raises:
        FileNotFoundError: If *path* does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Model file not found: {path}")
    if path.suffix.lower() == ".json":
        record = json.loads(path.read_text(encoding="utf-8"))
    else:
        record = joblib.load(path)
    log.info("Loaded model ← %s", path)
    return ModelSnapshot.from_dict(record)
