"""
conftest.py – Shared fixtures for the SMO-SVM test suite.
"""
from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest
from sklearn.datasets import load_iris, make_blobs

# Ensure project root is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


# ═══════════════════════════════════════════════════════════════════════════
# Fixtures
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture()
def toy_data() -> tuple[np.ndarray, np.ndarray]:
    """Four linearly separable 2-D points."""
    X = np.array([[0.0, 0.0], [0.0, 1.0], [5.0, 5.0], [5.0, 6.0]])
    y = np.array([-1, -1, 1, 1])
    return X, y


@pytest.fixture()
def blobs() -> tuple[np.ndarray, np.ndarray]:
    """Two slightly overlapping Gaussian blobs with ±1 labels (40 rows)."""
    X, y = make_blobs(
        n_samples=40, centers=[[0.0, 0.0], [3.0, 3.0]], cluster_std=1.0, random_state=0
    )
    return X, np.where(y == 1, 1, -1)


@pytest.fixture(scope="module")
def iris_setosa() -> tuple[np.ndarray, np.ndarray]:
    """Iris features with setosa as +1 and the other species as -1."""
    X, y = load_iris(return_X_y=True)
    return X, np.where(y == 0, 1, -1)


@pytest.fixture()
def project_config(tmp_path: Path) -> dict:
    """Pipeline configuration writing every artefact under *tmp_path*."""
    return {
        "random_state": 42,
        "test_size": 0.2,
        "cv_folds": 3,
        "dataset": {"name": "iris", "path": None, "positive_class": 0},
        "svm": {"C": 1.0, "kernel": "linear", "whitening": True},
        "paths": {
            "models": str(tmp_path / "models"),
            "reports": str(tmp_path / "reports"),
            "plots": str(tmp_path / "plots"),
        },
    }
