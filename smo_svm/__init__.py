"""SMO-SVM — binary Support Vector Machine trained with Sequential Minimal Optimization."""

from smo_svm.config import SVMConfig, load_config
from smo_svm.exceptions import (
    InvalidInputError,
    NotReadyError,
    NumericDegeneracyError,
    SVMError,
    TrainingDidNotConvergeError,
    UnsupportedOperationError,
)
from smo_svm.models.kernels import Kernel
from smo_svm.models.snapshot import ModelSnapshot
from smo_svm.models.svm import SVM, ModelState

__version__ = "1.0.0"

__all__ = [
    "SVM",
    "SVMConfig",
    "Kernel",
    "ModelSnapshot",
    "ModelState",
    "load_config",
    "SVMError",
    "InvalidInputError",
    "NumericDegeneracyError",
    "NotReadyError",
    "UnsupportedOperationError",
    "TrainingDidNotConvergeError",
]
