"""Configuration for the SMO-SVM model and pipelines.

Two layers:

* :class:`SVMConfig` — the model's hyperparameters, an explicit dataclass
  validated at construction.
* :func:`load_config` — the YAML project configuration used by the
  pipelines (dataset, splits, output paths and an ``svm`` section that is
  turned into an :class:`SVMConfig`).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import yaml

from smo_svm.exceptions import InvalidInputError
from smo_svm.models.kernels import resolve_kind

# ── package paths ────────────────────────────────────────────────
PACKAGE_ROOT = Path(__file__).resolve().parent
CONFIG_PATH = PACKAGE_ROOT / "config" / "config.yaml"

# camelCase keys accepted for compatibility with exported option records
_KEY_ALIASES: Dict[str, str] = {
    "maxPasses": "max_passes",
    "maxIterations": "max_iterations",
    "alphaTol": "alpha_tol",
    "kernelOptions": "kernel_options",
    "randomState": "random_state",
}


@dataclass
class SVMConfig:
    """Hyperparameters of an SMO-trained SVM.

    Attributes:
        C: Upper bound of every dual coefficient.
        tol: KKT violation tolerance.
        max_passes: Consecutive sweeps without any update before SMO is
            considered converged.
        max_iterations: Hard cap on the number of sweeps.
        alpha_tol: Dual coefficients above this value mark support vectors.
        kernel: Kernel tag (see :mod:`smo_svm.models.kernels`) or callable.
        kernel_options: Options of the kernel family, e.g. ``{"sigma": 0.2}``.
        whitening: Rescale every feature to ``[0, 1]`` with training min/max.
        random_state: Seed for partner selection when no random source is
            injected into the model.
    """

    C: float = 1.0
    tol: float = 1e-4
    max_passes: int = 10
    max_iterations: int = 10000
    alpha_tol: float = 1e-6
    kernel: str | Callable[..., Any] = "linear"
    kernel_options: Dict[str, Any] = field(default_factory=dict)
    whitening: bool = True
    random_state: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.C > 0:
            raise InvalidInputError(f"C must be > 0, got {self.C}")
        if self.tol < 0:
            raise InvalidInputError(f"tol must be >= 0, got {self.tol}")
        if self.alpha_tol < 0:
            raise InvalidInputError(f"alpha_tol must be >= 0, got {self.alpha_tol}")
        if int(self.max_passes) < 1:
            raise InvalidInputError(f"max_passes must be >= 1, got {self.max_passes}")
        if int(self.max_iterations) < 1:
            raise InvalidInputError(
                f"max_iterations must be >= 1, got {self.max_iterations}"
            )
        if not isinstance(self.kernel_options, dict):
            raise InvalidInputError("kernel_options must be a mapping")
        if not callable(self.kernel):
            self.kernel = resolve_kind(str(self.kernel))

        self.C = float(self.C)
        self.tol = float(self.tol)
        self.alpha_tol = float(self.alpha_tol)
        self.max_passes = int(self.max_passes)
        self.max_iterations = int(self.max_iterations)
        self.whitening = bool(self.whitening)
        self.kernel_options = dict(self.kernel_options)

    @classmethod
    def from_dict(cls, params: Optional[Dict[str, Any]] = None) -> "SVMConfig":
        """Build a config from a mapping, e.g. the ``svm`` YAML section.

        Args:
            params: Hyperparameters in snake_case or camelCase.

        Returns:
            A validated :class:`SVMConfig`.

        Raises:
            InvalidInputError: On unknown keys or invalid values.
        """
        params = {_KEY_ALIASES.get(k, k): v for k, v in (params or {}).items()}
        known = set(cls.__dataclass_fields__)
        unknown = set(params) - known
        if unknown:
            raise InvalidInputError(
                f"Unknown SVM option(s) {sorted(unknown)}; expected {sorted(known)}"
            )
        if params.get("kernel_options") is None:
            params.pop("kernel_options", None)
        return cls(**params)

    def to_dict(self) -> Dict[str, Any]:
        """Return the hyperparameters as a plain dictionary."""
        return asdict(self)


def load_config(path: Optional[Path | str] = None) -> dict:
    """Load the YAML project configuration.

    Args:
        path: Filesystem path to ``config.yaml``; the bundled file when
            *None*.

    Returns:
        Parsed configuration dictionary.
    """
    path = CONFIG_PATH if path is None else path
    with open(path, "r", encoding="utf-8") as fh:
        return yaml.safe_load(fh)


def svm_config_from(config: dict) -> SVMConfig:
    """Extract the model hyperparameters from a project configuration.

    The top-level ``random_state`` is used when the ``svm`` section does
    not set its own.
    """
    params = dict(config.get("svm") or {})
    params.setdefault("random_state", config.get("random_state"))
    return SVMConfig.from_dict(params)


def output_dir(config: dict, key: str) -> Path:
    """Return (and create) the output directory ``config["paths"][key]``.

    Relative paths are resolved against the current working directory.
    """
    path = Path(config.get("paths", {}).get(key, f"outputs/{key}"))
    path.mkdir(parents=True, exist_ok=True)
    return path
