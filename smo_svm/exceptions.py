"""Error types raised by the SMO-SVM package.

Every error derives from :class:`SVMError` and from the builtin exception a
caller would naturally catch (``ValueError`` for bad input, ``RuntimeError``
for lifecycle problems).
"""

from __future__ import annotations


class SVMError(Exception):
    """Base class for all SMO-SVM errors."""


class InvalidInputError(SVMError, ValueError):
    """Training data, configuration or a snapshot has the wrong shape."""


class NumericDegeneracyError(InvalidInputError):
    """A feature dimension has zero range and cannot be whitened.

    Attributes:
        dimensions: Indices of the constant feature columns.
    """

    def __init__(self, dimensions: list[int]) -> None:
        self.dimensions = list(dimensions)
        super().__init__(
            f"Cannot whiten constant feature dimension(s) {self.dimensions}: "
            "max == min. Drop them or disable whitening."
        )


class NotReadyError(SVMError, RuntimeError):
    """The model has not been trained or loaded yet."""


class UnsupportedOperationError(SVMError, RuntimeError):
    """The operation is not available for this model's state or kernel."""


class TrainingDidNotConvergeError(SVMError, RuntimeError):
    """SMO hit ``max_iterations`` before ``max_passes`` quiet sweeps.

    Attributes:
        iterations: Number of sweeps performed.
    """

    def __init__(self, iterations: int) -> None:
        self.iterations = iterations
        super().__init__(
            f"SMO did not converge within {iterations} iterations; "
            "increase max_iterations or revisit C / tol."
        )
