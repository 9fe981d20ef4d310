"""
Typed Errors
============

Every contract violation in the engine (shape mismatches, resizing a
borrowed view, using an unbound layer, too few samples for one
mini-batch...) is raised as a subclass of :class:`NeuralError`, so callers
can decide whether to propagate or abort.
"""

from __future__ import annotations


class NeuralError(Exception):
    """Base class of all errors raised by the ``neural`` package."""


class ShapeError(NeuralError, ValueError):
    """An invalid shape was given where a valid one is required."""


class ShapeMismatchError(ShapeError):
    """Two shapes that must be identical are not."""

    def __init__(self, expected, actual, context: str = "") -> None:
        self.expected = expected
        self.actual = actual
        prefix = f"{context}: " if context else ""
        super().__init__(f"{prefix}expected shape {expected}, got {actual}")


class BorrowedViewError(NeuralError):
    """Attempt to resize a tensor that borrows its parent's buffer."""


class UninitializedLayerError(NeuralError):
    """A layer was used before its input/output shapes were bound."""


class InsufficientSamplesError(NeuralError, ValueError):
    """Not enough samples to fill a single mini-batch."""


class BatchStateError(NeuralError):
    """A batch accumulator was used after ``stop_batch`` consumed it."""


class ModelNotCompiledError(NeuralError):
    """``train`` was called before ``compile``."""


class LayerConfigurationError(NeuralError, ValueError):
    """A layer or a layer stack was configured inconsistently."""
