"""Minimal feed-forward neural network engine with mini-batch SGD."""

from .core import (
    INVALID_SHAPE,
    SGD,
    Activation,
    ActivationFunction,
    Dense,
    Input,
    LossFunction,
    NeuralLayer,
    Shape,
    Tensor,
)
from .network import Sequential

__version__ = "1.0.0"

__all__ = [
    "INVALID_SHAPE", "SGD", "Activation", "ActivationFunction", "Dense", "Input",
    "LossFunction", "NeuralLayer", "Sequential", "Shape", "Tensor",
]
