r"""
Loss Functions
==============

Only the mean squared error is defined.  The training loop injects

.. math::
    \frac{\partial L}{\partial \hat{y}} \approx \hat{y} - y

into the network: the factor 2 of the exact MSE derivative
:math:`2(\hat{y} - y)` is folded into the learning rate.
"""

from __future__ import annotations

from enum import Enum

import numpy as np

from ..errors import ShapeMismatchError
from .tensor import Tensor, tensor_assign, tensor_sub


class LossFunction(Enum):
    MSE = "mse"


def loss_gradient(
    loss: LossFunction,
    prediction: Tensor,
    target: Tensor,
    gradient: Tensor,
) -> None:
    """Write ∂loss/∂prediction (up to the folded constant) into ``gradient``."""
    if loss is not LossFunction.MSE:
        raise ValueError(f"unsupported loss function: {loss!r}")
    if prediction.shape != target.shape:
        raise ShapeMismatchError(prediction.shape, target.shape, "loss_gradient")
    tensor_assign(gradient, prediction)
    tensor_sub(gradient, target)


def loss_value(loss: LossFunction, prediction: Tensor, target: Tensor) -> float:
    """Mean over elements of the per-sample loss."""
    if loss is not LossFunction.MSE:
        raise ValueError(f"unsupported loss function: {loss!r}")
    if prediction.shape != target.shape:
        raise ShapeMismatchError(prediction.shape, target.shape, "loss_value")
    diff = prediction.raw_data.astype(np.float64) - target.raw_data
    return float(np.mean(diff ** 2))
