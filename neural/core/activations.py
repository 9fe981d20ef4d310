r"""
Activation Functions — Values & Derivatives
===========================================

Stateless element-wise non-linearities.  Each function is evaluated on
the *pre-activation* value ``x``; the derivative is also expressed in
terms of ``x`` so that the ``Activation`` layer only needs to remember its
inputs.

=============  ==============================  ================================
name           f(x)                            f'(x)
=============  ==============================  ================================
SIGMOID        1 / (1 + e^{-x})                s · (1 − s),  s = f(x)
RELU           x < 0 → 0,     else x           x < 0 → 0,     else 1
LEAKY_RELU     x < 0 → 0.3x,  else x           x < 0 → 0.3,   else 1
SELU           x < 0 → λα(e^x − 1), else λx    x < 0 → λα e^x, else λ
=============  ==============================  ================================

with α = 1.673263242354377 and λ = 1.05070098735548 (Klambauer et al., 2017).
At ``x = 0`` every derivative takes the ``x ≥ 0`` branch.
"""

from __future__ import annotations

from enum import Enum

import numpy as np
from numpy.typing import NDArray

LEAKY_RELU_SLOPE = 0.3
SELU_ALPHA = 1.673263242354377
SELU_SCALE = 1.05070098735548

# float32 exp overflows just above 88
_EXP_LIMIT = 88.0


class ActivationFunction(Enum):
    SIGMOID = "sigmoid"
    RELU = "relu"
    LEAKY_RELU = "leaky_relu"
    SELU = "selu"

    @classmethod
    def _missing_(cls, value):
        # also accept member names in any case: "SELU", "Leaky_ReLU"
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if member.value == key:
                    return member
        return None


def _sigmoid(x: NDArray) -> NDArray:
    return 1.0 / (1.0 + np.exp(-np.clip(x, -_EXP_LIMIT, _EXP_LIMIT)))


def evaluate_activation(activation: ActivationFunction, x: NDArray) -> NDArray:
    """Return f(x) element-wise, in the dtype of ``x``."""
    x = np.asarray(x)
    if activation is ActivationFunction.SIGMOID:
        y = _sigmoid(x)
    elif activation is ActivationFunction.RELU:
        y = np.where(x < 0, 0.0, x)
    elif activation is ActivationFunction.LEAKY_RELU:
        y = np.where(x < 0, LEAKY_RELU_SLOPE * x, x)
    elif activation is ActivationFunction.SELU:
        # exp only sees the negative branch, so large x cannot overflow
        negative = SELU_SCALE * SELU_ALPHA * (np.exp(np.minimum(x, 0.0)) - 1.0)
        y = np.where(x < 0, negative, SELU_SCALE * x)
    else:
        raise ValueError(f"unknown activation function: {activation!r}")
    return y.astype(x.dtype, copy=False)


def evaluate_activation_derivative(
    activation: ActivationFunction,
    x: NDArray,
) -> NDArray:
    """Return f'(x) element-wise, in the dtype of ``x``."""
    x = np.asarray(x)
    if activation is ActivationFunction.SIGMOID:
        s = _sigmoid(x)
        d = s * (1.0 - s)
    elif activation is ActivationFunction.RELU:
        d = np.where(x < 0, 0.0, 1.0)
    elif activation is ActivationFunction.LEAKY_RELU:
        d = np.where(x < 0, LEAKY_RELU_SLOPE, 1.0)
    elif activation is ActivationFunction.SELU:
        d = np.where(
            x < 0,
            SELU_SCALE * SELU_ALPHA * np.exp(np.minimum(x, 0.0)),
            SELU_SCALE,
        )
    else:
        raise ValueError(f"unknown activation function: {activation!r}")
    return d.astype(x.dtype, copy=False)


def apply_activation(activation: ActivationFunction, outputs: NDArray) -> None:
    """Replace every element of ``outputs`` by f(element), in place."""
    outputs[...] = evaluate_activation(activation, outputs)


def softmax(values: NDArray) -> NDArray:
    r"""Numerically stable softmax of a 1-D vector.

    .. math::
        \text{softmax}(z)_j = \frac{e^{z_j - \max z}}{\sum_k e^{z_k - \max z}}
    """
    values = np.asarray(values, dtype=np.float64)
    shifted = np.exp(values - np.max(values))
    return shifted / np.sum(shifted)
