"""
Weight Initializers
===================

All initializers follow the pattern:

    W = init_fn(fan_in, fan_out, rng) → ndarray, shape (fan_out, fan_in)

i.e. one row per output unit, so that ``W.ravel()[i + o * fan_in]`` is
the weight from input ``i`` to output ``o``.

Terminology
-----------
  fan_in  (n_in)  : dimensionality of the input
  fan_out (n_out) : dimensionality of the output
  rng             : numpy.random.Generator for reproducibility
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from .tensor import DTYPE


def xavier_init(
    fan_in: int,
    fan_out: int,
    rng: np.random.Generator | None = None,
) -> NDArray:
    r"""Glorot / Xavier uniform initialization.

    .. math::
        W \sim \mathcal{U}\!\left[
            -\frac{\sqrt{6}}{\sqrt{n_{\text{in}} + n_{\text{out}}}},\;
             \frac{\sqrt{6}}{\sqrt{n_{\text{in}} + n_{\text{out}}}}
        \right]

    Keeps the variance of activations and gradients roughly equal across
    layers.  Reference: Glorot & Bengio, 2010.

    Parameters
    ----------
    fan_in  : int — number of input neurons.
    fan_out : int — number of output neurons.
    rng     : Generator, optional — PRNG for reproducibility.

    Returns
    -------
    W : ndarray, shape (fan_out, fan_in), float32
    """
    if rng is None:
        rng = np.random.default_rng()

    bound: float = float(np.sqrt(6.0) / np.sqrt(fan_in + fan_out))
    W: NDArray = rng.uniform(-bound, bound, size=(fan_out, fan_in))
    return W.astype(DTYPE)


def zeros_init(
    fan_in: int,
    fan_out: int,
    rng: np.random.Generator | None = None,
) -> NDArray:
    """All-zeros initialization (used for biases).

    ``rng`` is ignored — included for API consistency.
    """
    return np.zeros((fan_out, fan_in), dtype=DTYPE)
