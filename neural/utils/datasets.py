"""
Synthetic & Toy Datasets
========================

Generators for the example programs.  All return float32 NumPy arrays
with samples along axis 0, ready for ``Tensor.from_array``.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from sklearn import datasets

from .data_utils import one_hot_encode


def make_linear_dataset(
    n_samples: int,
    slope: float = 3.1415,
    intercept: float = 2.0,
    noise: float = 0.1,
    seed: int | None = None,
) -> tuple[NDArray, NDArray]:
    """Samples of ``y = slope · x + intercept + U(−noise, noise)``, x ∈ U(−1, 1).

    Returns
    -------
    (x, y) : each of shape (n_samples,)
    """
    rng = np.random.default_rng(seed)
    x = rng.uniform(-1.0, 1.0, n_samples)
    y = slope * x + intercept + rng.uniform(-noise, noise, n_samples)
    return x.astype(np.float32), y.astype(np.float32)


def make_or_dataset(
    n_samples: int,
    seed: int | None = None,
) -> tuple[NDArray, NDArray]:
    """Two inputs in U(0, 1) and the probabilistic OR ``a + b − a·b``.

    Returns
    -------
    (x, y) : shapes (n_samples, 2) and (n_samples,)
    """
    rng = np.random.default_rng(seed)
    x = rng.uniform(0.0, 1.0, (n_samples, 2))
    a, b = x[:, 0], x[:, 1]
    y = a + b - a * b
    return x.astype(np.float32), y.astype(np.float32)


def load_digits_dataset() -> tuple[NDArray, NDArray, NDArray]:
    """scikit-learn 8×8 handwritten digits, a small MNIST stand-in.

    Returns
    -------
    (x, y_one_hot, labels) : shapes (n, 64), (n, 10), (n,)
        Pixel intensities are scaled to [0, 1].
    """
    digits = datasets.load_digits()
    x = (digits.data / 16.0).astype(np.float32)
    labels = digits.target.astype(int)
    return x, one_hot_encode(labels, 10), labels
