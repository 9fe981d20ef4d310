"""
Evaluation Metrics
==================

Regression and classification metrics implemented in pure NumPy.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray


def mean_squared_error(y_true: NDArray, y_pred: NDArray) -> float:
    """
    .. math::
        \\text{MSE} = \\frac{1}{m} \\sum_{i=1}^{m} (\\hat{y}_i - y_i)^2
    """
    y_true = np.asarray(y_true, dtype=np.float64).ravel()
    y_pred = np.asarray(y_pred, dtype=np.float64).ravel()
    if y_true.shape != y_pred.shape:
        raise ValueError(f"shape mismatch: {y_true.shape} vs {y_pred.shape}")
    return float(np.mean((y_pred - y_true) ** 2))


def root_mean_squared_error(y_true: NDArray, y_pred: NDArray) -> float:
    return float(np.sqrt(mean_squared_error(y_true, y_pred)))


def accuracy(y_true: NDArray, y_pred: NDArray) -> float:
    """Classification accuracy over integer labels, ∈ [0, 1]."""
    return float(np.mean(np.asarray(y_true).ravel() == np.asarray(y_pred).ravel()))
