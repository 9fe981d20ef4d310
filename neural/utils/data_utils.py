"""
Data Utilities
==============

Helpers for splitting and encoding datasets before they are wrapped in
``Tensor`` objects.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray


# ────────────────────────────────────────────────────────────────────
# Train / test split
# ────────────────────────────────────────────────────────────────────
def train_test_split(
    X: NDArray,
    Y: NDArray,
    test_size: float = 0.2,
    seed: int | None = None,
) -> tuple[NDArray, NDArray, NDArray, NDArray]:
    """Split data into train and test sets.

    Parameters
    ----------
    test_size : float ∈ (0, 1) — fraction of data used for testing.

    Returns
    -------
    (X_train, X_test, Y_train, Y_test)
    """
    if not 0.0 < test_size < 1.0:
        raise ValueError(f"test_size must be in (0, 1), got {test_size}")
    if X.shape[0] != Y.shape[0]:
        raise ValueError("X and Y must have the same number of samples.")

    rng = np.random.default_rng(seed)
    n = X.shape[0]
    idx = np.arange(n)
    rng.shuffle(idx)

    split = int(n * (1 - test_size))
    train_idx, test_idx = idx[:split], idx[split:]

    return X[train_idx], X[test_idx], Y[train_idx], Y[test_idx]


# ────────────────────────────────────────────────────────────────────
# One-hot encoding
# ────────────────────────────────────────────────────────────────────
def one_hot_encode(
    labels: NDArray,
    n_classes: int | None = None,
) -> NDArray:
    """Convert integer labels to one-hot vectors.

    Parameters
    ----------
    labels    : ndarray, shape (n_samples,) — integer class labels.
    n_classes : int, optional — number of classes (auto-detected if None).

    Returns
    -------
    one_hot : ndarray, shape (n_samples, n_classes), float32
    """
    labels = labels.astype(int).ravel()
    if n_classes is None:
        n_classes = int(labels.max()) + 1

    one_hot: NDArray = np.zeros((labels.shape[0], n_classes), dtype=np.float32)
    one_hot[np.arange(labels.shape[0]), labels] = 1.0
    return one_hot
