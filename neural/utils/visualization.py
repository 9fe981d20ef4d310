"""
Visualization Utilities
=======================

Matplotlib helpers for training curves, fitted functions and weight
distributions.

All functions accept a ``save_path`` argument (pathlib.Path);
if given the figure is saved, then closed.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np
from numpy.typing import NDArray

import matplotlib
matplotlib.use("Agg")  # non-interactive backend
import matplotlib.pyplot as plt


def _save(fig, save_path: Optional[Path]) -> None:
    if save_path:
        save_path = Path(save_path)
        save_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
    plt.close(fig)


# ────────────────────────────────────────────────────────────────────
# Training curve
# ────────────────────────────────────────────────────────────────────
def plot_loss_curve(
    history: list[float],
    val_history: list[float] | None = None,
    save_path: Optional[Path] = None,
    title: str = "Training History",
) -> None:
    """Plot per-epoch MSE (log scale).

    Parameters
    ----------
    history : list of float — training MSE per epoch (``Sequential.train``).
    val_history : list of float, optional — held-out MSE per epoch.
    save_path : Path, optional — if given, saves the figure.
    """
    fig, ax = plt.subplots(figsize=(8, 5))
    ax.plot(history, label="Train MSE")
    if val_history:
        ax.plot(val_history, label="Test MSE")
    ax.set_xlabel("Epoch")
    ax.set_ylabel("MSE")
    ax.set_yscale("log")
    ax.set_title(title)
    ax.legend()
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    _save(fig, save_path)


# ────────────────────────────────────────────────────────────────────
# Fitted scalar function
# ────────────────────────────────────────────────────────────────────
def plot_predictions(
    x: NDArray,
    y_true: NDArray,
    y_pred: NDArray,
    save_path: Optional[Path] = None,
    title: str = "Predictions",
) -> None:
    """Scatter the targets and the network output of a 1-input function."""
    x = np.asarray(x).ravel()
    order = np.argsort(x)

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.scatter(x, np.asarray(y_true).ravel(), s=8, alpha=0.4, label="Target")
    ax.plot(x[order], np.asarray(y_pred).ravel()[order], color="C3", label="Network")
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    ax.set_title(title)
    ax.legend()
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    _save(fig, save_path)


# ────────────────────────────────────────────────────────────────────
# Weight distribution histograms
# ────────────────────────────────────────────────────────────────────
def plot_weight_distributions(
    layers: list,
    save_path: Optional[Path] = None,
    title: str = "Weight Distributions",
) -> None:
    """Plot histogram of weights for each trainable layer."""
    trainable = [l for l in layers if l.is_trainable() and "weight" in l.params]
    n = len(trainable)
    if n == 0:
        return

    fig, axes = plt.subplots(1, n, figsize=(5 * n, 4))
    if n == 1:
        axes = [axes]

    for ax, layer in zip(axes, trainable):
        W = layer.params["weight"].ravel()
        ax.hist(W, bins=50, alpha=0.7, edgecolor="black")
        ax.set_title(repr(layer))
        ax.set_xlabel("Weight value")
        ax.set_ylabel("Count")

    fig.suptitle(title, fontsize=14)
    fig.tight_layout()
    _save(fig, save_path)
