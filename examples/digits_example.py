"""
Digits Classification — MNIST in Miniature
==========================================

Classify scikit-learn's 8×8 handwritten digits (10 classes) by regressing
one-hot targets with the MSE loss, then taking the arg-max of the
softmax of the outputs.

Architecture
------------
::

    Input (64) → Dense(32) → LeakyReLU → Dense(10)
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

import numpy as np

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from neural.core.activations import ActivationFunction, softmax
from neural.core.layer import Activation, Dense, Input
from neural.core.losses import LossFunction
from neural.core.optimizers import SGD
from neural.core.tensor import Shape, Tensor
from neural.network.sequential import Sequential
from neural.utils.config import load_config
from neural.utils.data_utils import train_test_split
from neural.utils.datasets import load_digits_dataset
from neural.utils.logger import setup_logging
from neural.utils.metrics import accuracy

logger = logging.getLogger("neural.examples.digits")


def classify(model: Sequential, x: Tensor) -> np.ndarray:
    """Predicted class of every sample of ``x``."""
    output = Tensor()
    model.predict_batch(x, output)
    scores = output.to_numpy()
    return np.array([int(np.argmax(softmax(row))) for row in scores])


def main(
    config: dict[str, Any] | None = None,
    plot_dir: Path | None = None,
) -> dict[str, Any]:
    cfg = (config or load_config())["digits"]
    seed = cfg.get("seed")

    # ── dataset ──
    x, y, labels = load_digits_dataset()
    idx = np.arange(x.shape[0])
    idx_train, idx_test, _, _ = train_test_split(idx, idx, test_size=cfg["test_size"], seed=seed)
    x_train, y_train = Tensor.from_array(x[idx_train]), Tensor.from_array(y[idx_train])
    x_test = Tensor.from_array(x[idx_test])

    # ── model ──
    model = Sequential()
    model.add(Input(Shape(x.shape[1])))
    model.add(Dense(cfg["hidden_units"], seed=seed))
    model.add(Activation(ActivationFunction(cfg["activation"])))
    model.add(Dense(y.shape[1], seed=None if seed is None else seed + 1))
    logger.info("\n%s", model.summary())

    model.compile(SGD(lr=cfg["learning_rate"]), LossFunction.MSE)

    # ── train ──
    history = model.train(x_train, y_train, cfg["minibatch_size"], cfg["epochs"])

    # ── evaluate ──
    test_acc = accuracy(labels[idx_test], classify(model, x_test))
    logger.info("Test accuracy: %.2f%%", 100.0 * test_acc)

    if plot_dir is not None:
        from neural.utils.visualization import plot_loss_curve, plot_weight_distributions

        plot_loss_curve(history, save_path=Path(plot_dir) / "digits_loss.png", title="Digits")
        plot_weight_distributions(model.layers, save_path=Path(plot_dir) / "digits_weights.png")

    return {"test_accuracy": test_acc, "history": history}


if __name__ == "__main__":
    setup_logging("INFO")
    main(plot_dir=ROOT / "outputs" / "plots")
