"""
OR Function Example — Soft Boolean Gate
=======================================

Learn the probabilistic OR ``a + b − a·b`` of two inputs in [0, 1]:

::

    (a, b) → Dense(2) → SELU → Dense(2) → SELU → Dense(1) → ŷ

Thresholding the output at 0.5 recovers the boolean OR gate on the
corners of the unit square.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

import numpy as np

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from neural.core.activations import ActivationFunction
from neural.core.layer import Activation, Dense
from neural.core.losses import LossFunction
from neural.core.optimizers import SGD
from neural.core.tensor import Shape, Tensor
from neural.network.sequential import Sequential
from neural.utils.config import load_config
from neural.utils.datasets import make_or_dataset
from neural.utils.logger import setup_logging
from neural.utils.metrics import accuracy, root_mean_squared_error

logger = logging.getLogger("neural.examples.or_function")

CORNERS = np.array([[0, 0], [0, 1], [1, 0], [1, 1]], dtype=np.float32)
CORNER_LABELS = np.array([0, 1, 1, 1])


def main(
    config: dict[str, Any] | None = None,
    plot_dir: Path | None = None,
) -> dict[str, Any]:
    cfg = (config or load_config())["or_function"]
    seed = cfg.get("seed")
    activation = ActivationFunction(cfg["activation"])
    hidden = cfg["hidden_units"]

    # ── dataset ──
    x, y = make_or_dataset(cfg["n_dataset"], seed=seed)
    n_train = cfg["n_training"]
    x_train, y_train = Tensor.from_array(x[:n_train]), Tensor.from_array(y[:n_train])
    x_test, y_test = Tensor.from_array(x[n_train:]), Tensor.from_array(y[n_train:])

    # ── model ──
    model = Sequential()
    model.add(Dense(hidden, seed=seed), Shape(2))
    model.add(Activation(activation))
    model.add(Dense(hidden, seed=None if seed is None else seed + 1))
    model.add(Activation(activation))
    model.add(Dense(1, seed=None if seed is None else seed + 2))
    logger.info("\n%s", model.summary())

    model.compile(SGD(lr=cfg["learning_rate"]), LossFunction.MSE)

    # ── train ──
    history = model.train(x_train, y_train, cfg["minibatch_size"], cfg["epochs"])
    test_mse = model.evaluate(x_test, y_test)
    logger.info("RMSE on held-out data = %.6f", np.sqrt(test_mse))

    # ── boolean gate ──
    corner_out = Tensor()
    model.predict_batch(Tensor.from_array(CORNERS), corner_out)
    gate = (corner_out.to_numpy().ravel() >= 0.5).astype(int)
    gate_acc = accuracy(CORNER_LABELS, gate)
    for corner, value in zip(CORNERS, corner_out.to_numpy().ravel()):
        logger.info("  %s → %.4f", corner, value)

    if plot_dir is not None:
        from neural.utils.visualization import plot_loss_curve

        plot_loss_curve(history, save_path=Path(plot_dir) / "or_loss.png", title="OR function")

    return {
        "test_mse": test_mse,
        "test_rmse": root_mean_squared_error(y[n_train:], _predict(model, x_test)),
        "gate_accuracy": gate_acc,
        "history": history,
    }


def _predict(model: Sequential, x: Tensor) -> np.ndarray:
    output = Tensor()
    model.predict_batch(x, output)
    return output.to_numpy()


if __name__ == "__main__":
    setup_logging("INFO")
    main(plot_dir=ROOT / "outputs" / "plots")
