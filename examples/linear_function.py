"""
Linear Function Example — Scalar Regression
===========================================

Approximate ``f(x) = 3.1415 · x + 2`` from noisy samples with a tiny
network trained by mini-batch SGD:

::

    x (1) → Dense(2) → SELU → Dense(1) → ŷ
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from neural.core.activations import ActivationFunction
from neural.core.layer import Activation, Dense
from neural.core.losses import LossFunction
from neural.core.optimizers import SGD
from neural.core.tensor import Shape, Tensor
from neural.network.sequential import Sequential
from neural.utils.config import load_config
from neural.utils.datasets import make_linear_dataset
from neural.utils.logger import setup_logging

logger = logging.getLogger("neural.examples.linear")


def main(
    config: dict[str, Any] | None = None,
    plot_dir: Path | None = None,
) -> dict[str, Any]:
    cfg = (config or load_config())["linear"]
    seed = cfg.get("seed")

    # ── dataset ──
    x, y = make_linear_dataset(cfg["n_dataset"], seed=seed)
    n_train = cfg["n_training"]
    x_train, y_train = Tensor.from_array(x[:n_train]), Tensor.from_array(y[:n_train])
    x_test, y_test = Tensor.from_array(x[n_train:]), Tensor.from_array(y[n_train:])

    # ── model ──
    model = Sequential()
    model.add(Dense(cfg["hidden_units"], seed=seed), Shape(1))
    model.add(Activation(ActivationFunction(cfg["activation"])))
    model.add(Dense(1, seed=None if seed is None else seed + 1))
    logger.info("\n%s", model.summary())

    model.compile(SGD(lr=cfg["learning_rate"]), LossFunction.MSE)

    # ── train ──
    initial_mse = model.evaluate(x_test, y_test)
    history: list[float] = []
    test_history: list[float] = []
    for epoch in range(1, cfg["epochs"] + 1):
        history += model.train(x_train, y_train, cfg["minibatch_size"], 1)
        test_history.append(model.evaluate(x_test, y_test))
        if epoch % 100 == 0 or epoch == cfg["epochs"]:
            logger.info("Epoch %5d — test MSE = %.6f", epoch, test_history[-1])

    # ── plot ──
    if plot_dir is not None:
        from neural.utils.visualization import plot_loss_curve, plot_predictions

        predictions = Tensor()
        model.predict_batch(x_test, predictions)
        plot_loss_curve(history, test_history, save_path=Path(plot_dir) / "linear_loss.png",
                        title="Linear function")
        plot_predictions(x[n_train:], y[n_train:], predictions.to_numpy(),
                         save_path=Path(plot_dir) / "linear_fit.png", title="Linear function")

    return {"initial_mse": initial_mse, "test_mse": test_history[-1], "history": history}


if __name__ == "__main__":
    setup_logging("INFO")
    main(plot_dir=ROOT / "outputs" / "plots")
