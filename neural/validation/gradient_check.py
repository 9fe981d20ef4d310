"""
Gradient Checking — Numerical Verification of Backpropagation
=============================================================

Gradient checking compares the **analytical** gradient (from
``accumulate_gradient``) against a **numerical** approximation using
finite differences.

Numerical gradient
------------------
.. math::
    \\frac{\\partial L}{\\partial \\theta_i}
    \\approx \\frac{L(\\theta_i + \\varepsilon) - L(\\theta_i - \\varepsilon)}
                   {2 \\varepsilon}

This is the **centered difference** formula — O(ε²) accurate.

Layers are checked against the loss implied by the training loop, which
injects ``ŷ − y`` as the output gradient:

.. math::
    L = \\tfrac{1}{2} \\sum_j (\\hat{y}_j - y_j)^2

Relative error
--------------
.. math::
    \\text{rel\\_error} =
        \\frac{\\|g_{\\text{analytic}} - g_{\\text{numeric}}\\|_2}
             {\\|g_{\\text{analytic}}\\|_2 + \\|g_{\\text{numeric}}\\|_2 + \\varepsilon}

Parameters are stored in float32, so a perturbation of ``1e-2`` is used
by default; the error is then dominated by rounding, around 1e-5.
"""

from __future__ import annotations

import logging
from typing import Callable

import numpy as np
from numpy.typing import NDArray

from ..core.layer import NeuralLayer
from ..core.tensor import Tensor, tensor_assign, tensor_sub

logger = logging.getLogger(__name__)


def relative_error(analytic: NDArray, numeric: NDArray) -> float:
    analytic = np.asarray(analytic, dtype=np.float64)
    numeric = np.asarray(numeric, dtype=np.float64)
    diff = np.linalg.norm(analytic - numeric)
    norm_sum = np.linalg.norm(analytic) + np.linalg.norm(numeric) + 1e-15
    return float(diff / norm_sum)


def gradient_check(
    loss_fn: Callable[[NDArray], float],
    params: NDArray,
    analytic_grad: NDArray,
    epsilon: float = 1e-7,
) -> float:
    """Check gradient of a scalar loss function w.r.t. a flat parameter array.

    Parameters
    ----------
    loss_fn       : callable — takes params (flat ndarray) → scalar loss.
    params        : ndarray, shape (D,) — current parameter values.
    analytic_grad : ndarray, shape (D,) — gradient from backprop.
    epsilon       : float — perturbation size.

    Returns
    -------
    rel_error : float — relative error between numeric and analytic grads.
    """
    numeric_grad = np.zeros(params.shape, dtype=np.float64)

    for i in range(params.size):
        params_plus = params.copy()
        params_plus[i] += epsilon
        loss_plus = loss_fn(params_plus)

        params_minus = params.copy()
        params_minus[i] -= epsilon
        loss_minus = loss_fn(params_minus)

        numeric_grad[i] = (loss_plus - loss_minus) / (2.0 * epsilon)

    return relative_error(analytic_grad, numeric_grad)


def _half_squared_error(layer: NeuralLayer, x: Tensor, target: Tensor) -> float:
    output = Tensor()
    layer.predict(x, output)
    diff = output.raw_data.astype(np.float64) - target.raw_data
    return 0.5 * float(np.sum(diff ** 2))


def _numeric_gradient(
    values: NDArray,
    loss: Callable[[], float],
    epsilon: float,
) -> NDArray:
    """Centred differences of ``loss()`` w.r.t. every element of ``values`` (in place)."""
    numeric = np.zeros(values.shape, dtype=np.float64)
    for i in range(values.size):
        original = values[i]
        values[i] = original + epsilon
        loss_plus = loss()
        values[i] = original - epsilon
        loss_minus = loss()
        values[i] = original
        numeric[i] = (loss_plus - loss_minus) / (2.0 * epsilon)
    return numeric


def gradient_check_layer(
    layer: NeuralLayer,
    x: Tensor,
    target: Tensor,
    epsilon: float = 1e-2,
) -> dict[str, float]:
    """Check one sample's gradients for a layer.

    Runs ``predict`` + ``accumulate_gradient`` with ``ŷ − y`` as output
    gradient, then numerically verifies every parameter registered in the
    batch accumulator and the gradient w.r.t. the input.  The batch is
    discarded; parameters are left unchanged.

    Returns
    -------
    errors : dict[str, float] — relative error per parameter, plus ``"input"``.
    """
    output = Tensor()
    layer.predict(x, output)
    gradient = Tensor()
    tensor_assign(gradient, output)
    tensor_sub(gradient, target)

    batch = layer.start_batch()
    back_gradients = Tensor()
    layer.accumulate_gradient(gradient, back_gradients, batch)

    analytic: dict[str, NDArray] = {}
    if layer.params:
        buffers = batch.buffers(layer)
        analytic = {name: g.copy() for name, g in buffers.grads.items()}
    analytic["input"] = back_gradients.raw_data.copy()
    batch.close()

    probe = Tensor()
    tensor_assign(probe, x)
    targets: dict[str, NDArray] = dict(layer.params)
    targets["input"] = probe.raw_data

    errors: dict[str, float] = {}
    for name, values in targets.items():
        numeric = _numeric_gradient(
            values, lambda: _half_squared_error(layer, probe, target), epsilon
        )
        errors[name] = relative_error(analytic[name], numeric)
        logger.debug("%r %s rel_error = %.2e", layer, name, errors[name])

    # restore the forward cache of the unperturbed sample
    layer.predict(x, output)
    return errors
