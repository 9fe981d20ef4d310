"""
Tests for Loss Functions & Optimizers
=====================================

Validates the MSE value and output gradient, and the SGD
hyper-parameter carrier.
"""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from neural.core.losses import LossFunction, loss_gradient, loss_value
from neural.core.optimizers import SGD
from neural.core.tensor import Shape, Tensor
from neural.errors import ShapeMismatchError


# ────────────────────────────────────────────────────────────────────
# MSE
# ────────────────────────────────────────────────────────────────────
class TestMSE:
    def test_perfect_prediction(self):
        t = Tensor.from_array([1.0, 2.0, 3.0])
        assert loss_value(LossFunction.MSE, t, t) == 0.0

    def test_known_value(self):
        pred = Tensor.from_array([1.0, 2.0])
        target = Tensor.from_array([0.0, 4.0])
        assert loss_value(LossFunction.MSE, pred, target) == pytest.approx(2.5)

    def test_gradient_is_difference(self):
        pred = Tensor.from_array([1.0, 2.0, -1.0])
        target = Tensor.from_array([0.5, 2.0, 1.0])
        gradient = Tensor()
        loss_gradient(LossFunction.MSE, pred, target, gradient)
        assert gradient.shape == Shape(3)
        # no factor 2: it is folded into the learning rate
        np.testing.assert_allclose(gradient.raw_data, [0.5, 0.0, -2.0])

    def test_gradient_leaves_prediction(self):
        pred = Tensor.from_array([1.0, 2.0])
        loss_gradient(LossFunction.MSE, pred, Tensor.from_array([0.0, 0.0]), Tensor())
        np.testing.assert_array_equal(pred.raw_data, [1.0, 2.0])

    def test_shape_mismatch(self):
        with pytest.raises(ShapeMismatchError):
            loss_value(LossFunction.MSE, Tensor(Shape(2)), Tensor(Shape(3)))
        with pytest.raises(ShapeMismatchError):
            loss_gradient(LossFunction.MSE, Tensor(Shape(2)), Tensor(Shape(3)), Tensor())

    def test_from_string(self):
        assert LossFunction("mse") is LossFunction.MSE


# ────────────────────────────────────────────────────────────────────
# SGD
# ────────────────────────────────────────────────────────────────────
class TestSGD:
    def test_learning_rate(self):
        assert SGD(lr=0.05).learning_rate() == 0.05
        assert SGD().learning_rate() == 0.01

    @pytest.mark.parametrize("lr", [0.0, -0.1])
    def test_non_positive_rejected(self, lr):
        with pytest.raises(ValueError):
            SGD(lr=lr)

    def test_repr(self):
        assert repr(SGD(lr=0.1)) == "SGD(lr=0.1)"
