"""
Tests for Gradient Checking Utilities
=====================================
"""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from neural.core.activations import ActivationFunction
from neural.core.layer import Activation, Dense
from neural.core.tensor import Shape, Tensor
from neural.network.sequential import Sequential
from neural.validation.gradient_check import (
    gradient_check,
    gradient_check_layer,
    relative_error,
)


class TestRelativeError:
    def test_identical(self):
        g = np.array([1.0, -2.0, 3.0])
        assert relative_error(g, g) == 0.0

    def test_both_zero(self):
        assert relative_error(np.zeros(3), np.zeros(3)) == 0.0

    def test_opposite(self):
        g = np.array([1.0, 2.0])
        assert relative_error(g, -g) == pytest.approx(1.0)


class TestGradientCheck:
    def test_quadratic(self):
        """f(x) = Σ x² → ∇f = 2x."""
        x = np.array([1.0, -2.0, 3.0])
        err = gradient_check(lambda p: float(np.sum(p ** 2)), x, 2 * x)
        assert err < 1e-6

    def test_wrong_gradient_detected(self):
        x = np.array([1.0, -2.0, 3.0])
        err = gradient_check(lambda p: float(np.sum(p ** 2)), x, x)
        assert err > 0.1


class TestGradientCheckLayer:
    def test_dense(self):
        rng = np.random.default_rng(3)
        layer = Dense(3, seed=3)
        errors = gradient_check_layer(
            layer, Tensor.from_array(rng.standard_normal(4)), Tensor.from_array(rng.standard_normal(3))
        )
        assert max(errors.values()) < 1e-3

    def test_parameters_unchanged(self):
        layer = Dense(3, seed=3)
        layer.initialize(Shape(4))
        weight, bias = layer.weight.copy(), layer.bias.copy()
        gradient_check_layer(layer, Tensor.from_array(np.ones(4)), Tensor.from_array(np.zeros(3)))
        np.testing.assert_array_equal(layer.weight, weight)
        np.testing.assert_array_equal(layer.bias, bias)

    def test_network_input(self):
        model = Sequential()
        model.add(Dense(4, seed=0), Shape(3))
        model.add(Activation(ActivationFunction.LEAKY_RELU))
        model.add(Dense(2, seed=1))
        errors = gradient_check_layer(
            model, Tensor.from_array([0.4, -0.9, 1.3]), Tensor.from_array([1.0, -1.0])
        )
        assert errors["input"] < 1e-3

    def test_broken_backward_detected(self):
        class BrokenDense(Dense):
            def do_accumulate_gradient(self, forward_gradients, back_gradients, batch):
                super().do_accumulate_gradient(forward_gradients, back_gradients, batch)
                back_gradients.raw_data[:] *= 2.0

        errors = gradient_check_layer(
            BrokenDense(2, seed=0), Tensor.from_array([0.5, -0.5]), Tensor.from_array([1.0, 0.0])
        )
        assert errors["weight"] < 1e-3
        assert errors["input"] > 0.1
