"""
Layer Abstractions — NeuralLayer, Dense, Activation, Input
==========================================================

A *layer* maps one sample tensor to one output tensor (``predict``) and
maps the gradient of the loss w.r.t. its output back to the gradient
w.r.t. its input (``accumulate_gradient``), accumulating parameter
gradients along the way.

Lifecycle
---------
A layer starts *unbound*.  The first ``initialize`` (or the implicit
``lazy_initialization`` done by ``predict``) binds its input and output
shapes and allocates its parameters; from then on the shapes are fixed.

Mini-batches
------------
::

    batch = layer.start_batch()              # zeroed gradient buffers
    for x, y in samples:
        layer.predict(x, pred)               # caches what backward needs
        layer.accumulate_gradient(g, back, batch)
    layer.stop_batch(batch, learning_rate)   # averaged SGD step, consumes batch

Notation
--------
  x  : input vector          — length n_in
  y  : output vector         — length n_out
  W  : weights, row-major by output unit — W[i + o * n_in]
  b  : bias vector           — length n_out
  dy : upstream gradient ∂L/∂y
  dx : downstream gradient ∂L/∂x
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

import numpy as np
from numpy.typing import NDArray

from ..errors import (
    BatchStateError,
    LayerConfigurationError,
    ShapeError,
    ShapeMismatchError,
    UninitializedLayerError,
)
from .activations import (
    ActivationFunction,
    apply_activation,
    evaluate_activation_derivative,
)
from .initializers import xavier_init, zeros_init
from .tensor import DTYPE, Shape, Tensor, axpy, tensor_copy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayerBinding:
    """Shapes a layer is bound to once initialized."""

    input_shape: Shape
    output_shape: Shape


# ────────────────────────────────────────────────────────────────────
# Batch accumulator
# ────────────────────────────────────────────────────────────────────
@dataclass
class GradientBuffers:
    """Per-layer gradient sums and the number of samples accumulated."""

    grads: dict[str, NDArray] = field(default_factory=dict)
    count: int = 0


class BatchAccumulator:
    """Gradients accumulated over one mini-batch.

    Created by ``start_batch``, threaded through every
    ``accumulate_gradient`` call, consumed by ``stop_batch``.
    """

    def __init__(self) -> None:
        self._buffers: dict[int, GradientBuffers] = {}
        self._open = True

    @property
    def is_open(self) -> bool:
        return self._open

    def _check_open(self) -> None:
        if not self._open:
            raise BatchStateError("batch accumulator was already consumed by stop_batch")

    def open_buffers(self, layer: "NeuralLayer", params: dict[str, NDArray]) -> None:
        """Register zeroed gradient buffers shaped like ``params`` for ``layer``."""
        self._check_open()
        self._buffers[id(layer)] = GradientBuffers(
            {name: np.zeros_like(p) for name, p in params.items()}
        )

    def buffers(self, layer: "NeuralLayer") -> GradientBuffers:
        self._check_open()
        try:
            return self._buffers[id(layer)]
        except KeyError:
            raise BatchStateError(f"{layer!r} was not started in this batch") from None

    def take(self, layer: "NeuralLayer") -> GradientBuffers | None:
        """Remove and return the buffers of ``layer``."""
        self._check_open()
        return self._buffers.pop(id(layer), None)

    def close(self) -> None:
        self._buffers.clear()
        self._open = False


# ────────────────────────────────────────────────────────────────────
# Base class
# ────────────────────────────────────────────────────────────────────
class NeuralLayer:
    """Abstract layer interface.

    Concrete layers implement ``build``, ``do_predict`` and
    ``do_accumulate_gradient``; trainable layers also implement
    ``begin_accumulation`` and ``apply_update``.
    """

    def __init__(self) -> None:
        self._binding: LayerBinding | None = None

    # ── shapes ───────────────────────────────────────────────────
    @property
    def is_initialized(self) -> bool:
        return self._binding is not None

    def _require_binding(self, operation: str) -> LayerBinding:
        if self._binding is None:
            raise UninitializedLayerError(
                f"{operation} on {self!r} before its input shape is known"
            )
        return self._binding

    @property
    def input_shape(self) -> Shape:
        return self._require_binding("input_shape").input_shape

    @property
    def output_shape(self) -> Shape:
        return self._require_binding("output_shape").output_shape

    def initialize(self, input_shape: Shape) -> None:
        """Bind shapes and (re)allocate parameters for ``input_shape``."""
        if not input_shape.is_valid():
            raise ShapeError(f"cannot initialize {self!r} with invalid shape {input_shape}")
        if self._binding is not None and self._binding.input_shape != input_shape:
            raise ShapeMismatchError(
                self._binding.input_shape, input_shape, f"re-initializing {self!r}"
            )
        output_shape = self.build(input_shape)
        self._binding = LayerBinding(input_shape, output_shape)
        logger.debug("%r bound: %s -> %s", self, input_shape, output_shape)

    def lazy_initialization(self, input_shape: Shape) -> None:
        """Initialize once; afterwards only check that the shape matches."""
        if self._binding is None:
            self.initialize(input_shape)
        elif input_shape != self._binding.input_shape:
            raise ShapeMismatchError(self._binding.input_shape, input_shape, repr(self))

    # ── forward ──────────────────────────────────────────────────
    def predict(self, input: Tensor, output: Tensor) -> None:
        """Forward one sample; ``output`` is resized to ``output_shape``."""
        self.lazy_initialization(input.shape)
        output.resize(self.output_shape)
        self.do_predict(input, output)

    def predict_batch(self, input: Tensor, output: Tensor) -> None:
        """Forward every axis-0 item of ``input`` into the matching item of ``output``."""
        num_items = len(input)
        if num_items == 0:
            raise ShapeError("predict_batch needs at least one item")
        self.lazy_initialization(input[0].shape)
        output.resize(self.output_shape.batched(num_items))
        for n in range(num_items):
            self.predict(input[n], output[n])

    # ── backward ─────────────────────────────────────────────────
    def accumulate_gradient(
        self,
        forward_gradients: Tensor,
        back_gradients: Tensor,
        batch: BatchAccumulator,
    ) -> None:
        """Back-propagate ∂L/∂output of the last predicted sample.

        ``back_gradients`` is resized to ``input_shape`` and receives ∂L/∂input.
        """
        binding = self._require_binding("accumulate_gradient")
        if forward_gradients.shape != binding.output_shape:
            raise ShapeMismatchError(
                binding.output_shape, forward_gradients.shape, f"{self!r} gradients"
            )
        back_gradients.resize(binding.input_shape)
        self.do_accumulate_gradient(forward_gradients, back_gradients, batch)

    # ── mini-batch bracket ───────────────────────────────────────
    def start_batch(self) -> BatchAccumulator:
        batch = BatchAccumulator()
        self.begin_accumulation(batch)
        return batch

    def stop_batch(self, batch: BatchAccumulator, learning_rate: float) -> None:
        """Apply the averaged update accumulated in ``batch`` and consume it."""
        if not batch.is_open:
            raise BatchStateError("batch accumulator was already consumed by stop_batch")
        self.apply_update(batch, learning_rate)
        batch.close()

    # ── variant hooks ────────────────────────────────────────────
    def build(self, input_shape: Shape) -> Shape:
        """Allocate parameters for ``input_shape``; return the output shape."""
        raise NotImplementedError

    def do_predict(self, input: Tensor, output: Tensor) -> None:
        raise NotImplementedError

    def do_accumulate_gradient(
        self,
        forward_gradients: Tensor,
        back_gradients: Tensor,
        batch: BatchAccumulator,
    ) -> None:
        raise NotImplementedError

    def begin_accumulation(self, batch: BatchAccumulator) -> None:
        """Register this layer's gradient buffers in ``batch``."""

    def apply_update(self, batch: BatchAccumulator, learning_rate: float) -> None:
        """Update parameters from the buffers registered in ``batch``."""

    # ── introspection ────────────────────────────────────────────
    def is_trainable(self) -> bool:
        return False

    def trainable_params(self) -> int:
        return 0

    @property
    def params(self) -> dict[str, NDArray]:
        """Return dict of trainable parameters."""
        return {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


# ────────────────────────────────────────────────────────────────────
# Dense (fully-connected) layer
# ────────────────────────────────────────────────────────────────────
class Dense(NeuralLayer):
    r"""Fully-connected linear layer.

    Forward pass
    ------------
    .. math::
        y_o = b_o + \sum_i x_i \, W_{i + o \cdot n_{in}}

    Backward pass (per sample, accumulated over the mini-batch)
    -----------------------------------------------------------
    .. math::
        \Delta W_{i + o \cdot n_{in}} \mathrel{+}= dy_o \, x_i
        \qquad
        \Delta b_o \mathrel{+}= dy_o
        \qquad
        dx_i = \sum_o dy_o \, W_{i + o \cdot n_{in}}

    ``dx`` uses the current weights, not the updated ones.

    Update (``stop_batch``)
    -----------------------
    .. math::
        W \leftarrow W - \frac{\eta}{m} \Delta W
        \qquad
        b \leftarrow b - \frac{\eta}{m} \Delta b

    with *m* the number of ``accumulate_gradient`` calls in the batch.

    Parameters
    ----------
    units : int
        Number of output neurons.
    seed : int | None
        Random seed for the weight initialization.
    weight_init : callable
        Initialization function for W (default: Xavier uniform).
    """

    def __init__(
        self,
        units: int,
        seed: int | None = None,
        weight_init: Callable[..., NDArray] = xavier_init,
    ) -> None:
        super().__init__()
        if units < 1:
            raise LayerConfigurationError(f"Dense needs at least one unit, got {units}")
        self.units = units
        self._weight_init = weight_init
        self._rng = np.random.default_rng(seed)

        self.weight: NDArray = np.zeros(0, dtype=DTYPE)
        self.bias: NDArray = np.zeros(0, dtype=DTYPE)

        # ── forward cache ──
        self._last_input: NDArray | None = None

    @property
    def input_units(self) -> int:
        return self.input_shape.batch_size

    @property
    def weight_matrix(self) -> NDArray:
        """``weight`` viewed as (units, input_units)."""
        return self.weight.reshape(self.units, -1)

    def build(self, input_shape: Shape) -> Shape:
        if input_shape.num_dimensions() > 1:
            raise LayerConfigurationError(
                f"Dense expects a flat input vector, got {input_shape}"
            )
        n_in = input_shape.batch_size
        self.weight = np.ascontiguousarray(
            self._weight_init(n_in, self.units, self._rng), dtype=DTYPE
        ).ravel()
        self.bias = zeros_init(1, self.units).ravel()
        self._last_input = None
        return input_shape.with_batch_size(self.units)

    def do_predict(self, input: Tensor, output: Tensor) -> None:
        x = input.raw_data
        self._last_input = x.copy()
        output.raw_data[:] = self.bias + self.weight_matrix @ x

    def do_accumulate_gradient(
        self,
        forward_gradients: Tensor,
        back_gradients: Tensor,
        batch: BatchAccumulator,
    ) -> None:
        if self._last_input is None:
            raise UninitializedLayerError(f"{self!r} has no forward pass to back-propagate")
        dy = forward_gradients.raw_data
        buffers = batch.buffers(self)

        buffers.grads["weight"] += np.outer(dy, self._last_input).ravel()
        buffers.grads["bias"] += dy
        back_gradients.raw_data[:] = self.weight_matrix.T @ dy
        buffers.count += 1

    def begin_accumulation(self, batch: BatchAccumulator) -> None:
        self._require_binding("start_batch")
        batch.open_buffers(self, self.params)

    def apply_update(self, batch: BatchAccumulator, learning_rate: float) -> None:
        buffers = batch.take(self)
        if buffers is None or buffers.count == 0:
            return
        scaled_lr = learning_rate / buffers.count
        axpy(-scaled_lr, buffers.grads["weight"], self.weight)
        axpy(-scaled_lr, buffers.grads["bias"], self.bias)

    def is_trainable(self) -> bool:
        return True

    def trainable_params(self) -> int:
        return int(self.weight.size + self.bias.size)

    @property
    def params(self) -> dict[str, NDArray]:
        return {"weight": self.weight, "bias": self.bias}

    def __repr__(self) -> str:
        return f"Dense(units={self.units})"


# ────────────────────────────────────────────────────────────────────
# Activation layer
# ────────────────────────────────────────────────────────────────────
class Activation(NeuralLayer):
    """Element-wise non-linearity, no parameters.

    The forward pass remembers its *input* values; the backward pass is
    ``dx = dy ⊙ f'(x)``.
    """

    def __init__(self, activation_function: ActivationFunction | str) -> None:
        super().__init__()
        self.activation_function = ActivationFunction(activation_function)
        self._last_activation_values: NDArray | None = None

    def build(self, input_shape: Shape) -> Shape:
        self._last_activation_values = None
        return input_shape

    def do_predict(self, input: Tensor, output: Tensor) -> None:
        self._last_activation_values = input.raw_data.copy()
        tensor_copy(output, input)
        apply_activation(self.activation_function, output.raw_data)

    def do_accumulate_gradient(
        self,
        forward_gradients: Tensor,
        back_gradients: Tensor,
        batch: BatchAccumulator,
    ) -> None:
        if self._last_activation_values is None:
            raise UninitializedLayerError(f"{self!r} has no forward pass to back-propagate")
        derivative = evaluate_activation_derivative(
            self.activation_function, self._last_activation_values
        )
        back_gradients.raw_data[:] = forward_gradients.raw_data * derivative

    def __repr__(self) -> str:
        return f"Activation({self.activation_function.name})"


# ────────────────────────────────────────────────────────────────────
# Input layer
# ────────────────────────────────────────────────────────────────────
class Input(NeuralLayer):
    """Pass-through layer that declares the input shape of a network.

    Added first to a ``Sequential``, it lets every following layer be
    initialized as soon as it is added.
    """

    def __init__(self, shape: Shape) -> None:
        super().__init__()
        if not shape.is_valid():
            raise ShapeError(f"Input needs a valid shape, got {shape}")
        self.declared_shape = shape

    def build(self, input_shape: Shape) -> Shape:
        if input_shape != self.declared_shape:
            raise ShapeMismatchError(self.declared_shape, input_shape, repr(self))
        return input_shape

    def do_predict(self, input: Tensor, output: Tensor) -> None:
        tensor_copy(output, input)

    def do_accumulate_gradient(
        self,
        forward_gradients: Tensor,
        back_gradients: Tensor,
        batch: BatchAccumulator,
    ) -> None:
        tensor_copy(back_gradients, forward_gradients)

    def __repr__(self) -> str:
        return f"Input({self.declared_shape})"
