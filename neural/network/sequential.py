"""
Sequential Container & Training Loop
====================================

A ``Sequential`` is itself a layer: it chains its children in order for
the forward pass and in reverse order for the backward pass.

Architecture diagram
--------------------
::

    x ─→ [Layer 0] ─→ [Layer 1] ─→ ... ─→ [Layer N-1] ─→ ŷ

    ∂L/∂x ←─ [Layer 0] ←─ [Layer 1] ←─ ... ←─ [Layer N-1] ←─ ∂L/∂ŷ

Training
--------
``train(x, y, minibatch_size, epochs)`` splits the samples (axis 0 of
``x`` and ``y``) into ``sample_count // minibatch_size`` contiguous
mini-batches; trailing samples that do not fill a mini-batch are skipped.
For every sample the MSE gradient ``ŷ − y`` is back-propagated, and the
averaged SGD update is applied at the end of each mini-batch.
"""

from __future__ import annotations

import logging
from typing import Iterator

import numpy as np

from ..core.layer import BatchAccumulator, Input, NeuralLayer
from ..core.losses import LossFunction, loss_gradient, loss_value
from ..core.optimizers import Optimizer
from ..core.tensor import INVALID_SHAPE, Shape, Tensor, tensor_assign, tensor_copy
from ..errors import (
    InsufficientSamplesError,
    LayerConfigurationError,
    ModelNotCompiledError,
    ShapeMismatchError,
)

logger = logging.getLogger(__name__)


class Sequential(NeuralLayer):
    """Ordered stack of layers, usable anywhere a layer is.

    Parameters
    ----------
    *layers : NeuralLayer
        Variadic initial layers (can also be added later with ``add``).

    Example
    -------
    >>> model = Sequential()
    >>> model.add(Dense(2), Shape(2))
    >>> model.add(Activation(ActivationFunction.SELU))
    >>> model.add(Dense(1))
    >>> model.compile(SGD(lr=0.05), LossFunction.MSE)
    >>> history = model.train(x, y, minibatch_size=32, epochs=100)
    """

    def __init__(self, *layers: NeuralLayer) -> None:
        super().__init__()
        self._layers: list[NeuralLayer] = []

        # running output shape while building, for eager initialization
        self._current_input_shape: Shape = INVALID_SHAPE

        self._optimizer: Optimizer | None = None
        self._loss_function: LossFunction | None = None

        for layer in layers:
            self.add(layer)

    # ── layer management ─────────────────────────────────────────
    def add(self, layer: NeuralLayer, input_shape: Shape | None = None) -> "Sequential":
        """Append a layer and return self (for chaining).

        ``input_shape`` may only be given for the first layer; once the
        running shape is known every added layer is initialized at once.
        """
        if input_shape is not None:
            if self._layers:
                raise LayerConfigurationError(
                    "an input shape can only be given for the first layer"
                )
            self._current_input_shape = input_shape
        elif not self._layers and isinstance(layer, Input):
            self._current_input_shape = layer.declared_shape

        if self.is_initialized and not self._layers:
            self._current_input_shape = self.input_shape

        self._layers.append(layer)

        if self._current_input_shape.is_valid():
            layer.lazy_initialization(self._current_input_shape)
            self._current_input_shape = layer.output_shape
            if self.is_initialized:
                self._rebind_output()
        return self

    def pop(self) -> NeuralLayer:
        """Drop and return the last layer."""
        if not self._layers:
            raise LayerConfigurationError("cannot pop from an empty Sequential")
        layer = self._layers.pop()
        if self._layers and self._layers[-1].is_initialized:
            self._current_input_shape = self._layers[-1].output_shape
        elif not self._layers and self.is_initialized:
            self._current_input_shape = self.input_shape
        elif not self._layers:
            self._current_input_shape = INVALID_SHAPE
        if self.is_initialized:
            self._rebind_output()
        return layer

    def _rebind_output(self) -> None:
        self.initialize(self.input_shape)

    @property
    def layers(self) -> list[NeuralLayer]:
        return self._layers

    # ── NeuralLayer contract ─────────────────────────────────────
    def build(self, input_shape: Shape) -> Shape:
        shape = input_shape
        for layer in self._layers:
            layer.lazy_initialization(shape)
            shape = layer.output_shape
        self._current_input_shape = shape
        return shape

    def do_predict(self, input: Tensor, output: Tensor) -> None:
        current = Tensor()
        tensor_assign(current, input)
        for layer in self._layers:
            stage = Tensor()
            layer.predict(current, stage)
            current = stage
        tensor_copy(output, current)

    def do_accumulate_gradient(
        self,
        forward_gradients: Tensor,
        back_gradients: Tensor,
        batch: BatchAccumulator,
    ) -> None:
        current = Tensor()
        tensor_assign(current, forward_gradients)
        for layer in reversed(self._layers):
            back = Tensor()
            layer.accumulate_gradient(current, back, batch)
            current = back
        tensor_copy(back_gradients, current)

    def begin_accumulation(self, batch: BatchAccumulator) -> None:
        for layer in self._layers:
            layer.begin_accumulation(batch)

    def apply_update(self, batch: BatchAccumulator, learning_rate: float) -> None:
        for layer in self._layers:
            layer.apply_update(batch, learning_rate)

    def is_trainable(self) -> bool:
        return any(layer.is_trainable() for layer in self._layers)

    def trainable_params(self) -> int:
        return sum(layer.trainable_params() for layer in self._layers)

    # ── compile / train ──────────────────────────────────────────
    def compile(
        self,
        optimizer: Optimizer,
        loss_function: LossFunction = LossFunction.MSE,
    ) -> None:
        """Bind the optimizer and loss used by ``train``."""
        self._optimizer = optimizer
        self._loss_function = LossFunction(loss_function)

    @property
    def optimizer(self) -> Optimizer | None:
        return self._optimizer

    @property
    def loss_function(self) -> LossFunction | None:
        return self._loss_function

    def train(
        self,
        x: Tensor,
        y: Tensor,
        minibatch_size: int,
        epochs: int,
    ) -> list[float]:
        """Train with mini-batch SGD.

        Parameters
        ----------
        x, y : Tensor — samples along axis 0 (samples × units × ...).
        minibatch_size : int — samples per parameter update.
        epochs : int — number of passes over the data.

        Returns
        -------
        history : list[float] — mean training MSE of each epoch, measured
            before each mini-batch update.
        """
        if self._optimizer is None or self._loss_function is None:
            raise ModelNotCompiledError("call compile() before train()")
        num_samples = len(x)
        if len(y) != num_samples:
            raise ShapeMismatchError(num_samples, len(y), "train sample counts")
        if minibatch_size < 1:
            raise InsufficientSamplesError(
                f"minibatch_size must be at least 1, got {minibatch_size}"
            )
        if num_samples < minibatch_size:
            raise InsufficientSamplesError(
                f"{num_samples} samples cannot fill a mini-batch of {minibatch_size}"
            )

        num_batches = num_samples // minibatch_size

        # every layer gets a defined shape before the first batch
        self.lazy_initialization(x[0].shape)

        logger.info(
            "Training on %d samples: %d mini-batches of %d per epoch "
            "(%d dropped), %d epochs",
            num_samples, num_batches, minibatch_size,
            num_samples - num_batches * minibatch_size, epochs,
        )

        learning_rate = self._optimizer.learning_rate()
        history: list[float] = []
        prediction = Tensor()
        gradient = Tensor()
        back_gradients = Tensor()

        for epoch in range(1, epochs + 1):
            total_loss = 0.0

            for batch_index in range(num_batches):
                batch_start = batch_index * minibatch_size
                batch_stop = batch_start + minibatch_size

                batch = self.start_batch()
                for sample in range(batch_start, batch_stop):
                    sub_x = x[sample]
                    sub_y = y[sample]

                    self.predict(sub_x, prediction)
                    total_loss += loss_value(self._loss_function, prediction, sub_y)

                    loss_gradient(self._loss_function, prediction, sub_y, gradient)
                    # nothing consumes the gradient w.r.t. the network input
                    self.accumulate_gradient(gradient, back_gradients, batch)

                self.stop_batch(batch, learning_rate)

            epoch_loss = total_loss / (num_batches * minibatch_size)
            history.append(epoch_loss)
            logger.debug("Epoch %4d/%d — mse: %.6f", epoch, epochs, epoch_loss)

        return history

    def evaluate(self, x: Tensor, y: Tensor) -> float:
        """Mean squared error of ``predict_batch(x)`` against ``y``."""
        if len(x) != len(y):
            raise ShapeMismatchError(len(x), len(y), "evaluate sample counts")
        output = Tensor()
        self.predict_batch(x, output)
        if output.shape != y.shape:
            raise ShapeMismatchError(output.shape, y.shape, "evaluate targets")
        diff = output.raw_data.astype(np.float64) - y.raw_data
        return float(np.mean(diff ** 2))

    # ── utilities ────────────────────────────────────────────────
    def summary(self) -> str:
        """Return a Keras-style model summary."""
        lines: list[str] = []
        header = f"{'Layer (type)':<30} {'Output Shape':<26} {'Param #':>10}"
        lines.append("Model:")
        lines.append(header)
        lines.append("=" * len(header))
        for layer in self._layers:
            out_shape = str(layer.output_shape) if layer.is_initialized else "(unknown)"
            lines.append(f"{repr(layer):<30} {out_shape:<26} {layer.trainable_params():>10,}")
        lines.append("=" * len(header))
        total = self.trainable_params()
        lines.append(f"Total params: {total:,}")
        lines.append(f"Trainable params: {total:,}")
        lines.append("Non-trainable params: 0")
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self._layers)

    def __iter__(self) -> Iterator[NeuralLayer]:
        return iter(self._layers)

    def __repr__(self) -> str:
        if not self._layers:
            return "Sequential()"
        inner = ",\n  ".join(repr(l) for l in self._layers)
        return f"Sequential(\n  {inner}\n)"
