"""Core building blocks: tensors, activations, layers, losses, optimizers."""

from .activations import (
    ActivationFunction,
    apply_activation,
    evaluate_activation,
    evaluate_activation_derivative,
    softmax,
)
from .initializers import xavier_init, zeros_init
from .layer import (
    Activation,
    BatchAccumulator,
    Dense,
    Input,
    LayerBinding,
    NeuralLayer,
)
from .losses import LossFunction, loss_gradient, loss_value
from .optimizers import SGD, Optimizer
from .tensor import (
    INVALID_SHAPE,
    Shape,
    Tensor,
    axpy,
    tensor_add,
    tensor_assign,
    tensor_constant,
    tensor_copy,
    tensor_ones,
    tensor_random_uniform,
    tensor_sub,
    tensor_zeros,
)

__all__ = [
    "ActivationFunction", "apply_activation", "evaluate_activation",
    "evaluate_activation_derivative", "softmax",
    "xavier_init", "zeros_init",
    "Activation", "BatchAccumulator", "Dense", "Input", "LayerBinding", "NeuralLayer",
    "LossFunction", "loss_gradient", "loss_value",
    "SGD", "Optimizer",
    "INVALID_SHAPE", "Shape", "Tensor", "axpy",
    "tensor_add", "tensor_assign", "tensor_constant", "tensor_copy",
    "tensor_ones", "tensor_random_uniform", "tensor_sub", "tensor_zeros",
]
