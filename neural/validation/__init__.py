"""Numerical gradient verification for backpropagation correctness."""

from .gradient_check import gradient_check, gradient_check_layer, relative_error

__all__ = ["gradient_check", "gradient_check_layer", "relative_error"]
