"""
Optimizers
==========

The optimizer only carries the update hyper-parameters; the update itself
is applied by each trainable layer in ``stop_batch``:

.. math::
    \\theta \\leftarrow \\theta - \\frac{\\eta}{m} \\sum_{k=1}^{m} g_k

where *m* is the number of samples accumulated in the mini-batch.
"""

from __future__ import annotations


class Optimizer:
    """Abstract optimizer."""

    def __init__(self, lr: float = 0.01) -> None:
        if lr <= 0:
            raise ValueError(f"learning rate must be positive, got {lr}")
        self.lr = lr

    def learning_rate(self) -> float:
        return self.lr

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(lr={self.lr})"


class SGD(Optimizer):
    r"""Plain stochastic gradient descent (no momentum).

    Parameters
    ----------
    lr : float — learning rate η  (default: 0.01).
    """
