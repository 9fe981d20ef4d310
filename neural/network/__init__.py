"""Network container and training loop."""

from .sequential import Sequential

__all__ = ["Sequential"]
