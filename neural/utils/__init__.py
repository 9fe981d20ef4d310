"""Utility functions: configuration, logging, data, metrics, visualization."""

from .config import load_config, merge_configs
from .data_utils import one_hot_encode, train_test_split
from .datasets import load_digits_dataset, make_linear_dataset, make_or_dataset
from .logger import setup_logging
from .metrics import accuracy, mean_squared_error, root_mean_squared_error

__all__ = [
    "load_config", "merge_configs",
    "one_hot_encode", "train_test_split",
    "load_digits_dataset", "make_linear_dataset", "make_or_dataset",
    "setup_logging",
    "accuracy", "mean_squared_error", "root_mean_squared_error",
]
