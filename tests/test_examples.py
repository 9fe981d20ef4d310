"""
Smoke Tests — Example Programs & CLI
====================================

Runs every example end-to-end with a shrunken configuration.
"""

from __future__ import annotations

import math
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from examples.digits_example import main as digits_main
from examples.linear_function import main as linear_main
from examples.or_function import main as or_main
from neural.utils.config import load_config, merge_configs

import train


@pytest.fixture
def small_config():
    return merge_configs(load_config(), {
        "linear": {"n_dataset": 200, "n_training": 100, "epochs": 3},
        "or_function": {"n_dataset": 200, "n_training": 100, "epochs": 3},
        "digits": {"epochs": 1},
    })


class TestExamples:
    def test_linear(self, small_config, tmp_path):
        result = linear_main(small_config, plot_dir=tmp_path)
        assert len(result["history"]) == 3
        assert math.isfinite(result["test_mse"])
        assert (tmp_path / "linear_loss.png").exists()
        assert (tmp_path / "linear_fit.png").exists()

    def test_or(self, small_config):
        result = or_main(small_config)
        assert len(result["history"]) == 3
        assert result["test_rmse"] == pytest.approx(math.sqrt(result["test_mse"]), rel=1e-4)
        assert 0.0 <= result["gate_accuracy"] <= 1.0

    def test_digits(self, small_config, tmp_path):
        result = digits_main(small_config, plot_dir=tmp_path)
        assert len(result["history"]) == 1
        assert 0.0 <= result["test_accuracy"] <= 1.0
        assert (tmp_path / "digits_weights.png").exists()


class TestCLI:
    def test_parse_defaults(self):
        args = train.parse_args([])
        assert args.example == "linear"
        assert args.epochs is None

    def test_overrides(self):
        cfg = train.build_config(train.parse_args(
            ["--example", "or", "--epochs", "7", "--lr", "0.2", "--minibatch", "8",
             "--log-level", "debug"]
        ))
        assert cfg["or_function"]["epochs"] == 7
        assert cfg["or_function"]["learning_rate"] == 0.2
        assert cfg["or_function"]["minibatch_size"] == 8
        assert cfg["logging"]["level"] == "debug"
        assert cfg["linear"]["epochs"] == load_config()["linear"]["epochs"]

    def test_unknown_example(self):
        with pytest.raises(SystemExit):
            train.parse_args(["--example", "xor"])

    def test_main_runs(self, tmp_path):
        config = tmp_path / "cfg.yaml"
        config.write_text(
            "logging:\n  level: WARNING\n"
            "or_function:\n  n_dataset: 120\n  n_training: 64\n  hidden_units: 2\n"
            "  activation: selu\n  learning_rate: 0.05\n  minibatch_size: 32\n"
            "  epochs: 2\n  seed: 0\n",
            encoding="utf-8",
        )
        result = train.main(["--example", "or", "--config", str(config)])
        assert len(result["history"]) == 2
