#!/usr/bin/env python3
"""
CLI Entry Point — Train an Example Network
==========================================

Usage examples::

    python train.py --example linear
    python train.py --example or --epochs 200 --lr 0.05 --minibatch 32
    python train.py --example digits --log-level DEBUG --plot-dir outputs/plots
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT))

from neural.utils.config import load_config, merge_configs
from neural.utils.logger import setup_logging

EXAMPLE_SECTIONS = {
    "linear": "linear",
    "or": "or_function",
    "digits": "digits",
}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Train a small feed-forward network with mini-batch SGD.",
    )
    parser.add_argument("--example", choices=sorted(EXAMPLE_SECTIONS), default="linear",
                        help="Which example to run.")
    parser.add_argument("--config", type=Path, default=None, help="YAML config file.")
    parser.add_argument("--epochs", type=int, default=None, help="Number of training epochs.")
    parser.add_argument("--lr", type=float, default=None, help="SGD learning rate.")
    parser.add_argument("--minibatch", type=int, default=None, help="Mini-batch size.")
    parser.add_argument("--log-level", default=None, help="Logging level (DEBUG, INFO, ...).")
    parser.add_argument("--plot-dir", type=Path, default=None, help="Save plots here.")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> dict:
    """Load the YAML config and apply command-line overrides."""
    cfg = load_config(args.config)
    section = EXAMPLE_SECTIONS[args.example]
    overrides: dict = {}
    if args.epochs is not None:
        overrides["epochs"] = args.epochs
    if args.lr is not None:
        overrides["learning_rate"] = args.lr
    if args.minibatch is not None:
        overrides["minibatch_size"] = args.minibatch
    cfg = merge_configs(cfg, {section: overrides})
    if args.log_level is not None:
        cfg = merge_configs(cfg, {"logging": {"level": args.log_level}})
    return cfg


def main(argv: list[str] | None = None) -> dict:
    args = parse_args(argv)
    cfg = build_config(args)
    log_cfg = cfg.get("logging", {})
    setup_logging(log_cfg.get("level", "INFO"), log_cfg.get("log_file"))

    if args.example == "linear":
        from examples.linear_function import main as run
    elif args.example == "or":
        from examples.or_function import main as run
    else:
        from examples.digits_example import main as run

    return run(config=cfg, plot_dir=args.plot_dir)


if __name__ == "__main__":
    main()
