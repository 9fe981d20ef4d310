"""Neural SGD — pip-installable package."""

from setuptools import setup, find_packages
from pathlib import Path

ROOT = Path(__file__).parent

setup(
    name="neural-sgd",
    version="1.0.0",
    description="Minimal feed-forward neural network engine with mini-batch SGD, built on NumPy",
    author="Luca Gandolfi",
    packages=find_packages(include=["neural", "neural.*"]),
    py_modules=["train"],
    package_data={"neural": ["configs/*.yaml"]},
    python_requires=">=3.10",
    install_requires=[
        "numpy>=1.24.0",
        "matplotlib>=3.8.0",
        "scikit-learn>=1.3.0",
        "pyyaml>=6.0",
    ],
    extras_require={
        "dev": ["pytest>=7.4.0"],
    },
    entry_points={
        "console_scripts": [
            "neural-train=train:main",
        ],
    },
)
