"""Pytest configuration and shared fixtures for qcondsim tests.

This module provides:
- Deterministic RNG fixtures for numpy and torch
- A factory for random normalized state vectors
"""

import os
from typing import Callable

import numpy as np
import pytest
import torch

from qcondsim.core import DEFAULT_DTYPE


def _seed() -> int:
    return int(os.environ.get("TEST_RNG_SEED", "0"))


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).

    Returns:
        A seeded numpy.random.Generator instance.
    """
    return np.random.default_rng(_seed())


@pytest.fixture(scope="function")
def torch_rng() -> torch.Generator:
    """Provide a deterministic CPU torch RNG for tests.

    Returns:
        A seeded torch.Generator instance.
    """
    generator = torch.Generator(device="cpu")
    generator.manual_seed(_seed())
    return generator


@pytest.fixture(scope="function", autouse=True)
def set_random_seeds() -> None:
    """Seed the global numpy and torch generators before every test."""
    np.random.seed(_seed())
    torch.manual_seed(_seed())


@pytest.fixture(scope="function")
def random_state(rng: np.random.Generator) -> Callable[[int], torch.Tensor]:
    """Factory returning a random normalized complex128 state on ``n`` qubits."""

    def make(n_qubits: int) -> torch.Tensor:
        dim = 2**n_qubits
        values = rng.normal(size=dim) + 1j * rng.normal(size=dim)
        values /= np.linalg.norm(values)
        return torch.tensor(values, dtype=DEFAULT_DTYPE)

    return make
