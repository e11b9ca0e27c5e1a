"""Numerical constants shared by the engine, controller and tests."""

from __future__ import annotations

import torch

# Tolerance for probability ties, empty-branch detection and norm checks.
EPSILON: float = 1e-10

# State vectors and gate matrices are double precision so that EPSILON is
# meaningful after long replays.
DEFAULT_DTYPE: torch.dtype = torch.complex128

__all__ = ["EPSILON", "DEFAULT_DTYPE"]
