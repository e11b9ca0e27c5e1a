"""Numerical checks on state vectors and density matrices.

All functions accept an optional leading batch shape and work on any
complex dtype. The engine calls the ``assert_*`` helpers only while debug
mode is on.
"""

from __future__ import annotations

import torch

# Norm and trace tolerance. EPSILON in core.constants governs ties.
DEFAULT_ATOL = 1e-9


def state_norm(state: torch.Tensor) -> torch.Tensor:
    """
    L2 norm of ``state`` over its last dimension.

    Parameters
    ----------
    state:
        Complex tensor with shape (..., 2**n).

    Returns
    -------
    torch.Tensor
        Real tensor with the batch shape (a scalar for a single vector).
    """
    if state.dim() == 0:
        raise ValueError("state_norm expects a tensor with at least 1 dimension.")
    return torch.linalg.vector_norm(state, dim=-1)


def assert_normalized(state: torch.Tensor, atol: float = DEFAULT_ATOL) -> None:
    """Raise ``ValueError`` unless every vector in ``state`` has unit norm within ``atol``."""
    norms = state_norm(state)
    if not bool(torch.isfinite(norms).all()):
        raise ValueError("State norm contains non-finite values.")

    worst = float((norms - 1.0).abs().max()) if norms.numel() else 0.0
    if worst > atol:
        raise ValueError(
            f"State is not normalized: norm deviates from 1 by {worst:.3e} "
            f"(atol={atol})"
        )


def is_hermitian(mat: torch.Tensor, atol: float = DEFAULT_ATOL) -> bool:
    """True when ``mat`` (or each matrix in a batch) equals its adjoint within ``atol``."""
    if mat.dim() < 2 or mat.shape[-1] != mat.shape[-2]:
        return False
    deviation = (mat - mat.mH).abs()
    if deviation.numel() == 0:
        return True
    worst = deviation.max()
    return bool(torch.isfinite(worst)) and float(worst) <= atol


def assert_density_matrix(rho: torch.Tensor, atol: float = DEFAULT_ATOL) -> None:
    """
    Raise ``ValueError`` unless ``rho`` is Hermitian with unit trace.

    Positivity is not checked.
    """
    if not is_hermitian(rho, atol=atol):
        raise ValueError(f"Matrix is not Hermitian within tolerance {atol}.")
    trace = torch.diagonal(rho, dim1=-2, dim2=-1).sum(dim=-1).real
    if not bool(((trace - 1.0).abs() <= atol).all()):
        raise ValueError(
            f"Density matrix trace is {trace.detach().cpu().tolist()}, expected 1."
        )


def fidelity(state_a: torch.Tensor, state_b: torch.Tensor) -> torch.Tensor:
    """
    Fidelity |⟨a|b⟩|² between pure state vectors.

    Insensitive to global phase, so two circuits that differ only by a phase
    compare equal.
    """
    if state_a.shape != state_b.shape:
        raise ValueError(
            f"fidelity expects tensors with the same shape, got "
            f"{tuple(state_a.shape)} and {tuple(state_b.shape)}."
        )
    if state_a.dim() == 0:
        raise ValueError("fidelity expects state vectors, got a scalar.")
    overlap = torch.linalg.vecdot(state_a, state_b, dim=-1)
    return overlap.abs() ** 2


def bloch_vector(rho: torch.Tensor) -> torch.Tensor:
    """
    Bloch vector (x, y, z) of a single-qubit density matrix.

    With ρ = (I + xX + yY + zZ) / 2 the components are x = 2 Re ρ₁₀,
    y = 2 Im ρ₁₀ and z = ρ₀₀ − ρ₁₁. Combine with
    :meth:`StateVectorEngine.partial_trace` to inspect one qubit of a larger
    register.

    Parameters
    ----------
    rho:
        Complex tensor with shape (..., 2, 2).

    Returns
    -------
    torch.Tensor
        Real tensor of shape (..., 3).
    """
    if tuple(rho.shape[-2:]) != (2, 2):
        raise ValueError(
            f"bloch_vector needs a single-qubit density matrix, got shape {tuple(rho.shape)}."
        )
    lower = rho[..., 1, 0]
    z = (rho[..., 0, 0] - rho[..., 1, 1]).real
    return torch.stack([2.0 * lower.real, 2.0 * lower.imag, z], dim=-1)
