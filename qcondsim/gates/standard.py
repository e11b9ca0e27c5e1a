"""Standard quantum gate matrices.

Every function returns a freshly allocated ``(2**k, 2**k)`` complex tensor.
Multi-qubit matrices are ordered so that the first qubit the gate is applied
to is the most significant bit of the row/column index; for controlled gates
the control(s) come first.
"""

from __future__ import annotations

import cmath
import math
from typing import Sequence

import torch

from ..core.constants import DEFAULT_DTYPE


def _tensor(
    rows: Sequence[Sequence[complex]],
    dtype: torch.dtype | None,
    device: torch.device | None,
) -> torch.Tensor:
    if dtype is None:
        dtype = DEFAULT_DTYPE
    if device is None:
        device = torch.device("cpu")
    return torch.tensor(rows, dtype=dtype, device=device)


def _controlled(
    block: torch.Tensor, n_controls: int = 1
) -> torch.Tensor:
    """Embed ``block`` in the lower-right corner of an identity matrix."""
    k = block.shape[-1]
    dim = k * 2**n_controls
    matrix = torch.eye(dim, dtype=block.dtype, device=block.device)
    matrix[dim - k :, dim - k :] = block
    return matrix


def _permutation(
    dim: int,
    swaps: Sequence[tuple[int, int]],
    dtype: torch.dtype | None,
    device: torch.device | None,
) -> torch.Tensor:
    if dtype is None:
        dtype = DEFAULT_DTYPE
    if device is None:
        device = torch.device("cpu")
    matrix = torch.eye(dim, dtype=dtype, device=device)
    for a, b in swaps:
        matrix[[a, b]] = matrix[[b, a]]
    return matrix


# ---------------------------------------------------------------------------
# Fixed single-qubit gates
# ---------------------------------------------------------------------------


def I(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """
    Identity gate (single-qubit).

    Args:
        dtype: Complex dtype for the gate matrix. Defaults to torch.complex128.
        device: PyTorch device. Defaults to torch.device("cpu").

    Returns:
        A (2, 2) complex tensor representing the identity gate.
    """
    return _tensor([[1.0, 0.0], [0.0, 1.0]], dtype, device)


def X(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Pauli-X gate (bit-flip, NOT gate)."""
    return _tensor([[0.0, 1.0], [1.0, 0.0]], dtype, device)


def Y(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Pauli-Y gate."""
    return _tensor([[0.0, -1.0j], [1.0j, 0.0]], dtype, device)


def Z(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Pauli-Z gate (phase-flip)."""
    return _tensor([[1.0, 0.0], [0.0, -1.0]], dtype, device)


def H(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Hadamard gate."""
    sqrt2_inv = 1.0 / math.sqrt(2.0)
    return _tensor([[sqrt2_inv, sqrt2_inv], [sqrt2_inv, -sqrt2_inv]], dtype, device)


def S(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """S gate (phase gate, √Z)."""
    return _tensor([[1.0, 0.0], [0.0, 1.0j]], dtype, device)


def SDG(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """S† gate."""
    return _tensor([[1.0, 0.0], [0.0, -1.0j]], dtype, device)


def T(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """T gate (π/8 gate, √S)."""
    return _tensor([[1.0, 0.0], [0.0, cmath.exp(1.0j * math.pi / 4.0)]], dtype, device)


def TDG(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """T† gate."""
    return _tensor([[1.0, 0.0], [0.0, cmath.exp(-1.0j * math.pi / 4.0)]], dtype, device)


def SX(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """
    √X gate.

    Matrix form:
        ½ [[1+i, 1-i],
           [1-i, 1+i]]
    """
    return _tensor([[0.5 + 0.5j, 0.5 - 0.5j], [0.5 - 0.5j, 0.5 + 0.5j]], dtype, device)


def SXDG(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """√X† gate."""
    return _tensor([[0.5 - 0.5j, 0.5 + 0.5j], [0.5 + 0.5j, 0.5 - 0.5j]], dtype, device)


# ---------------------------------------------------------------------------
# Parametric single-qubit gates
# ---------------------------------------------------------------------------


def U(
    theta: float,
    phi: float,
    lam: float,
    dtype: torch.dtype | None = None,
    device: torch.device | None = None,
) -> torch.Tensor:
    """
    General single-qubit unitary U(θ, φ, λ).

    Matrix form:
        [[cos(θ/2),          -e^{iλ} sin(θ/2)],
         [e^{iφ} sin(θ/2),   e^{i(φ+λ)} cos(θ/2)]]

    Args:
        theta: Polar rotation angle.
        phi: Phase applied to the |1⟩ row.
        lam: Phase applied to the |1⟩ column.
        dtype: Complex dtype for the gate matrix. Defaults to torch.complex128.
        device: PyTorch device. Defaults to torch.device("cpu").

    Returns:
        A (2, 2) complex tensor.
    """
    cos_half = math.cos(float(theta) / 2.0)
    sin_half = math.sin(float(theta) / 2.0)
    return _tensor(
        [
            [cos_half, -cmath.exp(1.0j * lam) * sin_half],
            [cmath.exp(1.0j * phi) * sin_half, cmath.exp(1.0j * (phi + lam)) * cos_half],
        ],
        dtype,
        device,
    )


def U2(
    phi: float,
    lam: float,
    dtype: torch.dtype | None = None,
    device: torch.device | None = None,
) -> torch.Tensor:
    """U2(φ, λ) = U(π/2, φ, λ)."""
    return U(math.pi / 2.0, phi, lam, dtype=dtype, device=device)


def RX(
    theta: float,
    dtype: torch.dtype | None = None,
    device: torch.device | None = None,
) -> torch.Tensor:
    """
    Rotation gate around X-axis: RX(θ) = exp(-iθX/2).

    Matrix form:
        [[cos(θ/2), -i sin(θ/2)],
         [-i sin(θ/2), cos(θ/2)]]
    """
    cos_half = math.cos(float(theta) / 2.0)
    sin_half = math.sin(float(theta) / 2.0)
    return _tensor(
        [[cos_half, -1.0j * sin_half], [-1.0j * sin_half, cos_half]], dtype, device
    )


def RY(
    theta: float,
    dtype: torch.dtype | None = None,
    device: torch.device | None = None,
) -> torch.Tensor:
    """
    Rotation gate around Y-axis: RY(θ) = exp(-iθY/2).

    Matrix form:
        [[cos(θ/2), -sin(θ/2)],
         [sin(θ/2), cos(θ/2)]]
    """
    cos_half = math.cos(float(theta) / 2.0)
    sin_half = math.sin(float(theta) / 2.0)
    return _tensor([[cos_half, -sin_half], [sin_half, cos_half]], dtype, device)


def RZ(
    phi: float,
    dtype: torch.dtype | None = None,
    device: torch.device | None = None,
) -> torch.Tensor:
    """
    Rotation gate around Z-axis: RZ(φ) = exp(-iφZ/2).

    Matrix form:
        [[exp(-iφ/2), 0],
         [0, exp(iφ/2)]]
    """
    half = float(phi) / 2.0
    return _tensor([[cmath.exp(-1.0j * half), 0.0], [0.0, cmath.exp(1.0j * half)]], dtype, device)


def P(
    lam: float,
    dtype: torch.dtype | None = None,
    device: torch.device | None = None,
) -> torch.Tensor:
    """Phase gate P(λ) = diag(1, e^{iλ}); also known as U1."""
    return _tensor([[1.0, 0.0], [0.0, cmath.exp(1.0j * float(lam))]], dtype, device)


# ---------------------------------------------------------------------------
# Two-qubit gates
# ---------------------------------------------------------------------------


def CNOT(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """
    CNOT gate (controlled-X).

    The first qubit is the control and the second the target:
    |00⟩ -> |00⟩, |01⟩ -> |01⟩, |10⟩ -> |11⟩, |11⟩ -> |10⟩.
    """
    return _controlled(X(dtype, device))


def CY(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    return _controlled(Y(dtype, device))


def CZ(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    return _controlled(Z(dtype, device))


def CH(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    return _controlled(H(dtype, device))


def CS(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    return _controlled(S(dtype, device))


def CSDG(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    return _controlled(SDG(dtype, device))


def CT(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    return _controlled(T(dtype, device))


def CTDG(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    return _controlled(TDG(dtype, device))


def CSX(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    return _controlled(SX(dtype, device))


def CSXDG(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    return _controlled(SXDG(dtype, device))


def SWAP(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """SWAP gate: exchanges |01⟩ and |10⟩."""
    return _permutation(4, [(1, 2)], dtype, device)


def CU(
    theta: float,
    phi: float,
    lam: float,
    dtype: torch.dtype | None = None,
    device: torch.device | None = None,
) -> torch.Tensor:
    """Controlled U(θ, φ, λ)."""
    return _controlled(U(theta, phi, lam, dtype=dtype, device=device))


def CU2(
    phi: float,
    lam: float,
    dtype: torch.dtype | None = None,
    device: torch.device | None = None,
) -> torch.Tensor:
    return _controlled(U2(phi, lam, dtype=dtype, device=device))


def CRX(theta: float, dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    return _controlled(RX(theta, dtype=dtype, device=device))


def CRY(theta: float, dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    return _controlled(RY(theta, dtype=dtype, device=device))


def CRZ(phi: float, dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    return _controlled(RZ(phi, dtype=dtype, device=device))


def CP(lam: float, dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Controlled phase, diag(1, 1, 1, e^{iλ}); also known as CU1."""
    return _controlled(P(lam, dtype=dtype, device=device))


def RXX(
    theta: float,
    dtype: torch.dtype | None = None,
    device: torch.device | None = None,
) -> torch.Tensor:
    """
    Ising XX coupling: RXX(θ) = exp(-iθ X⊗X / 2).

    cos(θ/2) on the diagonal, -i sin(θ/2) on the anti-diagonal.
    """
    c = math.cos(float(theta) / 2.0)
    s = math.sin(float(theta) / 2.0)
    return _tensor(
        [
            [c, 0.0, 0.0, -1.0j * s],
            [0.0, c, -1.0j * s, 0.0],
            [0.0, -1.0j * s, c, 0.0],
            [-1.0j * s, 0.0, 0.0, c],
        ],
        dtype,
        device,
    )


def RYY(
    theta: float,
    dtype: torch.dtype | None = None,
    device: torch.device | None = None,
) -> torch.Tensor:
    """Ising YY coupling: RYY(θ) = exp(-iθ Y⊗Y / 2)."""
    c = math.cos(float(theta) / 2.0)
    s = math.sin(float(theta) / 2.0)
    return _tensor(
        [
            [c, 0.0, 0.0, 1.0j * s],
            [0.0, c, -1.0j * s, 0.0],
            [0.0, -1.0j * s, c, 0.0],
            [1.0j * s, 0.0, 0.0, c],
        ],
        dtype,
        device,
    )


def RZZ(
    theta: float,
    dtype: torch.dtype | None = None,
    device: torch.device | None = None,
) -> torch.Tensor:
    """Ising ZZ coupling: RZZ(θ) = diag(e^{-iθ/2}, e^{iθ/2}, e^{iθ/2}, e^{-iθ/2})."""
    minus = cmath.exp(-0.5j * float(theta))
    plus = cmath.exp(0.5j * float(theta))
    return _tensor(
        [
            [minus, 0.0, 0.0, 0.0],
            [0.0, plus, 0.0, 0.0],
            [0.0, 0.0, plus, 0.0],
            [0.0, 0.0, 0.0, minus],
        ],
        dtype,
        device,
    )


# ---------------------------------------------------------------------------
# Three- and four-qubit gates
# ---------------------------------------------------------------------------


def CCX(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Toffoli gate: flips the third qubit when the first two are |1⟩."""
    return _permutation(8, [(6, 7)], dtype, device)


def RCCX(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """
    Relative-phase Toffoli.

    Acts as CCX on |110⟩/|111⟩ and puts a -1 on |101⟩. This is not the
    Margolus gate of qelib1; the single sign flip is kept as-is for
    compatibility with existing circuits.
    """
    matrix = _permutation(8, [(6, 7)], dtype, device)
    matrix[5, 5] = -1.0
    return matrix


def FREDKIN(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Controlled-SWAP: swaps the last two qubits when the first is |1⟩."""
    return _permutation(8, [(5, 6)], dtype, device)


def CCCX(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Triple-controlled X: identity except |1110⟩ ↔ |1111⟩."""
    return _permutation(16, [(14, 15)], dtype, device)


def is_unitary(matrix: torch.Tensor, atol: float = 1e-9) -> bool:
    """
    Check if a matrix is unitary within a given tolerance.

    A matrix U is unitary if U†U = I, where U† is the conjugate transpose.

    Args:
        matrix: Tensor of shape (..., n, n) representing one or more matrices.
        atol: Absolute tolerance for the check.

    Returns:
        True if the matrix is unitary (within tolerance), False otherwise.
    """
    if matrix.shape[-1] != matrix.shape[-2]:
        return False

    adjoint = matrix.conj().transpose(-1, -2)
    product = torch.matmul(adjoint, matrix)

    n = matrix.shape[-1]
    identity = torch.eye(n, dtype=matrix.dtype, device=matrix.device)
    if product.ndim > 2:
        identity = identity.expand(product.shape)

    diff = torch.abs(product - identity)
    return bool(torch.all(diff < atol).item())
