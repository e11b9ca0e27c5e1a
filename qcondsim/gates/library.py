"""Static gate registry.

Gate names are resolved once, when an operation is appended to a circuit.
The result is a :class:`GateMatrix` that carries the kind, the canonical
name, the parameters and the unitary itself, so replays never re-dispatch on
strings.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Optional, Sequence, Tuple

import torch

from ..errors import UnsupportedOperationError
from . import standard as stdgates


class GateKind(Enum):
    """Every gate the simulator understands."""

    I = "I"
    X = "X"
    Y = "Y"
    Z = "Z"
    H = "H"
    S = "S"
    SDG = "SDG"
    T = "T"
    TDG = "TDG"
    SX = "SX"
    SXDG = "SXDG"
    U = "U"
    U1 = "U1"
    U2 = "U2"
    U3 = "U3"
    RX = "RX"
    RY = "RY"
    RZ = "RZ"
    P = "P"
    CNOT = "CNOT"
    CY = "CY"
    CZ = "CZ"
    CH = "CH"
    CS = "CS"
    CSDG = "CSDG"
    CT = "CT"
    CTDG = "CTDG"
    CSX = "CSX"
    CSXDG = "CSXDG"
    SWAP = "SWAP"
    CU = "CU"
    CU1 = "CU1"
    CU2 = "CU2"
    CU3 = "CU3"
    CRX = "CRX"
    CRY = "CRY"
    CRZ = "CRZ"
    CP = "CP"
    RXX = "RXX"
    RYY = "RYY"
    RZZ = "RZZ"
    CCX = "CCX"
    RCCX = "RCCX"
    FREDKIN = "FREDKIN"
    CCCX = "CCCX"


@dataclass(frozen=True)
class GateSpec:
    """
    Registry entry for one gate kind.

    Attributes
    ----------
    builder:
        Callable taking the gate parameters and returning the unitary.
    arity:
        Number of qubits the gate acts on.
    n_params:
        Number of real parameters the builder expects.
    qasm_name:
        Name used when the gate is serialized to OpenQASM. None means the
        lower-cased canonical name.
    """

    builder: Callable[..., torch.Tensor]
    arity: int
    n_params: int
    qasm_name: Optional[str] = None


@dataclass(frozen=True)
class GateMatrix:
    """
    A resolved gate: its kind, parameters and unitary matrix.

    The matrix tensor is never mutated after construction; the engine only
    reads it.
    """

    kind: GateKind
    params: Tuple[float, ...]
    matrix: torch.Tensor = field(compare=False, repr=False)

    @property
    def name(self) -> str:
        return self.kind.value

    @property
    def arity(self) -> int:
        return GATE_REGISTRY[self.kind].arity

    @property
    def qasm_name(self) -> str:
        return GATE_REGISTRY[self.kind].qasm_name or self.kind.value.lower()

    @property
    def is_parametric(self) -> bool:
        return len(self.params) > 0

    @property
    def is_controlled(self) -> bool:
        return self.kind in _CONTROLLED


def _spec(builder, arity: int, n_params: int = 0, qasm_name: Optional[str] = None) -> GateSpec:
    return GateSpec(builder=builder, arity=arity, n_params=n_params, qasm_name=qasm_name)


GATE_REGISTRY: Dict[GateKind, GateSpec] = {
    GateKind.I: _spec(stdgates.I, 1),
    GateKind.X: _spec(stdgates.X, 1),
    GateKind.Y: _spec(stdgates.Y, 1),
    GateKind.Z: _spec(stdgates.Z, 1),
    GateKind.H: _spec(stdgates.H, 1),
    GateKind.S: _spec(stdgates.S, 1),
    GateKind.SDG: _spec(stdgates.SDG, 1),
    GateKind.T: _spec(stdgates.T, 1),
    GateKind.TDG: _spec(stdgates.TDG, 1),
    GateKind.SX: _spec(stdgates.SX, 1),
    GateKind.SXDG: _spec(stdgates.SXDG, 1),
    GateKind.U: _spec(stdgates.U, 1, 3),
    GateKind.U1: _spec(stdgates.P, 1, 1),
    GateKind.U2: _spec(stdgates.U2, 1, 2),
    GateKind.U3: _spec(stdgates.U, 1, 3),
    GateKind.RX: _spec(stdgates.RX, 1, 1),
    GateKind.RY: _spec(stdgates.RY, 1, 1),
    GateKind.RZ: _spec(stdgates.RZ, 1, 1),
    GateKind.P: _spec(stdgates.P, 1, 1),
    GateKind.CNOT: _spec(stdgates.CNOT, 2, qasm_name="cx"),
    GateKind.CY: _spec(stdgates.CY, 2),
    GateKind.CZ: _spec(stdgates.CZ, 2),
    GateKind.CH: _spec(stdgates.CH, 2),
    GateKind.CS: _spec(stdgates.CS, 2),
    GateKind.CSDG: _spec(stdgates.CSDG, 2),
    GateKind.CT: _spec(stdgates.CT, 2),
    GateKind.CTDG: _spec(stdgates.CTDG, 2),
    GateKind.CSX: _spec(stdgates.CSX, 2),
    GateKind.CSXDG: _spec(stdgates.CSXDG, 2),
    GateKind.SWAP: _spec(stdgates.SWAP, 2),
    GateKind.CU: _spec(stdgates.CU, 2, 3),
    GateKind.CU1: _spec(stdgates.CP, 2, 1),
    GateKind.CU2: _spec(stdgates.CU2, 2, 2),
    GateKind.CU3: _spec(stdgates.CU, 2, 3),
    GateKind.CRX: _spec(stdgates.CRX, 2, 1),
    GateKind.CRY: _spec(stdgates.CRY, 2, 1),
    GateKind.CRZ: _spec(stdgates.CRZ, 2, 1),
    GateKind.CP: _spec(stdgates.CP, 2, 1),
    GateKind.RXX: _spec(stdgates.RXX, 2, 1),
    GateKind.RYY: _spec(stdgates.RYY, 2, 1),
    GateKind.RZZ: _spec(stdgates.RZZ, 2, 1),
    GateKind.CCX: _spec(stdgates.CCX, 3),
    GateKind.RCCX: _spec(stdgates.RCCX, 3),
    GateKind.FREDKIN: _spec(stdgates.FREDKIN, 3, qasm_name="cswap"),
    GateKind.CCCX: _spec(stdgates.CCCX, 4, qasm_name="c3x"),
}

GATE_ALIASES: Dict[str, GateKind] = {
    "CX": GateKind.CNOT,
    "TOFFOLI": GateKind.CCX,
    "CSWAP": GateKind.FREDKIN,
    "C3X": GateKind.CCCX,
    "ID": GateKind.I,
}

_CONTROLLED = frozenset(
    {
        GateKind.CNOT, GateKind.CY, GateKind.CZ, GateKind.CH, GateKind.CS,
        GateKind.CSDG, GateKind.CT, GateKind.CTDG, GateKind.CSX, GateKind.CSXDG,
        GateKind.CU, GateKind.CU1, GateKind.CU2, GateKind.CU3, GateKind.CRX,
        GateKind.CRY, GateKind.CRZ, GateKind.CP, GateKind.CCX, GateKind.RCCX,
        GateKind.FREDKIN, GateKind.CCCX,
    }
)


def resolve_gate_kind(name: str | GateKind) -> GateKind:
    """
    Map a gate name (case-insensitive, aliases allowed) to its kind.

    Raises
    ------
    UnsupportedOperationError
        If the name is not a known gate.
    """
    if isinstance(name, GateKind):
        return name
    key = str(name).strip().upper()
    if key in GATE_ALIASES:
        return GATE_ALIASES[key]
    try:
        return GateKind(key)
    except ValueError:
        raise UnsupportedOperationError(f"Unknown gate: {name}") from None


def build_gate(
    name: str | GateKind,
    params: Sequence[float] = (),
    dtype: torch.dtype | None = None,
    device: torch.device | None = None,
) -> GateMatrix:
    """
    Build the unitary for a gate name and parameter list.

    This is a pure function of its arguments.

    Parameters
    ----------
    name:
        Gate name or :class:`GateKind`.
    params:
        Real parameters, e.g. ``(theta,)`` for RX or ``(theta, phi, lam)``
        for U. Must match the gate's parameter count exactly.

    Raises
    ------
    UnsupportedOperationError
        If the name is unknown, the parameter count is wrong, or a parameter
        is not a finite real number.
    """
    kind = resolve_gate_kind(name)
    spec = GATE_REGISTRY[kind]

    p_tuple = tuple(float(p) for p in params)
    if len(p_tuple) != spec.n_params:
        raise UnsupportedOperationError(
            f"Gate {kind.value} requires exactly {spec.n_params} parameter(s), "
            f"got {len(p_tuple)}."
        )
    for p in p_tuple:
        if not math.isfinite(p):
            raise UnsupportedOperationError(
                f"Gate {kind.value} parameters must be finite, got {p_tuple}."
            )

    matrix = spec.builder(*p_tuple, dtype=dtype, device=device)
    return GateMatrix(kind=kind, params=p_tuple, matrix=matrix)


def gate_arity(name: str | GateKind) -> int:
    return GATE_REGISTRY[resolve_gate_kind(name)].arity


__all__ = [
    "GateKind",
    "GateSpec",
    "GateMatrix",
    "GATE_REGISTRY",
    "GATE_ALIASES",
    "resolve_gate_kind",
    "build_gate",
    "gate_arity",
]
