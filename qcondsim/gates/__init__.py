"""Quantum gate matrices and the static gate registry."""

from .library import (
    GATE_ALIASES,
    GATE_REGISTRY,
    GateKind,
    GateMatrix,
    GateSpec,
    build_gate,
    gate_arity,
    resolve_gate_kind,
)
from .standard import is_unitary

__all__ = [
    "GateKind",
    "GateSpec",
    "GateMatrix",
    "GATE_REGISTRY",
    "GATE_ALIASES",
    "build_gate",
    "gate_arity",
    "resolve_gate_kind",
    "is_unitary",
]
