"""Backend implementations for quantum state operations."""

from .statevector import (
    BasisStateProbability,
    QubitMeasurementReport,
    StateVectorEngine,
    apply_gate,
    embed_gate,
    measure_probs,
    partial_trace,
    qubit_marginals,
    zero_state,
)

__all__ = [
    "StateVectorEngine",
    "BasisStateProbability",
    "QubitMeasurementReport",
    "zero_state",
    "apply_gate",
    "embed_gate",
    "measure_probs",
    "qubit_marginals",
    "partial_trace",
]
