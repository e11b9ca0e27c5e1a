"""Circuit construction: operations, the operation log and the builder."""

from .core import QuantumCircuit
from .operation import MeasurementTarget, Operation, OperationKind, OperationLog

__all__ = [
    "QuantumCircuit",
    "Operation",
    "OperationKind",
    "OperationLog",
    "MeasurementTarget",
]
