"""Deterministic execution of recorded circuits."""

from .controller import (
    ExecutionController,
    ExecutionResult,
    ExecutionState,
    GateApplication,
    TraceStep,
)

__all__ = [
    "ExecutionController",
    "ExecutionResult",
    "ExecutionState",
    "GateApplication",
    "TraceStep",
]
