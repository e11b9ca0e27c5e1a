"""qcondsim - a PyTorch state-vector simulator for classically-conditioned circuits."""

__version__ = "0.1.0"

# Backend
from .backend import (
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

# Circuit construction
from .circuit import MeasurementTarget, Operation, OperationKind, OperationLog, QuantumCircuit

# Classical registers and conditions
from .classical import ClassicalCondition, ClassicalRegister, ClassicalRegisterBank, Comparator
from .core import DEFAULT_DTYPE, EPSILON, ComplexAmplitude, SimulatorConfiguration, TieBreak

# Diagnostics
from .diagnostics import (
    assert_density_matrix,
    assert_normalized,
    bloch_vector,
    debug_context,
    fidelity,
    is_debug_enabled,
    is_hermitian,
    set_debug_enabled,
    state_norm,
)

# Errors
from .errors import (
    BitRangeError,
    QCondSimError,
    QubitRangeError,
    RegisterLookupError,
    UnsupportedOperationError,
)

# Execution
from .execution import (
    ExecutionController,
    ExecutionResult,
    ExecutionState,
    GateApplication,
    TraceStep,
)

# Gates
from .gates import GateKind, GateMatrix, build_gate, is_unitary, resolve_gate_kind

# Serialization and drawing
from .io import export_circuit_to_qasm
from .logging import configure_logging, get_logger, set_log_level

# Facade
from .simulator import QuantumSimulator
from .viz import print_circuit, to_text

__all__ = [
    # Version
    "__version__",
    # Core
    "ComplexAmplitude",
    "SimulatorConfiguration",
    "TieBreak",
    "EPSILON",
    "DEFAULT_DTYPE",
    # Gates
    "GateKind",
    "GateMatrix",
    "build_gate",
    "resolve_gate_kind",
    "is_unitary",
    # Classical
    "ClassicalRegister",
    "ClassicalRegisterBank",
    "ClassicalCondition",
    "Comparator",
    # Circuit
    "Operation",
    "OperationKind",
    "OperationLog",
    "MeasurementTarget",
    "QuantumCircuit",
    # Backend
    "StateVectorEngine",
    "BasisStateProbability",
    "QubitMeasurementReport",
    "zero_state",
    "apply_gate",
    "embed_gate",
    "measure_probs",
    "qubit_marginals",
    "partial_trace",
    # Execution
    "ExecutionController",
    "ExecutionResult",
    "ExecutionState",
    "GateApplication",
    "TraceStep",
    # Facade
    "QuantumSimulator",
    # Errors
    "QCondSimError",
    "RegisterLookupError",
    "QubitRangeError",
    "BitRangeError",
    "UnsupportedOperationError",
    # Diagnostics
    "state_norm",
    "assert_normalized",
    "is_hermitian",
    "assert_density_matrix",
    "fidelity",
    "bloch_vector",
    "is_debug_enabled",
    "set_debug_enabled",
    "debug_context",
    # Logging
    "get_logger",
    "set_log_level",
    "configure_logging",
    # Serialization and drawing
    "export_circuit_to_qasm",
    "to_text",
    "print_circuit",
]
