"""Exception hierarchy for qcondsim.

Every error is raised synchronously at the point where a circuit is built or
a condition is evaluated. Nothing here is retried or recovered internally:
each one signals a mistake in the caller's circuit description.
"""

from __future__ import annotations


class QCondSimError(Exception):
    """Base class for all qcondsim errors."""


class RegisterLookupError(QCondSimError, LookupError):
    """A condition or measurement references an undeclared classical register."""

    def __init__(self, register_name: str) -> None:
        self.register_name = register_name
        super().__init__(f"Classical register '{register_name}' not found")


class QubitRangeError(QCondSimError, IndexError):
    """A qubit index lies outside the circuit."""

    def __init__(self, qubit: int, n_qubits: int) -> None:
        self.qubit = qubit
        self.n_qubits = n_qubits
        super().__init__(
            f"Qubit index {qubit} out of range [0, {n_qubits})"
        )


class BitRangeError(QCondSimError, IndexError):
    """A bit index is not smaller than the declared register width."""

    def __init__(self, bit: int, register_name: str, width: int) -> None:
        self.bit = bit
        self.register_name = register_name
        self.width = width
        super().__init__(
            f"Bit index {bit} out of range for register '{register_name}' "
            f"(size {width})"
        )


class UnsupportedOperationError(QCondSimError, ValueError):
    """Unknown gate or operation name, or a malformed gate request."""


__all__ = [
    "QCondSimError",
    "RegisterLookupError",
    "QubitRangeError",
    "BitRangeError",
    "UnsupportedOperationError",
]
