"""Operation records and the append-only operation log."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple, overload

from ..classical.condition import ClassicalCondition
from ..gates.library import GateMatrix


class OperationKind(Enum):
    GATE = "gate"
    MEASUREMENT = "measurement"
    RESET = "reset"
    BARRIER = "barrier"


@dataclass(frozen=True)
class MeasurementTarget:
    """Classical bit that receives a measurement outcome."""

    register_name: str
    bit: int


@dataclass(frozen=True)
class Operation:
    """
    One scheduled action in a circuit.

    Attributes
    ----------
    kind:
        Gate application, measurement, reset or barrier.
    qubits:
        Qubit indices the operation acts on. For gates the order matches the
        gate matrix (controls first).
    gate:
        Resolved gate, for ``OperationKind.GATE`` only.
    target:
        Destination bit, for ``OperationKind.MEASUREMENT`` only.
    condition:
        Optional classical guard. None means the operation always fires.
    """

    kind: OperationKind
    qubits: Tuple[int, ...]
    gate: Optional[GateMatrix] = None
    target: Optional[MeasurementTarget] = None
    condition: Optional[ClassicalCondition] = None

    @classmethod
    def gate_op(
        cls,
        gate: GateMatrix,
        qubits: Sequence[int],
        condition: Optional[ClassicalCondition] = None,
    ) -> "Operation":
        return cls(OperationKind.GATE, tuple(qubits), gate=gate, condition=condition)

    @classmethod
    def measurement(
        cls,
        qubit: int,
        register_name: str,
        bit: int,
        condition: Optional[ClassicalCondition] = None,
    ) -> "Operation":
        return cls(
            OperationKind.MEASUREMENT,
            (qubit,),
            target=MeasurementTarget(register_name, bit),
            condition=condition,
        )

    @classmethod
    def reset(
        cls, qubit: int, condition: Optional[ClassicalCondition] = None
    ) -> "Operation":
        return cls(OperationKind.RESET, (qubit,), condition=condition)

    @classmethod
    def barrier(cls, qubits: Sequence[int]) -> "Operation":
        return cls(OperationKind.BARRIER, tuple(qubits))

    @property
    def name(self) -> str:
        if self.kind is OperationKind.GATE and self.gate is not None:
            return self.gate.name
        return self.kind.value

    @property
    def params(self) -> Tuple[float, ...]:
        return self.gate.params if self.gate is not None else ()

    @property
    def is_conditional(self) -> bool:
        return self.condition is not None


class OperationLog:
    """
    Ordered, append-only record of a circuit's operations.

    The log describes circuit intent; it holds no execution state and is
    only read during replay.
    """

    def __init__(self, operations: Sequence[Operation] = ()) -> None:
        self._ops: List[Operation] = list(operations)

    def append(self, operation: Operation) -> Operation:
        self._ops.append(operation)
        return operation

    @property
    def operations(self) -> Tuple[Operation, ...]:
        """Read-only tuple of all operations in append order."""
        return tuple(self._ops)

    def copy(self) -> "OperationLog":
        # Operations are immutable, so a shallow copy is independent.
        return OperationLog(self._ops)

    def __iter__(self) -> Iterator[Operation]:
        return iter(tuple(self._ops))

    def __len__(self) -> int:
        return len(self._ops)

    @overload
    def __getitem__(self, index: int) -> Operation: ...

    @overload
    def __getitem__(self, index: slice) -> Tuple[Operation, ...]: ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return tuple(self._ops[index])
        return self._ops[index]

    def __repr__(self) -> str:
        return f"OperationLog({len(self._ops)} operations)"


__all__ = ["OperationKind", "MeasurementTarget", "Operation", "OperationLog"]
