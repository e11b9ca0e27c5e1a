"""Circuit builder with live feedback and deterministic replay."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import torch

from ..backend.statevector import (
    BasisStateProbability,
    QubitMeasurementReport,
    StateVectorEngine,
)
from ..classical.condition import ClassicalCondition, Comparator
from ..classical.register import ClassicalRegister, ClassicalRegisterBank
from ..core.config import SimulatorConfiguration
from ..errors import QubitRangeError, UnsupportedOperationError
from ..gates.library import GATE_REGISTRY, build_gate, resolve_gate_kind
from ..io.qasm2 import export_circuit_to_qasm
from ..logging import get_logger
from ..viz.drawer import to_text
from .operation import Operation, OperationKind, OperationLog

if TYPE_CHECKING:
    from ..execution.controller import ExecutionResult

logger = get_logger(__name__)

Registers = Union[Mapping[str, int], int, None]


class QuantumCircuit:
    """
    An append-only circuit over ``n_qubits`` qubits and named classical registers.

    Every builder call records an :class:`Operation` and, when its condition
    holds, applies it immediately to a working engine and register bank so the
    intermediate state can be inspected while the circuit is being built.
    :meth:`execute_deterministic` is the authoritative pass: it replays the
    whole log from |0...0⟩ and produces a step trace.

    Parameters
    ----------
    n_qubits:
        Number of qubits.
    registers:
        ``{name: width}`` mapping of classical registers. An integer creates a
        single register ``"c"`` of that width; None creates ``"c"`` with one
        bit per qubit.
    config:
        Measurement semantics. The circuit keeps its own clone.
    name:
        Label used by the simulator facade.
    generator:
        Optional ``torch.Generator`` for the random tie-break.
    """

    def __init__(
        self,
        n_qubits: int,
        registers: Registers = None,
        config: Optional[SimulatorConfiguration] = None,
        name: str = "quantum_circuit",
        generator: Optional[torch.Generator] = None,
    ) -> None:
        if n_qubits <= 0:
            raise ValueError("QuantumCircuit requires n_qubits >= 1.")

        self._n_qubits = int(n_qubits)
        self.name = name
        self._config = (config or SimulatorConfiguration()).clone()
        self._generator = generator
        self._log = OperationLog()

        if isinstance(registers, int):
            registers = {"c": registers}
        self._bank = ClassicalRegisterBank(registers or None)
        if len(self._bank) == 0:
            self._bank.add("c", self._n_qubits)

        self._engine = StateVectorEngine(
            self._n_qubits, config=self._config, generator=generator
        )

    # -- introspection -------------------------------------------------------

    @property
    def n_qubits(self) -> int:
        return self._n_qubits

    @property
    def width(self) -> int:
        return self._n_qubits

    @property
    def config(self) -> SimulatorConfiguration:
        return self._config

    @property
    def log(self) -> OperationLog:
        return self._log

    @property
    def operations(self) -> Tuple[Operation, ...]:
        """Return a read-only tuple of all recorded operations."""
        return self._log.operations

    @property
    def engine(self) -> StateVectorEngine:
        return self._engine

    @property
    def bank(self) -> ClassicalRegisterBank:
        return self._bank

    def register_widths(self) -> Dict[str, int]:
        return {register.name: register.width for register in self._bank}

    def __len__(self) -> int:
        return len(self._log)

    def __repr__(self) -> str:
        return (
            f"QuantumCircuit(name={self.name!r}, n_qubits={self._n_qubits}, "
            f"registers={self.register_widths()!r}, operations={len(self._log)})"
        )

    # -- classical registers -------------------------------------------------

    def add_classical_register(self, name: str, width: int) -> "QuantumCircuit":
        self._bank.add(name, width)
        return self

    def get_classical_register(self, name: str) -> ClassicalRegister:
        return self._bank.get(name)

    def get_classical_value(self, name: str) -> int:
        return self._bank.get_value(name)

    # -- conditions ----------------------------------------------------------

    def _condition(self, register: str, comparator: Comparator, value: int) -> ClassicalCondition:
        self._bank.get(register)
        return ClassicalCondition(register, comparator, value)

    def if_equal(self, register: str, value: int) -> ClassicalCondition:
        """
        Return a guard ``register == value`` to pass to later builder calls.

        Raises:
            RegisterLookupError: If ``register`` is not declared.
        """
        return self._condition(register, Comparator.EQ, value)

    def if_not_equal(self, register: str, value: int) -> ClassicalCondition:
        return self._condition(register, Comparator.NE, value)

    def if_greater(self, register: str, value: int) -> ClassicalCondition:
        return self._condition(register, Comparator.GT, value)

    def if_less(self, register: str, value: int) -> ClassicalCondition:
        return self._condition(register, Comparator.LT, value)

    def if_greater_equal(self, register: str, value: int) -> ClassicalCondition:
        return self._condition(register, Comparator.GE, value)

    def if_less_equal(self, register: str, value: int) -> ClassicalCondition:
        return self._condition(register, Comparator.LE, value)

    # -- validation ----------------------------------------------------------

    def _check_qubits(self, qubits: Sequence[int]) -> Tuple[int, ...]:
        q_tuple = tuple(int(q) for q in qubits)
        for q in q_tuple:
            if q < 0 or q >= self._n_qubits:
                raise QubitRangeError(q, self._n_qubits)
        if len(set(q_tuple)) != len(q_tuple):
            raise UnsupportedOperationError(
                f"Qubit indices of one operation must be distinct, got {q_tuple}"
            )
        return q_tuple

    def _check_condition(self, condition: Optional[ClassicalCondition]) -> None:
        if condition is not None:
            self._bank.get(condition.register_name)

    def _record(self, op: Operation) -> bool:
        """Append ``op`` and report whether its guard holds right now."""
        self._log.append(op)
        if op.condition is None:
            return True
        satisfied = op.condition.evaluate(self._bank)
        if not satisfied:
            logger.debug("%s recorded but not applied: %s is false", op.name, op.condition)
        return satisfied

    # -- generic appends -----------------------------------------------------

    def append_gate(
        self,
        name: str,
        qubits: Sequence[int],
        params: Sequence[float] = (),
        condition: Optional[ClassicalCondition] = None,
    ) -> "QuantumCircuit":
        """
        Resolve a gate by name, record it and apply it if its guard holds.

        Parameters
        ----------
        name:
            Gate name, case-insensitive; aliases such as ``"cx"`` or
            ``"toffoli"`` are accepted.
        qubits:
            Target qubits, controls first. Length must match the gate arity.
        params:
            Real gate parameters.
        condition:
            Optional classical guard.

        Raises
        ------
        UnsupportedOperationError
            Unknown gate, wrong arity or wrong parameter count.
        QubitRangeError
            A qubit index outside the circuit.
        RegisterLookupError
            The condition names an undeclared register.
        """
        kind = resolve_gate_kind(name)
        arity = GATE_REGISTRY[kind].arity
        if len(qubits) != arity:
            raise UnsupportedOperationError(
                f"Gate {kind.value} acts on {arity} qubit(s), got {len(qubits)}"
            )
        q_tuple = self._check_qubits(qubits)
        self._check_condition(condition)
        gate = build_gate(kind, params)

        if self._record(Operation.gate_op(gate, q_tuple, condition)):
            self._engine.apply_gate(gate, q_tuple)
        return self

    def measure(
        self,
        qubit: int,
        register: str = "c",
        bit: Optional[int] = None,
        condition: Optional[ClassicalCondition] = None,
    ) -> Optional[int]:
        """
        Record a measurement of ``qubit`` into ``register[bit]``.

        ``bit`` defaults to the qubit index. Returns the live outcome, or
        None when the condition does not hold.
        """
        (qubit,) = self._check_qubits((qubit,))
        target = self._bank.get(register)
        actual_bit = qubit if bit is None else int(bit)
        target.check_bit(actual_bit)
        self._check_condition(condition)

        if not self._record(Operation.measurement(qubit, register, actual_bit, condition)):
            return None
        outcome = self._engine.measure(qubit)
        target.set_bit(actual_bit, outcome)
        return outcome

    def measure_all(self, register: str = "c") -> List[int]:
        """Measure qubit ``i`` into ``register[i]`` for every qubit the register can hold."""
        width = self._bank.get(register).width
        return [
            self.measure(q, register, q) for q in range(min(self._n_qubits, width))
        ]

    def reset(
        self, qubit: int, condition: Optional[ClassicalCondition] = None
    ) -> "QuantumCircuit":
        (qubit,) = self._check_qubits((qubit,))
        self._check_condition(condition)
        if self._record(Operation.reset(qubit, condition)):
            self._engine.reset(qubit)
        return self

    def barrier(self, *qubits: Union[int, Iterable[int]]) -> "QuantumCircuit":
        """Scheduling marker. With no arguments it spans every qubit."""
        flat: List[int] = []
        for q in qubits:
            if isinstance(q, int):
                flat.append(q)
            else:
                flat.extend(q)
        if not flat:
            flat = list(range(self._n_qubits))
        self._record(Operation.barrier(self._check_qubits(flat)))
        return self

    # -- single-qubit gates --------------------------------------------------

    def i(self, qubit: int, condition: Optional[ClassicalCondition] = None) -> "QuantumCircuit":
        return self.append_gate("I", [qubit], condition=condition)

    def x(self, qubit: int, condition: Optional[ClassicalCondition] = None) -> "QuantumCircuit":
        return self.append_gate("X", [qubit], condition=condition)

    def y(self, qubit: int, condition: Optional[ClassicalCondition] = None) -> "QuantumCircuit":
        return self.append_gate("Y", [qubit], condition=condition)

    def z(self, qubit: int, condition: Optional[ClassicalCondition] = None) -> "QuantumCircuit":
        return self.append_gate("Z", [qubit], condition=condition)

    def h(self, qubit: int, condition: Optional[ClassicalCondition] = None) -> "QuantumCircuit":
        return self.append_gate("H", [qubit], condition=condition)

    def s(self, qubit: int, condition: Optional[ClassicalCondition] = None) -> "QuantumCircuit":
        return self.append_gate("S", [qubit], condition=condition)

    def sdg(self, qubit: int, condition: Optional[ClassicalCondition] = None) -> "QuantumCircuit":
        return self.append_gate("SDG", [qubit], condition=condition)

    def t(self, qubit: int, condition: Optional[ClassicalCondition] = None) -> "QuantumCircuit":
        return self.append_gate("T", [qubit], condition=condition)

    def tdg(self, qubit: int, condition: Optional[ClassicalCondition] = None) -> "QuantumCircuit":
        return self.append_gate("TDG", [qubit], condition=condition)

    def sx(self, qubit: int, condition: Optional[ClassicalCondition] = None) -> "QuantumCircuit":
        return self.append_gate("SX", [qubit], condition=condition)

    def sxdg(self, qubit: int, condition: Optional[ClassicalCondition] = None) -> "QuantumCircuit":
        return self.append_gate("SXDG", [qubit], condition=condition)

    def u(
        self,
        theta: float,
        phi: float,
        lam: float,
        qubit: int,
        condition: Optional[ClassicalCondition] = None,
    ) -> "QuantumCircuit":
        return self.append_gate("U", [qubit], (theta, phi, lam), condition)

    def u1(self, lam: float, qubit: int, condition: Optional[ClassicalCondition] = None) -> "QuantumCircuit":
        return self.append_gate("U1", [qubit], (lam,), condition)

    def u2(
        self, phi: float, lam: float, qubit: int, condition: Optional[ClassicalCondition] = None
    ) -> "QuantumCircuit":
        return self.append_gate("U2", [qubit], (phi, lam), condition)

    def u3(
        self,
        theta: float,
        phi: float,
        lam: float,
        qubit: int,
        condition: Optional[ClassicalCondition] = None,
    ) -> "QuantumCircuit":
        return self.append_gate("U3", [qubit], (theta, phi, lam), condition)

    def rx(self, theta: float, qubit: int, condition: Optional[ClassicalCondition] = None) -> "QuantumCircuit":
        return self.append_gate("RX", [qubit], (theta,), condition)

    def ry(self, theta: float, qubit: int, condition: Optional[ClassicalCondition] = None) -> "QuantumCircuit":
        return self.append_gate("RY", [qubit], (theta,), condition)

    def rz(self, phi: float, qubit: int, condition: Optional[ClassicalCondition] = None) -> "QuantumCircuit":
        return self.append_gate("RZ", [qubit], (phi,), condition)

    def p(self, lam: float, qubit: int, condition: Optional[ClassicalCondition] = None) -> "QuantumCircuit":
        return self.append_gate("P", [qubit], (lam,), condition)

    # -- two-qubit gates -----------------------------------------------------

    def cx(self, control: int, target: int, condition: Optional[ClassicalCondition] = None) -> "QuantumCircuit":
        return self.append_gate("CNOT", [control, target], condition=condition)

    cnot = cx

    def cy(self, control: int, target: int, condition: Optional[ClassicalCondition] = None) -> "QuantumCircuit":
        return self.append_gate("CY", [control, target], condition=condition)

    def cz(self, control: int, target: int, condition: Optional[ClassicalCondition] = None) -> "QuantumCircuit":
        return self.append_gate("CZ", [control, target], condition=condition)

    def ch(self, control: int, target: int, condition: Optional[ClassicalCondition] = None) -> "QuantumCircuit":
        return self.append_gate("CH", [control, target], condition=condition)

    def cs(self, control: int, target: int, condition: Optional[ClassicalCondition] = None) -> "QuantumCircuit":
        return self.append_gate("CS", [control, target], condition=condition)

    def csdg(self, control: int, target: int, condition: Optional[ClassicalCondition] = None) -> "QuantumCircuit":
        return self.append_gate("CSDG", [control, target], condition=condition)

    def ct(self, control: int, target: int, condition: Optional[ClassicalCondition] = None) -> "QuantumCircuit":
        return self.append_gate("CT", [control, target], condition=condition)

    def ctdg(self, control: int, target: int, condition: Optional[ClassicalCondition] = None) -> "QuantumCircuit":
        return self.append_gate("CTDG", [control, target], condition=condition)

    def csx(self, control: int, target: int, condition: Optional[ClassicalCondition] = None) -> "QuantumCircuit":
        return self.append_gate("CSX", [control, target], condition=condition)

    def csxdg(self, control: int, target: int, condition: Optional[ClassicalCondition] = None) -> "QuantumCircuit":
        return self.append_gate("CSXDG", [control, target], condition=condition)

    def swap(self, qubit1: int, qubit2: int, condition: Optional[ClassicalCondition] = None) -> "QuantumCircuit":
        return self.append_gate("SWAP", [qubit1, qubit2], condition=condition)

    def cu(
        self,
        theta: float,
        phi: float,
        lam: float,
        control: int,
        target: int,
        condition: Optional[ClassicalCondition] = None,
    ) -> "QuantumCircuit":
        return self.append_gate("CU", [control, target], (theta, phi, lam), condition)

    def cu1(
        self, lam: float, control: int, target: int, condition: Optional[ClassicalCondition] = None
    ) -> "QuantumCircuit":
        return self.append_gate("CU1", [control, target], (lam,), condition)

    def cu2(
        self,
        phi: float,
        lam: float,
        control: int,
        target: int,
        condition: Optional[ClassicalCondition] = None,
    ) -> "QuantumCircuit":
        return self.append_gate("CU2", [control, target], (phi, lam), condition)

    def cu3(
        self,
        theta: float,
        phi: float,
        lam: float,
        control: int,
        target: int,
        condition: Optional[ClassicalCondition] = None,
    ) -> "QuantumCircuit":
        return self.append_gate("CU3", [control, target], (theta, phi, lam), condition)

    def crx(
        self, theta: float, control: int, target: int, condition: Optional[ClassicalCondition] = None
    ) -> "QuantumCircuit":
        return self.append_gate("CRX", [control, target], (theta,), condition)

    def cry(
        self, theta: float, control: int, target: int, condition: Optional[ClassicalCondition] = None
    ) -> "QuantumCircuit":
        return self.append_gate("CRY", [control, target], (theta,), condition)

    def crz(
        self, phi: float, control: int, target: int, condition: Optional[ClassicalCondition] = None
    ) -> "QuantumCircuit":
        return self.append_gate("CRZ", [control, target], (phi,), condition)

    def cp(
        self, lam: float, control: int, target: int, condition: Optional[ClassicalCondition] = None
    ) -> "QuantumCircuit":
        return self.append_gate("CP", [control, target], (lam,), condition)

    def rxx(
        self, theta: float, qubit1: int, qubit2: int, condition: Optional[ClassicalCondition] = None
    ) -> "QuantumCircuit":
        return self.append_gate("RXX", [qubit1, qubit2], (theta,), condition)

    def ryy(
        self, theta: float, qubit1: int, qubit2: int, condition: Optional[ClassicalCondition] = None
    ) -> "QuantumCircuit":
        return self.append_gate("RYY", [qubit1, qubit2], (theta,), condition)

    def rzz(
        self, theta: float, qubit1: int, qubit2: int, condition: Optional[ClassicalCondition] = None
    ) -> "QuantumCircuit":
        return self.append_gate("RZZ", [qubit1, qubit2], (theta,), condition)

    # -- three- and four-qubit gates -----------------------------------------

    def ccx(
        self, control1: int, control2: int, target: int, condition: Optional[ClassicalCondition] = None
    ) -> "QuantumCircuit":
        return self.append_gate("CCX", [control1, control2, target], condition=condition)

    toffoli = ccx

    def rccx(
        self, control1: int, control2: int, target: int, condition: Optional[ClassicalCondition] = None
    ) -> "QuantumCircuit":
        return self.append_gate("RCCX", [control1, control2, target], condition=condition)

    def fredkin(
        self, control: int, target1: int, target2: int, condition: Optional[ClassicalCondition] = None
    ) -> "QuantumCircuit":
        return self.append_gate("FREDKIN", [control, target1, target2], condition=condition)

    cswap = fredkin

    def cccx(
        self,
        control1: int,
        control2: int,
        control3: int,
        target: int,
        condition: Optional[ClassicalCondition] = None,
    ) -> "QuantumCircuit":
        return self.append_gate(
            "CCCX", [control1, control2, control3, target], condition=condition
        )

    c3x = cccx

    # -- working-state inspection --------------------------------------------

    def get_state_vector(self) -> torch.Tensor:
        return self._engine.snapshot()

    def get_state_probabilities(self) -> List[BasisStateProbability]:
        return self._engine.state_probabilities()

    def get_qubit_probabilities(self) -> List[Tuple[float, float]]:
        return self._engine.qubit_probabilities()

    def get_density_matrix(self) -> torch.Tensor:
        return self._engine.density_matrix()

    def partial_trace(self, keep: Sequence[int]) -> torch.Tensor:
        return self._engine.partial_trace(keep)

    def measure_deterministic(self, qubit: int) -> QubitMeasurementReport:
        return self._engine.measure_deterministic(qubit)

    def measure_all_deterministic(self) -> List[QubitMeasurementReport]:
        return self._engine.measure_all_deterministic()

    # -- execution -----------------------------------------------------------

    def execute_deterministic(self) -> ExecutionResult:
        """
        Replay the full log from |0...0⟩ and return an ``ExecutionResult``.

        The circuit's working state is replaced by the replay's final state and
        registers, so later inspection reflects the authoritative run.
        """
        # Imported here: the controller module depends on this package.
        from ..execution.controller import ExecutionController

        controller = ExecutionController(
            self._n_qubits,
            self._log,
            self.register_widths(),
            config=self._config,
            generator=self._generator,
        )
        result = controller.execute_deterministic()
        self._engine = controller.engine
        self._bank = controller.bank
        return result

    # -- statistics ----------------------------------------------------------

    def copy(self) -> "QuantumCircuit":
        """Return an independent copy with the same log and working state."""
        new = QuantumCircuit(
            self._n_qubits,
            self.register_widths(),
            config=self._config,
            name=self.name,
            generator=self._generator,
        )
        new._log = self._log.copy()
        new._bank = self._bank.clone()
        new._engine.set_state(self._engine.snapshot())
        return new

    def gate_counts(self) -> Dict[str, int]:
        """Return a dictionary mapping gate names to their counts."""
        counts: Dict[str, int] = {}
        for op in self._log:
            if op.kind is OperationKind.GATE:
                counts[op.name] = counts.get(op.name, 0) + 1
        return counts

    def depth(self) -> int:
        """
        Number of sequential layers if operations on disjoint qubits run in
        parallel. Barriers add no layer but align the qubits they span.
        """
        qubit_layer = [0] * self._n_qubits
        max_layer = 0

        for op in self._log:
            earliest = max(qubit_layer[q] for q in op.qubits)
            layer = earliest if op.kind is OperationKind.BARRIER else earliest + 1
            for q in op.qubits:
                qubit_layer[q] = layer
            max_layer = max(max_layer, layer)

        return max_layer

    # -- external formats ----------------------------------------------------

    def to_qasm(self) -> str:
        return export_circuit_to_qasm(self)

    def draw(self) -> str:
        return to_text(self)


__all__ = ["QuantumCircuit"]
