"""Deterministic replay of an operation log."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple

import torch

from ..backend.statevector import BasisStateProbability, StateVectorEngine
from ..classical.register import ClassicalRegister, ClassicalRegisterBank
from ..circuit.operation import Operation, OperationKind, OperationLog
from ..core.config import SimulatorConfiguration
from ..logging import get_logger

logger = get_logger(__name__)


class ExecutionState(Enum):
    IDLE = "idle"
    REPLAYING = "replaying"


@dataclass(frozen=True)
class TraceStep:
    """
    Record of one replayed operation.

    Attributes
    ----------
    index:
        Position of the operation in the log.
    condition_satisfied:
        False when the operation's guard did not hold; the state and
        register snapshots are then identical before and after.
    outcome:
        Classical result of a measurement that fired, otherwise None.
    """

    index: int
    operation: Operation
    condition_satisfied: bool
    state_before: torch.Tensor
    state_after: torch.Tensor
    registers_before: Dict[str, int]
    registers_after: Dict[str, int]
    outcome: Optional[int] = None

    @property
    def changed_state(self) -> bool:
        return not torch.equal(self.state_before, self.state_after)


@dataclass(frozen=True)
class GateApplication:
    """A gate that fired during replay, with the basis probabilities it produced."""

    index: int
    name: str
    qubits: Tuple[int, ...]
    params: Tuple[float, ...]
    probabilities: torch.Tensor


@dataclass
class ExecutionResult:
    """Output of :meth:`ExecutionController.execute_deterministic`."""

    final_state: torch.Tensor
    final_probabilities: List[BasisStateProbability]
    registers: Dict[str, ClassicalRegister]
    trace: List[TraceStep]
    gate_applications: List[GateApplication]

    def register_values(self) -> Dict[str, int]:
        return {name: register.value for name, register in self.registers.items()}

    def satisfied_steps(self) -> List[TraceStep]:
        return [step for step in self.trace if step.condition_satisfied]


class ExecutionController:
    """
    Replays an :class:`OperationLog` against a fresh engine and register bank.

    A run resets the engine to |0...0⟩ and every register to zero, then
    walks the log in append order. Each guard is evaluated against the bank
    as it stands at that moment, so a condition sees the outcome of every
    earlier measurement in the same pass.

    Parameters
    ----------
    n_qubits:
        Width of the quantum register.
    log:
        Operations to replay. Never modified.
    registers:
        Classical register declarations, ``{name: width}``.
    config:
        Measurement semantics; cloned.
    generator:
        Optional ``torch.Generator`` for the random tie-break.
    """

    def __init__(
        self,
        n_qubits: int,
        log: OperationLog,
        registers: Mapping[str, int],
        config: Optional[SimulatorConfiguration] = None,
        generator: Optional[torch.Generator] = None,
    ) -> None:
        self.log = log
        self.config = (config or SimulatorConfiguration()).clone()
        self.engine = StateVectorEngine(n_qubits, config=self.config, generator=generator)
        self.bank = ClassicalRegisterBank(registers)
        self._state = ExecutionState.IDLE

    @property
    def state(self) -> ExecutionState:
        return self._state

    def execute_deterministic(self) -> ExecutionResult:
        """
        Run the whole log once and return the final state and trace.

        Raises
        ------
        RuntimeError
            If called while a replay is already in progress.
        """
        if self._state is ExecutionState.REPLAYING:
            raise RuntimeError("ExecutionController is already replaying")

        self._state = ExecutionState.REPLAYING
        try:
            return self._replay()
        finally:
            self._state = ExecutionState.IDLE

    def _replay(self) -> ExecutionResult:
        self.engine.reset_state()
        self.bank.reset()
        logger.info(
            "replaying %d operations on %d qubits", len(self.log), self.engine.n_qubits
        )

        trace: List[TraceStep] = []
        applications: List[GateApplication] = []

        for index, op in enumerate(self.log):
            state_before = self.engine.snapshot()
            registers_before = self.bank.snapshot()

            satisfied = op.condition is None or op.condition.evaluate(self.bank)
            outcome = None
            if satisfied:
                outcome = self._dispatch(op)
                if op.kind is OperationKind.GATE:
                    applications.append(
                        GateApplication(
                            index=index,
                            name=op.name,
                            qubits=op.qubits,
                            params=op.params,
                            probabilities=self.engine.state.abs() ** 2,
                        )
                    )
            else:
                logger.debug("step %d: %s skipped, condition %s is false", index, op.name, op.condition)

            trace.append(
                TraceStep(
                    index=index,
                    operation=op,
                    condition_satisfied=satisfied,
                    state_before=state_before,
                    state_after=self.engine.snapshot(),
                    registers_before=registers_before,
                    registers_after=self.bank.snapshot(),
                    outcome=outcome,
                )
            )

        logger.info("replay finished: registers=%s", self.bank.snapshot())
        return ExecutionResult(
            final_state=self.engine.snapshot(),
            final_probabilities=self.engine.state_probabilities(),
            registers=self.bank.registers(),
            trace=trace,
            gate_applications=applications,
        )

    def _dispatch(self, op: Operation) -> Optional[int]:
        if op.kind is OperationKind.GATE:
            self.engine.apply_gate(op.gate, op.qubits)
        elif op.kind is OperationKind.MEASUREMENT:
            outcome = self.engine.measure(op.qubits[0])
            self.bank.set_bit(op.target.register_name, op.target.bit, outcome)
            return outcome
        elif op.kind is OperationKind.RESET:
            self.engine.reset(op.qubits[0])
        # Barriers only affect scheduling and drawing.
        return None


__all__ = [
    "ExecutionState",
    "TraceStep",
    "GateApplication",
    "ExecutionResult",
    "ExecutionController",
]
