"""Named-circuit facade and a small library of ready-made circuits."""

from __future__ import annotations

import math
from typing import Dict, List, Optional

import torch

from .circuit.core import QuantumCircuit, Registers
from .core.config import SimulatorConfiguration
from .logging import get_logger

logger = get_logger(__name__)


class QuantumSimulator:
    """
    Owns a set of named circuits and the configuration they are created with.

    Each circuit receives a clone of the simulator's configuration at creation
    time; changing the simulator's configuration later does not affect
    circuits that already exist.
    """

    def __init__(
        self,
        config: Optional[SimulatorConfiguration] = None,
        generator: Optional[torch.Generator] = None,
    ) -> None:
        self.circuits: Dict[str, QuantumCircuit] = {}
        self.config = (config or SimulatorConfiguration()).clone()
        self.generator = generator
        self._current: Optional[QuantumCircuit] = None

    # -- configuration -------------------------------------------------------

    def configure(self) -> SimulatorConfiguration:
        """Return the live configuration so it can be adjusted fluently."""
        return self.config

    def set_configuration(self, config: SimulatorConfiguration) -> "QuantumSimulator":
        self.config = config.clone()
        return self

    # -- circuit registry ----------------------------------------------------

    def create_circuit(
        self, name: str, n_qubits: int, registers: Registers = None
    ) -> QuantumCircuit:
        """Create, register and select a new circuit. An existing name is replaced."""
        circuit = QuantumCircuit(
            n_qubits,
            registers,
            config=self.config,
            name=name,
            generator=self.generator,
        )
        if name in self.circuits:
            logger.info("replacing circuit %r", name)
        self.circuits[name] = circuit
        self._current = circuit
        logger.debug("created %r", circuit)
        return circuit

    def get_circuit(self, name: str) -> QuantumCircuit:
        try:
            return self.circuits[name]
        except KeyError:
            raise KeyError(f"Circuit '{name}' not found") from None

    def remove_circuit(self, name: str) -> None:
        circuit = self.circuits.pop(name, None)
        if circuit is not None and circuit is self._current:
            self._current = None

    def list_circuits(self) -> List[str]:
        return list(self.circuits)

    def set_current_circuit(self, name: str) -> QuantumCircuit:
        self._current = self.get_circuit(name)
        return self._current

    @property
    def current_circuit(self) -> Optional[QuantumCircuit]:
        return self._current

    # -- built-in circuits ---------------------------------------------------

    def create_bell_state(self, name: str = "bell_state") -> QuantumCircuit:
        """(|00⟩ + |11⟩)/√2."""
        circuit = self.create_circuit(name, 2, 2)
        circuit.h(0)
        circuit.cnot(0, 1)
        return circuit

    def create_ghz_state(self, n_qubits: int, name: str = "ghz_state") -> QuantumCircuit:
        """(|0...0⟩ + |1...1⟩)/√2 on ``n_qubits`` qubits."""
        circuit = self.create_circuit(name, n_qubits, n_qubits)
        circuit.h(0)
        for q in range(1, n_qubits):
            circuit.cnot(0, q)
        return circuit

    def create_qft(self, n_qubits: int, name: str = "qft") -> QuantumCircuit:
        """
        Quantum Fourier transform.

        Each controlled phase ``CP(π/2**(k-j))`` between qubits ``k`` and
        ``j`` is decomposed into two CNOTs and three single-qubit phase
        gates. The output order is reversed with swaps at the end.
        """
        circuit = self.create_circuit(name, n_qubits)
        for j in range(n_qubits):
            circuit.h(j)
            for k in range(j + 1, n_qubits):
                angle = math.pi / 2 ** (k - j)
                circuit.cnot(k, j)
                circuit.p(-angle / 2, j)
                circuit.cnot(k, j)
                circuit.p(angle / 2, j)
                circuit.p(angle / 2, k)

        for i in range(n_qubits // 2):
            circuit.swap(i, n_qubits - 1 - i)
        return circuit

    def create_multi_qubit_test_circuit(self, name: str = "multi_qubit_test") -> QuantumCircuit:
        """One of each gate family of arity two to four, on four qubits."""
        circuit = self.create_circuit(name, 4, 4)
        circuit.h(0)
        circuit.h(1)

        circuit.cnot(0, 2)
        circuit.cz(1, 3)

        circuit.ccx(0, 1, 2)
        circuit.fredkin(0, 2, 3)
        circuit.cccx(0, 1, 2, 3)

        circuit.rxx(math.pi / 4, 0, 1)
        circuit.ryy(math.pi / 6, 1, 2)
        circuit.rzz(math.pi / 3, 2, 3)
        return circuit

    def create_conditional_example_1(self) -> QuantumCircuit:
        """
        ::

            x q[0];
            measure q[0] -> c[1];
            if (c == 2) x q[0];
        """
        circuit = self.create_circuit("example1", 3, {"c": 3})
        circuit.x(0)
        circuit.measure(0, "c", 1)
        circuit.x(0, circuit.if_equal("c", 2))
        return circuit

    def create_conditional_example_2(self) -> QuantumCircuit:
        """
        ::

            x q[0]; x q[1];
            measure q[0] -> c[1];
            if (c == 3) x q[0];
            measure q[1] -> c0[3];
            if (c0 == 8) x q[1];
        """
        circuit = self.create_circuit("example2", 3, {"c": 3, "c0": 4})
        circuit.x(0)
        circuit.x(1)
        circuit.measure(0, "c", 1)
        circuit.x(0, circuit.if_equal("c", 3))
        circuit.measure(1, "c0", 3)
        circuit.x(1, circuit.if_equal("c0", 8))
        return circuit

    def create_complex_conditional_test(self) -> QuantumCircuit:
        """Guards over two registers; exactly one of the two ``c`` guards fires."""
        circuit = self.create_circuit("complex_test", 4, {"c": 4, "status": 2})
        circuit.h(0)
        circuit.cnot(0, 1)
        circuit.x(2)

        circuit.measure(0, "c", 0)
        circuit.measure(1, "c", 1)
        circuit.measure(2, "status", 0)

        circuit.x(3, circuit.if_equal("c", 3))
        circuit.h(3, circuit.if_equal("status", 1))
        circuit.z(2, circuit.if_equal("c", 0))
        return circuit


__all__ = ["QuantumSimulator"]
