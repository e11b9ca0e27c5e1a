"""Tests for the named-circuit facade and its built-in circuits."""

import math

import pytest
import torch

from qcondsim import QuantumSimulator, SimulatorConfiguration, TieBreak


@pytest.fixture
def simulator():
    sim = QuantumSimulator()
    sim.configure().set_tie_break("0")
    return sim


class TestRegistry:
    def test_create_and_select(self, simulator):
        circuit = simulator.create_circuit("a", 2)
        assert simulator.get_circuit("a") is circuit
        assert simulator.current_circuit is circuit
        assert simulator.list_circuits() == ["a"]

    def test_create_replaces_existing(self, simulator):
        first = simulator.create_circuit("a", 1)
        second = simulator.create_circuit("a", 2)
        assert first is not second
        assert simulator.get_circuit("a") is second
        assert simulator.list_circuits() == ["a"]

    def test_missing_circuit(self, simulator):
        with pytest.raises(KeyError, match="Circuit 'nope' not found"):
            simulator.get_circuit("nope")
        with pytest.raises(KeyError):
            simulator.set_current_circuit("nope")

    def test_set_current_and_remove(self, simulator):
        a = simulator.create_circuit("a", 1)
        simulator.create_circuit("b", 1)
        assert simulator.set_current_circuit("a") is a
        simulator.remove_circuit("a")
        assert simulator.current_circuit is None
        assert simulator.list_circuits() == ["b"]
        simulator.remove_circuit("a")  # no-op

    def test_config_is_cloned_per_circuit(self, simulator):
        circuit = simulator.create_circuit("a", 1)
        simulator.configure().set_tie_break("1").set_measurement_deferred(True)
        assert circuit.config.tie_break is TieBreak.ZERO
        assert not circuit.config.measurement_deferred

    def test_set_configuration(self):
        config = SimulatorConfiguration(tie_break="1")
        sim = QuantumSimulator().set_configuration(config)
        config.set_tie_break("0")
        assert sim.config.tie_break is TieBreak.ONE


class TestBuiltins:
    def test_bell_state(self, simulator):
        circuit = simulator.create_bell_state()
        probs = circuit.get_state_vector().abs() ** 2
        assert torch.allclose(probs, torch.tensor([0.5, 0, 0, 0.5], dtype=probs.dtype))
        assert circuit.register_widths() == {"c": 2}

    @pytest.mark.parametrize("n", [1, 3, 5])
    def test_ghz_state(self, simulator, n):
        circuit = simulator.create_ghz_state(n)
        state = circuit.get_state_vector()
        assert float(state[0].abs()) == pytest.approx(2**-0.5)
        assert float(state[-1].abs()) == pytest.approx(2**-0.5)
        assert float((state.abs() ** 2)[1:-1].sum()) == pytest.approx(0.0, abs=1e-12)

    @pytest.mark.parametrize("n", [1, 2, 3])
    def test_qft_of_zero_is_uniform(self, simulator, n):
        state = simulator.create_qft(n).get_state_vector()
        expected = torch.full((2**n,), 2 ** (-n / 2), dtype=state.dtype)
        assert torch.allclose(state, expected, atol=1e-12)

    def test_qft_of_basis_state(self, simulator):
        """QFT|1> on 3 qubits has phases exp(2πik/8)."""
        circuit = simulator.create_circuit("prep", 3)
        circuit.x(2)
        qft = simulator.create_qft(3)
        # Replay the QFT operations after the X on the prepared circuit.
        for op in qft.operations:
            circuit.append_gate(op.name, op.qubits, op.params)
        state = circuit.get_state_vector()
        expected = torch.tensor(
            [complex(math.cos(2 * math.pi * k / 8), math.sin(2 * math.pi * k / 8)) for k in range(8)],
            dtype=state.dtype,
        ) / math.sqrt(8)
        assert torch.allclose(state, expected, atol=1e-12)

    def test_multi_qubit_test_circuit(self, simulator):
        circuit = simulator.create_multi_qubit_test_circuit()
        assert circuit.n_qubits == 4
        counts = circuit.gate_counts()
        for name in ("CNOT", "CZ", "CCX", "FREDKIN", "CCCX", "RXX", "RYY", "RZZ"):
            assert counts[name] == 1
        assert float(torch.linalg.vector_norm(circuit.get_state_vector())) == pytest.approx(1.0)

    def test_conditional_example_1(self, simulator):
        circuit = simulator.create_conditional_example_1()
        result = circuit.execute_deterministic()
        assert result.register_values() == {"c": 2}
        assert result.trace[-1].condition_satisfied
        assert float(result.final_state[0].abs()) == pytest.approx(1.0)

    def test_conditional_example_2(self, simulator):
        circuit = simulator.create_conditional_example_2()
        result = circuit.execute_deterministic()
        assert result.register_values() == {"c": 2, "c0": 8}
        flags = [step.condition_satisfied for step in result.trace if step.operation.is_conditional]
        assert flags == [False, True]
        # q0 stays |1>, q1 is flipped back to |0>.
        assert float(result.final_state[0b100].abs()) == pytest.approx(1.0)

    @pytest.mark.parametrize("tie_break,c_value", [("0", 0), ("1", 3)])
    def test_complex_conditional(self, tie_break, c_value):
        sim = QuantumSimulator(SimulatorConfiguration(tie_break=tie_break))
        result = sim.create_complex_conditional_test().execute_deterministic()
        assert result.register_values() == {"c": c_value, "status": 1}
        guards = [step for step in result.trace if step.operation.is_conditional]
        c_guards = [step.condition_satisfied for step in guards if step.operation.condition.register_name == "c"]
        assert sum(c_guards) == 1
        assert guards[1].condition_satisfied
