"""Tests for the circuit builder."""

from __future__ import annotations

import math

import pytest
import torch

from qcondsim.circuit import OperationKind, QuantumCircuit
from qcondsim.classical import Comparator
from qcondsim.core import SimulatorConfiguration
from qcondsim.errors import (
    BitRangeError,
    QubitRangeError,
    RegisterLookupError,
    UnsupportedOperationError,
)


def _fixed(tie_break: str = "0") -> SimulatorConfiguration:
    return SimulatorConfiguration(tie_break=tie_break)


def test_circuit_simulates_bell_state() -> None:
    """H then CNOT gives (|00> + |11>)/sqrt(2) with qubit 0 as MSB."""
    circuit = QuantumCircuit(2)
    circuit.h(0)
    circuit.cx(0, 1)

    probs = circuit.get_state_vector().abs() ** 2
    assert torch.allclose(
        probs,
        torch.tensor([0.5, 0.0, 0.0, 0.5], dtype=probs.dtype),
        atol=1e-12,
    )


def test_big_endian_ordering() -> None:
    """X on qubit 0 of three sets the most significant bit."""
    circuit = QuantumCircuit(3)
    circuit.x(0)
    assert float(circuit.get_state_vector()[4].abs()) == pytest.approx(1.0)


def test_default_register() -> None:
    """No register argument declares "c" with one bit per qubit."""
    assert QuantumCircuit(3).register_widths() == {"c": 3}
    assert QuantumCircuit(2, 5).register_widths() == {"c": 5}
    assert QuantumCircuit(2, {"a": 1, "b": 2}).register_widths() == {"a": 1, "b": 2}


def test_rejects_empty_circuit() -> None:
    with pytest.raises(ValueError):
        QuantumCircuit(0)


class TestValidation:
    """Builder calls reject bad input before recording anything."""

    def test_qubit_out_of_range(self):
        circuit = QuantumCircuit(2)
        with pytest.raises(QubitRangeError):
            circuit.x(2)
        with pytest.raises(QubitRangeError):
            circuit.cx(0, -1)
        assert len(circuit) == 0

    def test_duplicate_qubits(self):
        circuit = QuantumCircuit(3)
        with pytest.raises(UnsupportedOperationError):
            circuit.cx(1, 1)
        assert len(circuit) == 0

    def test_unknown_gate(self):
        circuit = QuantumCircuit(1)
        with pytest.raises(UnsupportedOperationError, match="Unknown gate"):
            circuit.append_gate("FOO", [0])

    def test_wrong_arity(self):
        circuit = QuantumCircuit(3)
        with pytest.raises(UnsupportedOperationError):
            circuit.append_gate("CNOT", [0])
        with pytest.raises(UnsupportedOperationError):
            circuit.append_gate("H", [0, 1])

    def test_wrong_param_count(self):
        circuit = QuantumCircuit(1)
        with pytest.raises(UnsupportedOperationError):
            circuit.append_gate("RX", [0])

    def test_unknown_register(self):
        circuit = QuantumCircuit(1)
        with pytest.raises(RegisterLookupError):
            circuit.measure(0, "missing")
        with pytest.raises(RegisterLookupError):
            circuit.if_equal("missing", 1)
        with pytest.raises(RegisterLookupError):
            circuit.get_classical_value("missing")

    def test_bit_out_of_range(self):
        circuit = QuantumCircuit(2, {"c": 1})
        with pytest.raises(BitRangeError):
            circuit.measure(0, "c", 1)
        # Default bit is the qubit index.
        with pytest.raises(BitRangeError):
            circuit.measure(1, "c")
        assert len(circuit) == 0


class TestLiveFeedback:
    """Operations act on the working state as soon as they are recorded."""

    def test_measure_returns_outcome_and_sets_bit(self):
        circuit = QuantumCircuit(2, {"c": 2}, config=_fixed())
        circuit.x(1)
        assert circuit.measure(1, "c", 1) == 1
        assert circuit.get_classical_value("c") == 2

    def test_condition_evaluated_while_building(self):
        circuit = QuantumCircuit(1, {"c": 1}, config=_fixed())
        circuit.x(0)
        circuit.measure(0)
        circuit.x(0, circuit.if_equal("c", 1))
        assert float(circuit.get_state_vector()[0].abs()) == pytest.approx(1.0)

    def test_false_condition_records_but_skips(self):
        circuit = QuantumCircuit(1, {"c": 1}, config=_fixed())
        circuit.x(0, circuit.if_equal("c", 1))
        assert len(circuit) == 1
        assert circuit.operations[0].is_conditional
        assert float(circuit.get_state_vector()[0].abs()) == pytest.approx(1.0)

    def test_guarded_measure_returns_none(self):
        circuit = QuantumCircuit(1, {"c": 1, "flag": 1}, config=_fixed())
        assert circuit.measure(0, "c", 0, circuit.if_equal("flag", 1)) is None
        assert len(circuit) == 1

    def test_reset_returns_qubit_to_zero(self):
        circuit = QuantumCircuit(2, config=_fixed())
        circuit.x(0).x(1)
        circuit.reset(0)
        probs = circuit.get_state_vector().abs() ** 2
        assert float(probs[1]) == pytest.approx(1.0)

    def test_measure_all(self):
        circuit = QuantumCircuit(3, config=_fixed())
        circuit.x(0).x(2)
        assert circuit.measure_all() == [1, 0, 1]
        assert circuit.get_classical_value("c") == 0b101

    def test_measure_all_narrow_register(self):
        circuit = QuantumCircuit(3, {"c": 2}, config=_fixed())
        circuit.x(1)
        assert circuit.measure_all() == [0, 1]
        measurements = [op for op in circuit.operations if op.kind is OperationKind.MEASUREMENT]
        assert [op.qubits for op in measurements] == [(0,), (1,)]
        assert len(circuit) == 3


class TestConditions:
    """The if_* helpers build guards with the matching comparator."""

    @pytest.mark.parametrize(
        "method,comparator",
        [
            ("if_equal", Comparator.EQ),
            ("if_not_equal", Comparator.NE),
            ("if_greater", Comparator.GT),
            ("if_less", Comparator.LT),
            ("if_greater_equal", Comparator.GE),
            ("if_less_equal", Comparator.LE),
        ],
    )
    def test_comparators(self, method, comparator):
        circuit = QuantumCircuit(1)
        condition = getattr(circuit, method)("c", 1)
        assert condition.register_name == "c"
        assert condition.comparator is comparator
        assert condition.value == 1

    def test_condition_sees_register_value(self):
        circuit = QuantumCircuit(2, {"c": 2}, config=_fixed())
        circuit.get_classical_register("c").set_value(2)
        assert circuit.if_greater("c", 1).evaluate(circuit.bank)
        assert not circuit.if_less("c", 2).evaluate(circuit.bank)
        assert circuit.if_less_equal("c", 2).evaluate(circuit.bank)


class TestGateMethods:
    def test_aliases(self):
        assert QuantumCircuit.cnot is QuantumCircuit.cx
        assert QuantumCircuit.toffoli is QuantumCircuit.ccx
        assert QuantumCircuit.cswap is QuantumCircuit.fredkin
        assert QuantumCircuit.c3x is QuantumCircuit.cccx

    def test_parameters_are_recorded(self):
        circuit = QuantumCircuit(2)
        circuit.rx(math.pi / 2, 0)
        circuit.cu(0.1, 0.2, 0.3, 0, 1)
        assert circuit.operations[0].params == (math.pi / 2,)
        assert circuit.operations[1].params == (0.1, 0.2, 0.3)
        assert circuit.operations[1].qubits == (0, 1)

    def test_toffoli_flips_target(self):
        circuit = QuantumCircuit(3)
        circuit.x(0).x(1).ccx(0, 1, 2)
        assert float(circuit.get_state_vector()[7].abs()) == pytest.approx(1.0)

    def test_fredkin_swaps_targets(self):
        circuit = QuantumCircuit(3)
        circuit.x(0).x(1).fredkin(0, 1, 2)
        # |110> -> |101>
        assert float(circuit.get_state_vector()[5].abs()) == pytest.approx(1.0)

    def test_cccx(self):
        circuit = QuantumCircuit(4)
        circuit.x(0).x(1).x(2).cccx(0, 1, 2, 3)
        assert float(circuit.get_state_vector()[15].abs()) == pytest.approx(1.0)

    def test_norm_preserved(self):
        circuit = QuantumCircuit(3)
        circuit.h(0).ry(0.3, 1).crx(0.7, 0, 2).rzz(1.1, 1, 2).u(0.2, 0.4, 0.6, 2)
        assert float(torch.linalg.vector_norm(circuit.get_state_vector())) == pytest.approx(1.0)


class TestStatistics:
    def test_gate_counts_ignore_non_gates(self):
        circuit = QuantumCircuit(2, config=_fixed())
        circuit.h(0).h(1).cx(0, 1)
        circuit.barrier()
        circuit.measure(0)
        circuit.reset(1)
        assert circuit.gate_counts() == {"H": 2, "CNOT": 1}

    def test_depth(self):
        circuit = QuantumCircuit(2)
        circuit.h(0)
        circuit.h(1)  # parallel with the first H
        circuit.cx(0, 1)
        assert circuit.depth() == 2

    def test_depth_empty(self):
        assert QuantumCircuit(3).depth() == 0

    def test_barrier_aligns_without_adding_layer(self):
        circuit = QuantumCircuit(2)
        circuit.h(0).h(0)
        circuit.barrier()
        circuit.h(1)
        # Without the barrier H(1) would sit in layer 1.
        assert circuit.depth() == 3

    def test_barrier_flattens_arguments(self):
        circuit = QuantumCircuit(4)
        circuit.barrier(0, [2, 3])
        op = circuit.operations[0]
        assert op.kind is OperationKind.BARRIER
        assert op.qubits == (0, 2, 3)


class TestCopyAndReplay:
    def test_copy_is_independent(self):
        circuit = QuantumCircuit(2, config=_fixed())
        circuit.x(0)
        circuit.measure(0)
        clone = circuit.copy()
        clone.x(1)

        assert len(circuit) == 2
        assert len(clone) == 3
        assert clone.get_classical_value("c") == circuit.get_classical_value("c") == 1
        assert float(circuit.get_state_vector()[2].abs()) == pytest.approx(1.0)
        assert float(clone.get_state_vector()[3].abs()) == pytest.approx(1.0)

    def test_replay_matches_live_state_for_fixed_tie_break(self):
        circuit = QuantumCircuit(2, config=_fixed("1"))
        circuit.h(0).cx(0, 1)
        circuit.measure(0)
        circuit.x(1, circuit.if_equal("c", 2))
        live = circuit.get_state_vector()
        result = circuit.execute_deterministic()
        assert torch.allclose(live, result.final_state)

    def test_config_is_cloned(self):
        config = _fixed("0")
        circuit = QuantumCircuit(1, config=config)
        config.set_tie_break("1")
        assert circuit.config.tie_break.value == "0"


class TestInspection:
    def test_density_matrix_and_partial_trace(self):
        circuit = QuantumCircuit(2)
        circuit.h(0).cx(0, 1)
        rho = circuit.get_density_matrix()
        assert rho.shape == (4, 4)
        reduced = circuit.partial_trace([0])
        assert torch.allclose(
            reduced, torch.eye(2, dtype=reduced.dtype) / 2, atol=1e-12
        )

    def test_measure_deterministic_leaves_state(self):
        circuit = QuantumCircuit(1)
        circuit.ry(2 * math.acos(math.sqrt(0.75)), 0)
        before = circuit.get_state_vector()
        report = circuit.measure_deterministic(0)
        assert report.probability_0 == pytest.approx(0.75)
        assert report.probability_1 == pytest.approx(0.25)
        assert torch.equal(before, circuit.get_state_vector())

    def test_state_probabilities_labels(self):
        circuit = QuantumCircuit(2)
        circuit.x(1)
        probs = circuit.get_state_probabilities()
        assert [p.label for p in probs] == ["|00⟩", "|01⟩", "|10⟩", "|11⟩"]
        assert probs[1].probability == pytest.approx(1.0)

    def test_repr(self):
        circuit = QuantumCircuit(2, name="demo")
        circuit.h(0)
        text = repr(circuit)
        assert "demo" in text
        assert "operations=1" in text
