"""Tests for OpenQASM 2.0 export."""

from __future__ import annotations

import math

import pytest

from qcondsim.circuit import QuantumCircuit
from qcondsim.core import SimulatorConfiguration
from qcondsim.io import export_circuit_to_qasm
from qcondsim.io.qasm2 import save_qasm
from qcondsim.io.utils import float_to_angle_str, format_param


def _circuit(n_qubits, registers=None):
    return QuantumCircuit(n_qubits, registers, config=SimulatorConfiguration(tie_break="0"))


def test_conditional_circuit_exact_output() -> None:
    circuit = _circuit(3, {"c": 3})
    circuit.x(0)
    circuit.measure(0, "c", 1)
    circuit.x(0, circuit.if_equal("c", 2))

    assert export_circuit_to_qasm(circuit) == (
        "OPENQASM 2.0;\n"
        'include "qelib1.inc";\n'
        "\n"
        "qreg q[3];\n"
        "creg c[3];\n"
        "\n"
        "x q[0];\n"
        "measure q[0] -> c[1];\n"
        "if (c == 2) x q[0];\n"
    )


def test_one_creg_per_register() -> None:
    circuit = _circuit(2, {"c": 2, "flag": 1})
    lines = export_circuit_to_qasm(circuit).splitlines()
    assert "creg c[2];" in lines
    assert "creg flag[1];" in lines
    assert lines.index("creg c[2];") < lines.index("creg flag[1];")


def test_without_qelib() -> None:
    text = export_circuit_to_qasm(_circuit(1), include_qelib=False)
    assert "include" not in text
    assert text.startswith("OPENQASM 2.0;\n\nqreg q[1];")


class TestStatements:
    def _body(self, circuit):
        return export_circuit_to_qasm(circuit).rstrip("\n").split("\n\n")[-1].splitlines()

    def test_qasm_names(self):
        circuit = _circuit(4)
        circuit.cx(0, 1)
        circuit.fredkin(0, 1, 2)
        circuit.cccx(0, 1, 2, 3)
        circuit.sdg(3)
        circuit.ccx(0, 1, 2)
        assert self._body(circuit) == [
            "cx q[0], q[1];",
            "cswap q[0], q[1], q[2];",
            "c3x q[0], q[1], q[2], q[3];",
            "sdg q[3];",
            "ccx q[0], q[1], q[2];",
        ]

    def test_parameters(self):
        circuit = _circuit(2)
        circuit.rx(0.5, 0)
        circuit.u(1.0, 0.25, 0.0, 1)
        circuit.cp(0.75, 0, 1)
        assert self._body(circuit) == [
            "rx(0.5) q[0];",
            "u(1, 0.25, 0) q[1];",
            "cp(0.75) q[0], q[1];",
        ]

    def test_symbolic_angles(self):
        circuit = _circuit(1)
        circuit.rz(math.pi / 2, 0)
        text = export_circuit_to_qasm(circuit, symbolic_angles=True)
        assert "rz(pi/2) q[0];" in text

    def test_reset_and_barrier(self):
        circuit = _circuit(2, {"c": 2})
        circuit.reset(1)
        circuit.barrier()
        circuit.reset(0, circuit.if_not_equal("c", 0))
        assert self._body(circuit) == [
            "reset q[1];",
            "barrier q[0], q[1];",
            "if (c != 0) reset q[0];",
        ]

    def test_conditional_measure(self):
        circuit = _circuit(2, {"c": 2, "m": 1})
        circuit.measure(1, "m", 0, circuit.if_greater_equal("c", 1))
        assert self._body(circuit) == ["if (c >= 1) measure q[1] -> m[0];"]


def test_save_qasm(tmp_path) -> None:
    circuit = _circuit(1)
    circuit.h(0)
    path = tmp_path / "out.qasm"
    save_qasm(circuit, str(path))
    assert path.read_text(encoding="utf-8") == circuit.to_qasm()


@pytest.mark.parametrize(
    "value,expected",
    [(1.0, "1"), (0.0, "0"), (-2.0, "-2"), (0.5, "0.5"), (0.1, "0.1")],
)
def test_format_param(value, expected) -> None:
    assert format_param(value) == expected


@pytest.mark.parametrize(
    "angle,expected",
    [
        (0.0, "0"),
        (math.pi, "pi"),
        (-math.pi, "-pi"),
        (math.pi / 4, "pi/4"),
        (-math.pi / 2, "-pi/2"),
        (3 * math.pi / 4, "(3/4*pi)"),
        (2 * math.pi, "2*pi"),
    ],
)
def test_float_to_angle_str(angle, expected) -> None:
    assert float_to_angle_str(angle) == expected
