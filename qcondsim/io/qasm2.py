"""OpenQASM 2.0 exporter for quantum circuits.

Every logged operation becomes one statement, in append order:

    - gates: ``<name>(<params>) q[i], q[j];`` using the registry's QASM name
      (``cx``, ``cswap``, ``c3x``, otherwise the lower-cased gate name)
    - measurements: ``measure q[i] -> <register>[<bit>];``
    - resets: ``reset q[i];``
    - barriers: ``barrier q[i], q[j];``

Conditional operations are prefixed with ``if (<register> <op> <value>) ``.
Comparators other than ``==`` are emitted as-is even though strict QASM 2.0
only defines equality; the output is meant for humans and tools that accept
the extension. Parsing QASM is not supported.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from ..circuit.operation import Operation, OperationKind

from .utils import float_to_angle_str, format_param, qubit_list

if TYPE_CHECKING:
    from ..circuit.core import QuantumCircuit


def export_circuit_to_qasm(
    circuit: "QuantumCircuit",
    include_qelib: bool = True,
    symbolic_angles: bool = False,
) -> str:
    """
    Export a QuantumCircuit to OpenQASM 2.0 format.

    Parameters
    ----------
    circuit : QuantumCircuit
        Circuit to export.
    include_qelib : bool
        Whether to include the qelib1.inc header.
    symbolic_angles : bool
        Render parameters that are simple multiples of π as ``pi/2`` etc.
        instead of plain floats.

    Returns
    -------
    str
        OpenQASM 2.0 source code, newline-terminated.
    """
    lines = ["OPENQASM 2.0;"]

    if include_qelib:
        lines.append('include "qelib1.inc";')
    lines.append("")

    lines.append(f"qreg q[{circuit.n_qubits}];")
    for name, width in circuit.register_widths().items():
        lines.append(f"creg {name}[{width}];")
    lines.append("")

    for op in circuit.operations:
        lines.append(operation_to_qasm(op, symbolic_angles=symbolic_angles))

    return "\n".join(lines) + "\n"


def operation_to_qasm(op: Operation, symbolic_angles: bool = False) -> str:
    """Render a single operation as one QASM statement."""
    if op.kind is OperationKind.BARRIER:
        return f"barrier {qubit_list(op.qubits)};"

    prefix = f"if ({op.condition}) " if op.condition is not None else ""

    if op.kind is OperationKind.MEASUREMENT:
        target = op.target
        return f"{prefix}measure q[{op.qubits[0]}] -> {target.register_name}[{target.bit}];"
    if op.kind is OperationKind.RESET:
        return f"{prefix}reset q[{op.qubits[0]}];"

    fmt = float_to_angle_str if symbolic_angles else format_param
    params = ""
    if op.params:
        params = "(" + ", ".join(fmt(p) for p in op.params) + ")"
    return f"{prefix}{op.gate.qasm_name}{params} {qubit_list(op.qubits)};"


def save_qasm(circuit: "QuantumCircuit", path: str, **kwargs) -> None:
    """Write :func:`export_circuit_to_qasm` output to ``path``."""
    with open(path, "w", encoding="utf-8") as f:
        f.write(export_circuit_to_qasm(circuit, **kwargs))


__all__: List[str] = ["export_circuit_to_qasm", "operation_to_qasm", "save_qasm"]
