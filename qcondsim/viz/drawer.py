"""Text circuit drawer.

Each qubit is one wire starting with ``q[i] |0⟩─``. Operations are drawn in
append order, one segment per operation, and after each operation all wires
are padded to the same length so later segments line up. A summary of the
classical registers follows the wires.
"""

from __future__ import annotations

import math
import sys
from typing import IO, TYPE_CHECKING, Dict, List, Optional

from ..circuit.operation import Operation, OperationKind
from ..gates.library import GateKind

if TYPE_CHECKING:
    from ..circuit.core import QuantumCircuit

_ASCII = str.maketrans({"─": "-", "●": "*", "⊕": "+", "×": "x", "║": "|", "⟩": ">", "→": ">"})


def _format_angle(theta: float, atol: float = 1e-8) -> str:
    """
    Format an angle in radians as a readable string.

    Multiples of π/4 are written as fractions of π (π/4, π/2, 3π/4, π, ...).
    Anything else falls back to three decimal places.
    """
    k = round(theta / (math.pi / 4.0))
    if not math.isclose(theta, k * (math.pi / 4.0), abs_tol=atol):
        return f"{theta:.3f}"
    if k == 0:
        return "0"

    sign = "-" if k < 0 else ""
    k = abs(k)
    g = math.gcd(k, 4)
    num, den = k // g, 4 // g
    head = "π" if num == 1 else f"{num}π"
    return f"{sign}{head}" if den == 1 else f"{sign}{head}/{den}"


def _gate_label(op: Operation) -> str:
    if not op.params:
        return op.name
    return f"{op.name}({', '.join(_format_angle(p) for p in op.params)})"


def _segments(op: Operation) -> Dict[int, str]:
    """Symbol drawn on each qubit the operation touches."""
    if op.kind is OperationKind.MEASUREMENT:
        return {op.qubits[0]: f"[M→{op.target.register_name}[{op.target.bit}]]"}
    if op.kind is OperationKind.RESET:
        return {op.qubits[0]: "[R]"}

    qubits = op.qubits
    gate = op.gate
    if len(qubits) == 1 or not gate.is_controlled:
        return {q: f"[{_gate_label(op)}]" for q in qubits}
    if gate.kind is GateKind.FREDKIN:
        return {qubits[0]: "●", qubits[1]: "×", qubits[2]: "×"}
    symbols = {q: "●" for q in qubits[:-1]}
    symbols[qubits[-1]] = "⊕"
    return symbols


def _draw_operation(lines: List[str], op: Operation) -> None:
    if op.kind is OperationKind.BARRIER:
        for q in op.qubits:
            lines[q] += "─║─"
    else:
        prefix = f"[{op.condition}]" if op.condition is not None else ""
        for q, symbol in _segments(op).items():
            lines[q] += f"─{prefix}{symbol}─"

    width = max(len(line) for line in lines)
    for q, line in enumerate(lines):
        lines[q] = line.ljust(width, "─")


def to_text(circuit: "QuantumCircuit", use_ascii: bool = False) -> str:
    """
    Convert a QuantumCircuit to a multi-line text diagram.

    Controlled gates draw ``●`` on controls and ``⊕`` on the target (the
    target of a controlled rotation or phase gate is drawn as ``⊕`` too).
    FREDKIN draws ``×`` on both swapped qubits. Other gates show their name
    and parameters, e.g. ``[RX(π/2)]``. Conditions appear as a ``[c == 2]``
    prefix on every segment of the guarded operation.

    Parameters
    ----------
    circuit:
        Circuit to visualize.
    use_ascii:
        If True, replace box-drawing and symbol characters with ASCII.

    Returns
    -------
    str
        Wires, a blank line, then ``Classical Registers:`` with one
        ``name[width] = bits (value)`` line per register.
    """
    lines = [f"q[{q}] |0⟩─" for q in range(circuit.n_qubits)]
    for op in circuit.operations:
        _draw_operation(lines, op)

    registers = [
        f"{register.name}[{register.width}] = {register} ({register.value})"
        for register in circuit.bank
    ]
    text = "\n".join(lines) + "\n\nClassical Registers:\n" + "\n".join(registers)
    if use_ascii:
        text = text.translate(_ASCII)
    return text


def print_circuit(
    circuit: "QuantumCircuit",
    file: Optional[IO[str]] = None,
    use_ascii: bool = False,
) -> None:
    """
    Print a circuit diagram to stdout or a file.

    Parameters
    ----------
    circuit:
        Circuit to visualize.
    file:
        File-like object to write to. If None, writes to sys.stdout.
    use_ascii:
        If True, use only ASCII characters.
    """
    if file is None:
        file = sys.stdout
    print(to_text(circuit, use_ascii=use_ascii), file=file)


__all__ = ["to_text", "print_circuit"]
