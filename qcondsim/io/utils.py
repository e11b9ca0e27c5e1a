"""Formatting helpers for OpenQASM 2.0 export."""

from __future__ import annotations

import math
from typing import Sequence


def format_param(value: float) -> str:
    """
    Render a gate parameter as a plain number.

    Integral values drop the fractional part (``1.0`` -> ``"1"``); anything
    else uses the shortest round-tripping float representation.
    """
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def float_to_angle_str(angle: float, tol: float = 1e-10) -> str:
    """
    Convert a float angle (in radians) to a readable QASM-compatible expression.

    If the angle is a rational multiple of π with small denominator (q ≤ 12),
    returns a simplified expression like ``pi/2`` or ``(3/4*pi)``.
    Otherwise, returns a decimal string with 12 digits of precision.

    Parameters
    ----------
    angle : float
        Angle in radians.
    tol : float
        Tolerance for detecting rational multiples of π.

    Returns
    -------
    str
        QASM-compatible angle expression.
    """
    if abs(angle) < tol:
        return "0"

    pi_multiple = angle / math.pi
    for q in range(1, 13):
        p_float = pi_multiple * q
        p = round(p_float)
        if abs(p_float - p) >= tol:
            continue

        g = math.gcd(abs(p), q)
        p, q = p // g, q // g
        if q == 1:
            if p == 1:
                return "pi"
            if p == -1:
                return "-pi"
            return f"{p}*pi"
        if p == 1:
            return f"pi/{q}"
        if p == -1:
            return f"-pi/{q}"
        return f"({p}/{q}*pi)"

    if abs(angle) < 1e-4 or abs(angle) > 1e4:
        return f"{angle:.12e}"
    return f"{angle:.12f}".rstrip("0").rstrip(".")


def qubit_list(qubits: Sequence[int], register: str = "q") -> str:
    """``(0, 2)`` -> ``"q[0], q[2]"``."""
    return ", ".join(f"{register}[{q}]" for q in qubits)
