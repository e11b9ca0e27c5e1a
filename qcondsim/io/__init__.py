"""Serialization of circuits to external text formats."""

from .qasm2 import export_circuit_to_qasm, operation_to_qasm, save_qasm
from .utils import float_to_angle_str, format_param

__all__ = [
    "export_circuit_to_qasm",
    "operation_to_qasm",
    "save_qasm",
    "float_to_angle_str",
    "format_param",
]
