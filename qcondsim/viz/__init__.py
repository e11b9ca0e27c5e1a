"""Circuit visualization."""

from .drawer import print_circuit, to_text

__all__ = ["to_text", "print_circuit"]
