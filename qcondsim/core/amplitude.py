"""Scalar complex amplitude value type."""

from __future__ import annotations

import math
from dataclasses import dataclass

_DISPLAY_ATOL = 1e-10


@dataclass(frozen=True)
class ComplexAmplitude:
    """
    Immutable complex number used on the result surface.

    The simulation itself runs on ``torch.complex128`` tensors; amplitudes are
    converted to this type when they are reported back to callers.

    Attributes
    ----------
    real:
        Real part.
    imag:
        Imaginary part.
    """

    real: float
    imag: float = 0.0

    @classmethod
    def from_complex(cls, value: complex) -> "ComplexAmplitude":
        """Build an amplitude from a Python (or torch/numpy scalar) complex."""
        value = complex(value)
        return cls(real=float(value.real), imag=float(value.imag))

    def __complex__(self) -> complex:
        return complex(self.real, self.imag)

    def __add__(self, other: "ComplexAmplitude") -> "ComplexAmplitude":
        if not isinstance(other, ComplexAmplitude):
            return NotImplemented
        return ComplexAmplitude(self.real + other.real, self.imag + other.imag)

    def __mul__(self, other: "ComplexAmplitude") -> "ComplexAmplitude":
        if not isinstance(other, ComplexAmplitude):
            return NotImplemented
        return ComplexAmplitude(
            self.real * other.real - self.imag * other.imag,
            self.real * other.imag + self.imag * other.real,
        )

    def conjugate(self) -> "ComplexAmplitude":
        return ComplexAmplitude(self.real, -self.imag)

    def abs2(self) -> float:
        """Squared magnitude, i.e. the Born-rule probability."""
        return self.real * self.real + self.imag * self.imag

    def magnitude(self) -> float:
        return math.sqrt(self.abs2())

    def phase(self) -> float:
        """Phase angle in radians, in (-π, π]."""
        return math.atan2(self.imag, self.real)

    def isclose(self, other: "ComplexAmplitude", atol: float = 1e-9) -> bool:
        return (
            abs(self.real - other.real) <= atol
            and abs(self.imag - other.imag) <= atol
        )

    def __str__(self) -> str:
        if abs(self.imag) < _DISPLAY_ATOL:
            return f"{self.real:.4f}"
        if abs(self.real) < _DISPLAY_ATOL:
            return f"{self.imag:.4f}i"
        sign = "+" if self.imag >= 0 else ""
        return f"{self.real:.4f}{sign}{self.imag:.4f}i"


__all__ = ["ComplexAmplitude"]
