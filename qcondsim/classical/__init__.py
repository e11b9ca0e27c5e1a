"""Classical registers and the conditions that read them."""

from .condition import ClassicalCondition, Comparator
from .register import ClassicalRegister, ClassicalRegisterBank

__all__ = [
    "ClassicalRegister",
    "ClassicalRegisterBank",
    "ClassicalCondition",
    "Comparator",
]
