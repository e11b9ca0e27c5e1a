"""Predicates over classical register values."""

from __future__ import annotations

import operator
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict

from ..errors import UnsupportedOperationError
from .register import ClassicalRegisterBank


class Comparator(str, Enum):
    EQ = "=="
    NE = "!="
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="

    @classmethod
    def parse(cls, value: "Comparator | str") -> "Comparator":
        if isinstance(value, Comparator):
            return value
        try:
            return cls(str(value).strip())
        except ValueError:
            raise UnsupportedOperationError(
                f"Unknown comparator {value!r}; expected one of "
                f"{[c.value for c in cls]}"
            ) from None


_OPERATORS: Dict[Comparator, Callable[[int, int], bool]] = {
    Comparator.EQ: operator.eq,
    Comparator.NE: operator.ne,
    Comparator.GT: operator.gt,
    Comparator.LT: operator.lt,
    Comparator.GE: operator.ge,
    Comparator.LE: operator.le,
}


@dataclass(frozen=True)
class ClassicalCondition:
    """
    ``register <comparator> value``, evaluated against the current bank.

    Conditions are plain values: the builder hands one out and the caller
    passes it explicitly to each guarded operation.
    """

    register_name: str
    comparator: Comparator
    value: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "comparator", Comparator.parse(self.comparator))
        object.__setattr__(self, "value", int(self.value))

    def evaluate(self, bank: ClassicalRegisterBank) -> bool:
        """
        Apply the comparator to the register's current integer value.

        Raises
        ------
        RegisterLookupError
            If the register is not declared in ``bank``.
        """
        current = bank.get_value(self.register_name)
        return _OPERATORS[self.comparator](current, self.value)

    def __str__(self) -> str:
        return f"{self.register_name} {self.comparator.value} {self.value}"


__all__ = ["Comparator", "ClassicalCondition"]
