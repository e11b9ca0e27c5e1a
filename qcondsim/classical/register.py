"""Classical bit registers."""

from __future__ import annotations

from typing import Dict, Iterator, List, Mapping, Optional

from ..errors import BitRangeError, RegisterLookupError


class ClassicalRegister:
    """
    A named, fixed-width register of classical bits.

    The integer view is little-endian: bit ``i`` contributes ``2**i``.
    """

    def __init__(self, name: str, width: int) -> None:
        if width < 1:
            raise ValueError(f"Register width must be >= 1, got {width}")
        self.name = str(name)
        self.width = int(width)
        self._bits: List[int] = [0] * self.width

    @property
    def bits(self) -> tuple[int, ...]:
        """Bits in index order (bit 0 first)."""
        return tuple(self._bits)

    @property
    def max_value(self) -> int:
        return 2**self.width - 1

    def check_bit(self, bit: int) -> None:
        if bit < 0 or bit >= self.width:
            raise BitRangeError(bit, self.name, self.width)

    def set_bit(self, bit: int, value: int | bool) -> None:
        self.check_bit(bit)
        self._bits[bit] = 1 if value else 0

    def get_bit(self, bit: int) -> int:
        self.check_bit(bit)
        return self._bits[bit]

    @property
    def value(self) -> int:
        return sum(b << i for i, b in enumerate(self._bits))

    def set_value(self, value: int) -> None:
        """Assign the integer view; out-of-range values are clamped."""
        clamped = max(0, min(int(value), self.max_value))
        for i in range(self.width):
            self._bits[i] = (clamped >> i) & 1

    def clear(self) -> None:
        self._bits = [0] * self.width

    def clone(self) -> "ClassicalRegister":
        copy = ClassicalRegister(self.name, self.width)
        copy._bits = list(self._bits)
        return copy

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ClassicalRegister):
            return NotImplemented
        return (self.name, self.width, self._bits) == (other.name, other.width, other._bits)

    def __str__(self) -> str:
        # Most significant bit first, as registers are usually written.
        return "".join(str(b) for b in reversed(self._bits))

    def __repr__(self) -> str:
        return f"ClassicalRegister(name={self.name!r}, width={self.width}, value={self.value})"


class ClassicalRegisterBank:
    """
    The set of classical registers owned by one circuit.

    Registers keep their declaration order, which is also the order used by
    QASM export and drawing.
    """

    def __init__(self, registers: Optional[Mapping[str, int]] = None) -> None:
        self._registers: Dict[str, ClassicalRegister] = {}
        if registers:
            for name, width in registers.items():
                self.add(name, width)

    def add(self, name: str, width: int) -> ClassicalRegister:
        """Declare (or redeclare, zeroed) a register."""
        register = ClassicalRegister(name, width)
        self._registers[register.name] = register
        return register

    def get(self, name: str) -> ClassicalRegister:
        try:
            return self._registers[name]
        except KeyError:
            raise RegisterLookupError(name) from None

    def set_bit(self, name: str, bit: int, value: int | bool) -> None:
        self.get(name).set_bit(bit, value)

    def get_bit(self, name: str, bit: int) -> int:
        return self.get(name).get_bit(bit)

    def set_value(self, name: str, value: int) -> None:
        self.get(name).set_value(value)

    def get_value(self, name: str) -> int:
        return self.get(name).value

    def reset(self) -> None:
        """Zero every register."""
        for register in self._registers.values():
            register.clear()

    def clone(self) -> "ClassicalRegisterBank":
        copy = ClassicalRegisterBank()
        for name, register in self._registers.items():
            copy._registers[name] = register.clone()
        return copy

    def snapshot(self) -> Dict[str, int]:
        """Integer value of every register, by name."""
        return {name: register.value for name, register in self._registers.items()}

    def registers(self) -> Dict[str, ClassicalRegister]:
        """Independent copies of all registers, by name."""
        return {name: register.clone() for name, register in self._registers.items()}

    def names(self) -> List[str]:
        return list(self._registers)

    def __contains__(self, name: object) -> bool:
        return name in self._registers

    def __iter__(self) -> Iterator[ClassicalRegister]:
        return iter(self._registers.values())

    def __len__(self) -> int:
        return len(self._registers)

    def __repr__(self) -> str:
        return f"ClassicalRegisterBank({self.snapshot()!r})"


__all__ = ["ClassicalRegister", "ClassicalRegisterBank"]
