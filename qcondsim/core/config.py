"""Simulator configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from enum import Enum
from typing import Mapping, Optional

from ..errors import UnsupportedOperationError

_DEFERRED_ENV_VAR = "QCONDSIM_MEASUREMENT_DEFERRED"
_TIE_BREAK_ENV_VAR = "QCONDSIM_TIE_BREAK"


class TieBreak(str, Enum):
    """
    Outcome rule for a measurement whose two branches are equally likely.

    The values are the legacy string spellings, so ``TieBreak("0")`` works.
    """

    ZERO = "0"
    ONE = "1"
    RANDOM = "random"

    @classmethod
    def parse(cls, value: "TieBreak | str | int") -> "TieBreak":
        if isinstance(value, TieBreak):
            return value
        key = str(value).strip().lower()
        aliases = {"zero": "0", "one": "1", "uniform": "random", "uniform-random": "random"}
        key = aliases.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise UnsupportedOperationError(
                "Equal probability collapse must be 'random', '0', or '1', "
                f"got {value!r}"
            ) from None


@dataclass
class SimulatorConfiguration:
    """
    Measurement semantics shared by a circuit and its replays.

    Attributes
    ----------
    measurement_deferred:
        If True, measurement records a classical outcome but leaves the
        amplitude vector untouched.
    tie_break:
        Policy used when both outcomes have equal probability.
    """

    measurement_deferred: bool = False
    tie_break: TieBreak = TieBreak.RANDOM

    def __post_init__(self) -> None:
        self.tie_break = TieBreak.parse(self.tie_break)
        self.measurement_deferred = bool(self.measurement_deferred)

    def set_measurement_deferred(self, deferred: bool) -> "SimulatorConfiguration":
        self.measurement_deferred = bool(deferred)
        return self

    def set_tie_break(self, strategy: TieBreak | str) -> "SimulatorConfiguration":
        self.tie_break = TieBreak.parse(strategy)
        return self

    # Legacy spelling.
    set_equal_probability_collapse = set_tie_break

    @property
    def is_deterministic(self) -> bool:
        """True when replays of the same log are exactly reproducible."""
        return self.tie_break is not TieBreak.RANDOM

    def clone(self) -> "SimulatorConfiguration":
        return replace(self)

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "SimulatorConfiguration":
        """
        Build a configuration from ``QCONDSIM_MEASUREMENT_DEFERRED`` and
        ``QCONDSIM_TIE_BREAK``. Unset variables keep the defaults.
        """
        env = os.environ if environ is None else environ
        deferred = env.get(_DEFERRED_ENV_VAR, "0").lower() in ("1", "true", "yes", "on")
        tie_break = env.get(_TIE_BREAK_ENV_VAR, TieBreak.RANDOM.value)
        return cls(measurement_deferred=deferred, tie_break=TieBreak.parse(tie_break))


__all__ = ["TieBreak", "SimulatorConfiguration"]
