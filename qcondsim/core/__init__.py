"""Value types and configuration shared across qcondsim."""

from .amplitude import ComplexAmplitude
from .config import SimulatorConfiguration, TieBreak
from .constants import DEFAULT_DTYPE, EPSILON

__all__ = [
    "ComplexAmplitude",
    "SimulatorConfiguration",
    "TieBreak",
    "EPSILON",
    "DEFAULT_DTYPE",
]
