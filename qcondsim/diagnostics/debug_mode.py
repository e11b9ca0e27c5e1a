"""Debug mode switch for qcondsim.

When enabled, the state-vector engine re-checks normalization after every
gate, measurement and reset and raises ``ValueError`` as soon as the vector
drifts. Off by default; ``QCONDSIM_DEBUG=1`` turns it on at import.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Iterator

_DEBUG_ENV_VAR = "QCONDSIM_DEBUG"
_TRUTHY = frozenset({"1", "true", "yes", "on"})

_debug_enabled: bool = os.getenv(_DEBUG_ENV_VAR, "0").strip().lower() in _TRUTHY


def is_debug_enabled() -> bool:
    return _debug_enabled


def set_debug_enabled(enabled: bool) -> bool:
    """Set the flag and return its previous value."""
    global _debug_enabled
    previous, _debug_enabled = _debug_enabled, bool(enabled)
    return previous


@contextmanager
def debug_context(enabled: bool = True) -> Iterator[None]:
    """
    Temporarily enable or disable debug mode.

    Example
    -------
    >>> with debug_context(True):
    ...     circuit.execute_deterministic()
    """
    previous = set_debug_enabled(enabled)
    try:
        yield
    finally:
        set_debug_enabled(previous)
