"""Process-wide admission gate.

A single boolean guarded by ``threading.Lock``.  It starts enabled when the
process starts and only changes through ``set_gate``.  Closing the gate blocks
new check-ins; lookups, deletions and reporting stay available.
"""

from __future__ import annotations

import logging
import threading

logger = logging.getLogger(__name__)


class AdmissionGate:
    """Last-writer-wins enabled/disabled flag."""

    def __init__(self, enabled: bool = True) -> None:
        self._lock = threading.Lock()
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        with self._lock:
            return self._enabled

    def set(self, enabled: bool) -> bool:
        with self._lock:
            previous = self._enabled
            self._enabled = enabled
        if previous != enabled:
            logger.info(
                "admission_gate_changed",
                extra={"enabled": enabled, "previous": previous},
            )
        return enabled


_gate = AdmissionGate()


def get_gate() -> bool:
    """Return whether new check-ins are currently accepted."""
    return _gate.enabled


def set_gate(enabled: bool) -> bool:
    """Overwrite the gate state and return the new value."""
    return _gate.set(enabled)
