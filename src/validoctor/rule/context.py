"""Call-scoped evaluation context.

An ExaminationContext lives for exactly one examination call. It carries the
memoized results of shared computations so that rule objects themselves stay
immutable and can be reused across concurrent or interleaved examinations.
"""

from __future__ import annotations

from typing import Any


class ExaminationContext:
    """Per-call cache threaded through every property rule invocation.

    Entries are keyed by the object that owns them, which stays referenced
    for the lifetime of the context. Each entry also remembers the identity
    of the patient it was computed for, so a context accidentally reused for
    another patient never serves stale data.
    """

    def __init__(self) -> None:
        self._entries: dict[object, tuple[Any, Any]] = {}

    def lookup(self, owner: object, patient: Any) -> tuple[bool, Any]:
        """Return ``(found, value)`` for the entry ``owner`` stored for ``patient``."""
        entry = self._entries.get(owner)
        if entry is None or entry[0] is not patient:
            return False, None
        return True, entry[1]

    def store(self, owner: object, patient: Any, value: Any) -> None:
        """Remember ``value`` computed by ``owner`` for ``patient``."""
        self._entries[owner] = (patient, value)

    def __len__(self) -> int:
        return len(self._entries)
