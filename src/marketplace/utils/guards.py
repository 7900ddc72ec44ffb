"""Per-entity guards for conditional updates.

A guard serializes the read-check-write-commit of one entity (a product's
stock, a coupon's redemptions) within this process. Two racing checkouts that
touch the same product queue behind the same lock, so the second one re-reads
the committed stock before deciding.

The registry only keeps guards that some thread is holding or waiting on;
an idle guard is dropped and recreated on next use.

The locks are process-local. Running several worker processes against a shared
database needs the equivalent conditional update in the database itself.
"""

import threading
import weakref
from contextlib import contextmanager


class _Guard:
    # threading.Lock itself cannot be weakly referenced
    __slots__ = ("lock", "__weakref__")

    def __init__(self) -> None:
        self.lock = threading.Lock()


_registry_lock = threading.Lock()
_guards: "weakref.WeakValueDictionary[str, _Guard]" = weakref.WeakValueDictionary()


def _guard_for(key: str) -> _Guard:
    with _registry_lock:
        guard = _guards.get(key)
        if guard is None:
            guard = _Guard()
            _guards[key] = guard
        return guard


@contextmanager
def guarded(kind: str, identifier):
    """Hold the guard for ``kind:identifier`` for the duration of the block."""
    guard = _guard_for(f"{kind}:{identifier}")
    with guard.lock:
        yield
