"""Per-entity mutual exclusion for read-modify-write scoring updates."""
from __future__ import annotations

from contextlib import contextmanager
import threading


_locks = {}
_lock = threading.Lock()


def _lock_for(kind: str, entity_id) -> threading.RLock:
    key = (kind, str(entity_id))
    with _lock:
        entity_lock_ = _locks.get(key)
        if entity_lock_ is None:
            entity_lock_ = threading.RLock()
            _locks[key] = entity_lock_
        return entity_lock_


@contextmanager
def entity_lock(kind: str, entity_id):
    """Hold the lock for one (kind, id) pair for the duration of the block."""
    held = _lock_for(kind, entity_id)
    with held:
        yield


def reset() -> None:
    with _lock:
        _locks.clear()
