"""Simple TTL cache for standings and qualification payloads."""
from __future__ import annotations

import time
import threading


_cache = {}
_lock = threading.Lock()


def get_or_build(key: str, builder, ttl_seconds: int):
    """Return the cached payload for key, building and storing it on a miss."""
    now = time.time()
    with _lock:
        item = _cache.get(key)
        if item and item['expires_at'] >= now:
            return item['value']
        _cache.pop(key, None)

    payload = builder()
    with _lock:
        _cache[key] = {
            'value': payload,
            'expires_at': time.time() + max(1, int(ttl_seconds)),
        }
    return payload


def invalidate_prefix(prefix: str) -> None:
    with _lock:
        doomed = [k for k in _cache.keys() if k.startswith(prefix)]
        for key in doomed:
            _cache.pop(key, None)


def clear() -> None:
    with _lock:
        _cache.clear()
