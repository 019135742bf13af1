"""Volume lock for structural operations."""

import asyncio

_volume_locks: dict[str, asyncio.Lock] = {}


def get_volume_lock(name: str) -> asyncio.Lock:
    """Get or create a per-volume lock.

    Prevents TOCTOU races by ensuring only one create/remove/resize per
    volume name at a time. Check and insert run without an await in
    between, so the mapping needs no lock of its own on the event loop.

    Locks are never removed; a waiter may still hold a reference.
    """
    if name not in _volume_locks:
        _volume_locks[name] = asyncio.Lock()
    return _volume_locks[name]
