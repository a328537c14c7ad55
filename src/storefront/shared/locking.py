"""Per-member mutual exclusion for cart mutations and checkout.

A member's own concurrent requests (double-clicked "add to cart", a merge
racing an add, two checkout tabs) are serialized in-process by a lock keyed
by member id. The lock is held around the whole command, including the
unit-of-work commit, so callers run it off the event loop (FastAPI routes
dispatch through ``run_in_threadpool``).

Aggregate version checks remain the guard across members and processes: a
handler whose commit loses a version race is re-run from fresh state by
Protean's version retry (``[server.version_retry]`` in ``domain.toml``).

A member's lock lives only while some caller holds or waits on it.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from protean.utils.globals import current_domain


class _MemberLock:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.RLock()
        self.users = 0


_registry_lock = threading.Lock()
_member_locks: dict[str, _MemberLock] = {}


def _checkout_lock(member_id: str) -> _MemberLock:
    with _registry_lock:
        entry = _member_locks.get(member_id)
        if entry is None:
            entry = _member_locks[member_id] = _MemberLock()
        entry.users += 1
        return entry


def _return_lock(member_id: str, entry: _MemberLock) -> None:
    with _registry_lock:
        entry.users -= 1
        if entry.users == 0:
            del _member_locks[member_id]


def active_member_locks() -> int:
    """Number of members whose lock is currently held or awaited."""
    with _registry_lock:
        return len(_member_locks)


@contextmanager
def member_lock(member_id) -> Iterator[None]:
    """Hold the member's lock for the duration of the block."""
    member_id = str(member_id)
    entry = _checkout_lock(member_id)
    try:
        with entry.lock:
            yield
    finally:
        _return_lock(member_id, entry)


def process_for_member(member_id, command):
    """Process ``command`` synchronously while holding the member's lock."""
    with member_lock(member_id):
        return current_domain.process(command, asynchronous=False)
