from __future__ import annotations

from contextlib import contextmanager
from threading import Lock
from typing import TYPE_CHECKING

from crypto_payments.application.ports import LockProvider

if TYPE_CHECKING:
    from collections.abc import Iterator


class InMemoryLockProvider(LockProvider):
    """In-memory lock provider using per-resource locks.

    Implementation uses two-phase locking:
    1. Global lock protects the lock dictionary during lookup/creation
    2. Resource lock serializes access to the specific resource

    Resource locks are reference counted and evicted once no thread holds
    or waits on them, so a long-running watcher that sees millions of
    transaction hashes does not keep a lock per hash forever.

    Limitations:
    - Single-process only (locks don't work across processes)
    - Not suitable for production with multiple instances
    """

    def __init__(self) -> None:
        self._locks: dict[str, Lock] = {}
        self._refcounts: dict[str, int] = {}
        self._global_lock = Lock()

    @contextmanager
    def acquire(self, resource_id: str) -> Iterator[None]:
        # Phase 1: get or create the resource lock and register as a user
        with self._global_lock:
            lock = self._locks.get(resource_id)
            if lock is None:
                lock = self._locks[resource_id] = Lock()
            self._refcounts[resource_id] = self._refcounts.get(resource_id, 0) + 1

        try:
            # Phase 2: serialize on the resource lock
            with lock:
                yield
        finally:
            with self._global_lock:
                remaining = self._refcounts[resource_id] - 1
                if remaining:
                    self._refcounts[resource_id] = remaining
                else:
                    del self._refcounts[resource_id]
                    del self._locks[resource_id]

    @property
    def tracked_resources(self) -> int:
        """Number of resources with a live lock (held or awaited)."""
        with self._global_lock:
            return len(self._locks)


class NoOpLockProvider(LockProvider):
    """Lock provider that performs no locking.

    Use this for unit tests where:
    - Concurrency is not being tested
    - Tests are single-threaded

    Do NOT use for any test verifying race condition handling.
    """

    @contextmanager
    def acquire(self, resource_id: str) -> Iterator[None]:  # noqa: ARG002
        yield
