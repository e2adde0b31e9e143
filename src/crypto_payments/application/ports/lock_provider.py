from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator


class LockProvider(ABC):
    """Port for per-payment mutual exclusion.

    The Payment aggregate assumes exclusive access for the duration of one
    operation. Use cases hold this lock around every read-modify-write of a
    payment so concurrent feed workers never interleave updates to the same
    payment.

    Contract:
    - acquire() MUST serialize access to the same resource_id
    - acquire() MUST release the lock when the context exits (normal or exception)
    - acquire() MUST block until the lock is available
    - Different resource_ids MAY be held concurrently
    """

    @abstractmethod
    @contextmanager
    def acquire(self, resource_id: str) -> Iterator[None]:
        """Hold the lock for ``resource_id`` for the duration of the context.

        Args:
            resource_id: Stable key for the payment. Use cases key on the
                transaction hash, which is known before the payment id is.
        """
        ...
