from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime


class TimeProvider(ABC):
    """Port for the clock.

    The Payment aggregate never reads the clock itself; use cases read it
    here, inside the payment lock, and pass ``now`` into every operation.

    Contract: now() returns a datetime with tzinfo=datetime.UTC, never naive.
    """

    @abstractmethod
    def now(self) -> datetime: ...
