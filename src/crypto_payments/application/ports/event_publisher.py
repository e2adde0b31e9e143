from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from crypto_payments.domain.events import PaymentEvent


class EventPublisher(ABC):
    """Port for publishing payment lifecycle events.

    Contract:
    - Publishing is best-effort. Use cases call publish() only after the
      payment has been persisted, and a failing publish never reverses it
    - Implementations MAY raise; use cases log and swallow the failure
    """

    @abstractmethod
    def publish(self, event: PaymentEvent) -> None:
        """Deliver a single event."""

    def publish_all(self, events: list[PaymentEvent]) -> None:
        for event in events:
            self.publish(event)
