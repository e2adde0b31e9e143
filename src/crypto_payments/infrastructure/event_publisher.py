from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from crypto_payments.application.ports import EventPublisher

if TYPE_CHECKING:
    from crypto_payments.domain.events import PaymentEvent

logger = structlog.get_logger(__name__)


class InMemoryEventPublisher(EventPublisher):
    """Keeps published events in memory, in publish order.

    Meant for tests and for embedding the service in-process; not
    thread-safe beyond what list.append guarantees.
    """

    def __init__(self) -> None:
        self._events: list[PaymentEvent] = []

    def publish(self, event: PaymentEvent) -> None:
        self._events.append(event)

    @property
    def events(self) -> list[PaymentEvent]:
        return list(self._events)

    def events_of_type(self, event_type: str) -> list[PaymentEvent]:
        return [event for event in self._events if event.event_type == event_type]

    def clear(self) -> None:
        self._events.clear()


class LoggingEventPublisher(EventPublisher):
    """Writes each event to the structured log instead of a broker."""

    def publish(self, event: PaymentEvent) -> None:
        logger.info("payment_event", **event.to_dict())


class NullEventPublisher(EventPublisher):
    """Discards every event."""

    def publish(self, event: PaymentEvent) -> None:  # noqa: ARG002
        return None
