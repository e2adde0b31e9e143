from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from crypto_payments.application.ports import EventPublisher
    from crypto_payments.domain.events import PaymentEvent

logger = structlog.get_logger(__name__)


def publish_best_effort(publisher: EventPublisher, events: list[PaymentEvent]) -> int:
    """Publish ``events`` in order, logging failures instead of raising.

    The payment has already been persisted when this runs, so a failed
    publish must not reach the caller as an error.

    Returns:
        Number of events that were published.
    """
    published = 0
    for event in events:
        try:
            publisher.publish(event)
        except Exception:
            logger.exception(
                "payment_event_publish_failed",
                event_type=event.event_type,
                payment_id=event.payment_id,
                transaction_hash=event.transaction_hash,
            )
            continue
        published += 1
    return published
