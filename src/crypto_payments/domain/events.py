"""Domain events describing payment lifecycle changes.

Events are immutable facts built from a payment snapshot after a change has
been applied. Publishing them is best-effort and happens outside the
aggregate.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from crypto_payments.domain.status import PaymentStatus

if TYPE_CHECKING:
    from datetime import datetime

    from crypto_payments.domain.entities import Payment

PAYMENT_DETECTED = "payment.detected"
PAYMENT_STATUS_CHANGED = "payment.status_changed"
PAYMENT_CONFIRMED = "payment.confirmed"
PAYMENT_FAILED = "payment.failed"

AGGREGATE_TYPE = "payment"


@dataclass(frozen=True, slots=True)
class PaymentEvent:
    """A payment lifecycle event with the payment's state after the change."""

    event_type: str
    payment_id: str
    transaction_hash: str
    amount: str
    currency: str
    network: str
    to_address: str
    from_address: str | None
    status: PaymentStatus
    previous_status: PaymentStatus | None
    confirmations: int
    required_confirmations: int
    block_number: int | None
    block_hash: str | None
    occurred_at: datetime
    aggregate_type: str = AGGREGATE_TYPE
    event_version: int = 1

    @classmethod
    def from_payment(
        cls,
        event_type: str,
        payment: Payment,
        occurred_at: datetime,
        previous_status: PaymentStatus | None = None,
    ) -> PaymentEvent:
        block = payment.block_info
        return cls(
            event_type=event_type,
            payment_id=str(payment.id),
            transaction_hash=str(payment.transaction_hash),
            amount=str(payment.amount.value),
            currency=payment.amount.currency.value,
            network=payment.network.value,
            to_address=str(payment.to_address),
            from_address=str(payment.from_address) if payment.from_address else None,
            status=payment.status,
            previous_status=previous_status,
            confirmations=payment.confirmations.value,
            required_confirmations=payment.required_confirmations,
            block_number=block.number if block else None,
            block_hash=block.hash if block else None,
            occurred_at=occurred_at,
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation for publishers."""
        return {
            "event_type": self.event_type,
            "aggregate_type": self.aggregate_type,
            "aggregate_id": self.payment_id,
            "event_version": self.event_version,
            "occurred_at": self.occurred_at.isoformat(),
            "event_data": {
                "payment_id": self.payment_id,
                "transaction_hash": self.transaction_hash,
                "amount": self.amount,
                "currency": self.currency,
                "network": self.network,
                "to_address": self.to_address,
                "from_address": self.from_address,
                "status": self.status.value,
                "previous_status": self.previous_status.value if self.previous_status else None,
                "confirmations": self.confirmations,
                "required_confirmations": self.required_confirmations,
                "block_number": self.block_number,
                "block_hash": self.block_hash,
            },
        }


def events_for_transition(
    previous: Payment,
    current: Payment,
    occurred_at: datetime,
) -> list[PaymentEvent]:
    """Events to publish after ``previous`` became ``current``.

    No status change means no events. A change always yields a
    ``payment.status_changed`` event, followed by ``payment.confirmed`` or
    ``payment.failed`` when the payment reached that terminal status.
    """
    if previous.status is current.status:
        return []

    events = [
        PaymentEvent.from_payment(
            PAYMENT_STATUS_CHANGED, current, occurred_at, previous_status=previous.status
        )
    ]
    if current.status is PaymentStatus.CONFIRMED:
        events.append(
            PaymentEvent.from_payment(
                PAYMENT_CONFIRMED, current, occurred_at, previous_status=previous.status
            )
        )
    elif current.status is PaymentStatus.FAILED:
        events.append(
            PaymentEvent.from_payment(
                PAYMENT_FAILED, current, occurred_at, previous_status=previous.status
            )
        )
    return events
