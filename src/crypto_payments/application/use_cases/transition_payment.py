from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from crypto_payments.application.publishing import publish_best_effort
from crypto_payments.domain.events import events_for_transition
from crypto_payments.domain.exceptions import (
    InsufficientConfirmationsError,
    InvalidTransitionError,
    PaymentNotFoundError,
)
from crypto_payments.domain.status import TRIGGER_EDGES, PaymentStatus, Trigger

if TYPE_CHECKING:
    from crypto_payments.application.ports import (
        EventPublisher,
        LockProvider,
        PaymentRepository,
        TimeProvider,
    )
    from crypto_payments.domain.entities import Payment
    from crypto_payments.domain.value_objects import PaymentId

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class TransitionPaymentRequest:
    """Input DTO for transition payment use case."""

    payment_id: PaymentId
    trigger: Trigger


@dataclass(frozen=True, slots=True)
class TransitionPaymentResponse:
    """Output DTO for transition payment use case."""

    payment: Payment
    previous_status: PaymentStatus
    is_replay: bool  # True if the payment was already in the trigger's target status


# Triggers whose target status means the trigger has already been applied.
_RETRYABLE = frozenset({Trigger.CONFIRMED, Trigger.ORPHANED, Trigger.FAILED})


def _is_retry(trigger: Trigger, status: PaymentStatus) -> bool:
    if trigger not in _RETRYABLE:
        return False
    # Every trigger leads to exactly one target status.
    (target,) = set(TRIGGER_EDGES[trigger].values())
    return status is target


class TransitionPaymentUseCase:
    """Fires an explicit trigger on a payment (operator or reorg handler).

    Orphan recovery is driven exclusively from here: a reorged payment is
    marked orphaned, then either sent back to the mempool or dropped.

    Retry semantics: if a confirmed, orphaned or failed trigger is rejected
    but the payment already sits in the status that trigger leads to, the
    request is answered as a replay instead of an error. Included,
    back_to_mempool and dropped are never replays: the status they lead to
    is reachable without them. The aggregate itself still rejects the
    trigger; only the use case treats the retry as already applied.
    """

    def __init__(
        self,
        lock_provider: LockProvider,
        time_provider: TimeProvider,
        payment_repository: PaymentRepository,
        event_publisher: EventPublisher,
    ) -> None:
        self._lock_provider = lock_provider
        self._time_provider = time_provider
        self._payment_repo = payment_repository
        self._event_publisher = event_publisher

    def execute(self, request: TransitionPaymentRequest) -> TransitionPaymentResponse:
        """Apply the trigger.

        Raises:
            PaymentNotFoundError: Payment does not exist.
            InvalidTransitionError: No edge for the trigger from the current status.
            InsufficientConfirmationsError: Confirm requested below the threshold.
        """
        located = self._payment_repo.find_by_id(request.payment_id)
        if located is None:
            raise PaymentNotFoundError(f"Payment not found: {request.payment_id}")

        # Lock on the transaction hash like the feed use cases, then re-read.
        with self._lock_provider.acquire(located.transaction_hash.value):
            now = self._time_provider.now()

            payment = self._payment_repo.find_by_id(request.payment_id)
            if payment is None:
                raise PaymentNotFoundError(f"Payment not found: {request.payment_id}")

            try:
                updated = payment.fire(request.trigger, now)
            except (InvalidTransitionError, InsufficientConfirmationsError) as e:
                if _is_retry(request.trigger, payment.status):
                    logger.debug(
                        "payment_transition_replayed",
                        payment_id=str(payment.id),
                        trigger=request.trigger.value,
                        status=payment.status.value,
                    )
                    return TransitionPaymentResponse(
                        payment=payment, previous_status=payment.status, is_replay=True
                    )
                logger.warning(
                    "payment_transition_rejected",
                    payment_id=str(payment.id),
                    trigger=request.trigger.value,
                    status=payment.status.value,
                    reason=str(e),
                )
                raise

            self._payment_repo.update(updated)

        logger.info(
            "payment_status_changed",
            payment_id=str(updated.id),
            transaction_hash=updated.transaction_hash.value,
            trigger=request.trigger.value,
            from_status=payment.status.value,
            to_status=updated.status.value,
        )
        publish_best_effort(self._event_publisher, events_for_transition(payment, updated, now))

        return TransitionPaymentResponse(
            payment=updated, previous_status=payment.status, is_replay=False
        )
