from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from crypto_payments.application.publishing import publish_best_effort
from crypto_payments.domain.entities import Payment
from crypto_payments.domain.events import PAYMENT_DETECTED, PaymentEvent, events_for_transition
from crypto_payments.domain.exceptions import PaymentAlreadyExistsError
from crypto_payments.domain.policies import DEFAULT_CONFIRMATION_POLICY
from crypto_payments.domain.value_objects import (
    BlockInfo,
    ConfirmationCount,
    NetworkFee,
    PaymentAddress,
    PaymentAmount,
    TransactionHash,
)

if TYPE_CHECKING:
    from crypto_payments.application.dtos import ChainObservation
    from crypto_payments.application.ports import (
        EventPublisher,
        LockProvider,
        PaymentRepository,
        TimeProvider,
    )
    from crypto_payments.domain.policies import ConfirmationPolicy

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class DetectPaymentResponse:
    """Output DTO for detect payment use case."""

    payment: Payment
    events_published: int


class DetectPaymentUseCase:
    """Creates a payment for a transaction the watcher has just seen.

    Responsibilities:
    - Validate the raw observation before touching anything
    - Acquire the per-transaction lock
    - Reject a transaction hash that is already tracked
    - Apply block info and confirmations carried by the first observation
    - Persist, then publish events best-effort
    """

    def __init__(
        self,
        lock_provider: LockProvider,
        time_provider: TimeProvider,
        payment_repository: PaymentRepository,
        event_publisher: EventPublisher,
        confirmation_policy: ConfirmationPolicy = DEFAULT_CONFIRMATION_POLICY,
    ) -> None:
        self._lock_provider = lock_provider
        self._time_provider = time_provider
        self._payment_repo = payment_repository
        self._event_publisher = event_publisher
        self._policy = confirmation_policy

    def execute(self, observation: ChainObservation) -> DetectPaymentResponse:
        """Start tracking the observed transaction.

        Raises:
            ValidationError: The observation carries malformed values.
            PaymentAlreadyExistsError: The transaction hash is already tracked.
        """
        transaction_hash = TransactionHash(observation.transaction_hash)
        amount = PaymentAmount(observation.amount, observation.currency)
        to_address = PaymentAddress(observation.to_address, observation.network)
        from_address = (
            PaymentAddress(observation.from_address, observation.network)
            if observation.from_address
            else None
        )
        network_fee = (
            NetworkFee(observation.network_fee, observation.fee_currency or observation.currency)
            if observation.network_fee is not None
            else None
        )
        # Validate feed values up front; the payment is built only if all pass.
        ConfirmationCount(observation.confirmations)
        if observation.has_block_info:
            BlockInfo(observation.block_number, observation.block_hash)

        with self._lock_provider.acquire(transaction_hash.value):
            now = self._time_provider.now()

            if self._payment_repo.find_by_transaction_hash(transaction_hash) is not None:
                raise PaymentAlreadyExistsError(
                    f"Payment already exists for transaction: {transaction_hash.value}"
                )

            detected = Payment.detect(
                transaction_hash=transaction_hash,
                amount=amount,
                to_address=to_address,
                now=now,
                from_address=from_address,
                network_fee=network_fee,
                policy=self._policy,
            )
            history = [detected]
            if observation.has_block_info:
                history.append(
                    history[-1].update_block_info(
                        observation.block_number, observation.block_hash, now
                    )
                )
            if observation.confirmations:
                history.append(history[-1].update_confirmations(observation.confirmations, now))
            payment = history[-1]

            self._payment_repo.save(payment)

        logger.info(
            "payment_detected",
            payment_id=str(payment.id),
            transaction_hash=transaction_hash.value,
            amount=str(amount.value),
            network=to_address.network.value,
            status=payment.status.value,
            confirmations=payment.confirmations.value,
            required_confirmations=payment.required_confirmations,
        )

        events = [PaymentEvent.from_payment(PAYMENT_DETECTED, detected, now)]
        for previous, current in zip(history, history[1:]):
            events.extend(events_for_transition(previous, current, now))
        published = publish_best_effort(self._event_publisher, events)

        return DetectPaymentResponse(payment=payment, events_published=published)
