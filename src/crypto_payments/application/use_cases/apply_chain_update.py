from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from crypto_payments.application.publishing import publish_best_effort
from crypto_payments.domain.events import events_for_transition
from crypto_payments.domain.exceptions import PaymentNotFoundError
from crypto_payments.domain.value_objects import BlockInfo, ConfirmationCount, TransactionHash

if TYPE_CHECKING:
    from crypto_payments.application.ports import (
        EventPublisher,
        LockProvider,
        PaymentRepository,
        TimeProvider,
    )
    from crypto_payments.domain.entities import Payment
    from crypto_payments.domain.status import PaymentStatus

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ChainUpdateRequest:
    """Input DTO for apply chain update use case.

    ``confirmations`` and the block fields are each optional: the watcher
    may report only one of them.
    """

    transaction_hash: str
    confirmations: int | None = None
    block_number: int | None = None
    block_hash: str | None = None

    @property
    def has_block_info(self) -> bool:
        return self.block_number is not None or self.block_hash is not None


@dataclass(frozen=True, slots=True)
class ChainUpdateResponse:
    """Output DTO for apply chain update use case."""

    payment: Payment
    previous_status: PaymentStatus
    is_replay: bool  # True if the update changed nothing

    @property
    def status_changed(self) -> bool:
        return self.payment.status is not self.previous_status


class ApplyChainUpdateUseCase:
    """Applies a block/confirmation report to a tracked payment.

    Updates are applied in chain order: block info first (which may move a
    detected payment to confirming), then the confirmation count (which may
    move a confirming payment to confirmed). A duplicate or stale report
    leaves the payment untouched and is not persisted again, which makes
    the use case safe to retry after a failed write.
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

    def execute(self, request: ChainUpdateRequest) -> ChainUpdateResponse:
        """Apply the update.

        Raises:
            ValidationError: Negative confirmations, negative block number,
                empty block hash or malformed transaction hash.
            PaymentNotFoundError: No payment tracks this transaction hash.
        """
        transaction_hash = TransactionHash(request.transaction_hash)
        if request.confirmations is not None:
            ConfirmationCount(request.confirmations)
        if request.has_block_info:
            BlockInfo(request.block_number, request.block_hash)

        with self._lock_provider.acquire(transaction_hash.value):
            now = self._time_provider.now()

            payment = self._payment_repo.find_by_transaction_hash(transaction_hash)
            if payment is None:
                raise PaymentNotFoundError(
                    f"Payment not found for transaction: {transaction_hash.value}"
                )

            history = [payment]
            if request.has_block_info:
                history.append(
                    history[-1].update_block_info(request.block_number, request.block_hash, now)
                )
            if request.confirmations is not None:
                history.append(history[-1].update_confirmations(request.confirmations, now))
            updated = history[-1]

            if updated == payment:
                logger.debug(
                    "chain_update_replayed",
                    payment_id=str(payment.id),
                    transaction_hash=transaction_hash.value,
                    status=payment.status.value,
                    confirmations=payment.confirmations.value,
                )
                return ChainUpdateResponse(
                    payment=payment, previous_status=payment.status, is_replay=True
                )

            self._payment_repo.update(updated)

        events = []
        for previous, current in zip(history, history[1:]):
            events.extend(events_for_transition(previous, current, now))

        if events:
            logger.info(
                "payment_status_changed",
                payment_id=str(updated.id),
                transaction_hash=transaction_hash.value,
                from_status=payment.status.value,
                to_status=updated.status.value,
                confirmations=updated.confirmations.value,
                required_confirmations=updated.required_confirmations,
            )
        if payment.is_terminal and request.confirmations is not None:
            logger.debug(
                "confirmations_recorded_on_terminal_payment",
                payment_id=str(updated.id),
                status=updated.status.value,
                confirmations=updated.confirmations.value,
            )

        publish_best_effort(self._event_publisher, events)

        return ChainUpdateResponse(
            payment=updated, previous_status=payment.status, is_replay=False
        )
