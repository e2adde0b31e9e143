from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from crypto_payments.application.use_cases.apply_chain_update import ChainUpdateRequest
from crypto_payments.domain.exceptions import PaymentAlreadyExistsError
from crypto_payments.domain.value_objects import TransactionHash

if TYPE_CHECKING:
    from crypto_payments.application.dtos import ChainObservation
    from crypto_payments.application.ports import PaymentRepository
    from crypto_payments.application.use_cases.apply_chain_update import ApplyChainUpdateUseCase
    from crypto_payments.application.use_cases.detect_payment import DetectPaymentUseCase
    from crypto_payments.domain.entities import Payment

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class IngestObservationResponse:
    """Output DTO for ingest observation use case."""

    payment: Payment
    created: bool
    is_replay: bool


class IngestObservationUseCase:
    """Single entry point for the blockchain watcher feed.

    Unknown transaction hashes start a new payment; known ones are routed
    to the update path. A detection race (two workers seeing the same new
    hash) resolves itself: the loser gets PaymentAlreadyExistsError from
    the detect path and retries as an update.
    """

    def __init__(
        self,
        payment_repository: PaymentRepository,
        detect_payment: DetectPaymentUseCase,
        apply_chain_update: ApplyChainUpdateUseCase,
    ) -> None:
        self._payment_repo = payment_repository
        self._detect_payment = detect_payment
        self._apply_chain_update = apply_chain_update

    def execute(self, observation: ChainObservation) -> IngestObservationResponse:
        transaction_hash = TransactionHash(observation.transaction_hash)

        if self._payment_repo.find_by_transaction_hash(transaction_hash) is None:
            try:
                detected = self._detect_payment.execute(observation)
            except PaymentAlreadyExistsError:
                logger.info(
                    "payment_detection_raced",
                    transaction_hash=transaction_hash.value,
                )
            else:
                return IngestObservationResponse(
                    payment=detected.payment, created=True, is_replay=False
                )

        updated = self._apply_chain_update.execute(
            ChainUpdateRequest(
                transaction_hash=transaction_hash.value,
                confirmations=observation.confirmations,
                block_number=observation.block_number,
                block_hash=observation.block_hash,
            )
        )
        return IngestObservationResponse(
            payment=updated.payment, created=False, is_replay=updated.is_replay
        )
