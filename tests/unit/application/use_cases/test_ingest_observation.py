"""Tests for IngestObservationUseCase.

Tests cover:
- Unknown hashes detected, known hashes routed to the update path
- Redelivered observations answered as replays
- Concurrent first sightings of one transaction
"""

from concurrent.futures import ThreadPoolExecutor, wait
from decimal import Decimal

import pytest

from crypto_payments.application.dtos import ChainObservation
from crypto_payments.application.use_cases.apply_chain_update import ApplyChainUpdateUseCase
from crypto_payments.application.use_cases.detect_payment import DetectPaymentUseCase
from crypto_payments.application.use_cases.ingest_observation import IngestObservationUseCase
from crypto_payments.domain.events import PAYMENT_CONFIRMED, PAYMENT_DETECTED
from crypto_payments.domain.status import PaymentStatus
from crypto_payments.domain.value_objects import BlockchainNetwork
from crypto_payments.infrastructure import (
    FixedTimeProvider,
    InMemoryEventPublisher,
    InMemoryLockProvider,
    InMemoryPaymentRepository,
)

TO = "TXYZopYRdj2D9XRtbG411XZZ3kM5VkAeBf"


def observation(tx_hash: str, **overrides) -> ChainObservation:
    values = {
        "transaction_hash": tx_hash,
        "to_address": TO,
        "network": BlockchainNetwork.TRON,
        "amount": Decimal("150"),
    }
    values.update(overrides)
    return ChainObservation(**values)


def build_use_case(
    time_provider: FixedTimeProvider,
    payment_repository: InMemoryPaymentRepository,
    event_publisher: InMemoryEventPublisher,
) -> IngestObservationUseCase:
    lock_provider = InMemoryLockProvider()
    ports = {
        "lock_provider": lock_provider,
        "time_provider": time_provider,
        "payment_repository": payment_repository,
        "event_publisher": event_publisher,
    }
    return IngestObservationUseCase(
        payment_repository=payment_repository,
        detect_payment=DetectPaymentUseCase(**ports),
        apply_chain_update=ApplyChainUpdateUseCase(**ports),
    )


@pytest.fixture
def use_case(
    time_provider: FixedTimeProvider,
    payment_repository: InMemoryPaymentRepository,
    event_publisher: InMemoryEventPublisher,
) -> IngestObservationUseCase:
    return build_use_case(time_provider, payment_repository, event_publisher)


class TestIngestObservation:
    def test_unknown_hash_is_detected(
        self, use_case: IngestObservationUseCase, tx_hash: str
    ) -> None:
        response = use_case.execute(observation(tx_hash))

        assert response.created
        assert response.payment.status is PaymentStatus.DETECTED

    def test_known_hash_is_updated(
        self,
        use_case: IngestObservationUseCase,
        event_publisher: InMemoryEventPublisher,
        tx_hash: str,
    ) -> None:
        created = use_case.execute(observation(tx_hash))

        response = use_case.execute(
            observation(tx_hash, block_number=100, block_hash="abc", confirmations=12)
        )

        assert not response.created
        assert response.payment.id == created.payment.id
        assert response.payment.status is PaymentStatus.CONFIRMED
        assert len(event_publisher.events_of_type(PAYMENT_DETECTED)) == 1
        assert len(event_publisher.events_of_type(PAYMENT_CONFIRMED)) == 1

    def test_redelivered_observation_is_replay(
        self, use_case: IngestObservationUseCase, tx_hash: str
    ) -> None:
        first = observation(tx_hash, block_number=100, block_hash="abc", confirmations=3)
        use_case.execute(first)

        response = use_case.execute(first)

        assert response.is_replay
        assert response.payment.confirmations.value == 3

    def test_feed_sequence_reaches_confirmation(
        self, use_case: IngestObservationUseCase, tx_hash: str
    ) -> None:
        feed = [
            observation(tx_hash),
            observation(tx_hash, block_number=100, block_hash="abc", confirmations=1),
            observation(tx_hash, block_number=100, block_hash="abc", confirmations=6),
            observation(tx_hash, block_number=100, block_hash="abc", confirmations=4),
            observation(tx_hash, block_number=100, block_hash="abc", confirmations=12),
        ]

        statuses = [use_case.execute(item).payment.status for item in feed]

        assert statuses == [
            PaymentStatus.DETECTED,
            PaymentStatus.CONFIRMING,
            PaymentStatus.CONFIRMING,
            PaymentStatus.CONFIRMING,
            PaymentStatus.CONFIRMED,
        ]


class TestIngestObservationConcurrency:
    def test_concurrent_first_sightings_create_one_payment(
        self, time_provider: FixedTimeProvider, tx_hash: str
    ) -> None:
        payment_repository = InMemoryPaymentRepository()
        event_publisher = InMemoryEventPublisher()
        use_case = build_use_case(time_provider, payment_repository, event_publisher)

        with ThreadPoolExecutor(max_workers=6) as executor:
            futures = [
                executor.submit(use_case.execute, observation(tx_hash, confirmations=n))
                for n in range(6)
            ]
            wait(futures)

        responses = [future.result() for future in futures]
        assert sum(response.created for response in responses) == 1
        assert len({response.payment.id for response in responses}) == 1
        assert len(event_publisher.events_of_type(PAYMENT_DETECTED)) == 1
        assert payment_repository.count_by_status()[PaymentStatus.DETECTED] == 1
