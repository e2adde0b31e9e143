"""Shared pytest fixtures for the test suite."""

from collections.abc import Callable
from datetime import UTC, datetime
from decimal import Decimal

import pytest

from crypto_payments.domain.entities import Payment
from crypto_payments.domain.value_objects import (
    BlockchainNetwork,
    PaymentAddress,
    PaymentAmount,
    TransactionHash,
)
from crypto_payments.infrastructure import (
    FixedTimeProvider,
    InMemoryEventPublisher,
    InMemoryLockProvider,
    InMemoryPaymentRepository,
)

TX_HASH = "0x" + "a1" * 32
OTHER_TX_HASH = "0x" + "b2" * 32
TO_ADDRESS = "TXYZopYRdj2D9XRtbG411XZZ3kM5VkAeBf"
FROM_ADDRESS = "TSenderAddr0000000000000000000001"


@pytest.fixture
def fixed_time() -> datetime:
    """A fixed timestamp for deterministic testing."""
    return datetime(2024, 1, 15, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def time_provider(fixed_time: datetime) -> FixedTimeProvider:
    """A time provider with a fixed timestamp."""
    return FixedTimeProvider(fixed_time)


@pytest.fixture
def lock_provider() -> InMemoryLockProvider:
    """An in-memory lock provider for testing."""
    return InMemoryLockProvider()


@pytest.fixture
def payment_repository() -> InMemoryPaymentRepository:
    return InMemoryPaymentRepository()


@pytest.fixture
def event_publisher() -> InMemoryEventPublisher:
    return InMemoryEventPublisher()


@pytest.fixture
def to_address() -> PaymentAddress:
    return PaymentAddress(TO_ADDRESS, BlockchainNetwork.TRON)


@pytest.fixture
def make_payment(
    fixed_time: datetime, to_address: PaymentAddress
) -> Callable[..., Payment]:
    """Factory for DETECTED payments; pass amount/transaction_hash to vary them."""

    def _make(amount: str = "50", transaction_hash: str = TX_HASH, **kwargs) -> Payment:
        return Payment.detect(
            transaction_hash=TransactionHash(transaction_hash),
            amount=PaymentAmount(Decimal(amount)),
            to_address=kwargs.pop("to_address", to_address),
            now=kwargs.pop("now", fixed_time),
            **kwargs,
        )

    return _make


@pytest.fixture
def tx_hash() -> str:
    return TX_HASH
