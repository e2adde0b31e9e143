"""Infrastructure layer - Concrete implementations of ports.

This layer contains:
- Persistence: In-memory payment repository
- Events: In-memory, logging and null event publishers
- Time Provider: Clock abstraction for testability
- Locking: Per-transaction locking

Infrastructure adapters implement the ports defined in the application layer.
"""

from crypto_payments.infrastructure.event_publisher import (
    InMemoryEventPublisher,
    LoggingEventPublisher,
    NullEventPublisher,
)
from crypto_payments.infrastructure.lock_provider import InMemoryLockProvider, NoOpLockProvider
from crypto_payments.infrastructure.payment_repository import InMemoryPaymentRepository
from crypto_payments.infrastructure.time_provider import FixedTimeProvider, SystemTimeProvider

__all__ = [
    "FixedTimeProvider",
    "InMemoryEventPublisher",
    "InMemoryLockProvider",
    "InMemoryPaymentRepository",
    "LoggingEventPublisher",
    "NoOpLockProvider",
    "NullEventPublisher",
    "SystemTimeProvider",
]
