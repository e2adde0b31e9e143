"""Ports - Abstract interfaces for external dependencies.

Ports define the contracts that infrastructure adapters must implement.
The Payment aggregate never touches them; use cases do.
"""

from crypto_payments.application.ports.event_publisher import EventPublisher
from crypto_payments.application.ports.lock_provider import LockProvider
from crypto_payments.application.ports.payment_repository import PaymentRepository
from crypto_payments.application.ports.time_provider import TimeProvider

__all__ = [
    "EventPublisher",
    "LockProvider",
    "PaymentRepository",
    "TimeProvider",
]
