"""Domain entities - Objects with identity and lifecycle."""

from crypto_payments.domain.entities.payment import Payment

__all__ = [
    "Payment",
]
