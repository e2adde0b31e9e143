from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID, uuid4

from crypto_payments.domain.exceptions import InvalidPaymentIdError


@dataclass(frozen=True, slots=True)
class PaymentId:
    """Identity of a payment aggregate (UUID)."""

    value: UUID

    @classmethod
    def generate(cls) -> PaymentId:
        return cls(value=uuid4())

    @classmethod
    def from_string(cls, id_str: str) -> PaymentId:
        """Parse a PaymentId from its string form.

        Raises:
            InvalidPaymentIdError: If the string is empty or not a UUID.
        """
        if not id_str or not id_str.strip():
            raise InvalidPaymentIdError("Payment ID cannot be empty")
        try:
            return cls(value=UUID(id_str.strip()))
        except (ValueError, AttributeError) as e:
            raise InvalidPaymentIdError(f"Invalid payment ID: {id_str}") from e

    def __str__(self) -> str:
        return str(self.value)
