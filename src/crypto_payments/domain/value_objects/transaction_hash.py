from __future__ import annotations

from dataclasses import dataclass

from crypto_payments.domain.exceptions import InvalidTransactionHashError

MIN_LENGTH = 32


@dataclass(frozen=True, slots=True)
class TransactionHash:
    """On-chain transaction hash.

    A transaction hash identifies exactly one payment. Surrounding
    whitespace is trimmed; case is preserved since some chains are
    case-sensitive.
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise InvalidTransactionHashError("Transaction hash must be a string")

        normalized = self.value.strip()
        if normalized != self.value:
            object.__setattr__(self, "value", normalized)

        if not normalized:
            raise InvalidTransactionHashError("Transaction hash cannot be empty")

        if len(normalized) < MIN_LENGTH:
            raise InvalidTransactionHashError(
                f"Transaction hash must be at least {MIN_LENGTH} characters, got {len(normalized)}"
            )

    def __str__(self) -> str:
        return self.value
