from __future__ import annotations

from dataclasses import dataclass

from crypto_payments.domain.exceptions import InvalidConfirmationCountError


@dataclass(frozen=True, slots=True, order=True)
class ConfirmationCount:
    """Number of blocks mined on top of the block including a transaction.

    Immutable; ``increment()`` returns a new instance.
    """

    value: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise InvalidConfirmationCountError(
                f"Confirmation count must be an integer, got {type(self.value).__name__}"
            )
        if self.value < 0:
            raise InvalidConfirmationCountError(
                f"Confirmation count cannot be negative, got {self.value}"
            )

    @classmethod
    def zero(cls) -> ConfirmationCount:
        return cls(0)

    def increment(self) -> ConfirmationCount:
        return ConfirmationCount(self.value + 1)

    @property
    def is_zero(self) -> bool:
        return self.value == 0

    def meets(self, required: int) -> bool:
        return self.value >= required

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)
