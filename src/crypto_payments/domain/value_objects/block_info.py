from __future__ import annotations

from dataclasses import dataclass

from crypto_payments.domain.exceptions import InvalidBlockInfoError


@dataclass(frozen=True, slots=True)
class BlockInfo:
    """The block a payment transaction was observed in.

    Replaced when a reorg moves the transaction into a different block and
    cleared when the payment falls back to the mempool.
    """

    number: int
    hash: str

    def __post_init__(self) -> None:
        if isinstance(self.number, bool) or not isinstance(self.number, int):
            raise InvalidBlockInfoError(
                f"Block number must be an integer, got {type(self.number).__name__}"
            )
        if self.number < 0:
            raise InvalidBlockInfoError(f"Block number cannot be negative, got {self.number}")

        if not isinstance(self.hash, str) or not self.hash.strip():
            raise InvalidBlockInfoError("Block hash cannot be empty")

        normalized = self.hash.strip()
        if normalized != self.hash:
            object.__setattr__(self, "hash", normalized)
