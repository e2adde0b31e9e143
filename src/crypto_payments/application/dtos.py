"""Data Transfer Objects shared by the use cases."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from crypto_payments.domain.value_objects import BlockchainNetwork, CryptoCurrency


@dataclass(frozen=True, slots=True)
class ChainObservation:
    """One report from the blockchain watcher about a transaction.

    The feed is unreliable: the same observation may arrive twice, late,
    or out of order. Fields are raw values; use cases turn them into value
    objects so validation errors surface before any state is touched.
    """

    transaction_hash: str
    to_address: str
    network: BlockchainNetwork
    amount: Decimal | str
    currency: CryptoCurrency = CryptoCurrency.USDT
    confirmations: int = 0
    block_number: int | None = None
    block_hash: str | None = None
    from_address: str | None = None
    network_fee: Decimal | str | None = None
    fee_currency: CryptoCurrency | None = None

    @property
    def has_block_info(self) -> bool:
        return self.block_number is not None or self.block_hash is not None
