from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from crypto_payments.domain.exceptions import InvalidNetworkFeeError
from crypto_payments.domain.value_objects.money import parse_decimal
from crypto_payments.domain.value_objects.network import CryptoCurrency


@dataclass(frozen=True, slots=True)
class NetworkFee:
    """Fee paid to the network for the payment transaction.

    Informational only: the fee never influences status transitions.
    """

    amount: Decimal
    currency: CryptoCurrency

    def __post_init__(self) -> None:
        fee = parse_decimal(self.amount, InvalidNetworkFeeError, "network fee")
        if fee <= 0:
            raise InvalidNetworkFeeError(f"Network fee must be positive, got {fee}")
        if fee is not self.amount:
            object.__setattr__(self, "amount", fee)

        if not isinstance(self.currency, CryptoCurrency):
            raise InvalidNetworkFeeError(f"Invalid cryptocurrency: {self.currency!r}")

    def __str__(self) -> str:
        return f"{self.amount} {self.currency.value}"
