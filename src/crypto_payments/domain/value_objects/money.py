from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from crypto_payments.domain.exceptions import InvalidAmountError, ValidationError
from crypto_payments.domain.value_objects.network import CryptoCurrency


def parse_decimal(
    value: object,
    error_cls: type[ValidationError] = InvalidAmountError,
    label: str = "amount",
) -> Decimal:
    """Coerce ``value`` to a finite Decimal, raising ``error_cls`` otherwise.

    Floats go through ``str()`` so that 99.99 stays 99.99 rather than its
    binary approximation.
    """
    if value is None:
        raise error_cls(f"{label.capitalize()} cannot be None")
    if isinstance(value, bool):
        raise error_cls(f"{label.capitalize()} must be numeric, got bool")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as e:
            raise error_cls(f"Invalid {label} format: {value!r}") from e
    if not result.is_finite():
        raise error_cls(f"{label.capitalize()} must be finite, got {value!r}")
    return result


@dataclass(frozen=True, slots=True)
class PaymentAmount:
    """A strictly positive amount of a cryptocurrency."""

    value: Decimal
    currency: CryptoCurrency = CryptoCurrency.USDT

    def __post_init__(self) -> None:
        amount = parse_decimal(self.value)
        if amount <= 0:
            raise InvalidAmountError(f"Amount must be greater than 0, got {amount}")
        if amount is not self.value:
            object.__setattr__(self, "value", amount)

        if not isinstance(self.currency, CryptoCurrency):
            raise InvalidAmountError(f"Invalid cryptocurrency: {self.currency!r}")

    def __str__(self) -> str:
        return f"{self.value} {self.currency.value}"
