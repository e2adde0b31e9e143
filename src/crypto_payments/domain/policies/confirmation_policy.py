"""Amount-tiered confirmation requirements.

The number of confirmations a payment needs before it is final grows with
its amount: reorg-driven double-spend risk is economically bounded by what
the payment is worth. Canonical tiers (lower bound inclusive):

    amount < 100            ->  1 confirmation
    100 <= amount < 10,000  -> 12 confirmations
    amount >= 10,000        -> 19 confirmations

A network may carry its own tier table; networks without one use the
canonical tiers. Everything here is deterministic and side-effect free.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING

from crypto_payments.domain.exceptions import InvalidConfirmationPolicyError
from crypto_payments.domain.value_objects.money import PaymentAmount, parse_decimal

if TYPE_CHECKING:
    from crypto_payments.domain.entities.payment import Payment
    from crypto_payments.domain.value_objects.network import BlockchainNetwork

HIGH_VALUE_THRESHOLD = Decimal("10000")


@dataclass(frozen=True, slots=True)
class ConfirmationTier:
    """Amounts at or above ``min_amount`` need ``required`` confirmations."""

    min_amount: Decimal
    required: int

    def __post_init__(self) -> None:
        amount = parse_decimal(self.min_amount, InvalidConfirmationPolicyError, "tier amount")
        if amount < 0:
            raise InvalidConfirmationPolicyError(f"Tier amount cannot be negative, got {amount}")
        if amount is not self.min_amount:
            object.__setattr__(self, "min_amount", amount)

        if isinstance(self.required, bool) or not isinstance(self.required, int):
            raise InvalidConfirmationPolicyError(
                f"Tier confirmations must be an integer, got {self.required!r}"
            )
        if self.required < 1:
            raise InvalidConfirmationPolicyError(
                f"Tier confirmations must be at least 1, got {self.required}"
            )


Tiers = tuple[ConfirmationTier, ...]

CANONICAL_TIERS: Tiers = (
    ConfirmationTier(Decimal("0"), 1),
    ConfirmationTier(Decimal("100"), 12),
    ConfirmationTier(HIGH_VALUE_THRESHOLD, 19),
)


def _validate_tiers(tiers: Tiers) -> None:
    if not tiers:
        raise InvalidConfirmationPolicyError("At least one confirmation tier is required")
    if tiers[0].min_amount != 0:
        raise InvalidConfirmationPolicyError(
            f"First tier must start at amount 0, got {tiers[0].min_amount}"
        )
    for lower, upper in zip(tiers, tiers[1:]):
        if upper.min_amount <= lower.min_amount:
            raise InvalidConfirmationPolicyError(
                "Tier amounts must be strictly ascending: "
                f"{lower.min_amount} is followed by {upper.min_amount}"
            )


def parse_tiers(table: str) -> Tiers:
    """Parse a tier table such as ``"0:1,100:12,10000:19"``.

    Raises:
        InvalidConfirmationPolicyError: If the table is empty or malformed.
    """
    tiers = []
    for entry in table.split(","):
        entry = entry.strip()
        if not entry:
            continue
        amount, sep, required = entry.partition(":")
        if not sep:
            raise InvalidConfirmationPolicyError(
                f"Tier entry must look like '<amount>:<confirmations>', got {entry!r}"
            )
        try:
            count = int(required.strip())
        except ValueError as e:
            raise InvalidConfirmationPolicyError(
                f"Tier confirmations must be an integer, got {required!r}"
            ) from e
        tiers.append(ConfirmationTier(amount.strip(), count))

    result = tuple(tiers)
    _validate_tiers(result)
    return result


@dataclass(frozen=True, slots=True)
class ConfirmationPolicy:
    """Maps (amount, network) to the confirmations required for finality."""

    tiers: Tiers = CANONICAL_TIERS
    network_tiers: tuple[tuple[BlockchainNetwork, Tiers], ...] = ()

    def __post_init__(self) -> None:
        tiers = tuple(self.tiers)
        _validate_tiers(tiers)
        object.__setattr__(self, "tiers", tiers)

        network_tiers = tuple((network, tuple(table)) for network, table in self.network_tiers)
        for _, table in network_tiers:
            _validate_tiers(table)
        object.__setattr__(self, "network_tiers", network_tiers)

    @classmethod
    def with_network_tiers(
        cls,
        network_tiers: Mapping[BlockchainNetwork, Tiers],
        tiers: Tiers = CANONICAL_TIERS,
    ) -> ConfirmationPolicy:
        ordered = tuple(sorted(network_tiers.items(), key=lambda item: item[0].value))
        return cls(tiers=tiers, network_tiers=ordered)

    def tiers_for(self, network: BlockchainNetwork | None) -> Tiers:
        if network is not None:
            for candidate, tiers in self.network_tiers:
                if candidate is network:
                    return tiers
        return self.tiers

    def required_confirmations(
        self,
        amount: PaymentAmount | Decimal | int | str,
        network: BlockchainNetwork | None = None,
    ) -> int:
        value = amount.value if isinstance(amount, PaymentAmount) else parse_decimal(amount)
        tiers = self.tiers_for(network)
        for tier in reversed(tiers):
            if value >= tier.min_amount:
                return tier.required
        return tiers[0].required


DEFAULT_CONFIRMATION_POLICY = ConfirmationPolicy()


def required_confirmations(
    amount: PaymentAmount | Decimal | int | str,
    network: BlockchainNetwork | None = None,
) -> int:
    """Required confirmations under the canonical policy."""
    return DEFAULT_CONFIRMATION_POLICY.required_confirmations(amount, network)


def is_high_value(amount: PaymentAmount | Decimal | int | str) -> bool:
    value = amount.value if isinstance(amount, PaymentAmount) else parse_decimal(amount)
    return value >= HIGH_VALUE_THRESHOLD


def estimate_confirmation_time(network: BlockchainNetwork, confirmations: int) -> timedelta:
    """Rough time for ``confirmations`` blocks at the network's average block time."""
    if confirmations < 0:
        raise InvalidConfirmationPolicyError(
            f"Confirmations cannot be negative, got {confirmations}"
        )
    return network.average_block_time * confirmations


class RiskLevel(Enum):
    LOW = "low"
    HIGH = "high"


def risk_level(amount: PaymentAmount | Decimal | int | str) -> RiskLevel:
    """High-value payments are high risk; everything else is low."""
    return RiskLevel.HIGH if is_high_value(amount) else RiskLevel.LOW


def is_expired(payment: Payment, max_age: timedelta, now: datetime) -> bool:
    """True once more than ``max_age`` has passed since the payment was detected.

    Used to spot pending payments that are stuck; the status is not consulted.
    """
    if max_age < timedelta(0):
        raise InvalidConfirmationPolicyError(f"Max age cannot be negative, got {max_age}")
    return now > payment.detected_at + max_age
