from __future__ import annotations

import string
from dataclasses import dataclass

from crypto_payments.domain.exceptions import InvalidPaymentAddressError
from crypto_payments.domain.value_objects.network import BlockchainNetwork

MIN_LENGTH = 10

TRON_ADDRESS_LENGTH = 34
ETHEREUM_ADDRESS_LENGTH = 42
BITCOIN_ADDRESS_LENGTHS = range(26, 63)


@dataclass(frozen=True, slots=True)
class PaymentAddress:
    """A blockchain address on a specific network.

    Construction only checks basic shape (non-empty, minimum length).
    ``has_network_format`` adds the per-network shape rules; checksum
    validation belongs to the watcher that produced the address.
    """

    address: str
    network: BlockchainNetwork

    def __post_init__(self) -> None:
        if not isinstance(self.address, str) or not self.address.strip():
            raise InvalidPaymentAddressError("Address cannot be empty")

        normalized = self.address.strip()
        if normalized != self.address:
            object.__setattr__(self, "address", normalized)

        if len(normalized) < MIN_LENGTH:
            raise InvalidPaymentAddressError(
                f"Address must be at least {MIN_LENGTH} characters, got {len(normalized)}"
            )

        if not isinstance(self.network, BlockchainNetwork):
            raise InvalidPaymentAddressError(f"Invalid blockchain network: {self.network!r}")

    def __str__(self) -> str:
        return self.address

    @property
    def has_network_format(self) -> bool:
        """Whether the address has the shape its network uses.

        Tron: 34 characters starting with ``T``. Ethereum: ``0x`` plus 40 hex
        digits. Bitcoin: 26 to 62 characters.
        """
        address = self.address
        if self.network is BlockchainNetwork.TRON:
            return len(address) == TRON_ADDRESS_LENGTH and address.startswith("T")
        if self.network is BlockchainNetwork.ETHEREUM:
            return (
                len(address) == ETHEREUM_ADDRESS_LENGTH
                and address.startswith("0x")
                and all(c in string.hexdigits for c in address[2:])
            )
        return len(address) in BITCOIN_ADDRESS_LENGTHS

    def require_network_format(self) -> PaymentAddress:
        """Return self, or raise if the address does not fit its network.

        Raises:
            InvalidPaymentAddressError: If ``has_network_format`` is False.
        """
        if not self.has_network_format:
            raise InvalidPaymentAddressError(
                f"Address {self.address!r} is not a valid {self.network.value} address"
            )
        return self
