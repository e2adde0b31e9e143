"""Value objects - Immutable objects defined by their attributes."""

from crypto_payments.domain.value_objects.block_info import BlockInfo
from crypto_payments.domain.value_objects.confirmation_count import ConfirmationCount
from crypto_payments.domain.value_objects.money import PaymentAmount
from crypto_payments.domain.value_objects.network import BlockchainNetwork, CryptoCurrency
from crypto_payments.domain.value_objects.network_fee import NetworkFee
from crypto_payments.domain.value_objects.payment_address import PaymentAddress
from crypto_payments.domain.value_objects.payment_id import PaymentId
from crypto_payments.domain.value_objects.transaction_hash import TransactionHash

__all__ = [
    "BlockInfo",
    "BlockchainNetwork",
    "ConfirmationCount",
    "CryptoCurrency",
    "NetworkFee",
    "PaymentAddress",
    "PaymentAmount",
    "PaymentId",
    "TransactionHash",
]
