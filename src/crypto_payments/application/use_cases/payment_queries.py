from __future__ import annotations

from typing import TYPE_CHECKING

from crypto_payments.domain.exceptions import PaymentNotFoundError
from crypto_payments.domain.status import PaymentStatus
from crypto_payments.domain.value_objects import PaymentAddress, TransactionHash

if TYPE_CHECKING:
    from crypto_payments.application.ports import PaymentRepository
    from crypto_payments.domain.entities import Payment
    from crypto_payments.domain.value_objects import BlockchainNetwork, PaymentId


class PaymentQueries:
    """Read-only access to tracked payments.

    Reads take no lock: they observe whatever was last persisted.
    """

    def __init__(self, payment_repository: PaymentRepository) -> None:
        self._payment_repo = payment_repository

    def get_payment(self, payment_id: PaymentId) -> Payment:
        payment = self._payment_repo.find_by_id(payment_id)
        if payment is None:
            raise PaymentNotFoundError(f"Payment not found: {payment_id}")
        return payment

    def get_by_transaction_hash(self, transaction_hash: str) -> Payment:
        tx_hash = TransactionHash(transaction_hash)
        payment = self._payment_repo.find_by_transaction_hash(tx_hash)
        if payment is None:
            raise PaymentNotFoundError(f"Payment not found for transaction: {tx_hash.value}")
        return payment

    def list_by_address(self, address: str, network: BlockchainNetwork) -> list[Payment]:
        return self._payment_repo.find_by_address(PaymentAddress(address, network))

    def list_by_status(self, status: PaymentStatus) -> list[Payment]:
        return self._payment_repo.find_by_status(status)

    def list_pending(self) -> list[Payment]:
        return self._payment_repo.find_pending()

    def list_confirmed(self) -> list[Payment]:
        return self._payment_repo.find_confirmed()

    def list_failed(self) -> list[Payment]:
        return self._payment_repo.find_failed()

    def list_orphaned(self) -> list[Payment]:
        return self._payment_repo.find_orphaned()

    def statistics(self) -> dict[PaymentStatus, int]:
        """Payment count per status, including statuses with no payments."""
        counts = self._payment_repo.count_by_status()
        return {status: counts.get(status, 0) for status in PaymentStatus}
