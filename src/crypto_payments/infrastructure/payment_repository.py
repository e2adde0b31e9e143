from __future__ import annotations

import copy
from typing import TYPE_CHECKING

from crypto_payments.application.ports import PaymentRepository
from crypto_payments.domain.exceptions import PaymentAlreadyExistsError, PaymentNotFoundError
from crypto_payments.domain.status import PaymentStatus

if TYPE_CHECKING:
    from collections.abc import Callable

    from crypto_payments.domain.entities import Payment
    from crypto_payments.domain.value_objects import PaymentAddress, PaymentId, TransactionHash


class InMemoryPaymentRepository(PaymentRepository):
    """In-memory payment repository for tests and single-process use.

    Implementation notes:
    - Payments keyed by PaymentId, plus a transaction hash index
    - Returns deep copies from every find_*() to mimic database detachment
    - Stores deep copies in save()/update() to prevent external mutation
    - NOT thread-safe; relies on external LockProvider for serialization

    Deepcopy assumptions:
    - All entities and value objects must be deepcopy-safe (frozen dataclasses are)
    - datetime objects with tzinfo=UTC survive deepcopy correctly
    """

    def __init__(self) -> None:
        self._payments: dict[PaymentId, Payment] = {}
        self._by_transaction_hash: dict[TransactionHash, PaymentId] = {}

    def save(self, payment: Payment) -> None:
        if payment.id in self._payments:
            raise PaymentAlreadyExistsError(f"Payment already exists: {payment.id}")
        if payment.transaction_hash in self._by_transaction_hash:
            raise PaymentAlreadyExistsError(
                f"Payment already exists for transaction: {payment.transaction_hash}"
            )
        self._payments[payment.id] = copy.deepcopy(payment)
        self._by_transaction_hash[payment.transaction_hash] = payment.id

    def update(self, payment: Payment) -> None:
        stored = self._payments.get(payment.id)
        if stored is None:
            raise PaymentNotFoundError(f"Payment not found: {payment.id}")
        if stored.transaction_hash != payment.transaction_hash:
            del self._by_transaction_hash[stored.transaction_hash]
            self._by_transaction_hash[payment.transaction_hash] = payment.id
        self._payments[payment.id] = copy.deepcopy(payment)

    def delete(self, payment_id: PaymentId) -> None:
        payment = self._payments.pop(payment_id, None)
        if payment is None:
            raise PaymentNotFoundError(f"Payment not found: {payment_id}")
        del self._by_transaction_hash[payment.transaction_hash]

    def exists(self, payment_id: PaymentId) -> bool:
        return payment_id in self._payments

    def find_by_id(self, payment_id: PaymentId) -> Payment | None:
        payment = self._payments.get(payment_id)
        if payment is None:
            return None
        return copy.deepcopy(payment)

    def find_by_transaction_hash(self, transaction_hash: TransactionHash) -> Payment | None:
        payment_id = self._by_transaction_hash.get(transaction_hash)
        if payment_id is None:
            return None
        return self.find_by_id(payment_id)

    def find_by_address(self, address: PaymentAddress) -> list[Payment]:
        return self._select(lambda payment: payment.to_address == address)

    def find_by_status(self, status: PaymentStatus) -> list[Payment]:
        return self._select(lambda payment: payment.status is status)

    def count_by_status(self) -> dict[PaymentStatus, int]:
        counts = dict.fromkeys(PaymentStatus, 0)
        for payment in self._payments.values():
            counts[payment.status] += 1
        return counts

    def _select(self, predicate: Callable[[Payment], bool]) -> list[Payment]:
        matches = [p for p in self._payments.values() if predicate(p)]
        matches.sort(key=lambda payment: payment.detected_at)
        return [copy.deepcopy(payment) for payment in matches]
