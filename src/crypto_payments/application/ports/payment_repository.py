from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from crypto_payments.domain.status import PaymentStatus

if TYPE_CHECKING:
    from crypto_payments.domain.entities import Payment
    from crypto_payments.domain.value_objects import PaymentAddress, PaymentId, TransactionHash


class PaymentRepository(ABC):
    """Port for payment persistence.

    Contract:
    - save() creates; it rejects a duplicate id OR a duplicate transaction hash
    - update() replaces an existing payment; it never creates
    - find_*() return None / empty lists when nothing matches (no exception)
    - Returned payments are detached copies; mutating them changes nothing stored
    - Implementations are NOT thread-safe; callers must ensure serialization

    Thread safety note:
    Repositories assume the caller has acquired the per-payment lock via
    LockProvider before a read-modify-write. The aggregate performs no
    compare-and-swap of its own.
    """

    @abstractmethod
    def save(self, payment: Payment) -> None:
        """Persist a new payment.

        Raises:
            PaymentAlreadyExistsError: If the id or transaction hash is already stored.
        """

    @abstractmethod
    def update(self, payment: Payment) -> None:
        """Replace a stored payment.

        Raises:
            PaymentNotFoundError: If no payment with this id exists.
        """

    @abstractmethod
    def delete(self, payment_id: PaymentId) -> None:
        """Remove a payment.

        Raises:
            PaymentNotFoundError: If no payment with this id exists.
        """

    @abstractmethod
    def exists(self, payment_id: PaymentId) -> bool: ...

    @abstractmethod
    def find_by_id(self, payment_id: PaymentId) -> Payment | None: ...

    @abstractmethod
    def find_by_transaction_hash(self, transaction_hash: TransactionHash) -> Payment | None: ...

    @abstractmethod
    def find_by_address(self, address: PaymentAddress) -> list[Payment]:
        """Payments sent to ``address``, oldest detection first."""

    @abstractmethod
    def find_by_status(self, status: PaymentStatus) -> list[Payment]:
        """Payments currently in ``status``, oldest detection first."""

    @abstractmethod
    def count_by_status(self) -> dict[PaymentStatus, int]:
        """Number of payments per status; every status is present, zero if unused."""

    def find_pending(self) -> list[Payment]:
        """Payments still waiting on the chain (detected or confirming)."""
        pending = self.find_by_status(PaymentStatus.DETECTED) + self.find_by_status(
            PaymentStatus.CONFIRMING
        )
        return sorted(pending, key=lambda payment: payment.detected_at)

    def find_confirmed(self) -> list[Payment]:
        return self.find_by_status(PaymentStatus.CONFIRMED)

    def find_failed(self) -> list[Payment]:
        return self.find_by_status(PaymentStatus.FAILED)

    def find_orphaned(self) -> list[Payment]:
        return self.find_by_status(PaymentStatus.ORPHANED)
