from datetime import datetime, timedelta

import pytest

from crypto_payments.application.use_cases.payment_queries import PaymentQueries
from crypto_payments.domain.exceptions import InvalidTransactionHashError, PaymentNotFoundError
from crypto_payments.domain.status import PaymentStatus
from crypto_payments.domain.value_objects import BlockchainNetwork, PaymentId
from crypto_payments.infrastructure import InMemoryPaymentRepository

TO = "TXYZopYRdj2D9XRtbG411XZZ3kM5VkAeBf"


def _tx(n: int) -> str:
    return f"0x{n:064x}"


@pytest.fixture
def queries(payment_repository: InMemoryPaymentRepository) -> PaymentQueries:
    return PaymentQueries(payment_repository)


@pytest.fixture
def stored(make_payment, payment_repository: InMemoryPaymentRepository, fixed_time: datetime):
    detected = make_payment(transaction_hash=_tx(1), detected_at=fixed_time)
    confirming = make_payment(
        transaction_hash=_tx(2), detected_at=fixed_time - timedelta(minutes=5)
    ).update_block_info(1, "a", fixed_time)
    confirmed = make_payment(transaction_hash=_tx(3)).update_block_info(1, "a", fixed_time)
    confirmed = confirmed.update_confirmations(1, fixed_time)
    failed = make_payment(transaction_hash=_tx(4)).transition_to_failed(fixed_time)
    for payment in (detected, confirming, confirmed, failed):
        payment_repository.save(payment)
    return {"detected": detected, "confirming": confirming, "confirmed": confirmed, "failed": failed}


class TestPaymentLookups:
    def test_get_payment(self, queries: PaymentQueries, stored: dict) -> None:
        assert queries.get_payment(stored["detected"].id) == stored["detected"]

    def test_get_missing_payment(self, queries: PaymentQueries) -> None:
        with pytest.raises(PaymentNotFoundError):
            queries.get_payment(PaymentId.generate())

    def test_get_by_transaction_hash(self, queries: PaymentQueries, stored: dict) -> None:
        assert queries.get_by_transaction_hash(_tx(3)) == stored["confirmed"]

    def test_get_by_unknown_transaction_hash(self, queries: PaymentQueries) -> None:
        with pytest.raises(PaymentNotFoundError):
            queries.get_by_transaction_hash(_tx(99))

    def test_get_by_malformed_transaction_hash(self, queries: PaymentQueries) -> None:
        with pytest.raises(InvalidTransactionHashError):
            queries.get_by_transaction_hash("0x12")


class TestPaymentListings:
    def test_list_by_address(self, queries: PaymentQueries, stored: dict) -> None:
        assert len(queries.list_by_address(TO, BlockchainNetwork.TRON)) == 4
        assert queries.list_by_address(TO, BlockchainNetwork.ETHEREUM) == []

    def test_list_pending_oldest_first(self, queries: PaymentQueries, stored: dict) -> None:
        assert queries.list_pending() == [stored["confirming"], stored["detected"]]

    def test_list_by_terminal_status(self, queries: PaymentQueries, stored: dict) -> None:
        assert queries.list_confirmed() == [stored["confirmed"]]
        assert queries.list_failed() == [stored["failed"]]
        assert queries.list_orphaned() == []
        assert queries.list_by_status(PaymentStatus.CONFIRMING) == [stored["confirming"]]


class TestStatistics:
    def test_every_status_present(self, queries: PaymentQueries, stored: dict) -> None:
        assert queries.statistics() == {
            PaymentStatus.DETECTED: 1,
            PaymentStatus.CONFIRMING: 1,
            PaymentStatus.CONFIRMED: 1,
            PaymentStatus.ORPHANED: 0,
            PaymentStatus.FAILED: 1,
        }

    def test_empty_repository(self, queries: PaymentQueries) -> None:
        assert set(queries.statistics().values()) == {0}
