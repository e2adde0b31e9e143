from uuid import UUID

import pytest

from crypto_payments.domain.exceptions import InvalidPaymentIdError
from crypto_payments.domain.value_objects import PaymentId

UUID_STR = "550e8400-e29b-41d4-a716-446655440000"


class TestPaymentIdGenerate:
    def test_generate_creates_uuid_backed_id(self) -> None:
        payment_id = PaymentId.generate()

        assert isinstance(payment_id.value, UUID)

    def test_generate_creates_unique_ids(self) -> None:
        assert PaymentId.generate() != PaymentId.generate()


class TestPaymentIdFromString:
    def test_parses_valid_uuid(self) -> None:
        assert PaymentId.from_string(UUID_STR).value == UUID(UUID_STR)

    def test_parses_uppercase_and_surrounding_whitespace(self) -> None:
        payment_id = PaymentId.from_string(f"  {UUID_STR.upper()} ")

        assert payment_id.value == UUID(UUID_STR)

    @pytest.mark.parametrize("raw", ["", "   ", "not-a-valid-uuid", "550e8400-e29b-41d4-a716"])
    def test_rejects_invalid_input(self, raw: str) -> None:
        with pytest.raises(InvalidPaymentIdError):
            PaymentId.from_string(raw)

    def test_invalid_id_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            PaymentId.from_string("nope")

    def test_str_round_trips(self) -> None:
        payment_id = PaymentId.generate()

        assert PaymentId.from_string(str(payment_id)) == payment_id


class TestPaymentIdValueSemantics:
    def test_payment_id_is_frozen(self) -> None:
        payment_id = PaymentId.generate()

        with pytest.raises(AttributeError):
            payment_id.value = UUID(UUID_STR)  # type: ignore[misc]

    def test_equal_ids_share_hash_and_dedupe_in_set(self) -> None:
        first = PaymentId.from_string(UUID_STR)
        second = PaymentId.from_string(UUID_STR)

        assert first == second
        assert hash(first) == hash(second)
        assert len({first, second}) == 1

    def test_payment_id_not_equal_to_raw_uuid(self) -> None:
        assert PaymentId(UUID(UUID_STR)) != UUID(UUID_STR)  # type: ignore[comparison-overlap]
