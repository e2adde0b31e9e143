"""Tests for TimeProvider implementations.

Tests cover:
- SystemTimeProvider returns UTC datetime
- FixedTimeProvider returns fixed time, supports set_time() and advance()
- UTC validation rejects naive and non-UTC datetimes
"""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from crypto_payments.application.ports import TimeProvider
from crypto_payments.infrastructure.time_provider import (
    FixedTimeProvider,
    SystemTimeProvider,
)

FIXED = datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)


class TestSystemTimeProvider:
    def test_implements_time_provider_interface(self) -> None:
        assert isinstance(SystemTimeProvider(), TimeProvider)

    def test_now_returns_current_utc_time(self) -> None:
        provider = SystemTimeProvider()
        before = datetime.now(UTC)

        result = provider.now()

        after = datetime.now(UTC)
        assert result.tzinfo is UTC
        assert before <= result <= after


class TestFixedTimeProvider:
    def test_now_returns_fixed_time(self) -> None:
        provider = FixedTimeProvider(FIXED)

        assert provider.now() == FIXED
        assert provider.now() == FIXED

    def test_set_time(self) -> None:
        provider = FixedTimeProvider(FIXED)
        new_time = FIXED + timedelta(days=1)

        provider.set_time(new_time)

        assert provider.now() == new_time

    def test_advance_moves_clock_forward(self) -> None:
        provider = FixedTimeProvider(FIXED)

        result = provider.advance(timedelta(minutes=10))

        assert result == FIXED + timedelta(minutes=10)
        assert provider.now() == result

    def test_advance_rejects_negative_delta(self) -> None:
        provider = FixedTimeProvider(FIXED)

        with pytest.raises(ValueError, match="backwards"):
            provider.advance(timedelta(seconds=-1))

        assert provider.now() == FIXED


class TestFixedTimeProviderUtcValidation:
    def test_rejects_naive_datetime(self) -> None:
        with pytest.raises(ValueError, match="tzinfo=UTC"):
            FixedTimeProvider(datetime(2024, 1, 1, 12, 0, 0))

    def test_rejects_non_utc_timezone(self) -> None:
        with pytest.raises(ValueError, match="tzinfo=UTC"):
            FixedTimeProvider(datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone(timedelta(hours=2))))

    def test_set_time_rejects_naive_datetime(self) -> None:
        provider = FixedTimeProvider(FIXED)

        with pytest.raises(ValueError):
            provider.set_time(datetime(2024, 1, 2))

        assert provider.now() == FIXED
