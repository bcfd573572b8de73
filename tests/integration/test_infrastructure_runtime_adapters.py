"""Integration tests for the clock, id and opaque token adapters.

Architecture:
- Real system clock (frozen with freezegun, not mocked)
- Real uuid7 and secrets libraries
"""

from datetime import UTC, datetime, timedelta

import pytest
from freezegun import freeze_time

from authority.infrastructure.runtime import SystemClock, UUID7Generator
from authority.infrastructure.security import SecureTokenGenerator


@pytest.mark.integration
class TestSystemClock:
    def test_now_is_timezone_aware_utc(self):
        now = SystemClock().now()

        assert now.tzinfo is not None
        assert now.utcoffset() == timedelta(0)

    def test_now_follows_frozen_time(self):
        with freeze_time("2024-01-01 12:00:00") as frozen:
            clock = SystemClock()
            assert clock.now() == datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)

            frozen.tick(timedelta(minutes=15))

            assert clock.now() == datetime(2024, 1, 1, 12, 15, 0, tzinfo=UTC)


@pytest.mark.integration
class TestUUID7Generator:
    def test_ids_are_version_7(self):
        assert UUID7Generator().new_id().version == 7

    def test_ids_are_unique_and_time_ordered(self):
        generator = UUID7Generator()

        ids = [generator.new_id() for _ in range(200)]

        assert len(set(ids)) == 200
        assert ids == sorted(ids)


@pytest.mark.integration
class TestSecureTokenGenerator:
    def test_default_token_is_urlsafe_32_bytes(self):
        token = SecureTokenGenerator().new_token()

        # 32 bytes of base64url without padding
        assert len(token) == 43
        assert set(token) <= set(
            "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"
        )

    def test_tokens_are_unique(self):
        generator = SecureTokenGenerator()

        tokens = {generator.new_token() for _ in range(500)}

        assert len(tokens) == 500

    def test_custom_length(self):
        assert len(SecureTokenGenerator(nbytes=16).new_token()) == 22
