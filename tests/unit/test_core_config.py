"""Unit tests for Settings loading and validation."""

import pytest
from pydantic import ValidationError

from authority.core.config import Settings
from authority.core.enums import Environment
from tests.conftest import TEST_SECRET_KEY


def make_settings(**overrides) -> Settings:
    values = {"secret_key": TEST_SECRET_KEY, "_env_file": None}
    values.update(overrides)
    return Settings(**values)


@pytest.mark.unit
class TestSettings:
    def test_defaults(self):
        settings = make_settings(environment=Environment.DEVELOPMENT)

        assert settings.access_token_expire_minutes == 15
        assert settings.refresh_token_expire_days == 7
        assert settings.session_expire_days == 1
        assert settings.remember_me_expire_days == 30
        assert settings.password_reset_token_expire_hours == 24
        assert settings.lockout_threshold == 5
        assert settings.lockout_window_minutes == 30
        assert settings.bcrypt_rounds == 12
        assert settings.algorithm == "HS256"
        assert settings.database_url is None

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("AUTHORITY_SECRET_KEY", TEST_SECRET_KEY)
        monkeypatch.setenv("AUTHORITY_LOCKOUT_THRESHOLD", "3")
        monkeypatch.setenv("AUTHORITY_ENVIRONMENT", "production")

        settings = Settings(_env_file=None)

        assert settings.lockout_threshold == 3
        assert settings.is_production is True

    def test_secret_key_is_required(self, monkeypatch):
        monkeypatch.delenv("AUTHORITY_SECRET_KEY", raising=False)

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_short_secret_key_rejected(self):
        with pytest.raises(ValidationError):
            make_settings(secret_key="too-short")

    @pytest.mark.parametrize("rounds", [3, 32])
    def test_bcrypt_rounds_out_of_range(self, rounds):
        with pytest.raises(ValidationError, match="bcrypt_rounds"):
            make_settings(bcrypt_rounds=rounds)

    def test_non_positive_lifetime_rejected(self):
        with pytest.raises(ValidationError):
            make_settings(access_token_expire_minutes=0)

    @pytest.mark.parametrize(
        ("environment", "log_json", "expected"),
        [
            (Environment.DEVELOPMENT, None, False),
            (Environment.PRODUCTION, None, False),
            (Environment.TESTING, None, True),
            (Environment.CI, None, True),
            (Environment.DEVELOPMENT, True, True),
            (Environment.TESTING, False, False),
        ],
    )
    def test_use_json_logs(self, environment, log_json, expected):
        settings = make_settings(environment=environment, log_json=log_json)

        assert settings.use_json_logs is expected
