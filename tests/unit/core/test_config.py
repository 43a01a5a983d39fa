"""
Unit tests for header_session/core/config.py - Settings Class and Singleton.

Reference:
- Pydantic BaseSettings pattern with env_prefix="HEADER_SESSION_"
"""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError


class TestSettingsDefaults:
    """Default values of SessionSettings."""

    def test_settings_extends_base_settings(self):
        from pydantic_settings import BaseSettings

        from header_session.core.config import SessionSettings

        assert issubclass(SessionSettings, BaseSettings)

    def test_default_ttl_is_ten_minutes(self):
        from header_session.core.config import SessionSettings

        assert SessionSettings().ttl == 600

    def test_default_sid_length(self):
        from header_session.core.config import SessionSettings

        assert SessionSettings().sid_length == 40

    def test_default_sid_header(self):
        from header_session.core.config import SessionSettings

        assert SessionSettings().sid_header == "Session-Id"

    def test_debug_and_persist_off_by_default(self):
        from header_session.core.config import SessionSettings

        settings = SessionSettings()
        assert settings.debug is False
        assert settings.persist is False

    def test_default_connection(self):
        from header_session.core.config import SessionSettings

        con = SessionSettings().connection
        assert con.host == "127.0.0.1"
        assert con.port == 6379
        assert con.db is None
        assert con.username is None
        assert con.password.get_secret_value() == ""

    def test_default_key_prefix(self):
        from header_session.core.config import SessionSettings

        assert SessionSettings().key_prefix == "session:"


class TestAdminOperationsFlag:
    """allow_admin_operations is split from debug but defaults to it."""

    def test_admin_follows_debug_off(self):
        from header_session.core.config import SessionSettings

        assert SessionSettings().allow_admin_operations is False

    def test_admin_follows_debug_on(self):
        from header_session.core.config import SessionSettings

        assert SessionSettings(debug=True).allow_admin_operations is True

    def test_admin_can_be_disabled_in_debug(self):
        from header_session.core.config import SessionSettings

        settings = SessionSettings(debug=True, allow_admin_operations=False)
        assert settings.allow_admin_operations is False

    def test_admin_can_be_enabled_without_debug(self):
        from header_session.core.config import SessionSettings

        settings = SessionSettings(debug=False, allow_admin_operations=True)
        assert settings.allow_admin_operations is True


class TestSettingsEnvironment:
    """Settings load from HEADER_SESSION_* environment variables."""

    def test_ttl_from_env(self):
        from header_session.core.config import SessionSettings

        with patch.dict(os.environ, {"HEADER_SESSION_TTL": "42"}):
            assert SessionSettings().ttl == 42

    def test_nested_connection_from_env(self):
        from header_session.core.config import SessionSettings

        env = {
            "HEADER_SESSION_CONNECTION__HOST": "redis.internal",
            "HEADER_SESSION_CONNECTION__PORT": "6380",
            "HEADER_SESSION_CONNECTION__DB": "3",
        }
        with patch.dict(os.environ, env):
            con = SessionSettings().connection

        assert con.host == "redis.internal"
        assert con.port == 6380
        assert con.db == 3

    def test_password_is_masked(self):
        from header_session.core.config import SessionSettings

        settings = SessionSettings(connection={"password": "s3cret"})
        assert "s3cret" not in repr(settings)
        assert settings.connection.password.get_secret_value() == "s3cret"


class TestSettingsValidation:
    """Field validators and immutability."""

    def test_ttl_must_be_positive(self):
        from header_session.core.config import SessionSettings

        with pytest.raises(ValidationError):
            SessionSettings(ttl=0)

    def test_sid_length_must_be_positive(self):
        from header_session.core.config import SessionSettings

        with pytest.raises(ValidationError):
            SessionSettings(sid_length=0)

    def test_sid_header_rejects_invalid_names(self):
        from header_session.core.config import SessionSettings

        with pytest.raises(ValidationError):
            SessionSettings(sid_header="Session Id")

    def test_log_level_is_normalized(self):
        from header_session.core.config import SessionSettings

        assert SessionSettings(log_level="warning").log_level == "WARNING"

    def test_invalid_log_level(self):
        from header_session.core.config import SessionSettings

        with pytest.raises(ValidationError):
            SessionSettings(log_level="LOUD")

    def test_effective_log_level_is_debug_in_debug_mode(self):
        from header_session.core.config import SessionSettings

        assert SessionSettings(debug=True).effective_log_level == "DEBUG"
        assert SessionSettings(log_level="ERROR").effective_log_level == "ERROR"

    def test_settings_are_frozen(self):
        from header_session.core.config import SessionSettings

        settings = SessionSettings()
        with pytest.raises(ValidationError):
            settings.ttl = 10


class TestSettingsSingleton:
    """get_settings() returns a cached instance."""

    def test_get_settings_returns_same_instance(self):
        from header_session.core.config import get_settings

        assert get_settings() is get_settings()
