"""Tests for environment-driven settings."""

import pydantic
import pytest

from shopcore.domain.exceptions import ConfigurationError
from shopcore.infrastructure.bootstrap import build_notifier
from shopcore.infrastructure.config import DEFAULT_DATABASE_URL, Settings
from shopcore.infrastructure.notifications.http_notifier import HttpNotifier
from shopcore.infrastructure.notifications.logging_notifier import LoggingNotifier


class TestSettings:

    def test_defaults(self):
        s = Settings.from_env({})
        assert s.database_url == DEFAULT_DATABASE_URL
        assert s.is_sqlite
        assert s.notify_url is None
        assert not s.strict_transitions

    def test_postgres_url_gets_async_driver(self):
        s = Settings.from_env({"SHOP_DATABASE_URL": "postgresql://u:p@db/shop"})
        assert s.database_url == "postgresql+asyncpg://u:p@db/shop"
        assert not s.is_sqlite

    def test_flags_and_numbers(self):
        s = Settings.from_env(
            {
                "SHOP_STRICT_TRANSITIONS": "yes",
                "SHOP_DB_POOL_SIZE": "12",
                "SHOP_NOTIFY_TIMEOUT": "2.5",
                "SHOP_LOG_LEVEL": "debug",
            }
        )
        assert s.strict_transitions
        assert s.db_pool_size == 12
        assert s.notify_timeout == 2.5
        assert s.log_level == "DEBUG"

    @pytest.mark.parametrize(
        "env",
        [
            {"SHOP_DATABASE_URL": "  "},
            {"SHOP_DB_POOL_SIZE": "many"},
            {"SHOP_NOTIFY_TIMEOUT": "soon"},
            {"SHOP_LOG_LEVEL": "LOUD"},
            {"SHOP_DB_POOL_SIZE": "0"},
        ],
    )
    def test_bad_values_raise_configuration_error(self, env):
        with pytest.raises(ConfigurationError):
            Settings.from_env(env)


    def test_blank_optional_values_are_unset(self):
        s = Settings.from_env({"SHOP_NOTIFY_URL": "", "SHOP_NOTIFY_TOKEN": ""})
        assert s.notify_url is None
        assert s.notify_token is None

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("SHOP_DB_MAX_OVERFLOW", "3")
        monkeypatch.setenv("SHOP_STRICT_TRANSITIONS", "true")
        s = Settings.from_env()
        assert s.db_max_overflow == 3
        assert s.strict_transitions

    def test_bad_process_environment_raises_configuration_error(self, monkeypatch):
        monkeypatch.setenv("SHOP_NOTIFY_TIMEOUT", "soon")
        with pytest.raises(ConfigurationError, match="SHOP_NOTIFY_TIMEOUT"):
            Settings.from_env()

    def test_settings_are_immutable(self):
        s = Settings()
        with pytest.raises(pydantic.ValidationError):
            s.db_echo = True


class TestNotifierSelection:

    def test_logging_without_url(self):
        assert isinstance(build_notifier(Settings()), LoggingNotifier)

    def test_http_with_url(self):
        notifier = build_notifier(Settings(notify_url="https://mail.example/send"))
        assert isinstance(notifier, HttpNotifier)
