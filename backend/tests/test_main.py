"""Tests for process startup helpers."""

import logging

from app.config import Settings
from app.main import LOG_FORMAT, configure_logging, init_sentry


class TestConfigureLogging:
    def test_level_from_settings(self, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
        configure_logging(Settings(log_level="debug"))
        assert calls == [{"level": logging.DEBUG, "format": LOG_FORMAT}]

    def test_unknown_level_falls_back_to_info(self, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
        configure_logging(Settings(log_level="chatty"))
        assert calls[0]["level"] == logging.INFO


class TestInitSentry:
    def test_disabled_without_dsn(self):
        assert init_sentry(Settings(sentry_dsn="")) is False

    def test_init_failure_is_logged_not_raised(self, monkeypatch, caplog):
        import sentry_sdk

        def boom(**kwargs):
            raise RuntimeError("bad dsn")

        monkeypatch.setattr(sentry_sdk, "init", boom)
        with caplog.at_level(logging.WARNING, logger="ledgerscope"):
            assert init_sentry(Settings(sentry_dsn="https://key@example.invalid/1")) is False
        assert "Failed to initialize Sentry: bad dsn" in caplog.text

    def test_enabled_with_dsn(self, monkeypatch):
        import sentry_sdk

        calls = []
        monkeypatch.setattr(sentry_sdk, "init", lambda **kwargs: calls.append(kwargs))
        settings = Settings(sentry_dsn="https://key@example.invalid/1", environment="prod")
        assert init_sentry(settings) is True
        assert calls[0]["environment"] == "prod"
        assert calls[0]["release"] == "ledgerscope@0.1.0"
