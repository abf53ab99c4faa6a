"""
Unit tests for the Logfire monitoring module.

This test suite covers:
- Initialization when disabled or missing a token
- Feature flag handling for the instrumentations
- The request, search and payment event helpers
"""

import logging
from unittest.mock import MagicMock, patch

import pytest

from towgo.core import monitoring


@pytest.fixture
def logfire_mock():
    with patch("towgo.core.monitoring.logfire") as mock:
        yield mock


@pytest.fixture
def initialized(monkeypatch):
    monkeypatch.setattr(monitoring, "_initialized", True)


class TestInitializeLogfire:
    """Test Logfire initialization."""

    def test_disabled(self, logfire_mock, monkeypatch):
        monkeypatch.setattr(monitoring, "LOGFIRE_ENABLED", False)

        assert monitoring.initialize_logfire() is False
        logfire_mock.configure.assert_not_called()
        assert monitoring.is_enabled() is False

    def test_enabled_without_token(self, logfire_mock, monkeypatch, caplog):
        monkeypatch.setattr(monitoring, "LOGFIRE_ENABLED", True)
        monkeypatch.setattr(monitoring, "LOGFIRE_TOKEN", "")

        with caplog.at_level(logging.WARNING, logger="towgo.core.monitoring"):
            assert monitoring.initialize_logfire() is False
        assert "LOGFIRE_TOKEN is not set" in caplog.text
        logfire_mock.configure.assert_not_called()

    def test_enabled_with_token(self, logfire_mock, monkeypatch):
        monkeypatch.setattr(monitoring, "LOGFIRE_ENABLED", True)
        monkeypatch.setattr(monitoring, "LOGFIRE_TOKEN", "test-token")
        monkeypatch.setattr(monitoring, "LOGFIRE_TRACE_SQLALCHEMY", True)
        monkeypatch.setattr(monitoring, "LOGFIRE_TRACE_HTTPX", True)
        monkeypatch.setattr(monitoring, "LOGFIRE_TRACE_FASTAPI", True)
        monkeypatch.setattr(monitoring, "_initialized", False)
        app = MagicMock()

        assert monitoring.initialize_logfire(app) is True

        logfire_mock.configure.assert_called_once_with(
            token="test-token",
            service_name=monitoring.LOGFIRE_SERVICE_NAME,
            service_version=monitoring.LOGFIRE_SERVICE_VERSION,
            environment=monitoring.LOGFIRE_ENVIRONMENT,
        )
        logfire_mock.instrument_sqlalchemy.assert_called_once()
        logfire_mock.instrument_httpx.assert_called_once()
        logfire_mock.instrument_fastapi.assert_called_once_with(app=app)
        assert monitoring.is_enabled() is True

    def test_feature_flags_can_disable_instrumentation(self, logfire_mock, monkeypatch):
        monkeypatch.setattr(monitoring, "LOGFIRE_ENABLED", True)
        monkeypatch.setattr(monitoring, "LOGFIRE_TOKEN", "test-token")
        monkeypatch.setattr(monitoring, "LOGFIRE_TRACE_SQLALCHEMY", False)
        monkeypatch.setattr(monitoring, "LOGFIRE_TRACE_HTTPX", False)
        monkeypatch.setattr(monitoring, "LOGFIRE_TRACE_FASTAPI", True)
        monkeypatch.setattr(monitoring, "_initialized", False)

        monitoring.initialize_logfire(None)

        logfire_mock.instrument_sqlalchemy.assert_not_called()
        logfire_mock.instrument_httpx.assert_not_called()
        # No app given, nothing to instrument
        logfire_mock.instrument_fastapi.assert_not_called()


class TestEventHelpers:
    """Test the structured logging helpers."""

    def test_api_request_without_logfire(self, logfire_mock, caplog):
        with caplog.at_level(logging.DEBUG, logger="towgo.core.monitoring"):
            monitoring.log_api_request("GET", "/health", 200, 1.5)
        assert "GET /health -> 200 (1.50ms)" in caplog.text
        logfire_mock.info.assert_not_called()

    def test_api_request_with_logfire(self, logfire_mock, initialized):
        monitoring.log_api_request("POST", "/api/checkout", 200, 12.0)
        logfire_mock.info.assert_called_once_with(
            "API request completed", method="POST", path="/api/checkout", status_code=200, duration_ms=12.0
        )

    def test_search_is_always_logged(self, logfire_mock, caplog):
        with caplog.at_level(logging.INFO, logger="towgo.core.monitoring"):
            monitoring.log_search("scrape", "tow truck in Austin", 3, 120.0)
        assert "Web search answered by scrape: 3 results" in caplog.text
        logfire_mock.info.assert_not_called()

    def test_search_with_logfire(self, logfire_mock, initialized):
        monitoring.log_search("perplexity", "tow truck", 5, 300.0)
        logfire_mock.info.assert_called_once_with(
            "Web search completed", tier="perplexity", query="tow truck", result_count=5, duration_ms=300.0
        )

    def test_payment_event_with_context(self, logfire_mock, initialized):
        monitoring.log_payment_event("checkout.session.completed", "success", {"event_id": "evt_1"})
        logfire_mock.info.assert_called_once_with(
            "Stripe event handled", event_type="checkout.session.completed", status="success", event_id="evt_1"
        )

    def test_payment_event_without_logfire(self, logfire_mock, caplog):
        with caplog.at_level(logging.INFO, logger="towgo.core.monitoring"):
            monitoring.log_payment_event("invoice.paid", "ignored")
        assert "Stripe event invoice.paid handled with status=ignored" in caplog.text
        logfire_mock.info.assert_not_called()
