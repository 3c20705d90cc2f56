"""Tests for core/logging.py."""

import structlog

from itqan.core.logging import bind_request_context, redact_secrets


def test_secrets_are_redacted():
    event = redact_secrets(None, "info", {
        "event": "Token refreshed",
        "access_token": "eyJ...",
        "password": "hunter2",
        "refresh_token": None,
        "sub": "auth0|abc123",
    })
    assert event["access_token"] == "***"
    assert event["password"] == "***"
    assert event["refresh_token"] is None
    assert event["sub"] == "auth0|abc123"


def test_request_context_is_bound():
    bind_request_context("0123456789abcdef", "GET", "/en/dashboard")
    ctx = structlog.contextvars.get_contextvars()
    assert ctx == {"sid": "01234567", "method": "GET", "path": "/en/dashboard"}
    structlog.contextvars.clear_contextvars()
