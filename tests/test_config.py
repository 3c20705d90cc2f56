"""Tests for core/config.py."""

from itqan.core.config import Settings


def test_default_settings():
    s = Settings()
    assert s.app_port == 3000
    assert s.app_host == "0.0.0.0"
    assert s.log_level == "INFO"
    assert s.default_locale == "en"
    assert s.database_url  # non-empty


def test_auth0_base_url_adds_scheme():
    s = Settings(auth0_domain="tenant.eu.auth0.com/")
    assert s.auth0_base_url == "https://tenant.eu.auth0.com"


def test_auth0_base_url_keeps_explicit_scheme():
    s = Settings(auth0_domain="http://localhost:9000")
    assert s.auth0_base_url == "http://localhost:9000"


def test_scope_requests_refresh_tokens():
    s = Settings()
    assert "offline_access" in s.auth0_scope.split()
    assert "openid" in s.auth0_scope.split()
