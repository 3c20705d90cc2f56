"""Basic API smoke tests — health, locale routing, anonymous session."""

import pytest


@pytest.mark.asyncio
async def test_health(client):
    r = await client.get("/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "ok"
    assert data["version"]


@pytest.mark.asyncio
async def test_root_redirects_to_default_locale(client):
    r = await client.get("/")
    assert r.status_code in (302, 307)
    assert r.headers["location"] == "/en"


@pytest.mark.asyncio
async def test_unknown_locale_not_found(client):
    r = await client.get("/fr/auth/login")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_home_page_is_public(client):
    r = await client.get("/ar")
    assert r.status_code == 200
    data = r.json()
    assert data["page"] == "home"
    assert data["direction"] == "rtl"
    assert data["session"]["state"] == "anonymous"
    assert data["links"]["login"] == "/ar/auth/login"


@pytest.mark.asyncio
async def test_session_cookie_is_minted_once(client):
    r = await client.get("/health")
    assert "itqan_session" in r.cookies
    r2 = await client.get("/health")
    assert "itqan_session" not in r2.cookies


@pytest.mark.asyncio
async def test_anonymous_session(client):
    r = await client.get("/api/v1/session")
    assert r.status_code == 200
    assert r.json() == {
        "state": "anonymous",
        "is_authenticated": False,
        "requires_profile_completion": False,
        "user": None,
    }
