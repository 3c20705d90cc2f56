"""Tests for core/storage.py — in-memory and SQL-backed session storage."""

import pytest

from itqan.core.storage import MemoryStorage, SessionStorage, SqlSessionStorage


@pytest.mark.asyncio
async def test_memory_storage_roundtrip():
    s = MemoryStorage({"itqan_profile_completed": "1"})
    assert isinstance(s, SessionStorage)
    assert await s.get("itqan_profile_completed") == "1"
    await s.set("itqan_user", "{}")
    assert s.data["itqan_user"] == "{}"
    await s.remove("itqan_user")
    await s.remove("itqan_user")  # removing twice is fine
    assert await s.get("itqan_user") is None


@pytest.mark.asyncio
async def test_sql_storage_set_get_update(db_session):
    s = SqlSessionStorage(db_session, "sid-1")
    assert await s.get("itqan_user") is None

    await s.set("itqan_user", "first")
    await s.set("itqan_user", "second")
    assert await s.get("itqan_user") == "second"


@pytest.mark.asyncio
async def test_sql_storage_is_scoped_per_session(db_session):
    a = SqlSessionStorage(db_session, "sid-a")
    b = SqlSessionStorage(db_session, "sid-b")
    await a.set("itqan_tokens", "secret")

    assert await b.get("itqan_tokens") is None
    await b.remove("itqan_tokens")
    assert await a.get("itqan_tokens") == "secret"


@pytest.mark.asyncio
async def test_sql_storage_remove(db_session):
    s = SqlSessionStorage(db_session, "sid-1")
    await s.set("itqan_auth_state", "xyz")
    await s.remove("itqan_auth_state")
    assert await s.get("itqan_auth_state") is None
