"""Tests for the public catalog API."""

import pytest


@pytest.mark.asyncio
async def test_list_assets(client):
    r = await client.get("/api/v1/assets")
    assert r.status_code == 200
    data = r.json()
    assert data["pagination"]["total"] == 8
    assert data["pagination"]["page"] == 1
    assert len(data["items"]) == 8
    assert {"categories", "formats", "languages", "licenses"} <= set(data["filters"])


@pytest.mark.asyncio
async def test_filter_by_category(client):
    r = await client.get("/api/v1/assets", params={"categories": "quran"})
    assert r.status_code == 200
    data = r.json()
    assert data["pagination"]["total"] == 4
    assert all(a["category"] == "quran" for a in data["items"])


@pytest.mark.asyncio
async def test_repeated_facet_params_are_ored(client):
    r = await client.get(
        "/api/v1/assets",
        params=[("formats", "json"), ("formats", "csv"), ("languages", "en")],
    )
    ids = [a["id"] for a in r.json()["items"]]
    assert ids == ["asset-3", "asset-7"]


@pytest.mark.asyncio
async def test_search_and_paging(client):
    r = await client.get("/api/v1/assets", params={"q": "quran", "per_page": 2, "page": 2})
    data = r.json()
    assert data["pagination"]["per_page"] == 2
    assert data["pagination"]["has_prev"] is True
    assert len(data["items"]) == 2


@pytest.mark.asyncio
async def test_invalid_page(client):
    r = await client.get("/api/v1/assets", params={"page": 0})
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_filters_localized(client):
    r = await client.get("/api/v1/assets/filters", params={"locale": "ar"})
    assert r.status_code == 200
    labels = {o["value"]: o["label"] for o in r.json()["languages"]}
    assert labels["ur"] == "الأردية"


@pytest.mark.asyncio
async def test_filters_unknown_locale(client):
    r = await client.get("/api/v1/assets/filters", params={"locale": "fr"})
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_get_asset(client):
    r = await client.get("/api/v1/assets/asset-5")
    assert r.status_code == 200
    asset = r.json()
    assert asset["format"] == "audio"
    assert asset["access_required"] is True
    assert asset["has_access"] is False


@pytest.mark.asyncio
async def test_asset_not_found(client):
    r = await client.get("/api/v1/assets/asset-404")
    assert r.status_code == 404
