"""Catalog API router (read-only, backed by the static mock catalog)."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from itqan.catalog.dashboard import DashboardState
from itqan.catalog.service import available_filters, get_asset, search_assets
from itqan.core.config import get_settings
from itqan.core.i18n import LOCALES
from itqan.schemas.asset import AssetList, AssetOut, AvailableFilters

router = APIRouter(prefix="/assets", tags=["assets"])

_LOCALE_PATTERN = "^(" + "|".join(LOCALES) + ")$"


@router.get("", response_model=AssetList)
async def list_assets(
    q: str | None = Query(None, max_length=200),
    categories: list[str] = Query([]),
    formats: list[str] = Query([]),
    languages: list[str] = Query([]),
    licenses: list[str] = Query([]),
    page: int = Query(1, ge=1),
    per_page: int | None = Query(None, ge=1, le=100),
    locale: str = Query("en", pattern=_LOCALE_PATTERN),
) -> AssetList:
    state = DashboardState.from_query(
        q=q,
        categories=categories,
        formats=formats,
        languages=languages,
        licenses=licenses,
        page=page,
    )
    return search_assets(
        state,
        per_page=per_page or get_settings().catalog_per_page,
        locale=locale,
    )


# NOTE: /filters must be defined before /{asset_id}
@router.get("/filters", response_model=AvailableFilters)
async def list_filters(
    locale: str = Query("en", pattern=_LOCALE_PATTERN),
) -> AvailableFilters:
    return available_filters(locale)


@router.get("/{asset_id}", response_model=AssetOut)
async def read_asset(asset_id: str) -> AssetOut:
    asset = get_asset(asset_id)
    if not asset:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Asset not found")
    return asset
