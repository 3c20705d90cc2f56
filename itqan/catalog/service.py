"""Catalog queries over the mock asset set: search, facet filtering, paging."""

from __future__ import annotations

import math
from collections.abc import Sequence

from itqan.catalog.dashboard import DashboardState
from itqan.catalog.mock_data import FACET_VALUES, MOCK_ASSETS
from itqan.core.i18n import t
from itqan.schemas.asset import (
    FACETS,
    AssetList,
    AssetOut,
    AvailableFilters,
    FilterOption,
    FiltersState,
    PaginationInfo,
)


def facet_value(asset: AssetOut, facet: str) -> str:
    """The single value *asset* carries for *facet*."""
    if facet == "categories":
        return asset.category
    if facet == "formats":
        return asset.format
    if facet == "languages":
        return asset.language
    if facet == "licenses":
        return asset.license.type
    raise KeyError(facet)


def matches_search(asset: AssetOut, text: str) -> bool:
    needle = text.strip().casefold()
    if not needle:
        return True
    haystack = [asset.title, asset.description, asset.publisher.name, *asset.tags]
    return any(needle in part.casefold() for part in haystack)


def matches_filters(asset: AssetOut, filters: FiltersState) -> bool:
    """Values are OR-ed inside a facet, facets are AND-ed together."""
    for facet in FACETS:
        selected = filters.values(facet)
        if selected and facet_value(asset, facet) not in selected:
            return False
    return True


def paginate(total: int, page: int, per_page: int) -> PaginationInfo:
    pages = math.ceil(total / per_page) if total else 0
    return PaginationInfo(
        page=page,
        per_page=per_page,
        total=total,
        pages=pages,
        has_next=page < pages,
        has_prev=page > 1,
    )


def available_filters(
    locale: str, assets: Sequence[AssetOut] = MOCK_ASSETS
) -> AvailableFilters:
    """Facet options with localized labels and per-value asset counts."""
    options: dict[str, list[FilterOption]] = {}
    for facet, values in FACET_VALUES.items():
        options[facet] = [
            FilterOption(
                value=value,
                label=_label(locale, facet, value),
                count=sum(1 for a in assets if facet_value(a, facet) == value),
            )
            for value in values
        ]
    return AvailableFilters(**options)


def _label(locale: str, facet: str, value: str) -> str:
    label = t(locale, f"{facet}.{value}")
    if label == f"{facet}.{value}":
        return value.upper() if facet == "formats" else value
    return label


def search_assets(
    state: DashboardState,
    *,
    per_page: int,
    locale: str = "en",
    assets: Sequence[AssetOut] = MOCK_ASSETS,
) -> AssetList:
    matched = [
        a for a in assets
        if matches_filters(a, state.filters) and matches_search(a, state.search)
    ]
    pagination = paginate(len(matched), state.page, per_page)
    start = (state.page - 1) * per_page
    return AssetList(
        items=matched[start:start + per_page],
        filters=available_filters(locale, assets),
        pagination=pagination,
    )


def get_asset(asset_id: str, assets: Sequence[AssetOut] = MOCK_ASSETS) -> AssetOut | None:
    return next((a for a in assets if a.id == asset_id), None)
