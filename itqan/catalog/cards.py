"""Asset card view model: the localized strings an asset tile displays."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from itqan.core.i18n import format_date, format_number, t
from itqan.schemas.asset import AssetOut


def format_file_size(size_mb: float) -> str:
    if size_mb < 1:
        return f"{round(size_mb * 1024)} KB"
    return f"{size_mb:.1f} MB"


def format_download_count(count: int) -> str:
    if count >= 1000:
        return f"{count / 1000:.1f}K"
    return str(count)


def primary_action(asset: AssetOut) -> Literal["download", "request_access"]:
    if asset.access_required and not asset.has_access:
        return "request_access"
    return "download"


class AssetCard(BaseModel):
    id: str
    title: str
    description: str
    thumbnail_url: str | None
    publisher: str
    publisher_verified: bool
    category: str
    format: str
    language: str
    license: str
    license_url: str
    tags: list[str]
    downloads: str
    size: str
    version: str
    updated: str
    action: Literal["download", "request_access"]
    action_label: str


def asset_card(asset: AssetOut, locale: str) -> AssetCard:
    action = primary_action(asset)
    downloads = format_download_count(asset.stats.downloads)
    if locale == "ar" and asset.stats.downloads < 1000:
        downloads = format_number(asset.stats.downloads, locale)
    return AssetCard(
        id=asset.id,
        title=asset.title,
        description=asset.description,
        thumbnail_url=asset.thumbnail_url,
        publisher=asset.publisher.name,
        publisher_verified=asset.publisher.verified,
        category=t(locale, f"categories.{asset.category}"),
        format=asset.format.upper(),
        language=t(locale, f"languages.{asset.language}"),
        license=asset.license.name,
        license_url=asset.license.url,
        tags=list(asset.tags),
        downloads=downloads,
        size=format_file_size(asset.stats.size_mb),
        version=asset.stats.version,
        updated=format_date(asset.updated_at, locale),
        action=action,
        action_label=t(locale, "dashboard.download" if action == "download" else "dashboard.requestAccess"),
    )
