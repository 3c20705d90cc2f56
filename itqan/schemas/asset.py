"""Schemas for catalog assets, facet options and the pagination envelope."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

FacetName = Literal["categories", "formats", "languages", "licenses"]

FACETS: tuple[str, ...] = ("categories", "formats", "languages", "licenses")


class PublisherOut(BaseModel):
    id: str
    name: str
    avatar_url: str | None = None
    verified: bool = False


class LicenseOut(BaseModel):
    type: str
    name: str
    url: str


class AssetStats(BaseModel):
    downloads: int = Field(default=0, ge=0)
    size_mb: float = Field(default=0.0, ge=0)
    version: str = "1.0.0"


class AssetOut(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    thumbnail_url: str | None = None
    publisher: PublisherOut
    category: str
    tags: list[str] = []
    format: str
    language: str
    license: LicenseOut
    stats: AssetStats
    created_at: datetime
    updated_at: datetime
    access_required: bool = False
    has_access: bool = True


class FilterOption(BaseModel):
    value: str
    label: str
    count: int = 0


class AvailableFilters(BaseModel):
    categories: list[FilterOption] = []
    formats: list[FilterOption] = []
    languages: list[FilterOption] = []
    licenses: list[FilterOption] = []


class FiltersState(BaseModel):
    """Selected facet values; empty lists mean "no restriction"."""

    model_config = ConfigDict(frozen=True)

    categories: tuple[str, ...] = ()
    formats: tuple[str, ...] = ()
    languages: tuple[str, ...] = ()
    licenses: tuple[str, ...] = ()

    def values(self, facet: str) -> tuple[str, ...]:
        if facet not in FACETS:
            raise KeyError(facet)
        return getattr(self, facet)

    @property
    def is_active(self) -> bool:
        return any(getattr(self, f) for f in FACETS)


class PaginationInfo(BaseModel):
    page: int = Field(..., ge=1)
    per_page: int = Field(..., ge=1)
    total: int = Field(..., ge=0)
    pages: int = Field(..., ge=0)
    has_next: bool
    has_prev: bool


class AssetList(BaseModel):
    items: list[AssetOut]
    filters: AvailableFilters
    pagination: PaginationInfo
