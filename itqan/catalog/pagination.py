"""Pagination view helpers: item range, visible page numbers, prev/next state."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from itqan.core.i18n import format_number, t
from itqan.schemas.asset import PaginationInfo

MAX_VISIBLE_PAGES = 7

PageEntry = int | Literal["ellipsis"]


def start_item(p: PaginationInfo) -> int:
    return (p.page - 1) * p.per_page + 1


def end_item(p: PaginationInfo) -> int:
    return min(p.page * p.per_page, p.total)


def visible_pages(page: int, pages: int) -> list[PageEntry]:
    """Page numbers to render, at most seven entries, first and last always present."""
    if pages <= MAX_VISIBLE_PAGES:
        return list(range(1, pages + 1))

    if page <= 4:
        return [1, 2, 3, 4, 5, "ellipsis", pages]
    if page >= pages - 3:
        return [1, "ellipsis", *range(pages - 4, pages + 1)]
    return [1, "ellipsis", page - 1, page, page + 1, "ellipsis", pages]


class PaginationView(BaseModel):
    page: int
    pages: int
    start_item: int
    end_item: int
    total: int
    summary: str
    visible_pages: list[PageEntry]
    previous_disabled: bool
    next_disabled: bool
    previous_url: str | None = None
    next_url: str | None = None


def pagination_view(
    p: PaginationInfo,
    locale: str,
    previous_url: str | None = None,
    next_url: str | None = None,
) -> PaginationView:
    start, end = start_item(p), end_item(p)
    return PaginationView(
        page=p.page,
        pages=p.pages,
        start_item=start,
        end_item=end,
        total=p.total,
        summary=t(
            locale,
            "dashboard.showing",
            start=format_number(start, locale),
            end=format_number(end, locale),
            total=format_number(p.total, locale),
        ),
        visible_pages=visible_pages(p.page, p.pages),
        previous_disabled=not p.has_prev,
        next_disabled=not p.has_next,
        previous_url=previous_url if p.has_prev else None,
        next_url=next_url if p.has_next else None,
    )
