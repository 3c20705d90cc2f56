"""Dashboard view state: search text, selected facets and current page.

State objects are immutable; every transition returns a new state. Any
change to the search text or to the facet selection starts again from page 1.
"""

from __future__ import annotations

from collections.abc import Iterable
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field

from itqan.schemas.asset import FACETS, FiltersState


class DashboardState(BaseModel):
    model_config = ConfigDict(frozen=True)

    search: str = ""
    filters: FiltersState = FiltersState()
    page: int = Field(default=1, ge=1)

    @classmethod
    def from_query(
        cls,
        *,
        q: str | None = None,
        categories: Iterable[str] = (),
        formats: Iterable[str] = (),
        languages: Iterable[str] = (),
        licenses: Iterable[str] = (),
        page: int = 1,
    ) -> "DashboardState":
        return cls(
            search=(q or "").strip(),
            filters=FiltersState(
                categories=_unique(categories),
                formats=_unique(formats),
                languages=_unique(languages),
                licenses=_unique(licenses),
            ),
            page=max(page, 1),
        )

    # ── transitions ───────────────────────────────────────────────────────────

    def with_search(self, text: str) -> "DashboardState":
        return self.model_copy(update={"search": text.strip(), "page": 1})

    def with_filters(self, filters: FiltersState) -> "DashboardState":
        return self.model_copy(update={"filters": filters, "page": 1})

    def toggle_facet(self, facet: str, value: str, checked: bool | None = None) -> "DashboardState":
        """Select/deselect *value* in *facet*; ``checked=None`` flips the current selection."""
        current = self.filters.values(facet)
        if checked is None:
            checked = value not in current
        if checked:
            values = current if value in current else current + (value,)
        else:
            values = tuple(v for v in current if v != value)
        return self.with_filters(self.filters.model_copy(update={facet: values}))

    def clear_filters(self) -> "DashboardState":
        return self.with_filters(FiltersState())

    def with_page(self, page: int) -> "DashboardState":
        return self.model_copy(update={"page": max(page, 1)})

    # ── serialisation ─────────────────────────────────────────────────────────

    def query_params(self) -> list[tuple[str, str]]:
        params: list[tuple[str, str]] = []
        if self.search:
            params.append(("q", self.search))
        for facet in FACETS:
            params.extend((facet, v) for v in self.filters.values(facet))
        if self.page > 1:
            params.append(("page", str(self.page)))
        return params

    def to_url(self, path: str) -> str:
        query = urlencode(self.query_params())
        return f"{path}?{query}" if query else path


def _unique(values: Iterable[str]) -> tuple[str, ...]:
    seen: list[str] = []
    for v in values:
        if v and v not in seen:
            seen.append(v)
    return tuple(seen)
