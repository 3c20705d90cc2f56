"""Home and dashboard pages."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query, Request
from fastapi.responses import RedirectResponse

from itqan.api.dependencies import LocaleDep, PageSessionDep, guard, redirect
from itqan.catalog.cards import asset_card
from itqan.catalog.dashboard import DashboardState
from itqan.catalog.pagination import pagination_view
from itqan.catalog.service import search_assets
from itqan.core.config import get_settings
from itqan.core.i18n import format_number, get_dictionary, t
from itqan.schemas.asset import FACETS

router = APIRouter(prefix="/{locale}", tags=["pages"])


@router.get("", response_model=None)
async def home(
    request: Request, locale: LocaleDep, session: PageSessionDep
) -> dict[str, Any] | RedirectResponse:
    """Public landing page; signed-in users with a pending profile are sent to finish it."""
    if response := guard(session, request):
        return response
    return {
        "page": "home",
        "locale": locale,
        "direction": get_dictionary(locale)["direction"],
        "session": session.snapshot().model_dump(),
        "links": {
            "login": f"/{locale}/auth/login",
            "signup": f"/{locale}/auth/signup",
            "dashboard": f"/{locale}/dashboard",
            "logout": f"/{locale}/auth/logout",
        },
    }


@router.get("/dashboard", response_model=None)
async def dashboard(
    request: Request,
    locale: LocaleDep,
    session: PageSessionDep,
    q: str | None = Query(None, max_length=200),
    categories: list[str] = Query([]),
    formats: list[str] = Query([]),
    languages: list[str] = Query([]),
    licenses: list[str] = Query([]),
    page: int = Query(1, ge=1),
) -> dict[str, Any] | RedirectResponse:
    if response := guard(session, request):
        return response
    user = session.user
    if user is None:
        return redirect(session.login_path)

    path = request.url.path
    state = DashboardState.from_query(
        q=q,
        categories=categories,
        formats=formats,
        languages=languages,
        licenses=licenses,
        page=page,
    )
    result = search_assets(state, per_page=get_settings().catalog_per_page, locale=locale)

    sections = []
    for facet in FACETS:
        selected = state.filters.values(facet)
        sections.append({
            "key": facet,
            "title": t(locale, f"dashboard.{facet}"),
            "options": [
                {
                    **option.model_dump(),
                    "selected": option.value in selected,
                    "toggle_url": state.toggle_facet(facet, option.value).to_url(path),
                }
                for option in getattr(result.filters, facet)
            ],
        })

    p = result.pagination
    return {
        "page": "dashboard",
        "locale": locale,
        "direction": get_dictionary(locale)["direction"],
        "title": t(locale, "dashboard.title"),
        "welcome": t(locale, "dashboard.welcome", name=user.full_name),
        "user": user.model_dump(),
        "search": {
            "value": state.search,
            "placeholder": t(locale, "dashboard.search"),
            "clear_url": state.with_search("").to_url(path) if state.search else None,
        },
        "filters": {
            "title": t(locale, "dashboard.filters"),
            "sections": sections,
            "has_active": state.filters.is_active,
            "clear_url": state.clear_filters().to_url(path) if state.filters.is_active else None,
            "clear_label": t(locale, "dashboard.clearAll"),
        },
        "results": {
            "title": t(locale, "dashboard.assets.title"),
            "count": f"{format_number(p.total, locale)} {t(locale, 'dashboard.results')}",
            "items": [asset_card(a, locale).model_dump() for a in result.items],
            "empty": None if result.items else {
                "message": t(locale, "dashboard.noResults"),
                "hint": t(locale, "dashboard.noResultsHint"),
            },
        },
        "state": {
            "search": state.search,
            "filters": state.filters.model_dump(),
            "page": state.page,
        },
        "pagination": pagination_view(
            p,
            locale,
            previous_url=state.with_page(p.page - 1).to_url(path),
            next_url=state.with_page(p.page + 1).to_url(path),
        ).model_dump() if p.pages > 1 else None,
    }
