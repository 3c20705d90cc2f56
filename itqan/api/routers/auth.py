"""Auth pages — login, signup, social redirect, callback, profile completion, logout.

GET routes return the page view model; POST routes run the form and either
redirect (303) on success or return the form view with its errors.
"""

from __future__ import annotations

from typing import Any, Literal

import httpx
from fastapi import APIRouter, Query, Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from itqan.api.dependencies import LocaleDep, PageSessionDep, guard, redirect
from itqan.core.errors import AuthStateError, IdentityProviderError
from itqan.core.forms import Form, LoginForm, ProfileForm, SignupForm
from itqan.core.i18n import get_dictionary, t
from itqan.core.logging import get_logger
from itqan.core.session import SessionReconciler
from itqan.schemas.user import LoginIn, ProfileIn, SignupIn

router = APIRouter(prefix="/{locale}/auth", tags=["auth"])
logger = get_logger(__name__)

SOCIAL_CONNECTIONS = ("google-oauth2", "github")

# page name → dictionary section
_DICT_KEYS = {"login": "login", "signup": "signup", "complete_profile": "completeProfile"}


def _page(locale: str, name: str, title_key: str, **extra: Any) -> dict[str, Any]:
    return {
        "page": name,
        "locale": locale,
        "direction": get_dictionary(locale)["direction"],
        "title": t(locale, title_key),
        "back_to_site": {"label": t(locale, "auth.backToSite"), "href": f"/{locale}"},
        **extra,
    }


def _form_page(locale: str, name: str, form: Form, **extra: Any) -> dict[str, Any]:
    return _page(
        locale,
        name,
        f"auth.{_DICT_KEYS[name]}.title",
        form=form.view(),
        submit_label=t(locale, f"auth.{_DICT_KEYS[name]}.submit"),
        **extra,
    )


def _social_links(locale: str, screen_hint: str) -> list[dict[str, str]]:
    return [
        {
            "connection": c,
            "href": f"/{locale}/auth/authorize?connection={c}&screen_hint={screen_hint}",
        }
        for c in SOCIAL_CONNECTIONS
    ]


def _failed(locale: str, name: str, form: Form, **extra: Any) -> JSONResponse:
    code = (
        status.HTTP_422_UNPROCESSABLE_ENTITY if form.errors else status.HTTP_400_BAD_REQUEST
    )
    return JSONResponse(status_code=code, content=_form_page(locale, name, form, **extra))


# ── Login ─────────────────────────────────────────────────────────────────────

@router.get("/login", response_model=None)
async def login_page(
    request: Request, locale: LocaleDep, session: PageSessionDep
) -> dict[str, Any] | RedirectResponse:
    if response := guard(session, request):
        return response
    return _form_page(
        locale,
        "login",
        LoginForm(locale),
        social=_social_links(locale, "login"),
        signup_href=f"/{locale}/auth/signup",
    )


@router.post("/login", response_model=None)
async def login_submit(
    payload: LoginIn, request: Request, locale: LocaleDep, session: PageSessionDep
) -> JSONResponse | RedirectResponse:
    """Email/password login against the provider's database connection."""
    if response := guard(session, request):
        return response
    form = LoginForm(locale, payload.model_dump())
    destination = await form.submit(
        lambda p: session.login_with_password(p.email, p.password)
    )
    if destination:
        return redirect(destination)
    return _failed(locale, "login", form)


# ── Signup ────────────────────────────────────────────────────────────────────

@router.get("/signup", response_model=None)
async def signup_page(
    request: Request, locale: LocaleDep, session: PageSessionDep
) -> dict[str, Any] | RedirectResponse:
    if response := guard(session, request):
        return response
    return _form_page(
        locale,
        "signup",
        SignupForm(locale),
        social=_social_links(locale, "signup"),
        login_href=f"/{locale}/auth/login",
    )


@router.post("/signup", response_model=None)
async def signup_submit(
    payload: SignupIn, request: Request, locale: LocaleDep, session: PageSessionDep
) -> JSONResponse | RedirectResponse:
    if response := guard(session, request):
        return response
    form = SignupForm(locale, payload.model_dump())
    destination = await form.submit(session.signup)
    if destination:
        return redirect(destination)
    return _failed(locale, "signup", form)


# ── Hosted / social login ─────────────────────────────────────────────────────

@router.get("/authorize", response_model=None)
async def authorize(
    request: Request,
    session: PageSessionDep,
    connection: str | None = Query(None, max_length=100),
    screen_hint: Literal["login", "signup"] | None = Query(None),
) -> RedirectResponse:
    """Redirect to the provider's hosted login, optionally pinned to a connection."""
    if response := guard(session, request):
        return response
    url = await session.login_url(connection=connection, screen_hint=screen_hint)
    return redirect(url)


@router.get("/callback", response_model=None)
async def callback(
    locale: LocaleDep,
    session: PageSessionDep,
    code: str | None = Query(None),
    state: str | None = Query(None),
    error: str | None = Query(None),
    error_description: str | None = Query(None),
) -> dict[str, Any] | RedirectResponse:
    if error:
        logger.warning("Provider returned an error", error=error, description=error_description)
        return redirect(session.login_path)
    if not code:
        # Nothing to exchange: show the interstitial while the browser settles
        return _page(locale, "callback", "auth.signingIn", session=session.snapshot().model_dump())
    try:
        destination = await session.handle_callback(code, state)
    except (AuthStateError, IdentityProviderError, httpx.HTTPError, ValueError) as exc:
        logger.warning("Login callback failed", error=str(exc))
        return redirect(session.login_path)
    return redirect(destination)


# ── Profile completion ────────────────────────────────────────────────────────

def _prefilled_profile_form(locale: str, session: SessionReconciler) -> ProfileForm:
    user = session.user
    return ProfileForm(locale, {
        "first_name": user.first_name if user else "",
        "last_name": user.last_name if user else "",
    })


@router.get("/complete-profile", response_model=None)
async def complete_profile_page(
    request: Request, locale: LocaleDep, session: PageSessionDep
) -> dict[str, Any] | RedirectResponse:
    if response := guard(session, request):
        return response
    if session.user is None:
        return redirect(session.login_path)
    return _form_page(
        locale,
        "complete_profile",
        _prefilled_profile_form(locale, session),
        email=session.user.email,
    )


@router.post("/complete-profile", response_model=None)
async def complete_profile_submit(
    payload: ProfileIn, request: Request, locale: LocaleDep, session: PageSessionDep
) -> JSONResponse | RedirectResponse:
    if response := guard(session, request):
        return response
    if session.user is None:
        return redirect(session.login_path)
    form = ProfileForm(locale, payload.model_dump())
    destination = await form.submit(session.complete_profile)
    if destination:
        return redirect(destination)
    return _failed(locale, "complete_profile", form, email=session.user.email)


# ── Logout ────────────────────────────────────────────────────────────────────

@router.api_route("/logout", methods=["GET", "POST"], response_model=None)
async def logout(session: PageSessionDep) -> RedirectResponse:
    """Clear the local session, then end the provider session."""
    return redirect(await session.logout())
