"""FastAPI application factory with lifespan management."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from itqan import __version__
from itqan.api.dependencies import get_backend_client, get_identity_bridge
from itqan.api.routers import assets, dashboard, session
from itqan.api.routers import auth as auth_router
from itqan.core.auth import create_session_token, decode_session_token, new_session_id
from itqan.core.config import get_settings
from itqan.core.database import close_engine, init_models
from itqan.core.logging import bind_request_context, configure_logging, get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    configure_logging()
    settings = get_settings()
    logger.info(
        "Starting Itqan web",
        debug=settings.app_debug,
        auth0_domain=settings.auth0_domain,
        default_locale=settings.default_locale,
    )

    # Session storage tables
    await init_models()

    yield

    # Cleanup
    await get_identity_bridge().aclose()
    await get_backend_client().aclose()
    await close_engine()
    logger.info("Itqan web stopped")


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="Itqan",
        description="Localized web front-end for the Itqan content marketplace",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def session_cookie(request: Request, call_next):
        """Attach a session id to every request, minting a signed cookie when absent."""
        cookie_name = settings.session_cookie_name
        session_id = decode_session_token(request.cookies.get(cookie_name))
        is_new = session_id is None
        if is_new:
            session_id = new_session_id()
        request.state.session_id = session_id
        bind_request_context(session_id, request.method, request.url.path)

        response = await call_next(request)
        if is_new:
            response.set_cookie(
                cookie_name,
                create_session_token(session_id),
                max_age=settings.session_lifetime_days * 86400,
                httponly=True,
                samesite="lax",
                secure=settings.session_cookie_secure,
            )
        return response

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    # JSON API
    api_prefix = "/api/v1"
    app.include_router(session.router, prefix=api_prefix)
    app.include_router(assets.router, prefix=api_prefix)

    @app.get("/", include_in_schema=False)
    async def root() -> RedirectResponse:
        return RedirectResponse(f"/{settings.default_locale}")

    # Locale-prefixed pages last: "/{locale}" would otherwise shadow the routes above
    app.include_router(auth_router.router)
    app.include_router(dashboard.router)

    return app


app = create_app()
