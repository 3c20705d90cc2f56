"""FastAPI dependency providers."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from itqan.core.backend import BackendClient
from itqan.core.config import get_settings
from itqan.core.database import get_session_factory
from itqan.core.i18n import is_supported
from itqan.core.identity import IdentityBridge
from itqan.core.session import SessionReconciler
from itqan.core.storage import SessionStorage, SqlSessionStorage


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session for the duration of a request."""
    factory = get_session_factory()
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@lru_cache
def get_identity_bridge() -> IdentityBridge:
    """Process-wide identity bridge (shares one HTTP connection pool)."""
    return IdentityBridge(get_settings())


@lru_cache
def get_backend_client() -> BackendClient:
    return BackendClient(get_settings())


def get_session_id(request: Request) -> str:
    """Session id placed on request.state by the session cookie middleware."""
    sid = getattr(request.state, "session_id", None)
    if not sid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No session")
    return sid


async def get_storage(
    session_id: Annotated[str, Depends(get_session_id)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SessionStorage:
    return SqlSessionStorage(db, session_id)


def get_locale(locale: str) -> str:
    """Validate the ``{locale}`` path segment."""
    if not is_supported(locale):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown locale")
    return locale


async def _load_reconciler(
    locale: str,
    storage: SessionStorage,
    identity: IdentityBridge,
    backend: BackendClient,
) -> SessionReconciler:
    reconciler = SessionReconciler(
        storage,
        identity,
        backend,
        locale=locale,
        app_url=get_settings().app_url,
    )
    return await reconciler.load()


async def get_page_session(
    locale: Annotated[str, Depends(get_locale)],
    storage: Annotated[SessionStorage, Depends(get_storage)],
    identity: Annotated[IdentityBridge, Depends(get_identity_bridge)],
    backend: Annotated[BackendClient, Depends(get_backend_client)],
) -> SessionReconciler:
    """Reconciled session for a ``/{locale}/...`` page."""
    return await _load_reconciler(locale, storage, identity, backend)


async def get_api_session(
    storage: Annotated[SessionStorage, Depends(get_storage)],
    identity: Annotated[IdentityBridge, Depends(get_identity_bridge)],
    backend: Annotated[BackendClient, Depends(get_backend_client)],
) -> SessionReconciler:
    """Reconciled session for JSON API routes (no locale in the path)."""
    return await _load_reconciler(get_settings().default_locale, storage, identity, backend)


def redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


def guard(reconciler: SessionReconciler, request: Request) -> RedirectResponse | None:
    """Apply the reconciler's route guard to the current request path."""
    target = reconciler.guard(request.url.path)
    return redirect(target) if target else None


PageSessionDep = Annotated[SessionReconciler, Depends(get_page_session)]
ApiSessionDep = Annotated[SessionReconciler, Depends(get_api_session)]
LocaleDep = Annotated[str, Depends(get_locale)]
