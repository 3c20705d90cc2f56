"""Session API router — the reconciled session state as JSON."""

from __future__ import annotations

from fastapi import APIRouter

from itqan.api.dependencies import ApiSessionDep
from itqan.schemas.user import SessionOut

router = APIRouter(prefix="/session", tags=["session"])


@router.get("", response_model=SessionOut)
async def read_session(session: ApiSessionDep) -> SessionOut:
    """Return state, authentication flags and the current user (if any)."""
    return session.snapshot()
