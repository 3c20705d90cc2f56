"""Schemas for the session user, provider tokens and auth form payloads."""

from __future__ import annotations

import time
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """The locally persisted user record (stored as JSON under ``itqan_user``)."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    provider: str = "auth0"
    profile_completed: bool = False
    # Subject claim of the provider's ID token
    auth0_id: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class TokenSet(BaseModel):
    """Tokens returned by the provider's /oauth/token endpoint, plus verified ID claims."""

    access_token: str
    token_type: str = "Bearer"
    expires_at: int = Field(..., description="Unix timestamp after which access_token is stale")
    refresh_token: str | None = None
    id_token: str | None = None
    scope: str | None = None
    claims: dict[str, Any] = Field(default_factory=dict)

    def is_expired(self, leeway: int = 30) -> bool:
        return time.time() >= self.expires_at - leeway

    @property
    def subject(self) -> str | None:
        sub = self.claims.get("sub")
        return sub if isinstance(sub, str) and sub else None


class ProviderSession(BaseModel):
    """Snapshot of the identity provider's view of the browser session."""

    model_config = ConfigDict(frozen=True)

    is_loading: bool = False
    is_authenticated: bool = False
    claims: dict[str, Any] = Field(default_factory=dict)
    access_token: str | None = None


# ── Form payloads ─────────────────────────────────────────────────────────────
# Every field defaults to "" so that missing input reaches form validation
# (localized field errors) instead of being rejected by request parsing.

class LoginIn(BaseModel):
    email: str = ""
    password: str = ""


class SignupIn(BaseModel):
    first_name: str = ""
    last_name: str = ""
    job_title: str = ""
    phone_number: str = ""
    email: str = ""
    password: str = ""


class ProfileIn(BaseModel):
    first_name: str = ""
    last_name: str = ""
    job_title: str = ""
    phone_number: str = ""
    business_model: str = ""
    team_size: str = ""
    about_yourself: str = ""


class CompleteProfileRequest(BaseModel):
    """JSON body sent to the backend's complete-profile endpoint."""

    auth0_id: str | None
    email: str | None
    first_name: str
    last_name: str
    job_title: str
    phone_number: str
    business_model: str
    team_size: str
    about_yourself: str


class BackendUser(BaseModel):
    """User record returned by the backend on successful profile completion."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""


SessionStateName = Literal[
    "loading", "anonymous", "authenticated_incomplete", "authenticated_complete"
]


class SessionOut(BaseModel):
    state: SessionStateName
    is_authenticated: bool
    requires_profile_completion: bool
    user: User | None
