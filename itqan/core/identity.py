"""Identity bridge: the thin layer over the Auth0 HTTP API.

Everything the session reconciler needs from the identity provider goes
through ``IdentityBridge``:

    authorize_url()     → URL of the hosted login page (optionally pinned to a
                          social connection and a login/signup screen hint)
    logout_url()        → URL that ends the provider session then returns here
    exchange_code()     → authorization_code grant after the callback
    password_login()    → password-realm grant against the database connection
    signup()            → /dbconnections/signup
    get_access_token()  → silent token retrieval (refresh_token grant when stale)
    fetch_userinfo()    → /userinfo, used when the ID token carries no email
    restore()           → ProviderSession for a stored token set

ID tokens are verified before their claims are trusted: RS256 against the
tenant JWKS, HS256 with the client secret.
"""

from __future__ import annotations

import time
from typing import Any
from urllib.parse import urlencode

import httpx
import jwt

from itqan.core.config import Settings, get_settings
from itqan.core.errors import IdentityProviderError
from itqan.core.logging import get_logger
from itqan.schemas.user import ProviderSession, TokenSet

logger = get_logger(__name__)

PASSWORD_REALM_GRANT = "http://auth0.com/oauth/grant-type/password-realm"

# Used when the token endpoint omits expires_in
_DEFAULT_EXPIRES_IN = 86400


class IdentityBridge:
    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._client = client
        self._jwks: jwt.PyJWKSet | None = None

    # ── plumbing ──────────────────────────────────────────────────────────────

    @property
    def base_url(self) -> str:
        return self.settings.auth0_base_url

    @property
    def issuer(self) -> str:
        return f"{self.base_url}/"

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.settings.http_timeout)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # ── redirect URLs ─────────────────────────────────────────────────────────

    def authorize_url(
        self,
        *,
        redirect_uri: str,
        state: str,
        connection: str | None = None,
        screen_hint: str | None = None,
    ) -> str:
        params: dict[str, str] = {
            "response_type": "code",
            "client_id": self.settings.auth0_client_id,
            "redirect_uri": redirect_uri,
            "scope": self.settings.auth0_scope,
            "state": state,
        }
        if self.settings.auth0_audience:
            params["audience"] = self.settings.auth0_audience
        if connection:
            params["connection"] = connection
        if screen_hint:
            params["screen_hint"] = screen_hint
        return f"{self.base_url}/authorize?{urlencode(params)}"

    def logout_url(self, return_to: str) -> str:
        params = {"client_id": self.settings.auth0_client_id, "returnTo": return_to}
        return f"{self.base_url}/v2/logout?{urlencode(params)}"

    # ── token endpoint ────────────────────────────────────────────────────────

    async def _token_request(self, payload: dict[str, Any]) -> dict[str, Any]:
        body = {
            "client_id": self.settings.auth0_client_id,
            "client_secret": self.settings.auth0_client_secret,
            **payload,
        }
        resp = await self.client.post(f"{self.base_url}/oauth/token", json=body)
        if resp.is_error:
            raise _provider_error(resp, default="Token request failed")
        try:
            data = resp.json()
        except ValueError as exc:
            raise IdentityProviderError("Invalid token response", error="invalid_response") from exc
        if not isinstance(data, dict) or not data.get("access_token"):
            raise IdentityProviderError("Invalid token response", error="invalid_response")
        return data

    async def _token_set(
        self, data: dict[str, Any], previous: TokenSet | None = None
    ) -> TokenSet:
        id_token = data.get("id_token")
        if id_token:
            claims = await self.verify_id_token(id_token)
        else:
            claims = previous.claims if previous else {}
        expires_in = int(data.get("expires_in") or _DEFAULT_EXPIRES_IN)
        return TokenSet(
            access_token=data["access_token"],
            token_type=data.get("token_type", "Bearer"),
            expires_at=int(time.time()) + expires_in,
            # Without rotation Auth0 does not send a new refresh token
            refresh_token=data.get("refresh_token") or (previous.refresh_token if previous else None),
            id_token=id_token or (previous.id_token if previous else None),
            scope=data.get("scope"),
            claims=claims,
        )

    async def exchange_code(self, code: str, redirect_uri: str) -> TokenSet:
        data = await self._token_request({
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": redirect_uri,
        })
        tokens = await self._token_set(data)
        logger.info("Authorization code exchanged", sub=tokens.subject)
        return tokens

    async def password_login(self, email: str, password: str) -> TokenSet:
        payload: dict[str, Any] = {
            "grant_type": PASSWORD_REALM_GRANT,
            "username": email,
            "password": password,
            "realm": self.settings.auth0_db_connection,
            "scope": self.settings.auth0_scope,
        }
        if self.settings.auth0_audience:
            payload["audience"] = self.settings.auth0_audience
        data = await self._token_request(payload)
        tokens = await self._token_set(data)
        logger.info("Password login succeeded", sub=tokens.subject)
        return tokens

    async def refresh(self, tokens: TokenSet) -> TokenSet:
        if not tokens.refresh_token:
            raise IdentityProviderError("Session expired", error="login_required")
        data = await self._token_request({
            "grant_type": "refresh_token",
            "refresh_token": tokens.refresh_token,
        })
        return await self._token_set(data, previous=tokens)

    async def get_access_token(self, tokens: TokenSet) -> TokenSet:
        """Return *tokens* unchanged while fresh, otherwise a silently refreshed set."""
        if not tokens.is_expired():
            return tokens
        logger.debug("Access token expired, refreshing", sub=tokens.subject)
        return await self.refresh(tokens)

    # ── other endpoints ───────────────────────────────────────────────────────

    async def signup(
        self,
        *,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        user_metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        body: dict[str, Any] = {
            "client_id": self.settings.auth0_client_id,
            "connection": self.settings.auth0_db_connection,
            "email": email,
            "password": password,
            "given_name": first_name,
            "family_name": last_name,
        }
        if user_metadata:
            body["user_metadata"] = user_metadata
        resp = await self.client.post(f"{self.base_url}/dbconnections/signup", json=body)
        if resp.is_error:
            raise _provider_error(resp, default="Signup failed")
        logger.info("Database signup created", email=email)
        return resp.json()

    async def fetch_userinfo(self, access_token: str) -> dict[str, Any]:
        resp = await self.client.get(
            f"{self.base_url}/userinfo",
            headers={"Authorization": f"Bearer {access_token}"},
        )
        resp.raise_for_status()
        return resp.json()

    # ── ID token verification ────────────────────────────────────────────────

    async def _signing_key(self, kid: str | None, refresh: bool = False) -> jwt.PyJWK:
        if self._jwks is None or refresh:
            resp = await self.client.get(f"{self.base_url}/.well-known/jwks.json")
            resp.raise_for_status()
            self._jwks = jwt.PyJWKSet.from_dict(resp.json())
        if kid is None:
            return self._jwks.keys[0]
        try:
            return self._jwks[kid]
        except KeyError:
            if refresh:
                raise
            # Key rotation: fetch the set again once
            return await self._signing_key(kid, refresh=True)

    async def verify_id_token(self, id_token: str) -> dict[str, Any]:
        algorithm = self.settings.auth0_id_token_algorithm
        try:
            if algorithm == "HS256":
                key: Any = self.settings.auth0_client_secret
            else:
                header = jwt.get_unverified_header(id_token)
                key = (await self._signing_key(header.get("kid"))).key
            return jwt.decode(
                id_token,
                key,
                algorithms=[algorithm],
                audience=self.settings.auth0_client_id,
                issuer=self.issuer,
                options={"require": ["sub", "exp", "iss", "aud"]},
            )
        except (jwt.InvalidTokenError, KeyError) as exc:
            logger.warning("ID token rejected", error=str(exc))
            raise IdentityProviderError("Invalid ID token", error="invalid_token") from exc

    # ── session restore ──────────────────────────────────────────────────────

    async def restore(
        self, tokens: TokenSet | None
    ) -> tuple[ProviderSession, TokenSet | None]:
        """Build the provider view of a stored token set.

        Returns the session and the token set to keep (refreshed, unchanged,
        or None when the stored tokens are no longer usable).
        """
        if tokens is None or tokens.subject is None:
            return ProviderSession(), None
        try:
            current = await self.get_access_token(tokens)
        except (IdentityProviderError, httpx.HTTPError, ValueError) as exc:
            logger.info("Stored session could not be refreshed", sub=tokens.subject, error=str(exc))
            return ProviderSession(), None
        session = ProviderSession(
            is_authenticated=True,
            claims=current.claims,
            access_token=current.access_token,
        )
        return session, current


def _provider_error(resp: httpx.Response, default: str) -> IdentityProviderError:
    """Translate an Auth0 error payload into IdentityProviderError."""
    try:
        payload = resp.json()
    except ValueError:
        payload = {}
    if not isinstance(payload, dict):
        payload = {}

    description = payload.get("error_description") or payload.get("description")
    if isinstance(description, dict):
        # Password-strength failures carry a rules object instead of text
        description = payload.get("message") or payload.get("name")
    error = payload.get("error") or payload.get("code") or payload.get("name")
    logger.warning(
        "Identity provider request failed",
        status=resp.status_code,
        error=error,
        url=str(resp.request.url),
    )
    return IdentityProviderError(
        description or default,
        error=error,
        status_code=resp.status_code,
    )
