"""Session reconciler — merges identity-provider state with the persisted user.

The reconciler is an explicit state machine over four states::

    loading ──sync(provider)──▶ anonymous
                              ├─▶ authenticated_incomplete ──complete_profile()──▶ authenticated_complete
                              └─▶ authenticated_complete
    any state ──logout()──▶ anonymous

``loading`` only exists while a provider exchange is in flight (the login
callback); every other state is derived from three inputs: whether the
provider reports an authenticated session, whether a User record exists,
and whether the profile is complete (on the record or via the persisted
``"1"`` flag). The reconciler is the only writer of session storage.
"""

from __future__ import annotations

import enum
import secrets

import httpx

from itqan.core import crypto
from itqan.core.backend import BackendClient
from itqan.core.errors import AuthStateError, ItqanError, ProfileCompletionError
from itqan.core.identity import IdentityBridge
from itqan.core.logging import get_logger
from itqan.core.storage import (
    AUTH_STATE_KEY,
    PROFILE_COMPLETED,
    PROFILE_COMPLETED_KEY,
    TOKENS_KEY,
    USER_KEY,
    SessionStorage,
)
from itqan.schemas.user import (
    CompleteProfileRequest,
    ProfileIn,
    ProviderSession,
    SessionOut,
    SignupIn,
    TokenSet,
    User,
)

logger = get_logger(__name__)


class SessionState(str, enum.Enum):
    LOADING = "loading"
    ANONYMOUS = "anonymous"
    AUTHENTICATED_INCOMPLETE = "authenticated_incomplete"
    AUTHENTICATED_COMPLETE = "authenticated_complete"


def requires_profile_completion(
    user: User | None, is_authenticated: bool, profile_flag: str | None
) -> bool:
    """True iff a user exists, the provider says authenticated, and no completion flag is set."""
    if user is None or not is_authenticated:
        return False
    return not (user.profile_completed or profile_flag == PROFILE_COMPLETED)


def derive_state(
    provider: ProviderSession, user: User | None, profile_flag: str | None
) -> SessionState:
    if provider.is_loading:
        return SessionState.LOADING
    if not provider.is_authenticated or user is None:
        return SessionState.ANONYMOUS
    if requires_profile_completion(user, provider.is_authenticated, profile_flag):
        return SessionState.AUTHENTICATED_INCOMPLETE
    return SessionState.AUTHENTICATED_COMPLETE


class SessionReconciler:
    def __init__(
        self,
        storage: SessionStorage,
        identity: IdentityBridge,
        backend: BackendClient,
        *,
        locale: str,
        app_url: str,
    ) -> None:
        self.storage = storage
        self.identity = identity
        self.backend = backend
        self.locale = locale
        self.app_url = app_url.rstrip("/")

        self._provider = ProviderSession(is_loading=True)
        self._user: User | None = None
        self._profile_flag: str | None = None
        self._tokens: TokenSet | None = None

    # ── derived state ────────────────────────────────────────────────────────

    @property
    def state(self) -> SessionState:
        return derive_state(self._provider, self._user, self._profile_flag)

    @property
    def user(self) -> User | None:
        return self._user

    @property
    def is_loading(self) -> bool:
        return self._provider.is_loading

    @property
    def is_authenticated(self) -> bool:
        return self._provider.is_authenticated

    @property
    def requires_profile_completion(self) -> bool:
        return requires_profile_completion(
            self._user, self._provider.is_authenticated, self._profile_flag
        )

    def snapshot(self) -> SessionOut:
        return SessionOut(
            state=self.state.value,
            is_authenticated=self.is_authenticated,
            requires_profile_completion=self.requires_profile_completion,
            user=self._user,
        )

    # ── locale-prefixed paths ────────────────────────────────────────────────

    @property
    def home_path(self) -> str:
        return f"/{self.locale}"

    @property
    def dashboard_path(self) -> str:
        return f"/{self.locale}/dashboard"

    @property
    def login_path(self) -> str:
        return f"/{self.locale}/auth/login"

    @property
    def complete_profile_path(self) -> str:
        return f"/{self.locale}/auth/complete-profile"

    @property
    def callback_url(self) -> str:
        return f"{self.app_url}/{self.locale}/auth/callback"

    def landing_path(self) -> str:
        """Where to send the browser once a login has settled."""
        if self.requires_profile_completion:
            return self.complete_profile_path
        return self.dashboard_path

    # ── persistence ──────────────────────────────────────────────────────────

    async def _read_user(self) -> User | None:
        raw = await self.storage.get(USER_KEY)
        if not raw:
            return None
        try:
            return User.model_validate_json(raw)
        except ValueError:
            logger.warning("Discarding unreadable stored user")
            await self.storage.remove(USER_KEY)
            return None

    async def _read_tokens(self) -> TokenSet | None:
        raw = await self.storage.get(TOKENS_KEY)
        if not raw:
            return None
        try:
            return TokenSet.model_validate_json(crypto.decrypt(raw))
        except (crypto.InvalidToken, ValueError):
            logger.warning("Discarding unreadable stored tokens")
            await self.storage.remove(TOKENS_KEY)
            return None

    async def _store_tokens(self, tokens: TokenSet | None) -> None:
        self._tokens = tokens
        if tokens is None:
            await self.storage.remove(TOKENS_KEY)
        else:
            await self.storage.set(TOKENS_KEY, crypto.encrypt(tokens.model_dump_json()))

    async def _persist_user(self, user: User | None) -> None:
        self._user = user
        if user is not None:
            await self.storage.set(USER_KEY, user.model_dump_json())
        else:
            await self.storage.remove(USER_KEY)
            await self.storage.remove(PROFILE_COMPLETED_KEY)
            self._profile_flag = None

    # ── reconciliation ───────────────────────────────────────────────────────

    async def load(self) -> "SessionReconciler":
        """Restore persisted state and reconcile it with the provider."""
        self._user = await self._read_user()
        self._profile_flag = await self.storage.get(PROFILE_COMPLETED_KEY)
        stored = await self._read_tokens()
        provider, current = await self.identity.restore(stored)
        if current is not stored:
            await self._store_tokens(current)
        else:
            self._tokens = stored
        await self.sync(provider)
        return self

    async def sync(self, provider: ProviderSession) -> None:
        self._provider = provider
        if provider.is_loading:
            return
        try:
            sub = provider.claims.get("sub")
            if provider.is_authenticated and sub:
                await self._persist_user(await self._user_from_claims(provider, sub))
            else:
                await self._persist_user(None)
        except (ItqanError, httpx.HTTPError, ValueError) as exc:
            logger.error("Error syncing user", error=str(exc))
            await self._persist_user(None)

    async def _user_from_claims(self, provider: ProviderSession, sub: str) -> User:
        claims = provider.claims
        # Only reuse what was stored for this same subject
        stored = self._user if self._user and self._user.auth0_id == sub else None

        email = claims.get("email") or (stored.email if stored else "")
        if not email:
            email = await self._resolve_email(provider)

        self._profile_flag = await self.storage.get(PROFILE_COMPLETED_KEY)
        completed = self._profile_flag == PROFILE_COMPLETED or bool(stored and stored.profile_completed)
        return User(
            id=stored.id if stored else sub,
            email=email,
            first_name=claims.get("given_name") or (stored.first_name if stored else ""),
            last_name=claims.get("family_name") or (stored.last_name if stored else ""),
            provider="auth0",
            profile_completed=completed,
            auth0_id=sub,
        )

    async def _resolve_email(self, provider: ProviderSession) -> str:
        """Ask /userinfo for the email; the user keeps an empty email if that fails."""
        if not provider.access_token:
            return ""
        try:
            info = await self.identity.fetch_userinfo(provider.access_token)
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Could not resolve email from /userinfo", error=str(exc))
            return ""
        email = info.get("email") if isinstance(info, dict) else None
        return email if isinstance(email, str) else ""

    # ── login / logout ───────────────────────────────────────────────────────

    async def login_url(
        self, connection: str | None = None, screen_hint: str | None = None
    ) -> str:
        """Start a redirect login, optionally pinned to a social connection."""
        state = secrets.token_urlsafe(24)
        await self.storage.set(AUTH_STATE_KEY, state)
        return self.identity.authorize_url(
            redirect_uri=self.callback_url,
            state=state,
            connection=connection,
            screen_hint=screen_hint,
        )

    async def handle_callback(self, code: str, state: str | None) -> str:
        expected = await self.storage.get(AUTH_STATE_KEY)
        await self.storage.remove(AUTH_STATE_KEY)
        if not expected or not state or not secrets.compare_digest(expected, state):
            raise AuthStateError("Login state mismatch")

        self._provider = ProviderSession(is_loading=True)
        tokens = await self.identity.exchange_code(code, self.callback_url)
        await self._adopt_tokens(tokens)
        return self.landing_path()

    async def login_with_password(self, email: str, password: str) -> str:
        tokens = await self.identity.password_login(email, password)
        await self._adopt_tokens(tokens)
        return self.landing_path()

    async def signup(self, data: SignupIn) -> str:
        await self.identity.signup(
            email=data.email,
            password=data.password,
            first_name=data.first_name,
            last_name=data.last_name,
            user_metadata={"job_title": data.job_title, "phone_number": data.phone_number},
        )
        return await self.login_with_password(data.email, data.password)

    async def _adopt_tokens(self, tokens: TokenSet) -> None:
        await self._store_tokens(tokens)
        await self.sync(
            ProviderSession(
                is_authenticated=True,
                claims=tokens.claims,
                access_token=tokens.access_token,
            )
        )

    async def logout(self) -> str:
        """Forget everything about this session and return the provider logout URL."""
        sub = self._user.auth0_id if self._user else None
        await self._persist_user(None)
        await self._store_tokens(None)
        await self.storage.remove(AUTH_STATE_KEY)
        self._provider = ProviderSession()
        logger.info("User logged out", sub=sub)
        return self.identity.logout_url(return_to=f"{self.app_url}/{self.locale}")

    def _require_tokens(self) -> TokenSet:
        if self._tokens is None or not self.is_authenticated:
            raise ProfileCompletionError("Not authenticated", status_code=401)
        return self._tokens

    # ── user mutations ───────────────────────────────────────────────────────

    async def update_user(self, user: User) -> None:
        await self._persist_user(user)

    async def complete_profile(self, data: ProfileIn) -> str:
        """Submit the profile to the backend; failures are logged and re-raised."""
        try:
            tokens = self._require_tokens()
            current = await self.identity.get_access_token(tokens)
            if current is not tokens:
                await self._store_tokens(current)
            sub = current.subject
            payload = CompleteProfileRequest(
                auth0_id=sub,
                email=current.claims.get("email") or (self._user.email if self._user else None),
                first_name=data.first_name,
                last_name=data.last_name,
                job_title=data.job_title,
                phone_number=data.phone_number,
                business_model=data.business_model,
                team_size=data.team_size,
                about_yourself=data.about_yourself,
            )
            backend_user = await self.backend.complete_profile(current.access_token, payload)
        except (ItqanError, httpx.HTTPError, ValueError) as exc:
            logger.error("Error completing profile", error=str(exc))
            raise

        await self._persist_user(
            User(
                id=backend_user.id,
                email=backend_user.email,
                first_name=backend_user.first_name,
                last_name=backend_user.last_name,
                provider="auth0",
                profile_completed=True,
                auth0_id=sub or backend_user.id,
            )
        )
        await self.storage.set(PROFILE_COMPLETED_KEY, PROFILE_COMPLETED)
        self._profile_flag = PROFILE_COMPLETED
        logger.info("Profile completed", sub=sub)
        return self.dashboard_path

    # ── route guard ──────────────────────────────────────────────────────────

    def guard(self, path: str) -> str | None:
        """Return the path to redirect to, or None when *path* may be rendered."""
        if self.is_loading:
            return None

        # The callback and logout handlers decide their own destination
        if "/auth/callback" in path or "/auth/logout" in path:
            return None

        is_auth_route = "/auth/" in path
        is_home = path.rstrip("/") == self.home_path

        if self.is_authenticated and self._user is not None:
            if self.requires_profile_completion:
                if not path.startswith(self.complete_profile_path):
                    return self.complete_profile_path
                return None
            if is_auth_route:
                return self.dashboard_path

        if not self.is_authenticated and not is_auth_route and not is_home:
            return self.login_path
        return None
