"""Tests for the session reconciler state machine."""

import httpx
import pytest

from itqan.core.errors import AuthStateError, ProfileCompletionError
from itqan.core.session import (
    SessionReconciler,
    SessionState,
    derive_state,
    requires_profile_completion,
)
from itqan.core.storage import (
    AUTH_STATE_KEY,
    PROFILE_COMPLETED_KEY,
    TOKENS_KEY,
    USER_KEY,
)
from itqan.schemas.user import ProfileIn, ProviderSession, SignupIn, User

SUB = "auth0|abc123"


def _user(**kw) -> User:
    return User(**{"id": SUB, "email": "sara@example.com", "auth0_id": SUB, **kw})


# ── pure predicates ───────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "user, authenticated, flag, expected",
    [
        (None, True, None, False),
        (_user(), False, None, False),
        (_user(), True, None, True),
        (_user(), True, "1", False),
        (_user(profile_completed=True), True, None, False),
        (_user(), True, "0", True),
    ],
)
def test_requires_profile_completion(user, authenticated, flag, expected):
    assert requires_profile_completion(user, authenticated, flag) is expected


def test_derive_state():
    authed = ProviderSession(is_authenticated=True, claims={"sub": SUB})
    assert derive_state(ProviderSession(is_loading=True), _user(), None) is SessionState.LOADING
    assert derive_state(ProviderSession(), None, None) is SessionState.ANONYMOUS
    assert derive_state(authed, None, None) is SessionState.ANONYMOUS
    assert derive_state(authed, _user(), None) is SessionState.AUTHENTICATED_INCOMPLETE
    assert derive_state(authed, _user(), "1") is SessionState.AUTHENTICATED_COMPLETE


# ── load / sync ───────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_starts_loading_then_anonymous(reconciler, storage):
    assert reconciler.state is SessionState.LOADING
    assert reconciler.guard("/en/dashboard") is None

    await reconciler.load()
    assert reconciler.state is SessionState.ANONYMOUS
    assert reconciler.user is None
    assert storage.data == {}


@pytest.mark.asyncio
async def test_password_login_creates_incomplete_user(reconciler, storage):
    await reconciler.load()
    destination = await reconciler.login_with_password("sara@example.com", "hunter2hunter2")

    assert destination == "/en/auth/complete-profile"
    assert reconciler.state is SessionState.AUTHENTICATED_INCOMPLETE
    user = reconciler.user
    assert user.auth0_id == SUB
    assert user.email == "sara@example.com"
    assert user.first_name == "Sara"
    assert user.profile_completed is False

    assert USER_KEY in storage.data
    # Tokens are never stored in clear text
    assert "at-1" not in storage.data[TOKENS_KEY]


@pytest.mark.asyncio
async def test_state_survives_a_new_reconciler(reconciler, storage, fake_identity, fake_backend):
    await reconciler.load()
    await reconciler.login_with_password("sara@example.com", "hunter2hunter2")

    again = SessionReconciler(
        storage, fake_identity, fake_backend, locale="ar", app_url="http://localhost:3000"
    )
    await again.load()
    assert again.state is SessionState.AUTHENTICATED_INCOMPLETE
    assert again.user.auth0_id == SUB
    assert again.landing_path() == "/ar/auth/complete-profile"


@pytest.mark.asyncio
async def test_persisted_flag_marks_profile_complete(reconciler, storage):
    await reconciler.load()
    await storage.set(PROFILE_COMPLETED_KEY, "1")
    await reconciler.login_with_password("sara@example.com", "hunter2hunter2")

    assert reconciler.state is SessionState.AUTHENTICATED_COMPLETE
    assert reconciler.requires_profile_completion is False
    assert reconciler.user.profile_completed is True


@pytest.mark.asyncio
async def test_sync_unauthenticated_clears_user_and_flag(reconciler, storage):
    await reconciler.load()
    await reconciler.login_with_password("sara@example.com", "hunter2hunter2")
    await storage.set(PROFILE_COMPLETED_KEY, "1")

    await reconciler.sync(ProviderSession(is_authenticated=False))
    assert reconciler.user is None
    assert USER_KEY not in storage.data
    assert PROFILE_COMPLETED_KEY not in storage.data
    assert reconciler.state is SessionState.ANONYMOUS


@pytest.mark.asyncio
async def test_sync_while_loading_changes_nothing(reconciler, storage):
    await reconciler.sync(ProviderSession(is_loading=True))
    assert reconciler.state is SessionState.LOADING
    assert storage.data == {}


@pytest.mark.asyncio
async def test_email_falls_back_to_userinfo(reconciler, fake_identity):
    del fake_identity.claims["email"]
    fake_identity.userinfo = {"email": "from-userinfo@example.com"}
    await reconciler.load()
    await reconciler.login_with_password("x@example.com", "hunter2hunter2")

    assert reconciler.user.email == "from-userinfo@example.com"
    assert ("userinfo", "at-1") in fake_identity.calls


@pytest.mark.asyncio
async def test_userinfo_failure_keeps_empty_email(reconciler, fake_identity):
    del fake_identity.claims["email"]
    fake_identity.userinfo_error = httpx.ConnectError("unreachable")
    await reconciler.load()
    await reconciler.login_with_password("x@example.com", "hunter2hunter2")

    assert reconciler.user is not None
    assert reconciler.user.email == ""


@pytest.mark.asyncio
async def test_stored_user_of_other_subject_is_not_reused(reconciler, storage):
    other = User(id="99", email="old@example.com", first_name="Old", auth0_id="auth0|other",
                 profile_completed=True)
    await storage.set(USER_KEY, other.model_dump_json())
    await reconciler.load()
    await reconciler.login_with_password("sara@example.com", "hunter2hunter2")

    assert reconciler.user.id == SUB
    assert reconciler.user.first_name == "Sara"
    assert reconciler.user.profile_completed is False


@pytest.mark.asyncio
async def test_unreadable_tokens_are_discarded(reconciler, storage):
    await storage.set(TOKENS_KEY, "not-a-fernet-token")
    await reconciler.load()
    assert reconciler.state is SessionState.ANONYMOUS
    assert TOKENS_KEY not in storage.data


# ── redirect login ────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_login_url_stores_state(reconciler, storage):
    await reconciler.load()
    url = await reconciler.login_url(connection="google-oauth2")

    state = storage.data[AUTH_STATE_KEY]
    assert f"state={state}" in url
    assert "connection=google-oauth2" in url
    assert "redirect_uri=http%3A%2F%2Flocalhost%3A3000%2Fen%2Fauth%2Fcallback" in url


@pytest.mark.asyncio
async def test_callback_with_matching_state(reconciler, storage, fake_identity):
    await reconciler.load()
    await reconciler.login_url()
    state = storage.data[AUTH_STATE_KEY]

    destination = await reconciler.handle_callback("the-code", state)
    assert destination == "/en/auth/complete-profile"
    assert ("exchange_code", "the-code") in fake_identity.calls
    assert AUTH_STATE_KEY not in storage.data


@pytest.mark.asyncio
async def test_callback_with_wrong_state_is_rejected(reconciler, fake_identity):
    await reconciler.load()
    await reconciler.login_url()

    with pytest.raises(AuthStateError):
        await reconciler.handle_callback("the-code", "forged")
    assert fake_identity.calls == []


@pytest.mark.asyncio
async def test_signup_then_logs_in(reconciler, fake_identity):
    await reconciler.load()
    data = SignupIn(
        first_name="Sara", last_name="Ali", job_title="Engineer",
        phone_number="+966551234567", email="sara@example.com", password="hunter2hunter2",
    )
    destination = await reconciler.signup(data)

    assert [c[0] for c in fake_identity.calls] == ["signup", "password_login"]
    assert destination == "/en/auth/complete-profile"


# ── logout ────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_logout_clears_everything(reconciler, storage):
    await reconciler.load()
    await reconciler.login_url()
    await reconciler.login_with_password("sara@example.com", "hunter2hunter2")
    await storage.set(PROFILE_COMPLETED_KEY, "1")

    url = await reconciler.logout()

    assert storage.data == {}
    assert reconciler.user is None
    assert reconciler.state is SessionState.ANONYMOUS
    assert "returnTo=http%3A%2F%2Flocalhost%3A3000%2Fen" in url


# ── profile completion ───────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_complete_profile_success(reconciler, storage, fake_backend, profile_payload):
    await reconciler.load()
    await reconciler.login_with_password("sara@example.com", "hunter2hunter2")

    destination = await reconciler.complete_profile(ProfileIn(**profile_payload))

    assert destination == "/en/dashboard"
    assert storage.data[PROFILE_COMPLETED_KEY] == "1"
    assert reconciler.state is SessionState.AUTHENTICATED_COMPLETE
    user = reconciler.user
    assert user.id == "42"
    assert user.auth0_id == SUB
    assert user.profile_completed is True

    token, sent = fake_backend.requests[0]
    assert token == "at-1"
    assert sent.auth0_id == SUB
    assert sent.team_size == "11-50"


@pytest.mark.asyncio
async def test_complete_profile_failure_is_reraised(reconciler, storage, fake_backend, profile_payload):
    await reconciler.load()
    await reconciler.login_with_password("sara@example.com", "hunter2hunter2")
    fake_backend.error = ProfileCompletionError("Phone number already in use", status_code=400)

    with pytest.raises(ProfileCompletionError, match="already in use"):
        await reconciler.complete_profile(ProfileIn(**profile_payload))

    assert PROFILE_COMPLETED_KEY not in storage.data
    assert reconciler.state is SessionState.AUTHENTICATED_INCOMPLETE


@pytest.mark.asyncio
async def test_complete_profile_requires_authentication(reconciler, profile_payload):
    await reconciler.load()
    with pytest.raises(ProfileCompletionError) as exc_info:
        await reconciler.complete_profile(ProfileIn(**profile_payload))
    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_update_user_persists(reconciler, storage):
    await reconciler.load()
    await reconciler.login_with_password("sara@example.com", "hunter2hunter2")
    await reconciler.update_user(reconciler.user.model_copy(update={"first_name": "Sarah"}))

    assert User.model_validate_json(storage.data[USER_KEY]).first_name == "Sarah"


# ── route guard ──────────────────────────────────────────────────────────────

@pytest.mark.asyncio
@pytest.mark.parametrize(
    "path, expected",
    [
        ("/en", None),
        ("/en/auth/login", None),
        ("/en/auth/callback", None),
        ("/en/dashboard", "/en/auth/login"),
    ],
)
async def test_guard_anonymous(reconciler, path, expected):
    await reconciler.load()
    assert reconciler.guard(path) == expected


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "path, expected",
    [
        ("/en", "/en/auth/complete-profile"),
        ("/en/dashboard", "/en/auth/complete-profile"),
        ("/en/auth/login", "/en/auth/complete-profile"),
        ("/en/auth/complete-profile", None),
        ("/en/auth/logout", None),
    ],
)
async def test_guard_incomplete_profile(reconciler, path, expected):
    await reconciler.load()
    await reconciler.login_with_password("sara@example.com", "hunter2hunter2")
    assert reconciler.guard(path) == expected


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "path, expected",
    [
        ("/en", None),
        ("/en/dashboard", None),
        ("/en/auth/login", "/en/dashboard"),
        ("/en/auth/complete-profile", "/en/dashboard"),
        ("/en/auth/logout", None),
    ],
)
async def test_guard_complete_profile(reconciler, storage, path, expected):
    await reconciler.load()
    await storage.set(PROFILE_COMPLETED_KEY, "1")
    await reconciler.login_with_password("sara@example.com", "hunter2hunter2")
    assert reconciler.guard(path) == expected
