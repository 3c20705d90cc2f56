"""Domain exceptions raised by the identity bridge, reconciler and backend client."""

from __future__ import annotations


class ItqanError(Exception):
    """Base class for expected, user-visible failures."""

    def __init__(self, message: str = "", *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class IdentityProviderError(ItqanError):
    """The identity provider rejected a request (bad credentials, signup refused, ...)."""

    def __init__(
        self,
        message: str = "",
        *,
        error: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.error = error


class AuthStateError(ItqanError):
    """The login callback carried a missing or mismatched ``state`` value."""


class ProfileCompletionError(ItqanError):
    """The backend refused the profile-completion request."""
