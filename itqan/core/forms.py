"""Form controllers for the auth pages.

A form holds its field values, the per-field error map, a top-level
``submit_error`` and an ``is_submitting`` flag. ``submit()`` runs exactly one
attempt: validate, and only when valid await the action once. While that
action is outstanding the submit control is reported as disabled and further
submits are ignored.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, ClassVar, Generic, TypeVar

import httpx
from pydantic import BaseModel

from itqan.core.errors import ItqanError
from itqan.core.i18n import t
from itqan.core.logging import get_logger
from itqan.core.validation import (
    LOGIN_FIELDS,
    PROFILE_FIELDS,
    SIGNUP_FIELDS,
    validate_login_form,
    validate_profile_form,
    validate_signup_form,
)
from itqan.schemas.user import LoginIn, ProfileIn, SignupIn

logger = get_logger(__name__)

P = TypeVar("P", bound=BaseModel)
R = TypeVar("R")


class Form(ABC, Generic[P]):
    fields: ClassVar[tuple[str, ...]] = ()
    # Never echoed back to the client
    secret_fields: ClassVar[tuple[str, ...]] = ()
    payload_model: ClassVar[type[BaseModel]]
    # dictionary key of the message used when the action fails without one
    failure_message: ClassVar[str] = "auth.validation.networkError"

    def __init__(self, locale: str, data: Mapping[str, Any] | None = None) -> None:
        self.locale = locale
        self.values: dict[str, str] = {f: "" for f in self.fields}
        for field, value in (data or {}).items():
            if field in self.values and value is not None:
                self.values[field] = str(value)
        self.errors: dict[str, str] = {}
        self.submit_error = ""
        self.is_submitting = False

    @abstractmethod
    def _validate(self, values: Mapping[str, str]) -> dict[str, str]:
        ...

    def validate(self) -> dict[str, str]:
        return self._validate(self.values)

    def set_field(self, field: str, value: str) -> None:
        """Update one field; its error is cleared as soon as the user edits it."""
        if field not in self.values:
            raise KeyError(field)
        self.values[field] = value
        self.errors.pop(field, None)

    def payload(self) -> P:
        # Passwords are passed through untouched; everything else is trimmed
        data = {
            k: (v if k in self.secret_fields else v.strip())
            for k, v in self.values.items()
        }
        return self.payload_model(**data)  # type: ignore[return-value]

    @property
    def submit_disabled(self) -> bool:
        return self.is_submitting

    async def submit(self, action: Callable[[P], Awaitable[R]]) -> R | None:
        """Validate then run *action* once; returns its result, or None on any failure."""
        if self.is_submitting:
            return None
        self.submit_error = ""
        self.errors = self.validate()
        if self.errors:
            return None

        self.is_submitting = True
        try:
            return await action(self.payload())
        except ItqanError as exc:
            self.submit_error = exc.message or t(self.locale, self.failure_message)
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Form submission failed", form=type(self).__name__, error=str(exc))
            self.submit_error = t(self.locale, "auth.validation.networkError")
        finally:
            self.is_submitting = False
        return None

    def view(self) -> dict[str, Any]:
        return {
            "values": {k: ("" if k in self.secret_fields else v) for k, v in self.values.items()},
            "errors": dict(self.errors),
            "submit_error": self.submit_error,
            "submit_disabled": self.submit_disabled,
        }


class LoginForm(Form[LoginIn]):
    fields = LOGIN_FIELDS
    secret_fields = ("password",)
    payload_model = LoginIn
    failure_message = "auth.validation.loginFailed"

    def _validate(self, values: Mapping[str, str]) -> dict[str, str]:
        return validate_login_form(values, self.locale)


class SignupForm(Form[SignupIn]):
    fields = SIGNUP_FIELDS
    secret_fields = ("password",)
    payload_model = SignupIn
    failure_message = "auth.validation.signupFailed"

    def _validate(self, values: Mapping[str, str]) -> dict[str, str]:
        return validate_signup_form(values, self.locale)


class ProfileForm(Form[ProfileIn]):
    fields = PROFILE_FIELDS
    payload_model = ProfileIn
    failure_message = "auth.validation.profileFailed"

    def _validate(self, values: Mapping[str, str]) -> dict[str, str]:
        return validate_profile_form(values, self.locale)
