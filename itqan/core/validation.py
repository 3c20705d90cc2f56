"""Field validation for the login, signup and profile-completion forms.

Each validator returns ``{field: message}``; an empty dict means the input
is valid. Messages come from the locale dictionary.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping

from itqan.core.i18n import t

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_PHONE_RE = re.compile(r"^(?=.{7,20}$)(?=[^0-9]*[0-9])\+?[0-9 ()\-]+$")

MIN_PASSWORD_LENGTH = 8
TEAM_SIZES = ("1-10", "11-50", "51-200", "200+")

LOGIN_FIELDS = ("email", "password")
SIGNUP_FIELDS = ("first_name", "last_name", "job_title", "phone_number", "email", "password")
PROFILE_FIELDS = (
    "first_name",
    "last_name",
    "job_title",
    "phone_number",
    "business_model",
    "team_size",
    "about_yourself",
)


def _required(data: Mapping[str, str], fields: Iterable[str], locale: str) -> dict[str, str]:
    errors: dict[str, str] = {}
    for field in fields:
        if not (data.get(field) or "").strip():
            label = t(locale, f"auth.fields.{field}")
            errors[field] = t(locale, "auth.validation.required", field=label)
    return errors


def _check_email(data: Mapping[str, str], errors: dict[str, str], locale: str) -> None:
    if "email" not in errors and not _EMAIL_RE.match(data.get("email", "").strip()):
        errors["email"] = t(locale, "auth.validation.invalidEmail")


def _check_password(data: Mapping[str, str], errors: dict[str, str], locale: str) -> None:
    if "password" not in errors and len(data.get("password", "")) < MIN_PASSWORD_LENGTH:
        errors["password"] = t(locale, "auth.validation.passwordTooShort")


def _check_phone(data: Mapping[str, str], errors: dict[str, str], locale: str) -> None:
    if "phone_number" not in errors and not _PHONE_RE.match(data.get("phone_number", "").strip()):
        errors["phone_number"] = t(locale, "auth.validation.invalidPhone")


def validate_login_form(data: Mapping[str, str], locale: str) -> dict[str, str]:
    errors = _required(data, LOGIN_FIELDS, locale)
    _check_email(data, errors, locale)
    return errors


def validate_signup_form(data: Mapping[str, str], locale: str) -> dict[str, str]:
    errors = _required(data, SIGNUP_FIELDS, locale)
    _check_email(data, errors, locale)
    _check_password(data, errors, locale)
    _check_phone(data, errors, locale)
    return errors


def validate_profile_form(data: Mapping[str, str], locale: str) -> dict[str, str]:
    errors = _required(data, PROFILE_FIELDS, locale)
    _check_phone(data, errors, locale)
    if "team_size" not in errors and data.get("team_size", "").strip() not in TEAM_SIZES:
        errors["team_size"] = t(locale, "auth.validation.invalidTeamSize")
    return errors
