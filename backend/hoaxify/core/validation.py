from __future__ import annotations

import re
from typing import Any

from email_validator import EmailNotValidError, validate_email

from hoaxify.core.errors import ValidationFailure

USERNAME_MIN_LENGTH = 4
USERNAME_MAX_LENGTH = 32
PASSWORD_MIN_LENGTH = 6
HOAX_CONTENT_MIN_LENGTH = 10
HOAX_CONTENT_MAX_LENGTH = 5000

_UPPERCASE_RE = re.compile(r"[A-Z]")
_LOWERCASE_RE = re.compile(r"[a-z]")
_NUMBER_RE = re.compile(r"[0-9]")


def is_valid_email(email: Any) -> bool:
    if not email or not isinstance(email, str):
        return False
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def username_violation(username: Any) -> str | None:
    if username is None or username == "":
        return "username_null"
    if not isinstance(username, str) or not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        return "username_size"
    return None


def email_violation(email: Any) -> str | None:
    if email is None or email == "":
        return "email_null"
    if not is_valid_email(email):
        return "email_invalid"
    return None


def password_violation(password: Any) -> str | None:
    if password is None or password == "":
        return "password_null"
    if not isinstance(password, str) or len(password) < PASSWORD_MIN_LENGTH:
        return "password_size"
    if not (_UPPERCASE_RE.search(password) and _LOWERCASE_RE.search(password) and _NUMBER_RE.search(password)):
        return "password_pattern"
    return None


def hoax_content_violation(content: Any) -> str | None:
    if not isinstance(content, str) or not HOAX_CONTENT_MIN_LENGTH <= len(content) <= HOAX_CONTENT_MAX_LENGTH:
        return "hoax_content_size"
    return None


class FieldErrors:
    """
    Collects the first violation per field so every failing field is
    reported together instead of stopping at the first one.
    """

    def __init__(self) -> None:
        self._errors: dict[str, str] = {}

    def check(self, field: str, violation: str | None) -> None:
        if violation and field not in self._errors:
            self._errors[field] = violation

    def __contains__(self, field: str) -> bool:
        return field in self._errors

    def __bool__(self) -> bool:
        return bool(self._errors)

    def raise_if_any(self) -> None:
        if self._errors:
            raise ValidationFailure(self._errors)
