# hoaxify/auth/identity.py
"""
Canonical request identity.

Bearer-token resolution never fails a request: a missing, unknown or expired
token yields ``Identity.anonymous()`` and each endpoint decides whether an
authenticated caller is required.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    """
    Attributes:
        user_id: Internal user id, or ``None`` for anonymous requests.
        token: The bearer token that authenticated the request, if any.
    """

    user_id: int | None = None
    token: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @classmethod
    def anonymous(cls) -> Identity:
        return cls(user_id=None, token=None)

    @classmethod
    def authenticated(cls, user_id: int, token: str | None = None) -> Identity:
        return cls(user_id=user_id, token=token)

    def is_user(self, user_id: int | None) -> bool:
        return self.is_authenticated and user_id is not None and self.user_id == user_id
