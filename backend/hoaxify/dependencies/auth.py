# hoaxify/dependencies/auth.py
from __future__ import annotations

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from hoaxify.auth.identity import Identity
from hoaxify.core.database import get_db
from hoaxify.services.tokens import verify_token

bearer_scheme = HTTPBearer(auto_error=False)


def bearer_token(creds: HTTPAuthorizationCredentials | None) -> str | None:
    if not creds or creds.scheme.lower() != "bearer":
        return None
    token = (creds.credentials or "").strip()
    return token or None


def get_identity(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Identity:
    """
    Resolves ``Authorization: Bearer <token>`` to an Identity.

    Registered as an app-wide dependency so every request carrying a valid
    token refreshes it, including public endpoints. Never raises for a bad
    token; endpoints decide whether an anonymous caller is acceptable.
    """
    identity = verify_token(db, bearer_token(creds))
    request.state.identity = identity
    return identity
