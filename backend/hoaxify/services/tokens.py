from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from hoaxify.auth.identity import Identity
from hoaxify.core.clock import ONE_DAY_MILLIS, now_millis
from hoaxify.core.config import settings
from hoaxify.core.security import random_string
from hoaxify.models.token import Token
from hoaxify.models.user import User
from hoaxify.services.sweeps import PeriodicSweep

logger = logging.getLogger(__name__)

TOKEN_LENGTH = 32


def token_ttl_millis() -> int:
    return int(settings.TOKEN_TTL_DAYS) * ONE_DAY_MILLIS


def expiry_cutoff(now: int | None = None) -> int:
    """Tokens last used at or before this instant are expired."""
    return (now if now is not None else now_millis()) - token_ttl_millis()


def create_token(db: Session, user: User) -> str:
    """
    Issues a new opaque bearer token for user and returns the raw value.
    """
    raw = random_string(TOKEN_LENGTH)
    db.add(Token(token=raw, user_id=user.id, last_used_at=now_millis()))
    db.commit()
    return raw


def verify_token(db: Session, raw_token: str | None) -> Identity:
    """
    Resolves a bearer token to an identity and slides its expiry forward.

    Unknown or expired tokens resolve to Identity.anonymous(); expired rows
    are left for the periodic sweep.
    """
    if not raw_token:
        return Identity.anonymous()

    now = now_millis()
    stored = (
        db.query(Token)
        .filter(Token.token == raw_token, Token.last_used_at > expiry_cutoff(now))
        .first()
    )
    if not stored or stored.user_id is None:
        return Identity.anonymous()

    stored.last_used_at = now
    db.commit()
    return Identity.authenticated(stored.user_id, token=raw_token)


def delete_token(db: Session, raw_token: str | None) -> None:
    if not raw_token:
        return
    db.query(Token).filter(Token.token == raw_token).delete(synchronize_session=False)
    db.commit()


def clear_tokens(db: Session, user_id: int, *, commit: bool = True) -> None:
    db.query(Token).filter(Token.user_id == user_id).delete(synchronize_session=False)
    if commit:
        db.commit()


def remove_expired_tokens(db: Session) -> int:
    removed = (
        db.query(Token)
        .filter(Token.last_used_at <= expiry_cutoff())
        .delete(synchronize_session=False)
    )
    db.commit()
    if removed:
        logger.info("Token cleanup removed %s expired token(s)", removed)
    return removed


def schedule_cleanup(interval_seconds: float | None = None) -> PeriodicSweep:
    """
    Starts the recurring expired-token sweep on the running event loop.
    The caller owns the returned sweep and must stop() it on shutdown.
    """
    sweep = PeriodicSweep(
        "token-cleanup",
        remove_expired_tokens,
        interval_seconds if interval_seconds is not None else settings.TOKEN_CLEANUP_INTERVAL_SECONDS,
    )
    sweep.start()
    return sweep
